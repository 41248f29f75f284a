# civic_registry/core/security.py
import re

from fastapi import Header, HTTPException, status

_ZERO_IDENTITY = re.compile(r"^(0x)?0+$", re.IGNORECASE)


def normalize_identity(identity: str | None) -> str:
    return (identity or "").strip()


def is_null_identity(identity: str | None) -> bool:
    """
    The null identity: blank, or an all-zero address such as 0x000...0.
    """
    value = normalize_identity(identity)
    return not value or bool(_ZERO_IDENTITY.match(value))


def get_caller_identity(
    x_caller_identity: str | None = Header(None, alias="X-Caller-Identity"),
) -> str:
    """
    Caller identity as attested by the hosting gateway.
    """
    caller = normalize_identity(x_caller_identity)
    if not caller:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Caller-Identity",
        )
    return caller
