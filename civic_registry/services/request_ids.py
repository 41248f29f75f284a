from __future__ import annotations

import hashlib
from datetime import datetime

DEFAULT_MODULUS = 10000


def derive_request_id(
    identity: str, timestamp: datetime, modulus: int = DEFAULT_MODULUS
) -> int:
    """
    Request ID = sha256("<unix seconds>:<identity>") mod `modulus`.

    IDs are not unique: two requests from the same identity within one
    second always collide, and unrelated identities can collide too.
    Zero is reserved for "not found", so a zero remainder becomes `modulus`.
    """
    seconds = int(timestamp.timestamp())
    digest = hashlib.sha256(f"{seconds}:{identity}".encode("utf-8")).digest()
    request_id = int.from_bytes(digest, "big") % modulus
    return request_id or modulus
