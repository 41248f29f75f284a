from __future__ import annotations


class RegistryError(Exception):
    """
    Base class for every rejected registry operation.
    Raised before any write, so a failed call leaves state untouched.
    """

    code = "registry_error"
    status_code = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.code
        super().__init__(self.message)


class AlreadyRegistered(RegistryError):
    code = "already_registered"
    status_code = 409


class InvalidInput(RegistryError):
    code = "invalid_input"
    status_code = 400


class NotRegistered(RegistryError):
    code = "not_registered"
    status_code = 403


class NotAuthorized(RegistryError):
    code = "not_authorized"
    status_code = 403


class NotFound(RegistryError):
    code = "not_found"
    status_code = 404


class AlreadyCompleted(RegistryError):
    code = "already_completed"
    status_code = 409
