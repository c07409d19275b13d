from __future__ import annotations
from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Error that maps onto a `{success: false, ...}` HTTP response."""
    status_code: int = 500
    code: str = "internal_error"
    message: str = "Something went wrong"
    payload_key: str = "message"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, self.payload_key: self.message}


class UnauthorizedError(StorefrontError):
    status_code = 401
    code = "unauthorized"
    message = "Unauthorized Access"


class BadRequestError(StorefrontError):
    status_code = 400
    code = "bad_request"
    message = "Invalid request"


class WeakPasswordError(BadRequestError):
    code = "weak_password"
    message = "Password is required and 6 character long"
    payload_key = "error"


class InvalidCredentialsError(BadRequestError):
    code = "bad_credentials"
    message = "Invalid email or password"


class ConflictError(StorefrontError):
    status_code = 409
    code = "conflict"
    message = "Already Register please login"


class NotFoundError(StorefrontError):
    status_code = 404
    code = "not_found"
    message = "Resource not found"


class DatastoreError(StorefrontError):
    status_code = 500
    code = "datastore_error"


# ---------- Library-level errors ----------
class HashingFailed(Exception):
    """The password hashing backend could not produce a hash."""


class VerificationError(Exception):
    """A stored hash or candidate could not be checked."""


class InvalidToken(Exception):
    """Token is malformed, wrongly signed or expired."""


class DuplicateEmail(Exception):
    """A user with this email already exists."""
