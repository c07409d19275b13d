from .contracts import AuthState, GuardState
from .client import AuthClient, USER_AUTH_PATH, ADMIN_AUTH_PATH
from .guard import SessionGuard
from .storage import AuthStorage

__all__ = [
    "AuthState",
    "GuardState",
    "AuthClient",
    "USER_AUTH_PATH",
    "ADMIN_AUTH_PATH",
    "SessionGuard",
    "AuthStorage",
]
