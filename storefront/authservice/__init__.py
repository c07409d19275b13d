from .service import AuthService
from .crypto import TokenService, SystemClock
from .hashing import CredentialHasher
from .stores import InMemoryUserStore, InMemoryOrderStore, InMemoryProductCatalog
from .config import AuthConfig
from .deps import set_auth_service, get_auth_service, require_authenticated, require_admin
from .routes import router as auth_router

__all__ = [
    "AuthService",
    "TokenService",
    "SystemClock",
    "CredentialHasher",
    "InMemoryUserStore",
    "InMemoryOrderStore",
    "InMemoryProductCatalog",
    "AuthConfig",
    "set_auth_service",
    "get_auth_service",
    "require_authenticated",
    "require_admin",
    "auth_router",
]
