from typing import Optional

from fastapi import Depends, Header, Request

from .contracts import AuthenticatedIdentity, User
from .errors import UnauthorizedError
from .service import AuthService

_auth_service: Optional[AuthService] = None


def set_auth_service(svc: AuthService) -> None:
    global _auth_service
    _auth_service = svc


def get_auth_service() -> AuthService:
    if _auth_service is None:
        raise RuntimeError("AuthService not configured; call set_auth_service() during app wiring")
    return _auth_service


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    """
    Extract the token from the Authorization header. Both a bare token and
    'Bearer <token>' are accepted.
    """
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value.split(" ", 1)[1].strip()
    return value or None


def require_authenticated(
    request: Request,
    token: Optional[str] = Depends(get_authorization_header),
    auth: AuthService = Depends(get_auth_service),
) -> AuthenticatedIdentity:
    """Reject with 401 unless the token verifies; no datastore access."""
    if not token:
        raise UnauthorizedError()
    identity = auth.verify_token(token)
    request.state.user_id = identity.user_id
    return identity


def require_admin(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Runs after require_authenticated and loads the caller once to check the role."""
    return auth.authorize_admin(identity)
