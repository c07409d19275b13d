from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .authservice import (
    AuthConfig, AuthService, CredentialHasher, InMemoryOrderStore,
    InMemoryUserStore, TokenService, auth_router, set_auth_service,
)
from .authservice.errors import StorefrontError
from .observability import RequestContextMiddleware, SecurityHeadersMiddleware
from .settings import (
    APP_NAME, APP_VERSION, CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS, IS_PRODUCTION,
)

logger = logging.getLogger("storefront")

def build_auth_service(cfg: Optional[AuthConfig] = None) -> AuthService:
    cfg = cfg or AuthConfig()
    return AuthService(
        users=InMemoryUserStore(),
        orders=InMemoryOrderStore(),
        hasher=CredentialHasher(rounds=cfg.bcrypt_rounds),
        tokens=TokenService(cfg.secret, ttl_seconds=cfg.token_ttl_seconds, alg=cfg.alg),
        cfg=cfg,
    )

async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.failed", extra={"code": exc.code, "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

def create_app(auth_service: Optional[AuthService] = None, *, hsts: bool = IS_PRODUCTION) -> FastAPI:
    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_middleware(RequestContextMiddleware)
    # outermost, so preflight and error responses carry the headers too
    app.add_middleware(SecurityHeadersMiddleware, hsts=hsts)
    app.add_exception_handler(StorefrontError, storefront_error_handler)

    set_auth_service(auth_service or build_auth_service())

    @app.get("/api/health")
    def health():
        return {"ok": True}

    # Routers
    app.include_router(auth_router)

    return app
