from .app import create_app, build_auth_service

__all__ = ["create_app", "build_auth_service"]
