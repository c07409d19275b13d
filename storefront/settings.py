from __future__ import annotations
import os

APP_NAME = "storefront-auth"
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1/auth")

# Browser origins allowed to call the API with credentials.
CORS_ALLOW_ORIGINS = [
    o for o in (
        "http://localhost:3000",
        "http://localhost:6060",
        os.getenv("FRONTEND_URL"),
        os.getenv("BACKEND_URL"),
    ) if o
]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]

# HSTS is only sent in production.
IS_PRODUCTION = os.getenv("APP_ENV", "development") == "production"
