from __future__ import annotations
import os
from dataclasses import dataclass

@dataclass
class AuthConfig:
    alg: str = os.getenv("AUTH_ALG", "HS256")
    secret: str = os.getenv("AUTH_SECRET", "change-me-dev-secret")
    token_ttl_seconds: int = int(os.getenv("TOKEN_TTL_SECONDS", "604800"))  # 7 days
    bcrypt_rounds: int = int(os.getenv("AUTH_BCRYPT_ROUNDS", "10"))
    profile_min_password_length: int = int(os.getenv("PROFILE_MIN_PASSWORD_LENGTH", "6"))
    orders_per_page: int = int(os.getenv("ORDERS_PER_PAGE", "6"))
