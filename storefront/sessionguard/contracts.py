from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel


class GuardState(str, Enum):
    UNVERIFIED = "unverified"
    VERIFYING = "verifying"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class AuthState(BaseModel):
    """What the client keeps between sessions."""
    user: Optional[Dict[str, Any]] = None
    token: str = ""

    @property
    def is_logged_in(self) -> bool:
        return bool(self.token)
