from __future__ import annotations
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .contracts import AuthState

logger = logging.getLogger("sessionguard.storage")


class AuthStorage:
    """
    Local persistence of the logged-in user and token as one JSON document.
    Unreadable content counts as logged out.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def load(self) -> AuthState:
        with self._lock:
            if not self.path.exists():
                return AuthState()
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                return AuthState.model_validate(raw)
            except (ValueError, ValidationError, OSError) as ex:
                logger.error("auth_storage.unreadable", extra={"path": str(self.path), "error_type": type(ex).__name__})
                return AuthState()

    def save(self, token: str, user: Optional[Dict[str, Any]] = None) -> AuthState:
        state = AuthState(user=user, token=token)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(state.model_dump_json(), encoding="utf-8")
        return state

    def clear(self) -> None:
        """Log out locally. The token stays valid server side until it expires."""
        with self._lock:
            if self.path.exists():
                self.path.unlink()
