from __future__ import annotations
import time
from typing import Any, Dict, Optional

import jwt

from .contracts import ClockPort
from .errors import InvalidToken


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


class TokenService:
    """
    Issues and verifies stateless session tokens (JWT, HS256 by default).
    Verification never touches a datastore: a token is valid iff the
    signature matches the current secret and `exp` is still in the future.
    """
    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = 7 * 24 * 3600,
        alg: str = "HS256",
        clock: Optional[ClockPort] = None,
    ):
        if not secret:
            raise ValueError("TokenService requires non-empty secret")
        self._secret = secret
        self._alg = alg
        self.ttl_seconds = ttl_seconds
        self.clock = clock or SystemClock()

    def issue(self, subject_id: str) -> str:
        now = self.clock.now_utc_ts()
        claims: Dict[str, Any] = {
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=self._alg)

    def verify(self, token: Optional[str]) -> str:
        if not token:
            raise InvalidToken("Invalid token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._alg],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as ex:
            # Expired, forged and garbled tokens look the same to callers.
            raise InvalidToken("Invalid token") from ex
        return payload["sub"]
