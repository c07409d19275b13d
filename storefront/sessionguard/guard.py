from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional

import httpx

from .client import USER_AUTH_PATH, AuthClient
from .contracts import GuardState

logger = logging.getLogger("sessionguard")

Listener = Callable[[GuardState], None]


class SessionGuard:
    """
    Decides whether protected content may render for the cached token.

    Every token change re-evaluates from scratch. A missing token is denied
    without a network call; otherwise one verification request is sent and
    only a 2xx `{ok: true}` answer authorizes. Any other outcome, including
    transport errors, denies (fail closed).

    Each verification is tagged with a generation number. When the token
    changes while a check is in flight, the older result is discarded on
    arrival, so the last-issued check decides the state regardless of the
    order responses come back in.
    """

    def __init__(self, client: AuthClient, *, path: str = USER_AUTH_PATH) -> None:
        self.client = client
        self.path = path
        self._state = GuardState.UNVERIFIED
        self._generation = 0
        self._listeners: List[Listener] = []
        self._pending: Optional[asyncio.Task] = None

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def authorized(self) -> bool:
        return self._state is GuardState.AUTHORIZED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    async def set_token(self, token: Optional[str]) -> GuardState:
        """Verify `token` and return the state once this check settles."""
        self._generation += 1
        generation = self._generation

        if not token:
            self._transition(GuardState.DENIED)
            return self._state

        self._transition(GuardState.VERIFYING)
        try:
            ok = await self.client.check_session(token, self.path)
        except httpx.HTTPError as ex:
            logger.warning("session.verify_failed", extra={"error_type": type(ex).__name__, "path": self.path})
            ok = False
        except Exception:
            # e.g. a token that cannot be encoded into a header
            logger.exception("session.verify_error", extra={"path": self.path})
            ok = False

        if generation != self._generation:
            logger.debug("session.stale_result", extra={"generation": generation, "latest": self._generation})
            return self._state

        self._transition(GuardState.AUTHORIZED if ok else GuardState.DENIED)
        return self._state

    def on_token_change(self, token: Optional[str]) -> asyncio.Task:
        """Start verification without waiting for it, e.g. from an event callback."""
        self._pending = asyncio.ensure_future(self.set_token(token))
        return self._pending

    async def settled(self) -> GuardState:
        if self._pending is not None:
            await self._pending
        return self._state

    def _transition(self, state: GuardState) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
