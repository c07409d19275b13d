from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx

from ..settings import API_PREFIX

logger = logging.getLogger("sessionguard.client")

USER_AUTH_PATH = f"{API_PREFIX}/user-auth"
ADMIN_AUTH_PATH = f"{API_PREFIX}/admin-auth"


class AuthClient:
    """
    Thin wrapper over httpx.AsyncClient that attaches the caller's token to
    each request it builds. The shared client's default headers are never
    touched, so concurrent requests made during a token swap each carry the
    token they were issued with.
    """

    def __init__(self, http: httpx.AsyncClient, *, timeout: Optional[float] = None) -> None:
        self.http = http
        self.timeout = timeout

    @staticmethod
    def auth_headers(token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": token} if token else {}

    async def request(self, method: str, path: str, *, token: Optional[str] = None, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self.auth_headers(token))
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        return await self.http.request(method, path, headers=headers, **kwargs)

    async def get(self, path: str, *, token: Optional[str] = None, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, token=token, **kwargs)

    async def put(self, path: str, *, token: Optional[str] = None, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, token=token, **kwargs)

    async def post(self, path: str, *, token: Optional[str] = None, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, token=token, **kwargs)

    async def check_session(self, token: str, path: str = USER_AUTH_PATH) -> bool:
        """
        True only for a 2xx response whose JSON body carries ok == true.
        Transport errors propagate as httpx.HTTPError.
        """
        res = await self.get(path, token=token)
        if not res.is_success:
            logger.info("session.rejected", extra={"status": res.status_code, "path": path})
            return False
        try:
            body = res.json()
        except ValueError:
            logger.warning("session.bad_body", extra={"status": res.status_code, "path": path})
            return False
        return isinstance(body, dict) and body.get("ok") is True
