"""
Fake refresh endpoint built on httpx.MockTransport.
"""

import asyncio
import json
from typing import Dict, List, Optional

import httpx


class RefreshServer:
    """
    Answers POST /auth/refresh from a table of valid refresh tokens.

    Attributes:
        tokens: refresh token -> (access token, rotated refresh token)
        requests: Refresh tokens received, in order
        delay: Seconds to wait before answering
        status_override: Force a status code (e.g. 500)
    """

    def __init__(
        self,
        tokens: Optional[Dict[str, tuple]] = None,
        delay: float = 0.0,
        status_override: Optional[int] = None,
        body_override: Optional[str] = None,
    ):
        self.tokens = dict(tokens or {})
        self.delay = delay
        self.status_override = status_override
        self.body_override = body_override
        self.requests: List[str] = []
        self.paths: List[str] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        refresh_token = body.get("refreshToken")
        self.requests.append(refresh_token)
        self.paths.append(request.url.path)

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.body_override is not None:
            return httpx.Response(self.status_override or 200, text=self.body_override)
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={"message": "error"})

        if refresh_token not in self.tokens:
            return httpx.Response(401, json={"message": "Invalid refresh token"})

        access_token, rotated = self.tokens[refresh_token]
        data = {"accessToken": access_token}
        if rotated:
            data["refreshToken"] = rotated
        return httpx.Response(200, json=data)
