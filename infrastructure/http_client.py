"""Shared async HTTP client with configurable timeout and base URL."""

from typing import Any

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance per external service keeps timeouts independently
    configurable. Relative URLs resolve against ``base_url``.
    """

    def __init__(self, timeout: float = 5.0, base_url: str = "") -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout,
            base_url=base_url,
            headers={"Accept": "application/json"},
        )

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def post_json(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        return await self._client.post(url, json=payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
