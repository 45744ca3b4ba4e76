"""Async HTTP transport shared by the Forge service clients.

WHY: Every Forge call is the same dance: send a request with a Bearer
header, check the status, decode JSON. The service clients should only
describe *what* to call, not how to talk HTTP.

HOW: Wraps httpx.AsyncClient. Transport is an async context manager:
enter it to open the connection pool, exit to close it. get/post/patch
take an absolute URL plus headers and return the decoded body.

RULES:
- Non-2xx responses raise TransportError with the status and body text
- httpx network errors are re-raised as TransportError (status_code None)
- No retries at this layer
- An empty response body decodes to None
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from forge_client.config import FORGE_HTTP_TIMEOUT
from forge_client.errors import TransportError

logger = logging.getLogger(__name__)


class Transport:
    """Thin JSON-over-HTTP wrapper around httpx.AsyncClient.

    RULES:
    - Use as: async with Transport() as transport: ...
    - An existing httpx.AsyncClient may be injected (tests use MockTransport);
      an injected client is not closed on exit
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._timeout = timeout or FORGE_HTTP_TIMEOUT
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> Transport:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=30.0),
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "Transport must be used as an async context manager: "
                "async with Transport() as transport: ..."
            )
        return self._client

    async def get(
        self,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> Any:
        return await self._request("GET", url, headers, params=params)

    async def post(
        self,
        url: str,
        json: Any = None,
        data: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._request("POST", url, headers or {}, json=json, data=data)

    async def patch(
        self,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._request("PATCH", url, headers or {}, json=json)

    async def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        **kwargs: Any,
    ) -> Any:
        """Send one request and decode its JSON body.

        HOW: Delegates to httpx, maps transport-level exceptions and
        non-2xx statuses onto TransportError.

        RULES:
        - Only keyword arguments that are not None are forwarded to httpx
        - The original httpx exception is chained as __cause__
        """
        client = self._ensure_client()
        options = {key: value for key, value in kwargs.items() if value is not None}
        try:
            resp = await client.request(method, url, headers=headers, **options)
        except httpx.HTTPError as exc:
            raise TransportError(None, str(exc) or type(exc).__name__, url) from exc

        logger.debug("%s %s -> %d", method, resp.request.url, resp.status_code)
        if not resp.is_success:
            raise TransportError(resp.status_code, resp.text, str(resp.request.url))

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                resp.status_code, "Response body is not valid JSON", str(resp.request.url)
            ) from exc
