"""Cursor-based pagination over Forge listing endpoints.

WHY: Forge listings (engines, app bundles, activities, aliases, versions)
return a `data` array plus an optional `paginationToken`. Callers either
want to walk the pages lazily and stop early, or just want everything.

HOW: PaginatedFetcher.pages() is an async generator: each page is
fetched only when the consumer asks for the next one, with a freshly
requested token. collect() drains pages() and concatenates the items.

RULES:
- Page n+1 is never requested before page n has arrived (no prefetch)
- Each page request re-authenticates with the required scopes
- Absent paginationToken ends the sequence; present token is sent back
  as the `page` query parameter on the next request
- No bound on the page count; no retries
- Any failure aborts the whole listing; partial results are never returned
- pages() is not restartable: iterating again starts over from page one
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from typing import Any

from forge_client.api.auth import AuthProvider
from forge_client.api.transport import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """One page of a listing.

    RULES:
    - items keeps the order the service returned
    - continuation_token is None iff this is the last page
    """

    items: tuple[Any, ...]
    continuation_token: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Page:
        return cls(
            items=tuple(data.get("data") or ()),
            continuation_token=data.get("paginationToken") or None,
        )


class PaginatedFetcher:
    """Turns a paginated listing endpoint into pages or one collection.

    RULES:
    - endpoint is relative to base_url (e.g. "/activities")
    - Shares no state between calls; concurrent listings are independent
    """

    def __init__(self, transport: Transport, auth: AuthProvider, base_url: str) -> None:
        self._transport = transport
        self._auth = auth
        self._base_url = base_url.rstrip("/")

    async def pages(self, endpoint: str, scopes: Iterable[str]) -> AsyncIterator[Page]:
        """Yield the pages of a listing one at a time.

        HOW: Authenticate, fetch, yield; repeat while the fetched page
        carries a continuation token. Because this is a generator, the
        next request only happens when the consumer resumes it, so
        breaking out of ``async for`` is enough to stop.

        RULES:
        - Errors surface at the point the failing page would be yielded
        """
        scope_list = list(scopes)
        url = f"{self._base_url}{endpoint}"
        token: str | None = None
        index = 0

        while True:
            authentication = await self._auth.authenticate(scope_list)
            headers = {"Authorization": f"Bearer {authentication.access_token}"}
            params = {"page": token} if token is not None else None
            logger.debug("Fetching page %d of %s", index, endpoint)
            body = await self._transport.get(url, headers, params=params)

            page = Page.from_dict(body or {})
            yield page

            if page.continuation_token is None:
                return
            token = page.continuation_token
            index += 1

    async def collect(self, endpoint: str, scopes: Iterable[str]) -> list[Any]:
        """Fetch every page of a listing and return the concatenated items.

        RULES:
        - Same content and order as concatenating pages() by hand
        - If any page fails, the error propagates and nothing is returned
        """
        results: list[Any] = []
        async for page in self.pages(endpoint, scopes):
            results.extend(page.items)
        return results
