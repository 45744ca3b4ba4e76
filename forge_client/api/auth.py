"""Two-legged OAuth authentication for Forge apps.

WHY: Every Forge request needs a Bearer token issued for a specific set
of scopes. Tokens are short-lived (about an hour), and long listings may
outlive one, so callers ask for a token right before each request.

HOW: AuthProvider is the structural contract the other clients depend
on. AuthenticationClient is the concrete implementation: it posts the
app credentials to the authentication endpoint and caches the issued
token per scope set until shortly before it expires.

RULES:
- authenticate() is safe to call repeatedly; a cached token is reused
- Tokens are cached per *set* of scopes (order does not matter)
- A cached token is dropped 60 seconds before its expiry
- Any failure raises AuthenticationError; nothing is retried here
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from forge_client.api.transport import Transport
from forge_client.config import AUTH_PATH, FORGE_HOST, load_credentials
from forge_client.errors import AuthenticationError, TransportError

logger = logging.getLogger(__name__)

_EXPIRY_MARGIN_S = 60


@dataclass(frozen=True)
class Token:
    """An access token issued for a set of scopes.

    RULES:
    - access_token is always non-empty
    - expires_at is a time.monotonic() timestamp
    """

    access_token: str
    token_type: str
    expires_in: int
    expires_at: float

    def is_fresh(self, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        return now < self.expires_at - _EXPIRY_MARGIN_S


class AuthProvider(Protocol):
    """Anything that can issue a token for a set of scopes."""

    async def authenticate(self, scopes: Iterable[str]) -> Token:
        ...


class OwnerAuthProvider(AuthProvider, Protocol):
    """An AuthProvider that also names the app owning its resources."""

    client_id: str


class AuthenticationClient:
    """Client-credentials token issuer with a per-scope cache.

    RULES:
    - client_id is public; it doubles as the owner of app bundles
    - client_id/client_secret default to load_credentials() from .env
    - The transport must already be entered (async with) by the caller
    """

    def __init__(
        self,
        transport: Transport,
        client_id: str | None = None,
        client_secret: str | None = None,
        host: str | None = None,
    ) -> None:
        if client_id is None or client_secret is None:
            client_id, client_secret = load_credentials()
        self.client_id = client_id
        self._client_secret = client_secret
        self._transport = transport
        self._host = (host or FORGE_HOST).rstrip("/")
        self._cache: dict[frozenset[str], Token] = {}

    async def authenticate(self, scopes: Iterable[str]) -> Token:
        """Return a token valid for the given scopes.

        HOW: Looks up the cache by the frozen scope set; on a miss (or a
        stale entry) posts a client_credentials grant to the
        authentication endpoint.

        RULES:
        - Raises AuthenticationError when the credentials or scopes are
          rejected, or when the response carries no access_token
        """
        scope_list = list(scopes)
        key = frozenset(scope_list)
        cached = self._cache.get(key)
        if cached is not None and cached.is_fresh():
            logger.debug("Reusing cached token for scopes %s", " ".join(sorted(key)))
            return cached

        form = {
            "client_id": self.client_id,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
            "scope": " ".join(scope_list),
        }
        try:
            body = await self._transport.post(
                f"{self._host}{AUTH_PATH}",
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except TransportError as exc:
            raise AuthenticationError(
                f"Token request for scopes '{form['scope']}' was rejected: {exc.message}"
            ) from exc

        if not isinstance(body, dict) or not body.get("access_token"):
            raise AuthenticationError("Token response did not contain an access_token")

        try:
            expires_in = int(body.get("expires_in", 0))
        except (TypeError, ValueError) as exc:
            raise AuthenticationError(
                f"Token response has an invalid expires_in: {body.get('expires_in')!r}"
            ) from exc
        token = Token(
            access_token=body["access_token"],
            token_type=body.get("token_type", "Bearer"),
            expires_in=expires_in,
            expires_at=time.monotonic() + expires_in,
        )
        self._cache[key] = token
        return token
