"""Tests for AuthenticationClient.

WHY: Pagination re-authenticates before every page, so the token cache
decides how many token requests a long listing costs.

HOW: A FakeService plays the authentication endpoint.
"""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from conftest import TEST_HOST, FakeService, run_against
from forge_client.api.auth import AuthenticationClient
from forge_client.errors import AuthenticationError

TOKEN_RESPONSE = {"access_token": "abc", "token_type": "Bearer", "expires_in": 3599}


def _auth(transport):
    return AuthenticationClient(transport, "app-id", "app-secret", host=TEST_HOST)


class TestAuthenticate:
    """Tests for AuthenticationClient.authenticate()."""

    def test_posts_client_credentials(self):
        service = FakeService([TOKEN_RESPONSE])

        token = run_against(service, lambda t: _auth(t).authenticate(["data:read", "data:write"]))

        assert token.access_token == "abc"
        assert token.expires_in == 3599
        request = service.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/authentication/v1/authenticate"
        form = parse_qs(request.content.decode())
        assert form == {
            "client_id": ["app-id"],
            "client_secret": ["app-secret"],
            "grant_type": ["client_credentials"],
            "scope": ["data:read data:write"],
        }

    def test_token_cached_per_scope_set(self):
        service = FakeService([TOKEN_RESPONSE, dict(TOKEN_RESPONSE, access_token="other")])

        async def _run(transport):
            auth = _auth(transport)
            first = await auth.authenticate(["data:read", "data:write"])
            again = await auth.authenticate(["data:write", "data:read"])
            other = await auth.authenticate(["code:all"])
            return first, again, other

        first, again, other = run_against(service, _run)

        assert first is again
        assert other.access_token == "other"
        assert len(service.requests) == 2

    def test_nearly_expired_token_is_refreshed(self):
        short_lived = dict(TOKEN_RESPONSE, expires_in=30)
        service = FakeService([short_lived, TOKEN_RESPONSE])

        async def _run(transport):
            auth = _auth(transport)
            await auth.authenticate(["code:all"])
            await auth.authenticate(["code:all"])

        run_against(service, _run)

        assert len(service.requests) == 2

    def test_rejected_credentials(self):
        service = FakeService([httpx.Response(401, json={"developerMessage": "bad secret"})])

        with pytest.raises(AuthenticationError, match="rejected"):
            run_against(service, lambda t: _auth(t).authenticate(["code:all"]))

    def test_missing_access_token(self):
        service = FakeService([{"token_type": "Bearer"}])

        with pytest.raises(AuthenticationError, match="access_token"):
            run_against(service, lambda t: _auth(t).authenticate(["code:all"]))

    def test_malformed_expires_in(self):
        service = FakeService([dict(TOKEN_RESPONSE, expires_in="soon")])

        with pytest.raises(AuthenticationError, match="expires_in"):
            run_against(service, lambda t: _auth(t).authenticate(["code:all"]))

    def test_credentials_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("FORGE_CLIENT_ID", "env-id")
        monkeypatch.setenv("FORGE_CLIENT_SECRET", "env-secret")

        auth = AuthenticationClient(transport=None)

        assert auth.client_id == "env-id"

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("FORGE_CLIENT_ID", raising=False)
        monkeypatch.delenv("FORGE_CLIENT_SECRET", raising=False)

        with pytest.raises(ValueError, match="FORGE_CLIENT_ID"):
            AuthenticationClient(transport=None)
