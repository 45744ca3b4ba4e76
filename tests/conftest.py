"""Shared test fixtures for the forge_client test suite.

WHY: Most tests need the same two collaborators: an auth provider that
hands out numbered tokens, and a fake Forge service that answers
requests from a queue and remembers what it was asked.

HOW: FakeAuth implements the AuthProvider protocol and records every
scope list it was asked for. FakeService is an httpx.MockTransport
handler; run_against() wires it into a real Transport and runs a
coroutine with asyncio.run().

RULES:
- No test ever reaches the network
- A FakeService with an empty queue fails the test on any extra request
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from forge_client.api.auth import Token
from forge_client.api.transport import Transport
from forge_client.errors import AuthenticationError

TEST_HOST = "https://forge.test"


class FakeAuth:
    """AuthProvider double issuing "token-1", "token-2", ... per call."""

    def __init__(self, client_id: str = "owner", fail_on_call: Optional[int] = None) -> None:
        self.client_id = client_id
        self.fail_on_call = fail_on_call
        self.calls: List[List[str]] = []

    async def authenticate(self, scopes) -> Token:
        self.calls.append(list(scopes))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise AuthenticationError("scope rejected")
        return Token(
            access_token="token-{}".format(len(self.calls)),
            token_type="Bearer",
            expires_in=3600,
            expires_at=time.monotonic() + 3600,
        )


class FakeService:
    """Answers requests from a queue of JSON bodies or httpx.Response objects."""

    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("Unexpected request: {} {}".format(request.method, request.url))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


def run_against(service: FakeService, make_coro: Callable[[Transport], Any]) -> Any:
    """Run make_coro(transport) against a FakeService and return its result."""

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(service)) as http:
            async with Transport(client=http) as transport:
                return await make_coro(transport)

    return asyncio.run(_run())


@pytest.fixture
def fake_auth():
    return FakeAuth()


@pytest.fixture
def paged_responses() -> List[Dict[str, Any]]:
    """Three linked pages: [1, 2] → [3] → [4, 5]."""
    return [
        {"data": [1, 2], "paginationToken": "A"},
        {"data": [3], "paginationToken": "X"},
        {"data": [4, 5]},
    ]
