"""Tests for the httpx-backed Transport."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import TEST_HOST, FakeService, run_against
from forge_client.api.transport import Transport
from forge_client.errors import TransportError


class TestTransport:
    """Tests for status handling and body decoding."""

    def test_get_decodes_json(self):
        service = FakeService([{"data": [1]}])

        body = run_against(
            service, lambda t: t.get(TEST_HOST + "/x", {"Authorization": "Bearer t"})
        )

        assert body == {"data": [1]}
        assert service.requests[0].headers["Authorization"] == "Bearer t"

    def test_non_2xx_raises(self):
        service = FakeService([httpx.Response(403, text="Forbidden")])

        with pytest.raises(TransportError) as exc_info:
            run_against(service, lambda t: t.get(TEST_HOST + "/x", {}))

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Forbidden"
        assert exc_info.value.url == TEST_HOST + "/x"

    def test_network_error_wrapped(self):
        service = FakeService([httpx.ConnectError("connection refused")])

        with pytest.raises(TransportError) as exc_info:
            run_against(service, lambda t: t.get(TEST_HOST + "/x", {}))

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_empty_body_is_none(self):
        service = FakeService([httpx.Response(204)])

        assert run_against(service, lambda t: t.patch(TEST_HOST + "/x", json={"a": 1})) is None

    def test_invalid_json_raises(self):
        service = FakeService([httpx.Response(200, text="<html>")])

        with pytest.raises(TransportError, match="not valid JSON"):
            run_against(service, lambda t: t.post(TEST_HOST + "/x", json={}))

    def test_requires_context_manager(self):
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(Transport().get(TEST_HOST + "/x", {}))
