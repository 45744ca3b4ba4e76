"""Async client for the Forge Model Derivative v2 API.

WHY: Translating a design into viewable derivatives and reading back its
metadata is a handful of GETs and one POST, each needing the right
token scopes.

HOW: Each endpoint is one coroutine that authenticates, calls the
transport, and returns the decoded body.

RULES:
- Reads use DATA_READ_SCOPES, job submission uses DATA_WRITE_SCOPES
- urn is the base64-encoded object id, passed through unchanged
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from forge_client.api.auth import AuthProvider
from forge_client.api.transport import Transport
from forge_client.config import (
    DATA_READ_SCOPES,
    DATA_WRITE_SCOPES,
    FORGE_HOST,
    MODEL_DERIVATIVE_ROOT,
)


class ModelDerivativeClient:
    """Client for translation jobs, manifests and viewable metadata."""

    def __init__(
        self,
        auth: AuthProvider,
        transport: Transport,
        host: str | None = None,
    ) -> None:
        self.auth = auth
        self._transport = transport
        self._base_url = (host or FORGE_HOST).rstrip("/") + MODEL_DERIVATIVE_ROOT

    async def _headers(self, scopes: Iterable[str]) -> dict[str, str]:
        authentication = await self.auth.authenticate(scopes)
        return {"Authorization": f"Bearer {authentication.access_token}"}

    async def _get(self, endpoint: str) -> Any:
        headers = await self._headers(DATA_READ_SCOPES)
        return await self._transport.get(f"{self._base_url}{endpoint}", headers)

    async def formats(self) -> dict[str, list[str]]:
        """Return supported output formats mapped to their source formats."""
        response = await self._get("/designdata/formats")
        return response["formats"]

    async def submit_job(self, urn: str, outputs: Sequence[dict[str, Any]]) -> Any:
        """Submit a translation job.

        Args:
            urn: Document to translate.
            outputs: Requested output formats, e.g.
                ``[{"type": "svf", "views": ["2d", "3d"]}]``.

        Returns:
            Job details with ``result``, ``urn`` and ``acceptedJobs``.
        """
        body = {"input": {"urn": urn}, "output": {"formats": list(outputs)}}
        headers = await self._headers(DATA_WRITE_SCOPES)
        return await self._transport.post(
            f"{self._base_url}/designdata/job", json=body, headers=headers
        )

    async def get_manifest(self, urn: str) -> Any:
        return await self._get(f"/designdata/{urn}/manifest")

    async def get_metadata(self, urn: str) -> Any:
        return await self._get(f"/designdata/{urn}/metadata")

    async def get_viewable_tree(self, urn: str, guid: str) -> Any:
        """Return the object tree of one viewable."""
        return await self._get(f"/designdata/{urn}/metadata/{guid}")

    async def get_viewable_properties(self, urn: str, guid: str) -> Any:
        """Return the properties of every object in one viewable."""
        return await self._get(f"/designdata/{urn}/metadata/{guid}/properties")
