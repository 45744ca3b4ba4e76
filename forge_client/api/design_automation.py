"""Async client for the Forge Design Automation v3 API.

WHY: Running CAD work remotely means juggling engines, app bundles,
activities, their aliases and versions, and finally work items. This
client exposes each of those as one typed coroutine, so callers never
build URLs, tokens, or activity JSON by hand.

HOW: Listings go through PaginatedFetcher; each has an iterate_*
variant (async generator of pages, stop whenever you like) and a list_*
variant (everything, concatenated). Activity bodies are built by
core.activities.build_activity *before* authenticating, so an invalid
activity never costs a request.

RULES:
- Every call authenticates with DESIGN_AUTOMATION_SCOPES
- App bundle references use the auth client's client_id as owner
- create_activity sends an id; update_activity posts a new version
  without one (the service assigns the version number)
- Errors propagate unchanged: TransportError, AuthenticationError,
  ActivityValidationError
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from typing import Any

from forge_client.api.auth import OwnerAuthProvider
from forge_client.api.pagination import PaginatedFetcher
from forge_client.api.transport import Transport
from forge_client.config import DESIGN_AUTOMATION_ROOT, DESIGN_AUTOMATION_SCOPES, FORGE_HOST
from forge_client.core.activities import (
    InputDescriptor,
    OutputDescriptor,
    WorkItemInput,
    WorkItemOutput,
    build_activity,
    build_work_item,
)

logger = logging.getLogger(__name__)


class DesignAutomationClient:
    """Client for engines, app bundles, activities and work items.

    RULES:
    - transport must already be entered (async with Transport() ...)
    - auth.client_id is the owner of app bundles referenced by activities
    """

    def __init__(
        self,
        auth: OwnerAuthProvider,
        transport: Transport,
        host: str | None = None,
    ) -> None:
        self.auth = auth
        self._transport = transport
        self._base_url = (host or FORGE_HOST).rstrip("/") + DESIGN_AUTOMATION_ROOT
        self._pager = PaginatedFetcher(transport, auth, self._base_url)

    async def _headers(self) -> dict[str, str]:
        authentication = await self.auth.authenticate(DESIGN_AUTOMATION_SCOPES)
        return {"Authorization": f"Bearer {authentication.access_token}"}

    async def _iterate(self, endpoint: str) -> AsyncIterator[list[Any]]:
        async for page in self._pager.pages(endpoint, DESIGN_AUTOMATION_SCOPES):
            yield list(page.items)

    async def _get(self, endpoint: str) -> Any:
        return await self._transport.get(f"{self._base_url}{endpoint}", await self._headers())

    async def _post(self, endpoint: str, body: Any) -> Any:
        return await self._transport.post(
            f"{self._base_url}{endpoint}", json=body, headers=await self._headers()
        )

    async def _patch(self, endpoint: str, body: Any) -> Any:
        return await self._transport.patch(
            f"{self._base_url}{endpoint}", json=body, headers=await self._headers()
        )

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------

    def iterate_engines(self) -> AsyncIterator[list[Any]]:
        """Iterate over engine ids, one page at a time."""
        return self._iterate("/engines")

    async def list_engines(self) -> list[Any]:
        """Return every engine id."""
        return await self._pager.collect("/engines", DESIGN_AUTOMATION_SCOPES)

    # ------------------------------------------------------------------
    # App bundles
    # ------------------------------------------------------------------

    def iterate_app_bundles(self) -> AsyncIterator[list[Any]]:
        return self._iterate("/appbundles")

    async def list_app_bundles(self) -> list[Any]:
        return await self._pager.collect("/appbundles", DESIGN_AUTOMATION_SCOPES)

    async def create_app_bundle(self, name: str, engine: str, description: str) -> Any:
        """Create a new app bundle.

        Returns:
            The created bundle, including its upload parameters.
        """
        body = {"id": name, "description": description, "engine": engine}
        logger.info("Creating app bundle %s for engine %s", name, engine)
        return await self._post("/appbundles", body)

    async def update_app_bundle(
        self,
        name: str,
        engine: str | None = None,
        description: str | None = None,
    ) -> Any:
        """Create a new version of an existing app bundle."""
        body: dict[str, str] = {}
        if description:
            body["description"] = description
        if engine:
            body["engine"] = engine
        logger.info("Creating new version of app bundle %s", name)
        return await self._post(f"/appbundles/{name}/versions", body)

    def iterate_app_bundle_aliases(self, name: str) -> AsyncIterator[list[Any]]:
        return self._iterate(f"/appbundles/{name}/aliases")

    async def list_app_bundle_aliases(self, name: str) -> list[Any]:
        return await self._pager.collect(f"/appbundles/{name}/aliases", DESIGN_AUTOMATION_SCOPES)

    def iterate_app_bundle_versions(self, name: str) -> AsyncIterator[list[Any]]:
        return self._iterate(f"/appbundles/{name}/versions")

    async def list_app_bundle_versions(self, name: str) -> list[Any]:
        return await self._pager.collect(f"/appbundles/{name}/versions", DESIGN_AUTOMATION_SCOPES)

    async def create_app_bundle_alias(self, name: str, alias: str, version: int) -> Any:
        return await self._post(f"/appbundles/{name}/aliases", {"id": alias, "version": version})

    async def update_app_bundle_alias(self, name: str, alias: str, version: int) -> Any:
        """Point an existing app bundle alias at another version."""
        return await self._patch(f"/appbundles/{name}/aliases/{alias}", {"version": version})

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def iterate_activities(self) -> AsyncIterator[list[Any]]:
        return self._iterate("/activities")

    async def list_activities(self) -> list[Any]:
        return await self._pager.collect("/activities", DESIGN_AUTOMATION_SCOPES)

    async def create_activity(
        self,
        activity_id: str,
        description: str,
        bundle_name: str,
        bundle_alias: str,
        engine: str,
        inputs: Iterable[InputDescriptor | Mapping[str, Any]] = (),
        outputs: Iterable[OutputDescriptor | Mapping[str, Any]] = (),
        script: Any = None,
    ) -> Any:
        """Create a new activity.

        HOW: Builds the engine-specific descriptor first (raising
        ActivityValidationError on bad input), then posts it.

        Args:
            activity_id: New activity id.
            description: Activity description.
            bundle_name: Name of the app bundle the activity loads.
            bundle_alias: Alias of that app bundle.
            engine: Qualified engine id, e.g. "Autodesk.AutoCAD+24_1".
            inputs: Input descriptors, in command-line order.
            outputs: Output descriptors.
            script: Optional script (AutoCAD and 3dsMax only).

        Returns:
            The created activity as returned by the service.
        """
        descriptor = build_activity(
            engine,
            description,
            self.auth.client_id,
            bundle_name,
            bundle_alias,
            inputs,
            outputs,
            script=script,
            activity_id=activity_id,
        )
        logger.info("Creating activity %s for engine %s", activity_id, engine)
        return await self._post("/activities", descriptor.to_dict())

    async def update_activity(
        self,
        activity_id: str,
        description: str,
        bundle_name: str,
        bundle_alias: str,
        engine: str,
        inputs: Iterable[InputDescriptor | Mapping[str, Any]] = (),
        outputs: Iterable[OutputDescriptor | Mapping[str, Any]] = (),
        script: Any = None,
    ) -> Any:
        """Create a new version of an existing activity.

        Same arguments as create_activity; the posted descriptor carries
        no id since the service assigns the new version.
        """
        descriptor = build_activity(
            engine,
            description,
            self.auth.client_id,
            bundle_name,
            bundle_alias,
            inputs,
            outputs,
            script=script,
        )
        logger.info("Creating new version of activity %s", activity_id)
        return await self._post(f"/activities/{activity_id}/versions", descriptor.to_dict())

    def iterate_activity_aliases(self, name: str) -> AsyncIterator[list[Any]]:
        return self._iterate(f"/activities/{name}/aliases")

    async def list_activity_aliases(self, name: str) -> list[Any]:
        return await self._pager.collect(f"/activities/{name}/aliases", DESIGN_AUTOMATION_SCOPES)

    def iterate_activity_versions(self, name: str) -> AsyncIterator[list[Any]]:
        return self._iterate(f"/activities/{name}/versions")

    async def list_activity_versions(self, name: str) -> list[Any]:
        return await self._pager.collect(f"/activities/{name}/versions", DESIGN_AUTOMATION_SCOPES)

    async def create_activity_alias(self, activity_id: str, alias: str, version: int) -> Any:
        return await self._post(
            f"/activities/{activity_id}/aliases", {"id": alias, "version": version}
        )

    async def update_activity_alias(self, activity_id: str, alias: str, version: int) -> Any:
        return await self._patch(
            f"/activities/{activity_id}/aliases/{alias}", {"version": version}
        )

    # ------------------------------------------------------------------
    # Work items
    # ------------------------------------------------------------------

    async def get_work_item(self, work_item_id: str) -> Any:
        """Return the status and report URL of a work item."""
        return await self._get(f"/workitems/{work_item_id}")

    async def create_work_item(
        self,
        activity_id: str,
        inputs: Sequence[WorkItemInput | Mapping[str, Any]] = (),
        outputs: Sequence[WorkItemOutput | Mapping[str, Any]] = (),
    ) -> Any:
        """Submit a work item for a qualified activity id."""
        body = build_work_item(activity_id, inputs, outputs)
        logger.info("Submitting work item for activity %s", activity_id)
        return await self._post("/workitems", body)
