"""FastAPI dependencies for the query endpoints.

Registry conditions surface as exceptions that the app maps to statuses, so
consumers can tell apart:
- 503: catalog not ready (RegistryNotReady)
- 502: the manifest for a known tag could not be fetched (NetworkFetchFailure)
- 404: unknown version tag
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request

from ..engine.navigator import TypeNavigator
from ..exceptions import RegistryNotReady
from ..services.version_registry import VersionRegistry

logger = logging.getLogger(__name__)


def get_registry(request: Request) -> VersionRegistry:
    """The registry owned by the application."""
    return request.app.state.registry


Registry = Annotated[VersionRegistry, Depends(get_registry)]


def require_ready(registry: Registry) -> VersionRegistry:
    if not registry.ready:
        raise RegistryNotReady("Version catalog is not ready, try again shortly")
    return registry


ReadyRegistry = Annotated[VersionRegistry, Depends(require_ready)]


async def get_navigator(
    registry: ReadyRegistry,
    tag: Annotated[str, Path(description="Version tag")],
) -> TypeNavigator:
    navigator = await registry.get_tag(tag)
    if navigator is None:
        # The catalog can be withdrawn while the manifest is being fetched
        if not registry.ready:
            raise RegistryNotReady("Version catalog is not ready, try again shortly")
        raise HTTPException(status_code=404, detail=f"Unknown version: {tag}")
    return navigator


Navigator = Annotated[TypeNavigator, Depends(get_navigator)]
