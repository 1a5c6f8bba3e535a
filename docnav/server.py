"""FastAPI app exposing the documentation query surface."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api.deps import Navigator, ReadyRegistry, Registry
from .config import Settings
from .config import settings as default_settings
from .exceptions import NetworkFetchFailure, RegistryNotReady
from .models import (
    EntityKind,
    HealthResponse,
    RegistrySnapshot,
    ResolveResponse,
    SearchHit,
    SearchResponse,
    SearchScope,
    TagSearchResponse,
    VersionsResponse,
)
from .services.version_registry import VersionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the registry's refresh timer on startup, release it on shutdown."""
    registry: VersionRegistry = app.state.registry
    logging.basicConfig(
        level=registry.settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting docnav v{__version__} for {registry.settings.manifest_repo}")

    registry.start()
    yield
    await registry.shutdown()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(registry: VersionRegistry | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the app around a registry (one is created from settings if omitted)."""
    settings = settings or default_settings
    app = FastAPI(
        title="docnav",
        description="Versioned API documentation index",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.registry = registry or VersionRegistry(settings)

    # ============ EXCEPTION HANDLERS ============

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RegistryNotReady)
    async def not_ready_handler(request: Request, exc: RegistryNotReady):
        return _error_response(503, str(exc))

    @app.exception_handler(NetworkFetchFailure)
    async def fetch_failure_handler(request: Request, exc: NetworkFetchFailure):
        logger.warning(f"Upstream fetch failed for {request.url.path}: {exc}")
        return _error_response(502, "Could not fetch documentation from the source, try again")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error_response(500, "An internal server error occurred. Please try again.")

    # ============ HEALTH ENDPOINTS ============

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now(UTC))

    @app.get("/ready", response_model=RegistrySnapshot, tags=["Health"])
    async def readiness_check(registry: Registry):
        """Registry snapshot; 503 while the catalog is not ready."""
        snapshot = registry.debug_snapshot()
        return JSONResponse(
            content=snapshot.model_dump(mode="json"),
            status_code=200 if snapshot.ready else 503,
        )

    # ============ VERSION ENDPOINTS ============

    @app.get("/versions", response_model=VersionsResponse, tags=["Versions"])
    async def list_versions(registry: ReadyRegistry) -> VersionsResponse:
        return VersionsResponse(
            releases=registry.releases,
            branches=registry.branches,
            latest=registry.latest,
        )

    @app.get("/versions/search", response_model=TagSearchResponse, tags=["Versions"])
    async def search_versions(
        registry: ReadyRegistry,
        q: Annotated[str, Query(description="Fuzzy tag query")] = "",
    ) -> TagSearchResponse:
        return TagSearchResponse(query=q, tags=[match.key for match in registry.filter(q)])

    @app.post("/versions/refresh", response_model=RegistrySnapshot, tags=["Versions"])
    async def refresh_versions(registry: Registry) -> RegistrySnapshot:
        await registry.refresh()
        return registry.debug_snapshot()

    # ============ DOCUMENTATION ENDPOINTS ============

    @app.get("/versions/{tag}/search", response_model=SearchResponse, tags=["Docs"])
    async def search_docs(
        navigator: Navigator,
        q: Annotated[str, Query(description="Fuzzy key query")] = "",
        kind: Annotated[SearchScope, Query(description="Index map to search")] = SearchScope.ALL,
        limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    ) -> SearchResponse:
        matches = navigator.fuzzy_filter(q, kind, limit or settings.fuzzy_limit)
        # Scoped maps fix the kind; "all" may relabel a key on name collisions
        scoped_kind = None if kind is SearchScope.ALL else EntityKind(kind.value)
        return SearchResponse(
            tag=navigator.tag,
            query=q,
            scope=kind,
            results=[
                SearchHit(key=match.key, kind=scoped_kind or navigator.kind_of(match.key))
                for match in matches
            ],
        )

    @app.get("/versions/{tag}/resolve", response_model=ResolveResponse, tags=["Docs"])
    async def resolve(
        navigator: Navigator,
        class_name: Annotated[str, Query(min_length=1, description="Class or typedef name")],
        member: Annotated[str | None, Query(description="Method, prop or event name")] = None,
    ) -> ResolveResponse:
        descriptor = navigator.find_first_match(class_name, member)
        if descriptor is None:
            target = f"{class_name}.{member}" if member else class_name
            raise HTTPException(status_code=404, detail=f"No match for {target} in {navigator.tag}")
        return ResolveResponse(
            tag=navigator.tag,
            kind=descriptor.species,
            descriptor=descriptor.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    return app


app = create_app()
