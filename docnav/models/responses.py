"""Response schemas for the HTTP query surface."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import EntityKind, SearchScope


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Server time")


class VersionsResponse(BaseModel):
    """Current version catalog."""

    releases: list[str] = Field(default_factory=list, description="Release tags, newest first")
    branches: list[str] = Field(default_factory=list, description="Branch tags")
    latest: str | None = Field(default=None, description="Latest release tag")


class TagSearchResponse(BaseModel):
    """Fuzzy search over version tags."""

    query: str = Field(..., description="Search query")
    tags: list[str] = Field(default_factory=list, description="Matching tags, best first")


class SearchHit(BaseModel):
    """One fuzzy search result."""

    key: str = Field(..., description="Composite key or bare name")
    kind: EntityKind = Field(..., description="Entity kind the key resolves to")


class SearchResponse(BaseModel):
    """Fuzzy search over the keys of one documentation version."""

    tag: str = Field(..., description="Version tag searched")
    query: str = Field(..., description="Search query")
    scope: SearchScope = Field(..., description="Index map searched")
    results: list[SearchHit] = Field(default_factory=list, description="Results, best first")


class ResolveResponse(BaseModel):
    """A resolved descriptor."""

    tag: str = Field(..., description="Version tag")
    kind: EntityKind = Field(..., description="Entity kind")
    descriptor: dict[str, Any] = Field(..., description="Descriptor fields")
