"""Models for the remote tree listing and the registry debug snapshot."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GitTreeNode(BaseModel):
    """One entry of a Git tree listing."""

    model_config = ConfigDict(extra="ignore")

    path: str = Field(..., description="Path relative to the tree root")
    mode: str | None = Field(default=None, description="File mode")
    type: str = Field(..., description="'blob' or 'tree'")
    sha: str | None = Field(default=None, description="Object SHA")
    size: int | None = Field(default=None, ge=0, description="Blob size in bytes")
    url: str | None = Field(default=None, description="API URL of the object")


class GitTreeResponse(BaseModel):
    """Response of the Git trees API for one branch."""

    model_config = ConfigDict(extra="ignore")

    sha: str | None = Field(default=None, description="Tree SHA")
    url: str | None = Field(default=None, description="Tree API URL")
    tree: list[GitTreeNode] = Field(default_factory=list, description="Tree entries")
    truncated: bool = Field(default=False, description="Whether GitHub truncated the listing")


class RegistrySnapshot(BaseModel):
    """Debug view of the version registry."""

    ready: bool = Field(..., description="Whether the catalog is available")
    versions: int = Field(default=0, ge=0, description="Number of release tags")
    branches: int = Field(default=0, ge=0, description="Number of branch tags")
    navigator_count: int = Field(default=0, ge=0, description="Indexed versions in the cache")
    last_fetch: datetime | None = Field(default=None, description="Time of the last successful refresh")
    latest: str | None = Field(default=None, description="Latest release tag")
