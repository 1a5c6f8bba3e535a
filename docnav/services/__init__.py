"""Services: remote docs source, interval scheduling and the version registry."""

from .docs_source import DocsSourceClient
from .scheduler import FixedInterval
from .version_registry import (
    VersionCatalog,
    VersionRegistry,
    classify_tree,
    is_release,
    sort_releases,
)

__all__ = [
    "DocsSourceClient",
    "FixedInterval",
    "VersionCatalog",
    "VersionRegistry",
    "classify_tree",
    "is_release",
    "sort_releases",
]
