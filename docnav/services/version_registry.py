"""Version registry and navigator cache.

The registry lists the manifest branch, splits the discovered tags into
releases and branches, and publishes them as one immutable ``VersionCatalog``.
Each catalog owns the navigator cache for its tags, so publishing a new catalog
also drops every index built for the previous one.

While a refresh is running (or after one failed) no catalog is published and
every read returns an empty result: callers never see stale or half-built data.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import cached_property

import semver

from ..config import Settings
from ..config import settings as default_settings
from ..constants import TREE_BLOB_TYPE
from ..engine.fuzzy import FuzzyMatch, fuzzy_filter
from ..engine.navigator import TypeNavigator
from ..exceptions import NetworkFetchFailure
from ..models.enums import RegistryState
from ..models.registry import GitTreeNode, RegistrySnapshot
from .docs_source import DocsSourceClient
from .scheduler import FixedInterval

logger = logging.getLogger(__name__)


def is_release(tag: str) -> bool:
    """Whether ``tag`` is a semantic version, optionally prefixed with "v"."""
    return semver.Version.is_valid(tag.removeprefix("v"))


def release_version(tag: str) -> semver.Version:
    return semver.Version.parse(tag.removeprefix("v"))


def sort_releases(tags: Iterable[str]) -> list[str]:
    """Sort release tags newest first by semantic-version precedence."""
    return sorted(tags, key=release_version, reverse=True)


def classify_tree(nodes: Iterable[GitTreeNode], settings: Settings) -> tuple[list[str], list[str]]:
    """Split a tree listing into (releases, branches).

    Tags are prepended as they are discovered, so both lists start with the
    most recently listed entry; releases are then sorted by version.
    """
    releases: list[str] = []
    branches: list[str] = []
    prefix = settings.docs_prefix
    extension = settings.document_extension

    for node in nodes:
        if node.type != TREE_BLOB_TYPE:
            continue
        if settings.excluded_path_marker and settings.excluded_path_marker in node.path:
            continue
        if prefix and not node.path.startswith(prefix):
            continue
        path = node.path[len(prefix):]
        if "/" in path or not path.endswith(extension):
            continue

        tag = path[: -len(extension)]
        if not tag:
            continue

        release = is_release(tag)
        (releases if release else branches).insert(0, tag)
        logger.debug(f"Found {'release' if release else 'branch'} {tag}")

    return sort_releases(releases), branches


@dataclass(frozen=True)
class VersionCatalog:
    """One published set of known versions plus the indices built for them."""

    releases: tuple[str, ...]
    branches: tuple[str, ...]
    fetched_at: datetime
    navigators: dict[str, TypeNavigator] = field(default_factory=dict, compare=False, repr=False)
    build_lock: asyncio.Lock = field(default_factory=asyncio.Lock, compare=False, repr=False)

    @cached_property
    def latest(self) -> str | None:
        return self.releases[0] if self.releases else None

    @cached_property
    def all(self) -> tuple[str, ...]:
        return self.branches + self.releases


class VersionRegistry:
    """Catalog of documentation versions with a lazily built index per tag.

    Lifecycle: ``start()`` schedules hourly refreshes and fires one right
    away, ``refresh()`` can also be awaited directly, ``shutdown()`` stops the
    timer (an in-flight refresh still completes) and releases the HTTP client.
    """

    def __init__(self, settings: Settings | None = None, source: DocsSourceClient | None = None):
        self.settings = settings or default_settings
        self.source = source or DocsSourceClient(self.settings)
        self._catalog: VersionCatalog | None = None
        self._last_fetch: datetime | None = None
        self._interval: FixedInterval | None = None
        self._refresh_lock = asyncio.Lock()
        self._closed = False

    # ============ STATE ============

    @property
    def state(self) -> RegistryState:
        return RegistryState.READY if self._catalog is not None else RegistryState.NOT_READY

    @property
    def ready(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> VersionCatalog | None:
        return self._catalog

    @property
    def last_fetch(self) -> datetime | None:
        return self._last_fetch

    @property
    def releases(self) -> list[str]:
        if self._catalog is None:
            return []
        return list(self._catalog.releases)

    @property
    def branches(self) -> list[str]:
        if self._catalog is None:
            return []
        return list(self._catalog.branches)

    @property
    def all(self) -> list[str]:
        if self._catalog is None:
            return []
        return list(self._catalog.all)

    @property
    def latest(self) -> str | None:
        if self._catalog is None:
            return None
        return self._catalog.latest

    def filter(self, query: str, limit: int | None = None) -> list[FuzzyMatch]:
        """Fuzzy-match ``query`` against every known tag, best first."""
        return fuzzy_filter(query, self.all, limit=limit)

    def debug_snapshot(self) -> RegistrySnapshot:
        catalog = self._catalog
        return RegistrySnapshot(
            ready=catalog is not None,
            versions=len(catalog.releases) if catalog else 0,
            branches=len(catalog.branches) if catalog else 0,
            navigator_count=len(catalog.navigators) if catalog else 0,
            last_fetch=self._last_fetch,
            latest=catalog.latest if catalog else None,
        )

    # ============ NAVIGATOR CACHE ============

    async def get_tag(self, tag: str) -> TypeNavigator | None:
        """Return the index for ``tag``, building it on first request.

        Returns None while the registry is not ready and for tags outside the
        current catalog; unknown tags are never fetched.

        Raises:
            NetworkFetchFailure: If the manifest for a known tag could not be fetched.
        """
        catalog = self._catalog
        if catalog is None:
            return None
        if tag not in catalog.all:
            logger.debug(f"Tag {tag} is not in the current catalog")
            return None

        navigator = catalog.navigators.get(tag)
        if navigator is not None:
            return navigator

        async with catalog.build_lock:
            navigator = catalog.navigators.get(tag)
            if navigator is None:
                navigator = await TypeNavigator.from_source(tag, self.source)
                catalog.navigators[tag] = navigator
        return navigator

    # ============ REFRESH LIFECYCLE ============

    async def refresh(self) -> VersionCatalog | None:
        """List the manifest branch and publish a new catalog.

        The current catalog is withdrawn before fetching. If the fetch fails
        the registry stays not ready until the next successful refresh.
        After ``shutdown()`` nothing is published and None is returned.

        Raises:
            NetworkFetchFailure: If the tree listing could not be fetched.
        """
        async with self._refresh_lock:
            self._catalog = None
            if self._closed:
                return None

            try:
                tree = await self.source.fetch_tree()
            except NetworkFetchFailure as e:
                logger.error(f"Version refresh failed: {e}")
                raise

            if self._closed:
                logger.info("Registry shut down during refresh, discarding catalog")
                return None

            releases, branches = classify_tree(tree.tree, self.settings)
            catalog = VersionCatalog(
                releases=tuple(releases),
                branches=tuple(branches),
                fetched_at=datetime.now(UTC),
            )

            self._last_fetch = catalog.fetched_at
            self._catalog = catalog
            logger.info(
                f"Version catalog refreshed: {len(releases)} releases, {len(branches)} branches, "
                f"latest={catalog.latest}"
            )
            return catalog

    def start(self, force: bool = False) -> asyncio.Task | None:
        """Schedule recurring refreshes and fire one immediately.

        Must be called from a running event loop. Returns the task of the
        immediate refresh, or None if the timer was already running.
        """
        if self._interval is not None and self._interval.running:
            if not force:
                return None
            self._interval.destroy()

        self._interval = FixedInterval(
            self.settings.refresh_interval_seconds,
            self.refresh,
            name="version-refresh",
        )
        self._interval.start()
        return self._interval.fire()

    def stop(self) -> None:
        """Stop scheduled refreshes without touching one in flight."""
        if self._interval is not None:
            self._interval.destroy()
            self._interval = None

    async def shutdown(self) -> None:
        self.stop()
        self._closed = True
        self._catalog = None
        await self.source.aclose()
        logger.info("Version registry shut down")
