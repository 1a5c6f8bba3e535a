"""Exception types raised by docnav.

Lookup misses and unknown version tags are not errors: they return ``None``.
Malformed documentation entries are dropped while parsing and never raise.
"""


class DocnavError(Exception):
    """Base class for docnav errors."""


class NetworkFetchFailure(DocnavError):
    """A remote listing or document fetch failed or returned a non-success status."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RegistryNotReady(DocnavError):
    """The version catalog is being refreshed (or the last refresh failed)."""
