"""API helpers for the HTTP query surface."""

from .deps import get_navigator, get_registry, require_ready

__all__ = [
    "get_navigator",
    "get_registry",
    "require_ready",
]
