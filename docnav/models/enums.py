"""Enumeration types for docnav."""

from enum import StrEnum


class EntityKind(StrEnum):
    """Kind of documentation entity a key resolves to."""

    CLASS = "class"
    EVENT = "event"
    METHOD = "method"
    PROP = "prop"
    TYPEDEF = "typedef"


class SearchScope(StrEnum):
    """Which index map a fuzzy search runs over."""

    ALL = "all"
    CLASS = "class"
    EVENT = "event"
    METHOD = "method"
    PROP = "prop"
    TYPEDEF = "typedef"


class TypeSymbol(StrEnum):
    """Connector placed between a class name and a member name in a composite key."""

    METHOD = "#"
    PROP = "~"
    EVENT = "$"


class RegistryState(StrEnum):
    """Lifecycle state of the version registry."""

    NOT_READY = "not_ready"
    READY = "ready"
