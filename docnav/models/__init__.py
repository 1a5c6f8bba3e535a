"""Pydantic models and enums for docnav.

Import from submodules directly for narrower imports:

    from docnav.models.descriptors import ClassDescriptor
    from docnav.models.enums import EntityKind
"""

from .descriptors import (
    AnyDescriptor,
    ClassDescriptor,
    ConstructorDescriptor,
    DocumentationFile,
    DocumentationMeta,
    DocumentationRoot,
    EventDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
)
from .enums import EntityKind, RegistryState, SearchScope, TypeSymbol
from .registry import GitTreeNode, GitTreeResponse, RegistrySnapshot
from .responses import (
    HealthResponse,
    ResolveResponse,
    SearchHit,
    SearchResponse,
    TagSearchResponse,
    VersionsResponse,
)

__all__ = [
    # Enums
    "EntityKind",
    "RegistryState",
    "SearchScope",
    "TypeSymbol",
    # Descriptors
    "AnyDescriptor",
    "ClassDescriptor",
    "ConstructorDescriptor",
    "DocumentationFile",
    "DocumentationMeta",
    "DocumentationRoot",
    "EventDescriptor",
    "MemberDescriptor",
    "MethodDescriptor",
    "ParameterDescriptor",
    "TypeDescriptor",
    # Registry
    "GitTreeNode",
    "GitTreeResponse",
    "RegistrySnapshot",
    # Responses
    "HealthResponse",
    "ResolveResponse",
    "SearchHit",
    "SearchResponse",
    "TagSearchResponse",
    "VersionsResponse",
]
