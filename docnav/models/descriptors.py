"""Descriptor models for a documentation manifest.

A manifest (one per version tag) is a tree of descriptors: classes with their
constructor, methods, events and props, plus top-level typedefs. Manifests are
produced by an external doc generator and are not always well formed, so list
fields drop entries that fail validation instead of rejecting the whole
document, and a malformed ``meta`` block is treated as absent.
"""

import logging
from collections.abc import Callable
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from .enums import EntityKind

logger = logging.getLogger(__name__)

# Nested lists of type fragments, e.g. [[["Promise", "<"], ["string"], [">"]]]
TypeString = list[Any]


def _lenient_list(model: type[BaseModel]) -> Callable[[Any], list[Any]]:
    """Build a validator that keeps only entries ``model`` accepts."""

    def validate(entries: Any) -> list[Any]:
        if entries is None:
            return []
        if not isinstance(entries, list):
            logger.warning(f"Expected a list of {model.__name__}, got {type(entries).__name__}")
            return []

        kept = []
        for position, entry in enumerate(entries):
            if isinstance(entry, model):
                kept.append(entry)
                continue
            try:
                kept.append(model.model_validate(entry))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed {model.__name__} at position {position}: "
                    f"{e.error_count()} validation error(s)"
                )
        return kept

    return validate


def _optional_meta(value: Any) -> Any:
    """Treat a meta block that does not validate as missing."""
    if value is None or isinstance(value, DocumentationFile):
        return value
    try:
        return DocumentationFile.model_validate(value)
    except ValidationError:
        logger.debug(f"Ignoring malformed meta block: {value!r}")
        return None


class DocumentationFile(BaseModel):
    """Source location of a descriptor."""

    file: str = Field(default="", description="File name")
    line: int | None = Field(default=None, description="Line number")
    path: str = Field(default="", description="Directory of the file, relative to the repo")

    @property
    def source_path(self) -> str:
        """``path/file`` with empty parts skipped and any ``#fragment`` removed."""
        joined = "/".join(part for part in (self.path, self.file) if part)
        return joined.split("#", 1)[0]


Meta = Annotated[DocumentationFile | None, BeforeValidator(_optional_meta)]


def _optional_manifest_meta(value: Any) -> Any:
    if value is None or isinstance(value, (dict, BaseModel)):
        return value
    return None


class DocumentationMeta(BaseModel):
    """Generator metadata for a manifest."""

    version: str | int | None = Field(default=None, description="Generator version")
    format: int | str | None = Field(default=None, description="Manifest format number")
    date: int | float | str | None = Field(default=None, description="Generation time (epoch ms)")


class BaseDescriptor(BaseModel):
    """Fields shared by every descriptor."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # None for descriptors that are never indexed under a key
    species: ClassVar[EntityKind | None] = None

    name: str = Field(..., description="Entity name")
    description: str | None = Field(default=None, description="Entity description")
    meta: Meta = Field(default=None, description="Source location")

    def is_species(self, query: str | EntityKind) -> bool:
        """Check whether this descriptor is of the given kind."""
        return self.species == query

    def __str__(self) -> str:
        return self.name


class ParameterDescriptor(BaseDescriptor):
    type: TypeString | None = None
    optional: bool = False
    default: Any = None


Params = Annotated[list[ParameterDescriptor], BeforeValidator(_lenient_list(ParameterDescriptor))]


class ConstructorDescriptor(BaseDescriptor):
    species: ClassVar[EntityKind] = EntityKind.METHOD

    name: str = "constructor"
    params: Params = Field(default_factory=list)
    returns: TypeString | None = None


class MethodDescriptor(BaseDescriptor):
    species: ClassVar[EntityKind] = EntityKind.METHOD

    params: Params = Field(default_factory=list)
    returns: TypeString | None = None
    deprecated: bool = False
    access: str | None = None
    emits: list[Any] = Field(default_factory=list)
    examples: list[Any] = Field(default_factory=list)
    see: list[Any] = Field(default_factory=list)

    @property
    def is_private(self) -> bool:
        return self.access == "private"


class EventDescriptor(BaseDescriptor):
    species: ClassVar[EntityKind] = EntityKind.EVENT

    params: Params = Field(default_factory=list)
    returns: TypeString | None = None
    deprecated: bool = False
    emits: list[Any] = Field(default_factory=list)
    examples: list[Any] = Field(default_factory=list)
    see: list[Any] = Field(default_factory=list)


class MemberDescriptor(BaseDescriptor):
    species: ClassVar[EntityKind] = EntityKind.PROP

    type: TypeString | None = None
    readonly: bool = False


class ClassDescriptor(BaseDescriptor):
    species: ClassVar[EntityKind] = EntityKind.CLASS

    extends: list[Any] = Field(default_factory=list, description="Inheritance list")
    constructor: ConstructorDescriptor | None = Field(default=None, alias="construct")
    methods: Annotated[
        list[MethodDescriptor], BeforeValidator(_lenient_list(MethodDescriptor))
    ] = Field(default_factory=list)
    events: Annotated[
        list[EventDescriptor], BeforeValidator(_lenient_list(EventDescriptor))
    ] = Field(default_factory=list)
    props: Annotated[
        list[MemberDescriptor], BeforeValidator(_lenient_list(MemberDescriptor))
    ] = Field(default_factory=list)


class TypeDescriptor(BaseDescriptor):
    """A typedef. Callable typedefs carry ``params``/``returns`` instead of ``type``."""

    species: ClassVar[EntityKind] = EntityKind.TYPEDEF

    access: str | None = None
    type: TypeString | None = None
    props: Annotated[
        list[MemberDescriptor], BeforeValidator(_lenient_list(MemberDescriptor))
    ] = Field(default_factory=list)
    params: Params = Field(default_factory=list)
    returns: TypeString | None = None
    see: list[Any] = Field(default_factory=list)


class DocumentationRoot(BaseModel):
    """A whole documentation manifest for one version."""

    model_config = ConfigDict(extra="ignore")

    classes: Annotated[
        list[ClassDescriptor], BeforeValidator(_lenient_list(ClassDescriptor))
    ] = Field(default_factory=list)
    typedefs: Annotated[
        list[TypeDescriptor], BeforeValidator(_lenient_list(TypeDescriptor))
    ] = Field(default_factory=list)
    custom: Any = None
    meta: Annotated[DocumentationMeta | None, BeforeValidator(_optional_manifest_meta)] = None


AnyStructureDescriptor = ClassDescriptor | TypeDescriptor
AnyChildDescriptor = ConstructorDescriptor | MethodDescriptor | EventDescriptor | MemberDescriptor
AnyDescriptor = AnyStructureDescriptor | AnyChildDescriptor
