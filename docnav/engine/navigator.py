"""Lookup index over one version of the documentation.

The index addresses every entity with a composite key: classes and typedefs by
their bare name, class members as ``<Class><symbol><member>`` where the symbol
is ``#`` for methods, ``~`` for props and ``$`` for events. Keys map back to
positions in the manifest's class/typedef lists, so descriptors are never
copied.

Members whose name starts with ``_`` or contains a bracket are internal and
are not queryable, but their source files are still tracked in
``known_files``. Duplicate keys are not rejected: the last entry wins.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..constants import DEFAULT_FUZZY_LIMIT, EXCLUSION_PATTERN
from ..models.descriptors import (
    AnyDescriptor,
    ClassDescriptor,
    DocumentationFile,
    DocumentationMeta,
    DocumentationRoot,
    EventDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    TypeDescriptor,
)
from ..models.enums import EntityKind, SearchScope, TypeSymbol
from .fuzzy import FuzzyMatch, fuzzy_filter

if TYPE_CHECKING:
    from ..services.docs_source import DocsSourceClient

logger = logging.getLogger(__name__)

# Connectors tried by find_first_match, in priority order.
CONNECTORS: tuple[TypeSymbol, ...] = (TypeSymbol.METHOD, TypeSymbol.PROP, TypeSymbol.EVENT)


@dataclass(frozen=True)
class TypeMap:
    """Read-only lookup tables of one index.

    Attributes:
        class_: class name -> class position
        event: composite key -> (class position, event position)
        method: composite key -> (class position, method position)
        prop: composite key -> (class position, prop position)
        typedef: typedef name -> typedef position
        all: every queryable key -> entity kind
    """

    class_: Mapping[str, int]
    event: Mapping[str, tuple[int, int]]
    method: Mapping[str, tuple[int, int]]
    prop: Mapping[str, tuple[int, int]]
    typedef: Mapping[str, int]
    all: Mapping[str, EntityKind]

    def for_scope(self, scope: SearchScope | str) -> Mapping[str, Any]:
        """Return the map a search scope runs over."""
        scope = SearchScope(scope)
        if scope is SearchScope.ALL:
            return self.all
        if scope is SearchScope.CLASS:
            return self.class_
        return getattr(self, scope.value)


def is_excluded(name: str) -> bool:
    """Whether a member name marks an internal member."""
    return EXCLUSION_PATTERN.search(name) is not None


class TypeNavigator:
    """Index and query surface for one documentation version.

    Built once from a manifest in a single pass and not modified afterwards.
    """

    def __init__(
        self,
        tag: str,
        data: DocumentationRoot | Mapping[str, Any],
        *,
        source_prefix: str = "src",
    ):
        self.tag = tag
        self.data = (
            data if isinstance(data, DocumentationRoot) else DocumentationRoot.model_validate(data)
        )
        self.source_prefix = source_prefix
        self._known_files: dict[str, None] = {}
        self.type_map = self._generate_type_map()

        logger.info(
            f"Indexed {tag}: {len(self.type_map.class_)} classes, "
            f"{len(self.type_map.typedef)} typedefs, {len(self.type_map.all)} keys"
        )

    @classmethod
    async def from_source(
        cls,
        tag: str,
        source: "DocsSourceClient",
        *,
        source_prefix: str | None = None,
    ) -> "TypeNavigator":
        """Fetch the manifest for ``tag`` and build its index.

        Raises:
            NetworkFetchFailure: If the manifest could not be fetched.
        """
        raw = await source.fetch_document(tag)
        prefix = source_prefix if source_prefix is not None else source.settings.source_root_prefix
        return cls(tag, raw, source_prefix=prefix)

    def __repr__(self) -> str:
        return f"<TypeNavigator tag={self.tag!r} keys={len(self.type_map.all)}>"

    # ============ ACCESSORS ============

    @property
    def classes(self) -> list[ClassDescriptor]:
        return self.data.classes

    @property
    def typedefs(self) -> list[TypeDescriptor]:
        return self.data.typedefs

    @property
    def meta(self) -> DocumentationMeta | None:
        return self.data.meta

    @property
    def known_files(self) -> list[str]:
        """Source files referenced by the manifest, in first-seen order."""
        return list(self._known_files)

    # ============ POINT LOOKUPS ============

    def get_class_descriptor(self, class_name: str) -> ClassDescriptor | None:
        class_index = self.type_map.class_.get(class_name)
        if class_index is None:
            return None
        return self.classes[class_index]

    def get_method_descriptor(self, class_name: str, method_name: str) -> MethodDescriptor | None:
        return self._get_member(self.type_map.method, "methods", class_name, method_name, TypeSymbol.METHOD)

    def get_event_descriptor(self, class_name: str, event_name: str) -> EventDescriptor | None:
        return self._get_member(self.type_map.event, "events", class_name, event_name, TypeSymbol.EVENT)

    def get_prop_descriptor(self, class_name: str, prop_name: str) -> MemberDescriptor | None:
        return self._get_member(self.type_map.prop, "props", class_name, prop_name, TypeSymbol.PROP)

    def get_type_descriptor(self, type_name: str) -> TypeDescriptor | None:
        type_index = self.type_map.typedef.get(type_name)
        if type_index is None:
            return None
        return self.typedefs[type_index]

    def _get_member(
        self,
        table: Mapping[str, tuple[int, int]],
        attribute: str,
        class_name: str,
        member_name: str,
        connector: TypeSymbol,
    ) -> Any:
        position = table.get(self.join_key([class_name, member_name], connector))
        if position is None:
            return None
        class_index, member_index = position
        return getattr(self.classes[class_index], attribute)[member_index]

    def kind_of(self, key: str) -> EntityKind | None:
        """Entity kind of a composite key or bare name, if indexed."""
        return self.type_map.all.get(key)

    # ============ DISAMBIGUATION ============

    @staticmethod
    def join_key(entry_path: Iterable[str | None], connector: str) -> str:
        """Join the non-empty parts of ``entry_path`` with ``connector``.

        Autocomplete callers often only know the class name, so the member part
        may be missing; the key then degenerates to the bare class name.
        """
        return connector.join(part for part in entry_path if part)

    def find_first_match(
        self, class_name: str, member_name: str | None = None
    ) -> AnyDescriptor | None:
        """Resolve a possibly unqualified member name.

        Connectors are tried in the order method, prop, event and the first key
        present in the index wins. Without a member name the class name alone is
        resolved, matching either a class or a typedef.
        """
        for connector in CONNECTORS:
            key = self.join_key([class_name, member_name], connector)
            kind = self.type_map.all.get(key)
            if kind is None:
                continue

            if kind is EntityKind.CLASS:
                return self.get_class_descriptor(key)
            if kind is EntityKind.TYPEDEF:
                return self.get_type_descriptor(key)
            if kind is EntityKind.METHOD:
                return self.get_method_descriptor(class_name, member_name)
            if kind is EntityKind.PROP:
                return self.get_prop_descriptor(class_name, member_name)
            if kind is EntityKind.EVENT:
                return self.get_event_descriptor(class_name, member_name)

        return None

    # ============ FUZZY SEARCH ============

    def fuzzy_filter(
        self,
        query: str,
        type_filter: SearchScope | str = SearchScope.ALL,
        limit: int = DEFAULT_FUZZY_LIMIT,
    ) -> list[FuzzyMatch]:
        """Fuzzy-match ``query`` against the keys of one map, best first."""
        return fuzzy_filter(query, self.type_map.for_scope(type_filter).keys(), limit=limit)

    # ============ INDEX CONSTRUCTION ============

    def _register_known_file(self, meta: DocumentationFile | None) -> None:
        if meta is None:
            return
        file_path = meta.source_path
        if not file_path.startswith(self.source_prefix):
            return
        self._known_files.setdefault(file_path, None)

    def _generate_type_map(self) -> TypeMap:
        classes: dict[str, int] = {}
        events: dict[str, tuple[int, int]] = {}
        methods: dict[str, tuple[int, int]] = {}
        props: dict[str, tuple[int, int]] = {}
        typedefs: dict[str, int] = {}
        all_keys: dict[str, EntityKind] = {}

        for class_index, class_entry in enumerate(self.classes):
            classes[class_entry.name] = class_index
            all_keys[class_entry.name] = EntityKind.CLASS
            self._register_known_file(class_entry.meta)

            members = (
                (class_entry.events, events, TypeSymbol.EVENT, EntityKind.EVENT),
                (class_entry.methods, methods, TypeSymbol.METHOD, EntityKind.METHOD),
                (class_entry.props, props, TypeSymbol.PROP, EntityKind.PROP),
            )
            for entries, table, connector, kind in members:
                for member_index, member in enumerate(entries):
                    if not is_excluded(member.name):
                        key = self.join_key([class_entry.name, member.name], connector)
                        table[key] = (class_index, member_index)
                        all_keys[key] = kind
                    self._register_known_file(member.meta)

        for type_index, type_entry in enumerate(self.typedefs):
            typedefs[type_entry.name] = type_index
            all_keys[type_entry.name] = EntityKind.TYPEDEF
            self._register_known_file(type_entry.meta)

        return TypeMap(
            class_=MappingProxyType(classes),
            event=MappingProxyType(events),
            method=MappingProxyType(methods),
            prop=MappingProxyType(props),
            typedef=MappingProxyType(typedefs),
            all=MappingProxyType(all_keys),
        )
