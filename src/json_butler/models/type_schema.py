"""Type schema graph model."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from ..types import SchemaGraphError


class TypeKind(Enum):
    """Kind of an inferred field type."""
    NULL = "null"
    ANY = "any"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


SCALAR_KINDS = frozenset({TypeKind.BOOLEAN, TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.STRING})


@dataclass(frozen=True)
class TypeRef:
    """
    Reference to a field type.

    OBJECT references carry the name of a schema in the same graph,
    ARRAY references carry the element type.
    """
    kind: TypeKind
    name: Optional[str] = None
    element: Optional["TypeRef"] = None

    @classmethod
    def of(cls, kind: TypeKind) -> "TypeRef":
        return cls(kind)

    @classmethod
    def object(cls, name: str) -> "TypeRef":
        return cls(TypeKind.OBJECT, name=name)

    @classmethod
    def array(cls, element: "TypeRef") -> "TypeRef":
        return cls(TypeKind.ARRAY, element=element)

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    def innermost(self) -> "TypeRef":
        """Strip array wrappers."""
        ref = self
        while ref.kind == TypeKind.ARRAY and ref.element is not None:
            ref = ref.element
        return ref


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of an inferred record type."""
    original_name: str
    normalized_name: str
    type_ref: TypeRef
    optional: bool = False

    @property
    def is_array(self) -> bool:
        return self.type_ref.is_array


@dataclass(frozen=True)
class TypeSchema:
    """An inferred record type."""
    name: str
    namespace: str
    fields: Tuple[FieldDescriptor, ...]
    fingerprint: str

    def field_names(self) -> List[str]:
        return [f.normalized_name for f in self.fields]

    def get_field(self, normalized_name: str) -> Optional[FieldDescriptor]:
        for descriptor in self.fields:
            if descriptor.normalized_name == normalized_name:
                return descriptor
        return None

    def dependencies(self) -> List[str]:
        """Names of schemas referenced by this schema, in field order."""
        names = []
        for descriptor in self.fields:
            inner = descriptor.type_ref.innermost()
            if inner.kind == TypeKind.OBJECT and inner.name not in names:
                names.append(inner.name)
        return names


def compute_fingerprint(entries: List[Tuple[str, str, bool]]) -> str:
    """
    Structural fingerprint of a record.

    ``entries`` are (field name, canonical type, optional) triples; they are
    sorted so field order does not affect the result.
    """
    canonical = ";".join(
        f"{name}:{type_key}{'?' if optional else ''}"
        for name, type_key, optional in sorted(entries)
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass
class TypeSchemaGraph:
    """Deduplicated set of record definitions rooted at one schema."""
    root_name: str
    namespace: str
    schemas: Dict[str, TypeSchema] = field(default_factory=dict)
    root_is_array: bool = False
    _by_fingerprint: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @property
    def root(self) -> TypeSchema:
        return self.resolve(self.root_name)

    def __len__(self) -> int:
        return len(self.schemas)

    def __iter__(self) -> Iterator[TypeSchema]:
        return iter(self.schemas.values())

    def __contains__(self, name: str) -> bool:
        return name in self.schemas

    def add(self, schema: TypeSchema) -> None:
        if schema.name in self.schemas:
            raise SchemaGraphError(f"Duplicate schema name: {schema.name}")
        self.schemas[schema.name] = schema
        self._by_fingerprint.setdefault(schema.fingerprint, schema.name)

    def resolve(self, name: str) -> TypeSchema:
        try:
            return self.schemas[name]
        except KeyError:
            raise SchemaGraphError(f"Unresolved type reference: {name}") from None

    def find_by_fingerprint(self, fingerprint: str) -> Optional[TypeSchema]:
        name = self._by_fingerprint.get(fingerprint)
        return self.schemas[name] if name is not None else None

    def validate(self) -> None:
        """Check that every object reference resolves within the graph."""
        self.resolve(self.root_name)
        for schema in self.schemas.values():
            for name in schema.dependencies():
                if name not in self.schemas:
                    raise SchemaGraphError(
                        f"Field of {schema.name} references unknown type {name}"
                    )

    def dependency_order(self) -> List[TypeSchema]:
        """Schemas ordered so every dependency precedes its dependents."""
        ordered: List[TypeSchema] = []
        visited = set()

        def visit(name: str) -> None:
            if name in visited:
                return
            visited.add(name)
            schema = self.resolve(name)
            for dependency in schema.dependencies():
                visit(dependency)
            ordered.append(schema)

        visit(self.root_name)
        for name in self.schemas:
            visit(name)
        return ordered
