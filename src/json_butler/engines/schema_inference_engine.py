"""Schema inference from JSON samples by structural unification."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models.json_value import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
)
from ..models.type_schema import (
    SCALAR_KINDS,
    FieldDescriptor,
    TypeKind,
    TypeRef,
    TypeSchema,
    TypeSchemaGraph,
    compute_fingerprint,
)
from ..naming import RESERVED_TYPE_NAMES, IdentifierNormalizer, NameScope
from ..error_handler import TOO_DEEP_MESSAGE
from ..types import ParseError, SchemaConflict

ROOT_VALUE_FIELD = "Value"


@dataclass
class _Shape:
    """Unnamed structure observed at one position of the sample."""
    kind: TypeKind
    element: Optional["_Shape"] = None
    fields: Optional[Dict[str, "_FieldShape"]] = None


@dataclass
class _FieldShape:
    shape: _Shape
    optional: bool = False


@dataclass
class InferenceResult:
    """Schema graph plus the non-fatal conflicts found while unifying samples."""
    graph: TypeSchemaGraph
    diagnostics: List[SchemaConflict] = field(default_factory=list)


class _GraphBuilder:
    """Per-call naming and dedup state."""

    def __init__(self, graph: TypeSchemaGraph, type_scope: NameScope):
        self.graph = graph
        self.type_scope = type_scope


class SchemaInferenceEngine:
    """
    Infers a deduplicated record graph from a JSON sample.

    Inference runs in two passes. The first walks the value tree and
    unifies every position into an unnamed shape: objects merge field by
    field, arrays merge their elements, integers widen to floats, and any
    other disagreement demotes the position to ANY with a SchemaConflict.
    The second pass names the object shapes and adds them to the graph,
    reusing an existing schema whenever the structural fingerprint matches.
    """

    def __init__(self, normalizer: Optional[IdentifierNormalizer] = None,
                 widen_numbers: bool = True,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the inference engine.

        Args:
            normalizer: Optional IdentifierNormalizer instance
            widen_numbers: Merge integer and floating-point samples into floating-point
            logger: Optional logger instance
        """
        self.normalizer = normalizer or IdentifierNormalizer()
        self.widen_numbers = widen_numbers
        self.logger = logger or logging.getLogger(__name__)

    def infer(self, value: JsonValue, namespace: str, root_type_name: str) -> InferenceResult:
        """
        Infer the schema graph for a sample document.

        Args:
            value: Parsed sample
            namespace: Namespace recorded on every schema
            root_type_name: Name of the root record (normalized)

        Returns:
            InferenceResult with the graph and any schema conflicts

        Raises:
            ParseError: If the sample is nested too deeply to walk
        """
        diagnostics: List[SchemaConflict] = []
        try:
            return self._infer(value, namespace, root_type_name, diagnostics)
        except RecursionError:
            raise ParseError(TOO_DEEP_MESSAGE) from None

    def _infer(self, value: JsonValue, namespace: str, root_type_name: str,
               diagnostics: List[SchemaConflict]) -> InferenceResult:
        shape = self._shape_of(value, "$", diagnostics)

        root_is_array = False
        if shape.kind == TypeKind.ARRAY and shape.element is not None and shape.element.kind == TypeKind.OBJECT:
            shape = shape.element
            root_is_array = True
        elif shape.kind != TypeKind.OBJECT:
            shape = _Shape(TypeKind.OBJECT, fields={ROOT_VALUE_FIELD: _FieldShape(shape)})

        type_scope = NameScope(self.normalizer)
        type_scope.reserve(*RESERVED_TYPE_NAMES)
        root_name = type_scope.claim(root_type_name)
        graph = TypeSchemaGraph(root_name=root_name, namespace=namespace, root_is_array=root_is_array)
        builder = _GraphBuilder(graph, type_scope)

        self._materialize_record(shape, root_name, builder, is_root=True)
        graph.validate()

        self.logger.info(f"Inferred {len(graph)} type(s) for {root_name} "
                         f"with {len(diagnostics)} schema conflict(s)")
        return InferenceResult(graph=graph, diagnostics=diagnostics)

    # First pass: shapes and unification

    def _shape_of(self, value: JsonValue, path: str, diagnostics: List[SchemaConflict]) -> _Shape:
        if isinstance(value, JsonNull):
            return _Shape(TypeKind.NULL)
        if isinstance(value, JsonBool):
            return _Shape(TypeKind.BOOLEAN)
        if isinstance(value, JsonNumber):
            return _Shape(TypeKind.INTEGER if value.is_integral else TypeKind.FLOAT)
        if isinstance(value, JsonString):
            return _Shape(TypeKind.STRING)
        if isinstance(value, JsonArray):
            element = None
            element_path = f"{path}[]"
            for item in value:
                item_shape = self._shape_of(item, element_path, diagnostics)
                element = item_shape if element is None else self._merge(element, item_shape, element_path, diagnostics)
            return _Shape(TypeKind.ARRAY, element=element)
        if isinstance(value, JsonObject):
            fields = {}
            for key, member in value.items():
                fields[key] = _FieldShape(self._shape_of(member, f"{path}.{key}", diagnostics))
            return _Shape(TypeKind.OBJECT, fields=fields)
        raise TypeError(f"Unsupported JSON value: {type(value).__name__}")

    def _merge(self, a: _Shape, b: _Shape, path: str, diagnostics: List[SchemaConflict]) -> _Shape:
        """Unify two shapes observed at the same position."""
        if a.kind == TypeKind.NULL:
            return b
        if b.kind == TypeKind.NULL:
            return a
        if a.kind == TypeKind.ANY or b.kind == TypeKind.ANY:
            return _Shape(TypeKind.ANY)

        if a.kind == b.kind and a.kind in SCALAR_KINDS:
            return a
        if self.widen_numbers and {a.kind, b.kind} == {TypeKind.INTEGER, TypeKind.FLOAT}:
            return _Shape(TypeKind.FLOAT)

        if a.kind == b.kind == TypeKind.OBJECT:
            return self._merge_objects(a, b, path, diagnostics)
        if a.kind == b.kind == TypeKind.ARRAY:
            if a.element is None:
                return b
            if b.element is None:
                return a
            return _Shape(TypeKind.ARRAY, element=self._merge(a.element, b.element, f"{path}[]", diagnostics))

        diagnostics.append(SchemaConflict(
            path=path,
            message=f"conflicting samples ({a.kind.value} vs {b.kind.value}), typed as untyped",
            observed=(a.kind.value, b.kind.value),
        ))
        return _Shape(TypeKind.ANY)

    def _merge_objects(self, a: _Shape, b: _Shape, path: str, diagnostics: List[SchemaConflict]) -> _Shape:
        fields = {}
        for key, left in a.fields.items():
            right = b.fields.get(key)
            if right is None:
                fields[key] = _FieldShape(left.shape, optional=True)
                continue
            saw_null = (left.shape.kind == TypeKind.NULL) != (right.shape.kind == TypeKind.NULL)
            fields[key] = _FieldShape(
                self._merge(left.shape, right.shape, f"{path}.{key}", diagnostics),
                optional=left.optional or right.optional or saw_null,
            )
        for key, right in b.fields.items():
            if key not in fields:
                fields[key] = _FieldShape(right.shape, optional=True)
        return _Shape(TypeKind.OBJECT, fields=fields)

    # Second pass: naming and dedup

    def _materialize_record(self, shape: _Shape, requested_name: str,
                            builder: _GraphBuilder, is_root: bool = False) -> str:
        field_scope = NameScope(self.normalizer)
        descriptors = []
        entries = []

        for key, field_shape in shape.fields.items():
            normalized = field_scope.claim(key)
            type_ref = self._materialize_type(field_shape.shape, normalized, builder)
            optional = field_shape.optional or field_shape.shape.kind == TypeKind.NULL
            descriptors.append(FieldDescriptor(
                original_name=key,
                normalized_name=normalized,
                type_ref=type_ref,
                optional=optional,
            ))
            entries.append((f"{key}={normalized}", self._type_key(type_ref, builder), optional))

        fingerprint = compute_fingerprint(entries)

        if is_root:
            name = requested_name
        else:
            existing = builder.graph.find_by_fingerprint(fingerprint)
            if existing is not None:
                self.logger.debug(f"Reusing {existing.name} for {requested_name}")
                return existing.name
            name = builder.type_scope.claim(requested_name)

        builder.graph.add(TypeSchema(
            name=name,
            namespace=builder.graph.namespace,
            fields=tuple(descriptors),
            fingerprint=fingerprint,
        ))
        self.logger.debug(f"Added type {name} with {len(descriptors)} field(s)")
        return name

    def _materialize_type(self, shape: _Shape, field_name: str, builder: _GraphBuilder) -> TypeRef:
        if shape.kind == TypeKind.NULL:
            return TypeRef.of(TypeKind.ANY)
        if shape.kind == TypeKind.OBJECT:
            return TypeRef.object(self._materialize_record(shape, field_name, builder))
        if shape.kind == TypeKind.ARRAY:
            if shape.element is None:
                return TypeRef.array(TypeRef.of(TypeKind.ANY))
            element_name = self.normalizer.singularize(field_name)
            return TypeRef.array(self._materialize_type(shape.element, element_name, builder))
        return TypeRef.of(shape.kind)

    def _type_key(self, type_ref: TypeRef, builder: _GraphBuilder) -> str:
        """Canonical type text; object references contribute their fingerprint."""
        if type_ref.kind == TypeKind.OBJECT:
            return "{" + builder.graph.resolve(type_ref.name).fingerprint + "}"
        if type_ref.kind == TypeKind.ARRAY:
            return "[" + self._type_key(type_ref.element, builder) + "]"
        return type_ref.kind.value
