"""Source code emission for inferred schema graphs."""

import json
import logging
from typing import List, Optional

from ..models.type_schema import FieldDescriptor, TypeKind, TypeRef, TypeSchema, TypeSchemaGraph
from ..naming import IdentifierNormalizer, NameScope
from ..types import JSON_NAME_METADATA, CodeStyle

INDENT = "    "

_PYTHON_TYPES = {
    TypeKind.STRING: "str",
    TypeKind.INTEGER: "int",
    TypeKind.FLOAT: "float",
    TypeKind.BOOLEAN: "bool",
    TypeKind.ANY: "typing.Any",
    TypeKind.NULL: "typing.Any",
}

# Class-body names that must not be shadowed by a field
_PYTHON_RESERVED = ("str", "int", "float", "bool", "typing", "dataclasses")

_CSHARP_TYPES = {
    TypeKind.STRING: "string",
    TypeKind.INTEGER: "long",
    TypeKind.FLOAT: "double",
    TypeKind.BOOLEAN: "bool",
    TypeKind.ANY: "object",
    TypeKind.NULL: "object",
}

_CSHARP_VALUE_TYPES = {TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.BOOLEAN}


class CodeEmitter:
    """
    Renders a TypeSchemaGraph as standalone source text.

    Output is a pure function of the graph and options: types are ordered
    by a depth-first walk from the root so dependencies come first, and
    fields keep the order they were first seen in the sample.
    """

    def __init__(self, normalizer: Optional[IdentifierNormalizer] = None,
                 logger: Optional[logging.Logger] = None):
        self.normalizer = normalizer or IdentifierNormalizer()
        self.logger = logger or logging.getLogger(__name__)

    def emit(self, graph: TypeSchemaGraph, namespace: Optional[str] = None,
             root_type_name: Optional[str] = None,
             style: CodeStyle = CodeStyle.DATACLASS) -> str:
        """
        Emit source defining one type per graph node.

        Args:
            graph: Fully built schema graph
            namespace: Namespace for the generated types (defaults to the graph's)
            root_type_name: Root type name shown in the header (defaults to the graph's)
            style: Target code style

        Returns:
            Source text

        Raises:
            SchemaGraphError: If a type reference does not resolve
        """
        graph.validate()
        namespace = graph.namespace if namespace is None else namespace
        root_type_name = root_type_name or graph.root_name
        schemas = graph.dependency_order()

        if style == CodeStyle.CSHARP:
            source = self._emit_csharp(schemas, namespace)
        else:
            source = self._emit_dataclasses(schemas, namespace, root_type_name, graph.root_is_array)

        self.logger.debug(f"Emitted {len(schemas)} type(s) as {style.value}")
        return source

    # Python dataclasses

    def _emit_dataclasses(self, schemas: List[TypeSchema], namespace: str,
                          root_type_name: str, root_is_array: bool) -> str:
        lines = ['"""', f"Types generated from the {root_type_name} JSON sample."]
        if namespace:
            lines += ["", f"Namespace: {namespace}"]
        if root_is_array:
            lines += ["", f"The sample's root is a JSON array of {root_type_name}."]
        lines += ['"""', "", "import dataclasses", "import typing"]

        for schema in schemas:
            lines += ["", "", "@dataclasses.dataclass(kw_only=True)", f"class {schema.name}:"]
            if not schema.fields:
                lines.append(f"{INDENT}pass")
                continue

            scope = NameScope(self.normalizer)
            scope.reserve(*_PYTHON_RESERVED)
            for descriptor in schema.fields:
                attribute = scope.claim(self.normalizer.to_snake_case(descriptor.normalized_name),
                                        normalize=False)
                lines.append(INDENT + self._dataclass_field(attribute, descriptor))

        return "\n".join(lines) + "\n"

    def _dataclass_field(self, attribute: str, descriptor: FieldDescriptor) -> str:
        annotation = self._python_type(descriptor.type_ref)
        metadata = f'metadata={{"{JSON_NAME_METADATA}": {self._python_literal(descriptor.original_name)}}}'
        if descriptor.optional:
            annotation = f"typing.Optional[{annotation}]"
            return f"{attribute}: {annotation} = dataclasses.field(default=None, {metadata})"
        return f"{attribute}: {annotation} = dataclasses.field({metadata})"

    def _python_type(self, type_ref: TypeRef) -> str:
        if type_ref.kind == TypeKind.OBJECT:
            return type_ref.name
        if type_ref.kind == TypeKind.ARRAY:
            return f"typing.List[{self._python_type(type_ref.element)}]"
        return _PYTHON_TYPES[type_ref.kind]

    @staticmethod
    def _python_literal(text: str) -> str:
        return json.dumps(text, ensure_ascii=False)

    # C# classes

    def _emit_csharp(self, schemas: List[TypeSchema], namespace: str) -> str:
        lines = ["using System.Collections.Generic;", "using Newtonsoft.Json;", ""]
        indent = ""
        if namespace:
            namespace = ".".join(self.normalizer.normalize(segment) for segment in namespace.split("."))
            lines += [f"namespace {namespace}", "{"]
            indent = INDENT

        for index, schema in enumerate(schemas):
            if index:
                lines.append("")
            lines += [f"{indent}public class {schema.name}", f"{indent}{{"]

            scope = NameScope(self.normalizer)
            scope.reserve(schema.name)
            for position, descriptor in enumerate(schema.fields):
                if position:
                    lines.append("")
                member = scope.claim(descriptor.normalized_name, normalize=False)
                json_name = descriptor.original_name.replace("\\", "\\\\").replace('"', '\\"')
                lines.append(f'{indent}{INDENT}[JsonProperty("{json_name}")]')
                lines.append(f"{indent}{INDENT}public {self._csharp_type(descriptor)} {member} {{ get; set; }}")

            lines.append(f"{indent}}}")

        if namespace:
            lines.append("}")
        return "\n".join(lines) + "\n"

    def _csharp_type(self, descriptor: FieldDescriptor) -> str:
        text = self._csharp_type_ref(descriptor.type_ref)
        if descriptor.optional and descriptor.type_ref.kind in _CSHARP_VALUE_TYPES:
            text += "?"
        return text

    def _csharp_type_ref(self, type_ref: TypeRef) -> str:
        if type_ref.kind == TypeKind.OBJECT:
            return type_ref.name
        if type_ref.kind == TypeKind.ARRAY:
            return f"List<{self._csharp_type_ref(type_ref.element)}>"
        return _CSHARP_TYPES[type_ref.kind]
