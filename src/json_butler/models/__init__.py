"""Data models for JSON Butler."""

from .json_value import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    from_python,
)
from .type_schema import FieldDescriptor, TypeKind, TypeRef, TypeSchema, TypeSchemaGraph
from .member_info import MemberInfo

__all__ = [
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "from_python",
    "FieldDescriptor",
    "TypeKind",
    "TypeRef",
    "TypeSchema",
    "TypeSchemaGraph",
    "MemberInfo",
]
