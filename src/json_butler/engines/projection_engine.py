"""Projection of reflected members into a representative JSON document."""

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import json
import logging
import typing
import uuid
from typing import Any, List, Optional

from ..models.json_value import NULL, JsonArray, JsonBool, JsonNumber, JsonObject, JsonString, JsonValue, from_python
from ..models.member_info import MemberInfo
from ..reflection.contract_resolver import ContractResolver
from ..reflection.member_reflector import MemberReflector
from ..types import TypeHandle

# Checked in order; bool must precede int and datetime must precede date
_PLACEHOLDERS = (
    (bool, JsonBool(False)),
    (int, JsonNumber("0")),
    (float, JsonNumber("0.0")),
    (decimal.Decimal, JsonNumber("0")),
    (str, JsonString("")),
    (bytes, JsonString("")),
    (datetime.datetime, JsonString(datetime.datetime(1970, 1, 1).isoformat())),
    (datetime.date, JsonString(datetime.date(1970, 1, 1).isoformat())),
    (datetime.time, JsonString(datetime.time(0, 0).isoformat())),
    (uuid.UUID, JsonString(str(uuid.UUID(int=0)))),
)

_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _has_annotations(klass: type) -> bool:
    try:
        return bool(inspect.get_annotations(klass))
    except NameError:
        return True


class ProjectionEngine:
    """
    Synthesizes a representative JSON document for a type.

    Scalars get type-appropriate placeholders, collections of records get
    a single sample element, scalar collections are empty, and nested
    records recurse through the reflector. The types on the current path
    are tracked so a type reached again is handed to the contract
    resolver's cycle policy instead of recursing forever.
    """

    def __init__(self, reflector: Optional[MemberReflector] = None,
                 logger: Optional[logging.Logger] = None):
        self.reflector = reflector or MemberReflector()
        self.logger = logger or logging.getLogger(__name__)

    def project(self, handle: TypeHandle, resolver: ContractResolver) -> JsonValue:
        """
        Project a resolved type into a JsonValue tree.

        Raises:
            TypeResolutionError: If the handle carries no type
            CyclicReferenceError: On a reference loop under the ERROR policy
        """
        members = self.reflector.reflect(handle, resolver)
        return self.project_members(handle.type, members, resolver)

    def project_members(self, owner: type, members: List[MemberInfo], resolver: ContractResolver,
                        path: Optional[List[type]] = None) -> JsonObject:
        path = path or [owner]
        return JsonObject(tuple(
            (member.json_name, self._project_member(member, resolver, path))
            for member in members
        ))

    def render(self, value: JsonValue, resolver: ContractResolver) -> str:
        """Render a JsonValue tree with the resolver's formatting."""
        return json.dumps(value.to_python(), **resolver.dump_options())

    def _project_member(self, member: MemberInfo, resolver: ContractResolver, path: List[type]) -> JsonValue:
        target = member.type_ref

        if self.is_record(target):
            if target in path:
                resolver.on_cycle(target, [t.__qualname__ for t in path] + [target.__qualname__])
                return JsonArray() if member.is_collection else NULL
            nested_path = path + [target]
            sample = self.project_members(target, self.reflector.reflect_type(target, resolver),
                                          resolver, nested_path)
            return JsonArray((sample,)) if member.is_collection else sample

        if member.is_collection:
            return JsonArray()
        return self.placeholder(target)

    @staticmethod
    def is_record(candidate: Any) -> bool:
        """True for classes whose members are projected as a nested object."""
        if not isinstance(candidate, type) or candidate.__module__ == "builtins":
            return False
        if issubclass(candidate, enum.Enum):
            return False
        if any(issubclass(candidate, base) for base, _ in _PLACEHOLDERS):
            return False
        if dataclasses.is_dataclass(candidate):
            return True
        return any(
            klass.__module__ != "builtins" and (
                _has_annotations(klass)
                or any(isinstance(attr, property) for attr in vars(klass).values())
            )
            for klass in candidate.__mro__
        )

    @staticmethod
    def placeholder(annotation: Any) -> JsonValue:
        """Default JSON value for a non-record type."""
        origin = typing.get_origin(annotation)
        if origin is typing.Literal:
            return from_python(typing.get_args(annotation)[0])
        if annotation in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
            return JsonObject()

        if isinstance(annotation, type):
            if issubclass(annotation, enum.Enum):
                first = next(iter(annotation), None)
                if first is None:
                    return NULL
                if isinstance(first.value, (str, int, float, bool)):
                    return from_python(first.value)
                return JsonString(first.name)
            for base, value in _PLACEHOLDERS:
                if issubclass(annotation, base):
                    return value
        return NULL
