"""Member reflection over Python types."""

import collections.abc
import dataclasses
import inspect
import logging
import sys
import types
import typing
from typing import Any, Dict, List, Optional, Tuple

from ..models.member_info import MemberInfo
from ..types import JSON_NAME_METADATA, Provenance, TypeHandle, TypeResolutionError
from .contract_resolver import ContractResolver

_COLLECTION_ORIGINS = (
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
    collections.abc.Iterable, collections.abc.Collection,
)


def strip_optional(annotation: Any) -> Tuple[Any, bool]:
    """Remove Annotated and Optional wrappers; report whether None was allowed."""
    optional = False
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            annotation = typing.get_args(annotation)[0]
        elif origin is typing.Union or origin is types.UnionType:
            args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            optional = optional or len(args) < len(typing.get_args(annotation))
            annotation = args[0] if len(args) == 1 else Any
        else:
            return annotation, optional


def describe_annotation(annotation: Any) -> Tuple[Any, bool, bool]:
    """
    Split an annotation into (type, is_collection, optional).

    For collections the element type is returned.
    """
    if isinstance(annotation, str):
        return Any, False, False

    annotation, optional = strip_optional(annotation)
    origin = typing.get_origin(annotation)

    if origin in _COLLECTION_ORIGINS or annotation in (list, tuple, set, frozenset):
        args = typing.get_args(annotation)
        element = args[0] if args else Any
        element, _ = strip_optional(element)
        if isinstance(element, str):
            element = Any
        return element, True, optional

    return annotation, False, optional


class MemberReflector:
    """
    Extracts the ordered, serializable members of a type.

    Candidates are annotated attributes and properties across the MRO,
    base classes first, so the order matches dataclass field order. Which
    candidates survive is decided by the ContractResolver.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def reflect(self, handle: TypeHandle, resolver: ContractResolver) -> List[MemberInfo]:
        """
        Reflect the members of a resolved type handle.

        Raises:
            TypeResolutionError: If the handle carries no type
        """
        if handle is None or not isinstance(handle.type, type):
            name = handle.qualified_name if handle is not None else None
            raise TypeResolutionError(f"No reflectable type for {name}", qualified_name=name)
        return self.reflect_type(handle.type, resolver)

    def reflect_type(self, cls: type, resolver: ContractResolver) -> List[MemberInfo]:
        hints = self._type_hints(cls)
        metadata = self._field_metadata(cls)
        members = []

        for name, declaring, raw_annotation, is_property in self._candidates(cls):
            annotation = hints.get(name, raw_annotation) if not is_property else raw_annotation
            field_metadata = metadata.get(name, {})
            if not resolver.include_member(cls, declaring, name, annotation, field_metadata):
                continue

            type_ref, is_collection, optional = describe_annotation(annotation)
            members.append(MemberInfo(
                name=name,
                json_name=field_metadata.get(JSON_NAME_METADATA, name),
                type_ref=type_ref,
                provenance=Provenance.GENERATED if declaring is cls else Provenance.EXTERNAL,
                is_collection=is_collection,
                optional=optional,
                declaring_type=declaring,
            ))

        self.logger.debug(f"Reflected {len(members)} member(s) of {cls.__qualname__} "
                          f"({resolver.serialization_mode.value})")
        return members

    def _candidates(self, cls: type) -> List[Tuple[str, type, Any, bool]]:
        """(name, declaring class, raw annotation, is property) in base-first order."""
        order: List[str] = []
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name in self._own_annotations(klass):
                if name not in order:
                    order.append(name)
            for name, attr in vars(klass).items():
                if isinstance(attr, property) and name not in order:
                    order.append(name)

        candidates = []
        for name in order:
            declaring = self._declaring_class(cls, name)
            attr = vars(declaring).get(name)
            if isinstance(attr, property):
                candidates.append((name, declaring, self._property_type(attr), True))
            else:
                candidates.append((name, declaring, self._own_annotations(declaring).get(name, Any), False))
        return candidates

    def _declaring_class(self, cls: type, name: str) -> type:
        for klass in cls.__mro__:
            if name in self._own_annotations(klass) or isinstance(vars(klass).get(name), property):
                return klass
        return cls

    def _own_annotations(self, klass: type) -> Dict[str, Any]:
        if klass.__module__ == "builtins":
            return {}
        try:
            return dict(inspect.get_annotations(klass))
        except NameError as e:
            self.logger.warning(f"Annotations of {klass.__qualname__} could not be evaluated: {e}")
            return {}

    def _type_hints(self, cls: type) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(cls, include_extras=True)
        except Exception as e:
            # Unbuilt sources may reference names that do not exist yet
            self.logger.debug(f"Evaluating annotations of {cls.__qualname__} one by one: {e}")

        hints: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            module = sys.modules.get(klass.__module__)
            globalns = dict(vars(module)) if module is not None else {}
            localns = dict(vars(klass))
            for name, annotation in self._own_annotations(klass).items():
                hints[name] = self._evaluate(annotation, globalns, localns)
        return hints

    def _evaluate(self, annotation: Any, globalns: Dict[str, Any], localns: Dict[str, Any]) -> Any:
        """Evaluate one string annotation; unresolvable ones stay strings."""
        if not isinstance(annotation, str):
            return annotation
        try:
            return eval(annotation, globalns, localns)
        except Exception as e:
            self.logger.debug(f"Annotation {annotation!r} could not be evaluated: {e}")
            return annotation

    def _property_type(self, prop: property) -> Any:
        if prop.fget is None:
            return Any
        try:
            return typing.get_type_hints(prop.fget, include_extras=True).get("return", Any)
        except Exception:
            return Any

    @staticmethod
    def _field_metadata(cls: type) -> Dict[str, typing.Mapping]:
        if not dataclasses.is_dataclass(cls):
            return {}
        return {f.name: f.metadata for f in dataclasses.fields(cls)}
