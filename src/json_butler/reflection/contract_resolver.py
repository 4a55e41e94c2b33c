"""Serialization policy for the reverse direction."""

import dataclasses
import logging
import typing
from typing import Any, Dict, List, Mapping, Optional

from ..types import (
    SERIALIZE_METADATA,
    ContractResolverSettings,
    CyclicReferenceError,
    Formatting,
    ReferenceLoopHandling,
    SerializationMode,
)


class NonSerialized:
    """Marker for members that never appear in projected JSON.

    Use as ``Annotated[int, NonSerialized]``.
    """


def root_package(klass: type) -> str:
    return (getattr(klass, "__module__", None) or "").split(".")[0]


class ContractResolver:
    """
    Decides which members are serialized and how cycles and formatting are handled.

    Under RESOLVED_DYNAMIC only members declared on the reflected type
    itself are visible; inherited metadata may belong to types that have
    not been built. Under DECLARED_ONLY inherited members are visible as
    long as the declaring base lives in the same top-level package as the
    reflected type.
    """

    def __init__(self, settings: Optional[ContractResolverSettings] = None,
                 logger: Optional[logging.Logger] = None):
        self.settings = settings or ContractResolverSettings()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def serialization_mode(self) -> SerializationMode:
        return self.settings.serialization_mode

    def include_member(self, reflected: type, declaring: type, name: str,
                       annotation: Any, metadata: Optional[Mapping] = None) -> bool:
        """
        Apply the member inclusion policy.

        Args:
            reflected: Type being reflected
            declaring: Class in the MRO that declares the member
            name: Member name
            annotation: Member annotation (evaluated or raw)
            metadata: Dataclass field metadata, if any

        Returns:
            True if the member should be serialized
        """
        if name.startswith("_"):
            return False

        if declaring is not reflected:
            if self.serialization_mode == SerializationMode.RESOLVED_DYNAMIC:
                return False
            if not self.is_related_base(reflected, declaring):
                self.logger.debug(f"Skipping {name} inherited from unrelated base {declaring.__qualname__}")
                return False

        if self.is_static(annotation):
            return False
        if self.is_non_serialized(annotation) or (metadata or {}).get(SERIALIZE_METADATA) is False:
            return False
        return True

    def is_related_base(self, reflected: type, base: type) -> bool:
        return root_package(base) == root_package(reflected) and root_package(base) != "builtins"

    @staticmethod
    def is_static(annotation: Any) -> bool:
        if isinstance(annotation, str):
            return annotation.replace("typing.", "").startswith("ClassVar")
        if isinstance(annotation, dataclasses.InitVar):
            return True
        return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar

    @staticmethod
    def is_non_serialized(annotation: Any) -> bool:
        if typing.get_origin(annotation) is not typing.Annotated:
            return False
        return any(
            marker is NonSerialized or isinstance(marker, NonSerialized)
            for marker in getattr(annotation, "__metadata__", ())
        )

    def on_cycle(self, cyclic_type: type, path: List[str]) -> None:
        """
        Handle a type reached again along the current projection path.

        Raises:
            CyclicReferenceError: Under the ERROR policy
        """
        chain = " -> ".join(path)
        if self.settings.reference_loop_handling == ReferenceLoopHandling.ERROR:
            raise CyclicReferenceError(
                f"Self referencing loop detected for type {cyclic_type.__qualname__}: {chain}",
                path=path,
            )
        self.logger.debug(f"Ignoring reference loop: {chain}")

    def dump_options(self) -> Dict[str, Any]:
        """Keyword arguments for json.dumps matching the formatting setting."""
        if self.settings.formatting == Formatting.COMPACT:
            return {"ensure_ascii": False, "separators": (",", ":")}
        return {"ensure_ascii": False, "indent": 2}
