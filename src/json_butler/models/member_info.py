"""Reflected member model."""

from dataclasses import dataclass
from typing import Any, Optional

from ..types import Provenance


@dataclass(frozen=True)
class MemberInfo:
    """
    One serializable member of a reflected type.

    For collection members ``type_ref`` is the element type.
    """
    name: str
    json_name: str
    type_ref: Any
    provenance: Provenance
    is_collection: bool = False
    optional: bool = False
    declaring_type: Optional[type] = None

    @property
    def is_inherited(self) -> bool:
        return self.provenance == Provenance.EXTERNAL
