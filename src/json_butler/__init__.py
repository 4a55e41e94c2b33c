"""
JSON Butler - Bidirectional mapping between JSON documents and record types.

Infers record types from JSON samples and emits their source code, and
synthesizes representative JSON documents from existing types.
"""

__version__ = "1.0.0"

from .butler import JSONButler
from .engines import InferenceResult
from .models import MemberInfo, TypeSchemaGraph
from .reflection import NonSerialized
from .types import (
    CodeStyle,
    ContractResolverSettings,
    CyclicReferenceError,
    Formatting,
    GenerateResult,
    ParseError,
    ReferenceLoopHandling,
    SchemaConflict,
    SerializationMode,
    SerializeResult,
    TypeHandle,
    TypeResolutionError,
)

__all__ = [
    "JSONButler",
    "InferenceResult",
    "MemberInfo",
    "TypeSchemaGraph",
    "NonSerialized",
    "CodeStyle",
    "ContractResolverSettings",
    "CyclicReferenceError",
    "Formatting",
    "GenerateResult",
    "ParseError",
    "ReferenceLoopHandling",
    "SchemaConflict",
    "SerializationMode",
    "SerializeResult",
    "TypeHandle",
    "TypeResolutionError",
]
