"""Core type definitions for JSON Butler."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional


JSON_NAME_METADATA = "json"
SERIALIZE_METADATA = "serialize"


class CodeStyle(Enum):
    """Enumeration of supported code emission styles."""
    DATACLASS = "dataclass"
    CSHARP = "csharp"


class SerializationMode(Enum):
    """How much of a type's member layout is visible to reflection."""
    DECLARED_ONLY = "declared-only"
    RESOLVED_DYNAMIC = "resolved-dynamic"


class ReferenceLoopHandling(Enum):
    """What to do when a type is reached again through a reference cycle."""
    IGNORE = "ignore"
    ERROR = "error"


class Formatting(Enum):
    """JSON text formatting."""
    COMPACT = "compact"
    INDENTED = "indented"


class Provenance(Enum):
    """Where a reflected member was declared."""
    GENERATED = "generated"
    EXTERNAL = "external"


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    STRUCTURE = "structure"
    RESOLUTION = "resolution"
    CIRCULAR = "circular"


@dataclass(frozen=True)
class TypeHandle:
    """A resolved type, possibly obtained without a successful build."""
    qualified_name: str
    type: Optional[type]
    is_built: bool = True
    source_path: Optional[str] = None


@dataclass(frozen=True)
class ContractResolverSettings:
    """Serialization rules for the reverse direction."""
    serialization_mode: SerializationMode = SerializationMode.DECLARED_ONLY
    reference_loop_handling: ReferenceLoopHandling = ReferenceLoopHandling.IGNORE
    formatting: Formatting = Formatting.INDENTED

    def for_handle(self, handle: TypeHandle) -> "ContractResolverSettings":
        """Return settings suited to the handle; unbuilt types only expose own members."""
        if not handle.is_built and self.serialization_mode != SerializationMode.RESOLVED_DYNAMIC:
            return replace(self, serialization_mode=SerializationMode.RESOLVED_DYNAMIC)
        return self


@dataclass(frozen=True)
class TypeNameRequest:
    """Namespace and type name entered for the forward direction."""
    namespace: str
    type_name: str


@dataclass(frozen=True)
class SchemaConflict:
    """Non-fatal diagnostic: a field was demoted to an untyped placeholder."""
    path: str
    message: str
    observed: tuple = ()


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """User-facing description of a fatal error."""
    message: str
    suggested_action: str


@dataclass
class GenerateResult:
    """Result of the forward direction."""
    source: str
    type_count: int
    diagnostics: List[SchemaConflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.diagnostics)


@dataclass
class SerializeResult:
    """Result of the reverse direction."""
    json_string: str
    qualified_name: str
    member_count: int
    settings: ContractResolverSettings


class ButlerError(Exception):
    """Base exception for fatal JSON Butler errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


class ParseError(ButlerError):
    """Malformed JSON input."""

    def __init__(self, message: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(message, ErrorType.SYNTAX,
                         context={"position": position, "line": line, "column": column})
        self.position = position
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.args[0]} at line {self.line}, column {self.column} (char {self.position})"


class TypeResolutionError(ButlerError):
    """No reflectable type could be obtained."""

    def __init__(self, message: str, qualified_name: Optional[str] = None):
        super().__init__(message, ErrorType.RESOLUTION, context={"qualified_name": qualified_name})
        self.qualified_name = qualified_name


class CyclicReferenceError(ButlerError):
    """A type was reached again through a reference cycle under the ERROR policy."""

    def __init__(self, message: str, path: Optional[List[str]] = None):
        super().__init__(message, ErrorType.CIRCULAR, context={"path": list(path or [])})
        self.path = list(path or [])


class SchemaGraphError(ButlerError):
    """The schema graph violates one of its invariants."""

    def __init__(self, message: str):
        super().__init__(message, ErrorType.STRUCTURE)


# Capabilities supplied by the host

class EditorSurface(ABC):
    """Source of the user's current selection."""

    @abstractmethod
    def get_selected_text(self) -> str:
        """Return the selected text, possibly empty."""
        pass


class TypeResolver(ABC):
    """Resolves qualified type names to type handles."""

    @abstractmethod
    def resolve_type(self, qualified_name: str, context: Optional[Any] = None) -> TypeHandle:
        """Resolve a type or raise TypeResolutionError."""
        pass


class NamePrompt(ABC):
    """Interactive input of namespace and type name."""

    @abstractmethod
    def prompt_for_namespace_and_name(self) -> Optional[TypeNameRequest]:
        """Return the entered names, or None when cancelled."""
        pass


class Clipboard(ABC):
    """Terminal sink for generated text."""

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> None:
        pass


class MessageSink(ABC):
    """Terminal sink for user-visible messages."""

    @abstractmethod
    def show_message(self, text: str) -> None:
        pass
