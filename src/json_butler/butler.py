"""Main JSON Butler implementation."""

import logging
from typing import List, Optional

from .engines import InferenceResult, ProjectionEngine, SchemaInferenceEngine
from .error_handler import ErrorHandler
from .io import CodeEmitter
from .models import JsonValue, MemberInfo
from .naming import IdentifierNormalizer
from .parser import JSONParser
from .profiler import PerformanceProfiler
from .reflection import ContractResolver, MemberReflector
from .types import (
    CodeStyle,
    ContractResolverSettings,
    GenerateResult,
    SerializeResult,
    TypeHandle,
    TypeResolutionError,
)

DEFAULT_NAMESPACE = "Generated"
DEFAULT_TYPE_NAME = "Root"


class JSONButler:
    """
    Bidirectional mapping between JSON documents and record types.

    Forward: JSON text is parsed, a schema graph is inferred and rendered
    as source code. Reverse: a resolved type is reflected and projected
    into a representative JSON document. Each call builds its own value
    trees, graphs and member lists, so one instance can serve concurrent
    callers.
    """

    def __init__(self, default_namespace: str = DEFAULT_NAMESPACE,
                 default_style: CodeStyle = CodeStyle.DATACLASS,
                 widen_numbers: bool = True,
                 block_on_conflicts: bool = False,
                 enable_profiling: bool = True,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize JSON Butler.

        Args:
            default_namespace: Namespace used when a call does not name one
            default_style: Code style used when a call does not name one
            widen_numbers: Merge integer and floating-point samples into floating-point
            block_on_conflicts: Host commands skip output when schema conflicts occur
            enable_profiling: Sample process memory around each operation
            logger: Optional logger instance
        """
        self.default_namespace = default_namespace
        self.default_style = default_style
        self.block_on_conflicts = block_on_conflicts
        self.logger = logger or logging.getLogger(__name__)

        self.error_handler = ErrorHandler(self.logger)
        self.parser = JSONParser(self.error_handler, self.logger)
        self.normalizer = IdentifierNormalizer()
        self.inference_engine = SchemaInferenceEngine(self.normalizer, widen_numbers=widen_numbers,
                                                      logger=self.logger)
        self.code_emitter = CodeEmitter(self.normalizer, self.logger)
        self.reflector = MemberReflector(self.logger)
        self.projection_engine = ProjectionEngine(self.reflector, self.logger)
        self.profiler = PerformanceProfiler(self.logger, enabled=enable_profiling)

    def parse(self, json_string: str) -> JsonValue:
        """Parse JSON text, raising ParseError when malformed."""
        return self.parser.parse(json_string)

    def infer_schema(self, json_string: str, namespace: Optional[str] = None,
                     type_name: str = DEFAULT_TYPE_NAME) -> InferenceResult:
        """
        Infer the schema graph of a JSON sample.

        Raises:
            ParseError: If the sample is empty or malformed
        """
        namespace = self.default_namespace if namespace is None else namespace
        value = self.parser.parse(json_string)
        return self.inference_engine.infer(value, namespace, type_name)

    def generate_code(self, json_string: str, namespace: Optional[str] = None,
                      type_name: str = DEFAULT_TYPE_NAME,
                      style: Optional[CodeStyle] = None) -> GenerateResult:
        """
        Generate source code for the types of a JSON sample.

        Args:
            json_string: Sample JSON text
            namespace: Namespace of the generated types
            type_name: Name of the root type
            style: Code style (defaults to the instance default)

        Returns:
            GenerateResult with the source and schema conflicts

        Raises:
            ParseError: If the sample is empty or malformed
        """
        namespace = self.default_namespace if namespace is None else namespace
        style = style or self.default_style
        input_size = len(json_string.encode("utf-8")) if json_string else 0

        with self.profiler.profile_operation("generate_code", input_size) as metrics:
            self.logger.info(f"Generating {style.value} types for {namespace}.{type_name}")
            result = self.infer_schema(json_string, namespace, type_name)
            source = self.code_emitter.emit(result.graph, namespace, result.graph.root_name, style)
            metrics.output_size = len(source.encode("utf-8"))

        if result.diagnostics:
            self.logger.warning(f"{len(result.diagnostics)} field(s) demoted to untyped placeholders")

        return GenerateResult(source=source, type_count=len(result.graph), diagnostics=result.diagnostics)

    def reflect_members(self, handle: TypeHandle,
                        settings: Optional[ContractResolverSettings] = None) -> List[MemberInfo]:
        """Members of a type as the reverse direction sees them."""
        self._require_type(handle)
        settings = (settings or ContractResolverSettings()).for_handle(handle)
        return self.reflector.reflect(handle, ContractResolver(settings, self.logger))

    def serialize_type(self, handle: TypeHandle,
                       settings: Optional[ContractResolverSettings] = None) -> SerializeResult:
        """
        Synthesize a representative JSON document for a resolved type.

        Args:
            handle: Resolved type handle
            settings: Serialization rules (unbuilt handles always use RESOLVED_DYNAMIC)

        Returns:
            SerializeResult with the rendered JSON

        Raises:
            TypeResolutionError: If the handle carries no type
            CyclicReferenceError: On a reference loop under the ERROR policy
        """
        self._require_type(handle)
        settings = (settings or ContractResolverSettings()).for_handle(handle)
        resolver = ContractResolver(settings, self.logger)

        with self.profiler.profile_operation("serialize_type") as metrics:
            self.logger.info(f"Serializing {handle.qualified_name} "
                             f"({settings.serialization_mode.value}, {settings.formatting.value})")
            members = self.reflector.reflect(handle, resolver)
            value = self.projection_engine.project_members(handle.type, members, resolver)
            json_string = self.projection_engine.render(value, resolver)
            metrics.output_size = len(json_string.encode("utf-8"))

        return SerializeResult(
            json_string=json_string,
            qualified_name=handle.qualified_name,
            member_count=len(members),
            settings=settings,
        )

    def convert_to_pascal_case(self, text: str) -> str:
        return self.normalizer.normalize(text)

    @staticmethod
    def _require_type(handle: Optional[TypeHandle]) -> None:
        if handle is None or not isinstance(handle.type, type):
            name = handle.qualified_name if handle is not None else None
            raise TypeResolutionError(f"No reflectable type for {name}", qualified_name=name)
