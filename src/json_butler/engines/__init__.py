"""Inference and projection engines."""

from .schema_inference_engine import InferenceResult, SchemaInferenceEngine
from .projection_engine import ProjectionEngine

__all__ = ["InferenceResult", "SchemaInferenceEngine", "ProjectionEngine"]
