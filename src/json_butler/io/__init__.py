"""Output rendering for JSON Butler."""

from .code_emitter import CodeEmitter

__all__ = ["CodeEmitter"]
