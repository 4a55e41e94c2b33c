"""Type resolvers turning qualified names into type handles."""

import hashlib
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Tuple

from .types import TypeHandle, TypeResolutionError, TypeResolver


def _lookup_attribute(owner: Any, dotted: str) -> Any:
    target = owner
    for part in dotted.split("."):
        target = getattr(target, part)
    return target


class ImportTypeResolver(TypeResolver):
    """
    Resolves types of importable (built) modules.

    Accepts ``package.module.Type`` or ``package.module:Type.Inner``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def resolve_type(self, qualified_name: str, context: Optional[Any] = None) -> TypeHandle:
        if not qualified_name or not qualified_name.strip():
            raise TypeResolutionError("No type name given", qualified_name=qualified_name)
        qualified_name = qualified_name.strip()

        module_name, attribute = self._split(qualified_name)
        try:
            module = importlib.import_module(module_name)
            resolved = _lookup_attribute(module, attribute)
        except Exception as e:
            raise TypeResolutionError(f"Cannot resolve {qualified_name}: {e}",
                                      qualified_name=qualified_name) from e

        if not isinstance(resolved, type):
            raise TypeResolutionError(f"{qualified_name} is not a class", qualified_name=qualified_name)

        self.logger.debug(f"Resolved {qualified_name} from module {module_name}")
        return TypeHandle(qualified_name=qualified_name, type=resolved, is_built=True)

    def _split(self, qualified_name: str) -> Tuple[str, str]:
        if ":" in qualified_name:
            module_name, attribute = qualified_name.split(":", 1)
            return module_name, attribute

        parts = qualified_name.split(".")
        if len(parts) < 2:
            raise TypeResolutionError(f"{qualified_name} is not a qualified name",
                                      qualified_name=qualified_name)
        # Longest importable module prefix wins
        for split_at in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split_at])
            try:
                if importlib.util.find_spec(module_name) is not None:
                    return module_name, ".".join(parts[split_at:])
            except Exception as e:
                self.logger.debug(f"Module lookup for {module_name} failed: {e}")
                continue
        raise TypeResolutionError(f"No importable module in {qualified_name}",
                                  qualified_name=qualified_name)


class SourceFileTypeResolver(TypeResolver):
    """
    Resolves types straight from one source file, without importing its package.

    Handles produced here are not built: the file is executed on its own,
    so base classes and annotations from elsewhere in the project may be
    missing and only members declared in the file are reliable.
    """

    def __init__(self, source_path: str, logger: Optional[logging.Logger] = None):
        self.source_path = Path(source_path)
        self.logger = logger or logging.getLogger(__name__)

    def resolve_type(self, qualified_name: str, context: Optional[Any] = None) -> TypeHandle:
        if not qualified_name or not qualified_name.strip():
            raise TypeResolutionError("No type name given", qualified_name=qualified_name)
        qualified_name = qualified_name.strip()

        module = self._load_module(qualified_name)
        resolved = None
        parts = qualified_name.split(".")
        # Try the longest dotted suffix that names an attribute of the module
        for start in range(len(parts)):
            try:
                resolved = _lookup_attribute(module, ".".join(parts[start:]))
                break
            except AttributeError:
                continue

        if not isinstance(resolved, type):
            raise TypeResolutionError(f"{qualified_name} is not a class in {self.source_path}",
                                      qualified_name=qualified_name)

        self.logger.debug(f"Resolved {qualified_name} from source {self.source_path} without building")
        return TypeHandle(qualified_name=qualified_name, type=resolved, is_built=False,
                          source_path=str(self.source_path))

    @property
    def module_name(self) -> str:
        """Module name for the file, unique per resolved path."""
        digest = hashlib.sha1(str(self.source_path.resolve()).encode("utf-8")).hexdigest()[:12]
        return f"_json_butler_source_{self.source_path.stem}_{digest}"

    def _load_module(self, qualified_name: str) -> Any:
        if not self.source_path.is_file():
            raise TypeResolutionError(f"Source file not found: {self.source_path}",
                                      qualified_name=qualified_name)

        module_name = self.module_name
        spec = importlib.util.spec_from_file_location(module_name, self.source_path)
        if spec is None or spec.loader is None:
            raise TypeResolutionError(f"Cannot load {self.source_path}", qualified_name=qualified_name)

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise TypeResolutionError(f"Loading {self.source_path} failed: {e}",
                                      qualified_name=qualified_name) from e
        return module
