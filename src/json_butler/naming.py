"""Identifier normalization for generated type and member names."""

import keyword
import re
from typing import Dict, Optional

_SEGMENT_PATTERN = re.compile(r"[^\W_]+", re.UNICODE)
_SNAKE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

EMPTY_IDENTIFIER = "Field"
DIGIT_PREFIX = "N"

# PascalCase identifiers that are Python keywords
RESERVED_TYPE_NAMES = tuple(name for name in keyword.kwlist if name[0].isupper())


class IdentifierNormalizer:
    """
    Turns arbitrary JSON keys and text into PascalCase identifiers.

    Splits on anything that is not a letter or digit, capitalizes each
    segment and joins them. All-caps segments such as ``ID`` become ``Id``.
    The result always starts with a letter and is never empty, and
    normalizing an already normalized name returns it unchanged.
    """

    def normalize(self, raw: Optional[str]) -> str:
        segments = _SEGMENT_PATTERN.findall(raw or "")
        name = "".join(self._capitalize(segment) for segment in segments)

        if not name:
            return EMPTY_IDENTIFIER
        if not name[0].isalpha():
            name = DIGIT_PREFIX + name
        return name

    def to_snake_case(self, name: str) -> str:
        """Python attribute name for a normalized identifier."""
        snake = _SNAKE_BOUNDARY.sub("_", self.normalize(name)).lower()
        if keyword.iskeyword(snake) or keyword.issoftkeyword(snake):
            snake += "_"
        return snake

    def singularize(self, name: str) -> str:
        """Element type name for an array-valued field (``Items`` -> ``Item``)."""
        lowered = name.lower()
        if lowered.endswith("ies") and len(name) > 3:
            return name[:-3] + "y"
        if lowered.endswith("sses"):
            return name[:-2]
        if lowered.endswith("s") and not lowered.endswith(("ss", "us", "is")) and len(name) > 1:
            return name[:-1]
        return name

    @staticmethod
    def _capitalize(segment: str) -> str:
        if len(segment) > 1 and segment.isupper():
            segment = segment.lower()
        return segment[0].upper() + segment[1:]


class NameScope:
    """
    Hands out collision-free sibling names.

    The first claimant of a name gets it unchanged, later ones get a
    numeric suffix starting at 2. A scope belongs to a single call.
    """

    def __init__(self, normalizer: Optional[IdentifierNormalizer] = None):
        self.normalizer = normalizer or IdentifierNormalizer()
        self._taken: Dict[str, int] = {}

    def claim(self, raw: str, normalize: bool = True) -> str:
        base = self.normalizer.normalize(raw) if normalize else raw
        name = base
        suffix = self._taken.get(base, 1)
        while name in self._taken:
            suffix += 1
            name = f"{base}{suffix}"
        self._taken[base] = suffix
        self._taken.setdefault(name, 1)
        return name

    def reserve(self, *names: str) -> None:
        """Mark names as unavailable without handing them out."""
        for name in names:
            self._taken.setdefault(name, 1)
