"""Immutable JSON value model."""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class JsonNull:
    """JSON null."""

    def to_python(self) -> Any:
        return None


@dataclass(frozen=True)
class JsonBool:
    """JSON true/false."""
    value: bool

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class JsonNumber:
    """
    JSON number.

    Keeps the literal text so integral and non-integral samples can be
    told apart (``1`` vs ``1.0``).
    """
    literal: str

    @property
    def is_integral(self) -> bool:
        """True for an integer literal that fits a signed 64-bit value."""
        if any(c in self.literal for c in ".eE"):
            return False
        try:
            number = int(self.literal)
        except ValueError:
            return False
        return INT64_MIN <= number <= INT64_MAX

    @property
    def value(self) -> Union[int, float]:
        if self.is_integral:
            return int(self.literal)
        return float(self.literal)

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class JsonString:
    """JSON string."""
    value: str

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class JsonArray:
    """Ordered sequence of JSON values."""
    items: Tuple["JsonValue", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["JsonValue"]:
        return iter(self.items)

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class JsonObject:
    """Ordered mapping of unique names to JSON values."""
    members: Tuple[Tuple[str, "JsonValue"], ...] = ()

    def __len__(self) -> int:
        return len(self.members)

    def keys(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.members)

    def items(self) -> Tuple[Tuple[str, "JsonValue"], ...]:
        return self.members

    def get(self, name: str) -> Optional["JsonValue"]:
        for key, value in self.members:
            if key == name:
                return value
        return None

    def to_python(self) -> Any:
        return {name: value.to_python() for name, value in self.members}


JsonValue = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]

NULL = JsonNull()


def from_python(data: Any) -> JsonValue:
    """Build a JsonValue tree from plain Python data."""
    if isinstance(data, (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)):
        return data
    if data is None:
        return NULL
    if isinstance(data, bool):
        return JsonBool(data)
    if isinstance(data, (int, float)):
        return JsonNumber(repr(data))
    if isinstance(data, str):
        return JsonString(data)
    if isinstance(data, (list, tuple)):
        return JsonArray(tuple(from_python(item) for item in data))
    if isinstance(data, dict):
        return JsonObject(tuple((str(key), from_python(value)) for key, value in data.items()))
    raise TypeError(f"Unsupported value type: {type(data).__name__}")
