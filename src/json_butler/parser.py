"""JSON parser producing the immutable value model."""

import json
import logging
from typing import Any, List, Optional, Tuple

from .error_handler import TOO_DEEP_MESSAGE, ErrorHandler
from .models.json_value import (
    NULL,
    JsonArray,
    JsonBool,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
)
from .types import ParseError


class _Pairs(list):
    """Object members in document order, as handed over by the decoder."""


class JSONParser:
    """
    JSON parser with input validation.

    Parses JSON text into a JsonValue tree. Numbers keep their literal
    text and objects keep their key order.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, json_string: str) -> JsonValue:
        """
        Parse JSON text.

        Args:
            json_string: JSON text to parse

        Returns:
            Root JsonValue

        Raises:
            ParseError: If the text is empty or malformed
        """
        validation_result = self.error_handler.validate_input(json_string)
        if not validation_result.is_valid:
            raise self._to_parse_error(json_string, validation_result.errors[0].message)

        try:
            raw = json.loads(
                json_string,
                object_pairs_hook=_Pairs,
                parse_int=JsonNumber,
                parse_float=JsonNumber,
                parse_constant=JsonNumber,
            )
        except json.JSONDecodeError as e:
            raise ParseError(e.msg, position=e.pos, line=e.lineno, column=e.colno) from e
        except RecursionError:
            raise ParseError(TOO_DEEP_MESSAGE) from None

        try:
            value = self._build(raw)
        except RecursionError:
            raise ParseError(TOO_DEEP_MESSAGE) from None
        self.logger.debug(f"Parsed JSON document with root {type(value).__name__}")
        return value

    def _build(self, raw: Any) -> JsonValue:
        if isinstance(raw, _Pairs):
            return JsonObject(self._dedupe_members(raw))
        if isinstance(raw, list):
            return JsonArray(tuple(self._build(item) for item in raw))
        if isinstance(raw, JsonNumber):
            return raw
        if raw is None:
            return NULL
        if isinstance(raw, bool):
            return JsonBool(raw)
        return JsonString(raw)

    def _dedupe_members(self, pairs: List[Tuple[str, Any]]) -> Tuple[Tuple[str, JsonValue], ...]:
        """Last value wins for a repeated key, first position is kept."""
        members = {}
        for key, value in pairs:
            if key in members:
                self.logger.debug(f"Duplicate key '{key}' in object, keeping last value")
            members[key] = self._build(value)
        return tuple(members.items())

    def _to_parse_error(self, json_string: str, message: str) -> ParseError:
        if not json_string or not json_string.strip():
            return ParseError(message)
        try:
            json.loads(json_string)
        except json.JSONDecodeError as e:
            return ParseError(e.msg, position=e.pos, line=e.lineno, column=e.colno)
        except RecursionError:
            pass
        return ParseError(message)
