"""Tests for error handler."""

from json_butler.error_handler import ErrorHandler
from json_butler.types import (
    CyclicReferenceError,
    ErrorType,
    ParseError,
    SchemaConflict,
    SchemaGraphError,
    TypeResolutionError,
)


class TestErrorHandler:
    """Tests for ErrorHandler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_validate_input_valid_json(self):
        """Test validation of valid JSON input."""
        result = self.error_handler.validate_input('{"users": [{"name": "Alice"}]}')

        assert result.is_valid
        assert len(result.errors) == 0

    def test_validate_input_invalid_json(self):
        """Test validation of invalid JSON input."""
        result = self.error_handler.validate_input('{"users": [{"name": "Alice"}]')

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.SYNTAX
        assert result.errors[0].location.startswith("line 1")

    def test_validate_input_empty(self):
        """Test validation of blank input."""
        for text in ("", "   \n"):
            result = self.error_handler.validate_input(text)
            assert not result.is_valid
            assert result.errors[0].message == "JSON string is empty"

    def test_describe_parse_error(self):
        """Test the message for malformed input."""
        response = self.error_handler.describe(ParseError("Expecting value", position=4, line=1, column=5))

        assert response.message == "Selected text is not valid JSON: Expecting value at line 1, column 5 (char 4)"
        assert "JSON document" in response.suggested_action

    def test_describe_resolution_error(self):
        """Test the message for unresolvable types."""
        response = self.error_handler.describe(TypeResolutionError("No module named 'shop'", "shop.Order"))

        assert response.message.startswith("Could not resolve type:")
        assert "build" in response.suggested_action

    def test_describe_cyclic_error(self):
        """Test the message for reference loops."""
        response = self.error_handler.describe(CyclicReferenceError("Self referencing loop", ["Node", "Node"]))

        assert response.message.startswith("Reference loop detected:")
        assert "ignore" in response.suggested_action

    def test_describe_other_error(self):
        """Test the generic message."""
        response = self.error_handler.describe(SchemaGraphError("Unresolved type reference: Child"))
        assert response.message == "JSON Butler failed: Unresolved type reference: Child"

    def test_summarize_conflicts(self):
        """Test all conflicting paths are listed in one message."""
        conflicts = [
            SchemaConflict(path="$.a", message="conflicting samples", observed=("integer", "string")),
            SchemaConflict(path="$.b[].c", message="conflicting samples", observed=("boolean", "object")),
        ]

        summary = self.error_handler.summarize_conflicts(conflicts)

        assert summary == "2 field(s) typed as untyped due to conflicting samples: $.a, $.b[].c"
