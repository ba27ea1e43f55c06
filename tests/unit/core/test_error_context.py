"""Unit tests for src.core.error_context module."""

import pytest
from pytest_mock import MockType

from src.core.error_context import (
    MAX_DEPTH,
    REDACTED,
    is_sensitive_field,
    sanitize_dict,
    sanitize_error_context,
    sanitize_value,
)
from src.core.exceptions import UnprocessableEntityError


@pytest.mark.unit
class TestIsSensitiveField:
    """Test cases for sensitive field detection."""

    @pytest.mark.parametrize(
        "field_name",
        ["password", "user_password", "API_KEY", "access_token", "authorization"],
    )
    def test_default_pattern(self, field_name: str) -> None:
        """Test well-known secret names are detected."""
        assert is_sensitive_field(field_name) is True

    @pytest.mark.parametrize("field_name", ["title", "author", "status", "pages"])
    def test_resource_members_are_not_sensitive(self, field_name: str) -> None:
        """Test ordinary attribute and relationship names pass through."""
        assert is_sensitive_field(field_name) is False

    def test_configured_fields(self, mock_get_settings: MockType) -> None:
        """Test fields listed in the log configuration are detected."""
        assert is_sensitive_field("book_isbn") is True
        mock_get_settings.assert_called_once()


@pytest.mark.unit
class TestSanitize:
    """Test cases for value and dict sanitization."""

    def test_nested_structures(self) -> None:
        """Test secrets are redacted at any nesting level."""
        # Setup
        data = {
            "title": "Dune",
            "meta": {"password": "hunter2", "tags": [{"token": "abc"}, "plain"]},
        }

        # Execution
        result = sanitize_dict(data)

        # Assertions
        assert result == {
            "title": "Dune",
            "meta": {"password": REDACTED, "tags": [{"token": REDACTED}, "plain"]},
        }
        assert data["meta"]["password"] == "hunter2"  # type: ignore[index]

    def test_tuples_are_walked(self) -> None:
        """Test tuples keep their type while being sanitized."""
        assert sanitize_value(({"secret": 1}, 2)) == ({"secret": REDACTED}, 2)

    def test_depth_limit(self) -> None:
        """Test values nested beyond MAX_DEPTH are redacted."""
        assert sanitize_value("x", depth=MAX_DEPTH + 1) == REDACTED


@pytest.mark.unit
class TestSanitizeErrorContext:
    """Test cases for sanitize_error_context."""

    def test_includes_type_message_and_attributes(self) -> None:
        """Test exception attributes are exposed without the stack trace."""
        # Setup
        error = UnprocessableEntityError(
            [{"source": {"parameter": ""}, "detail": "Bad"}],
            context={"entity": "Book"},
        )

        # Execution
        context = sanitize_error_context(error, {"path": "/api/books", "token": "t"})

        # Assertions
        assert context["error_type"] == "UnprocessableEntityError"
        assert context["error_message"] == str(error)
        assert context["path"] == "/api/books"
        assert context["token"] == REDACTED
        attributes = context["error_attributes"]
        assert attributes["errors"] == [{"source": {"parameter": ""}, "detail": "Bad"}]
        assert "stack_trace" not in attributes

    def test_plain_exception(self) -> None:
        """Test exceptions without public attributes get no attribute block."""
        context = sanitize_error_context(ValueError("nope"))

        assert context == {"error_type": "ValueError", "error_message": "nope"}
