"""Unit tests for error classification utilities."""

import pytest

from collective.core.errors import (
    EmptyGroupError,
    ErrorCode,
    ErrorSeverity,
    InvalidItemError,
    UnknownMemberError,
    classify_analytics_error,
)


@pytest.mark.unit
class TestAnalyticsErrors:
    """Tests for the typed engine errors."""

    def test_invalid_item_message(self):
        error = InvalidItemError("expense-009", "Expense items require expense details")

        assert error.item_id == "expense-009"
        assert str(error) == "Invalid item expense-009: Expense items require expense details"

    def test_invalid_item_without_id(self):
        assert "<unknown>" in str(InvalidItemError(None, "bad data"))

    def test_empty_group_message(self):
        assert str(EmptyGroupError("group-001")) == "Group group-001 has no members to aggregate"
        assert str(EmptyGroupError()) == "Group has no members to aggregate"

    def test_unknown_member_message_is_not_quoted(self):
        # KeyError normally repr()s its argument
        assert str(UnknownMemberError("zoe")) == "Member zoe not found"


@pytest.mark.unit
class TestClassifyAnalyticsError:
    """Tests for classify_analytics_error function."""

    def test_invalid_item(self):
        """Test classification of a malformed item."""
        response = classify_analytics_error(InvalidItemError("expense-009", "missing payload"))

        assert response.code == ErrorCode.ERR_INVALID_ITEM
        assert response.severity == ErrorSeverity.HIGH
        assert "expense-009" in response.message

    def test_empty_group(self):
        """Test classification of a rollup over no members."""
        response = classify_analytics_error(EmptyGroupError("group-002"))

        assert response.code == ErrorCode.ERR_EMPTY_GROUP
        assert response.severity == ErrorSeverity.LOW
        assert "add at least one member" in response.suggestion.lower()

    def test_unknown_member(self):
        """Test classification of a missing member."""
        response = classify_analytics_error(UnknownMemberError("zoe"))

        assert response.code == ErrorCode.ERR_MEMBER_NOT_FOUND
        assert response.message == "Member zoe not found"

    def test_unexpected_error_hides_details(self):
        """Test that unexpected errors do not leak internals."""
        response = classify_analytics_error(RuntimeError("connection string: secret"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert response.severity == ErrorSeverity.MEDIUM
        assert "secret" not in response.message

    def test_response_serializes_severity_value(self):
        """Test JSON dump uses the severity value."""
        payload = classify_analytics_error(EmptyGroupError()).model_dump(mode="json")

        assert payload["severity"] == "low"
        assert set(payload) == {"code", "message", "suggestion", "severity"}
