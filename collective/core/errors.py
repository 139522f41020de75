"""Typed analytics errors and their classification into client responses."""

from enum import Enum

from pydantic import BaseModel


class AnalyticsError(Exception):
    """Base class for errors raised by the analytics engine."""


class InvalidItemError(AnalyticsError):
    """A tracked item violates its contract (e.g. an expense without expense details)."""

    def __init__(self, item_id: str | None, reason: str) -> None:
        self.item_id = item_id
        self.reason = reason
        super().__init__(f"Invalid item {item_id or '<unknown>'}: {reason}")


class EmptyGroupError(AnalyticsError):
    """A group rollup was requested over zero members."""

    def __init__(self, group_id: str | None = None) -> None:
        self.group_id = group_id
        label = f"Group {group_id}" if group_id else "Group"
        super().__init__(f"{label} has no members to aggregate")


class UnknownMemberError(AnalyticsError, KeyError):
    """A member id is not present in the member directory."""

    def __init__(self, member_id: str) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} not found")

    def __str__(self) -> str:
        return str(self.args[0])


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_INVALID_ITEM = "ERR_INVALID_ITEM"
    ERR_EMPTY_GROUP = "ERR_EMPTY_GROUP"
    ERR_MEMBER_NOT_FOUND = "ERR_MEMBER_NOT_FOUND"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_analytics_error(exception: Exception) -> ErrorResponse:
    """Classify an engine error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised while computing analytics

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, InvalidItemError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_ITEM,
            message=str(exception),
            suggestion="Fix the item data; expenses need an amount, a payer and a date.",
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, EmptyGroupError):
        return ErrorResponse(
            code=ErrorCode.ERR_EMPTY_GROUP,
            message=str(exception),
            suggestion="Add at least one member to the group before requesting group analytics.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, UnknownMemberError):
        return ErrorResponse(
            code=ErrorCode.ERR_MEMBER_NOT_FOUND,
            message=str(exception),
            suggestion="Use /analytics/members to list known members.",
            severity=ErrorSeverity.LOW,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
