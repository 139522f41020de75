"""Pydantic models for service layer return types.

These records are derived views over tracked items. They are rebuilt on every
call and never stored.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class GroupStatus(StrEnum):
    """Weekly health classification for a group."""

    BALANCED = "balanced"
    NEEDS_ATTENTION = "needs_attention"


class WeekAnalytics(BaseModel):
    """Task performance for one member over the trailing week."""

    model_config = ConfigDict(frozen=True)

    tasks_completed: int
    tasks_assigned: int
    completion_rate: float = Field(..., ge=0.0, le=1.0)
    on_time: bool
    all_on_time: bool


class WeeklyBreakdown(BaseModel):
    """One 7-day slice of a member's month."""

    model_config = ConfigDict(frozen=True)

    week: int = Field(..., ge=1, description="1 is the oldest slice")
    start: datetime
    end: datetime
    completion_rate: float = Field(..., ge=0.0, le=1.0)
    completed: int
    assigned: int


class CategoryTally(BaseModel):
    """Completed and assigned counts for one task category."""

    model_config = ConfigDict(frozen=True)

    completed: int
    assigned: int


class ExpenseSummary(BaseModel):
    """What a member paid and what they owe over the month."""

    model_config = ConfigDict(frozen=True)

    paid_amount: float
    paid_count: int
    owed_amount: float
    owed_to: str | None = None


class MonthAnalytics(BaseModel):
    """Task and expense performance for one member over the trailing 30 days."""

    model_config = ConfigDict(frozen=True)

    tasks_completed: int
    tasks_assigned: int
    completion_rate: float = Field(..., ge=0.0, le=1.0)
    avg_completion_offset_days: float = Field(..., description="Negative = early, positive = late")
    weekly_breakdown: list[WeeklyBreakdown]
    tasks_by_category: dict[str, CategoryTally]
    expense_summary: ExpenseSummary


class UserAnalytics(BaseModel):
    """Week and month analytics for one member."""

    model_config = ConfigDict(frozen=True)

    week: WeekAnalytics
    month: MonthAnalytics


class GroupWeekAnalytics(BaseModel):
    """Group-level weekly rollup."""

    model_config = ConfigDict(frozen=True)

    overall_completion: float
    status: GroupStatus


class CompletionRange(BaseModel):
    """Lowest and highest member completion rates."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float


class GroupMonthAnalytics(BaseModel):
    """Group-level monthly rollup."""

    model_config = ConfigDict(frozen=True)

    avg_completion_rate: float
    range: CompletionRange
