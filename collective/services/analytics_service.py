"""Analytics service for member and group performance statistics.

This module provides functions for:
- Per-member weekly analytics (completion rate, on-time status)
- Per-member monthly analytics (average lateness, weekly breakdown, categories, expenses)
- Group rollups across all members for both windows

Key Concepts:
- Selection: a member's tasks for a window are the task items assigned to them
  whose due date OR completion date falls inside the window (inclusive).
- Idle members: a member with nothing assigned reports a completion rate of 1.0
  and counts as on time. Group rollups average these rates as-is.
- On time: ``all_on_time`` only looks at completed tasks (missing dates never
  disqualify); ``on_time`` additionally fails while any selected task is overdue.
- Clock: every entry point takes ``now`` explicitly; nothing here reads the wall clock.
- Freshness: results are recomputed on every call. There is no cache to invalidate.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from collective.core.config import Constants
from collective.core.errors import EmptyGroupError
from collective.core.logging import log_with_member_context, span
from collective.core.time_windows import TimeWindow, days_between, tile_contains, weekly_tiles, window_ending_at
from collective.domain.item import ItemKind, ItemStatus, TrackedItem
from collective.domain.member import Member
from collective.models.service_models import (
    CompletionRange,
    GroupMonthAnalytics,
    GroupStatus,
    GroupWeekAnalytics,
    MonthAnalytics,
    UserAnalytics,
    WeekAnalytics,
    WeeklyBreakdown,
)
from collective.services.category_service import tally_by_category
from collective.services.settlement_service import summarize_expenses


logger = logging.getLogger(__name__)


def completion_rate(completed: int, assigned: int) -> float:
    """Completed over assigned, or the idle rate when nothing was assigned."""
    if assigned > 0:
        return completed / assigned
    return Constants.IDLE_COMPLETION_RATE


def select_member_tasks(items: Iterable[TrackedItem], member_id: str, window: TimeWindow) -> list[TrackedItem]:
    """Return the member's task items that were due or completed inside the window, in item order."""
    return [
        item
        for item in items
        if item.kind == ItemKind.TASK
        and item.is_assigned_to(member_id)
        and (window.contains(item.due_at) or window.contains(item.completed_at))
    ]


def _completed_on_time(item: TrackedItem) -> bool:
    # Missing either date cannot prove lateness
    if item.due_at is None or item.completed_at is None:
        return True
    return item.completed_at <= item.due_at


def compute_user_week(items: Iterable[TrackedItem], member_id: str, now: datetime) -> WeekAnalytics:
    """Compute a member's analytics over the 7 days ending at ``now``.

    Args:
        items: Tracked items to aggregate (read, never modified)
        member_id: Member to compute analytics for
        now: Reference instant the window ends at

    Returns:
        WeekAnalytics for the member
    """
    with span("analytics_service.compute_user_week"):
        window = window_ending_at(now, Constants.WEEK_WINDOW_DAYS)
        selected = select_member_tasks(items, member_id, window)

        completed_items = [item for item in selected if item.is_completed]
        assigned = len(selected)
        completed = len(completed_items)

        all_on_time = all(_completed_on_time(item) for item in completed_items)
        has_overdue = any(item.status == ItemStatus.OVERDUE for item in selected)
        on_time = True if assigned == 0 else all_on_time and not has_overdue

        log_with_member_context(
            logger,
            "debug",
            "Week analytics computed",
            member_id=member_id,
            tasks_assigned=assigned,
            tasks_completed=completed,
        )

        return WeekAnalytics(
            tasks_completed=completed,
            tasks_assigned=assigned,
            completion_rate=completion_rate(completed, assigned),
            on_time=on_time,
            all_on_time=all_on_time,
        )


def average_completion_offset_days(items: Iterable[TrackedItem]) -> float:
    """Mean of (completed_at - due_at) in days over completed items with both dates; 0 when none."""
    offsets = [
        days_between(item.due_at, item.completed_at)
        for item in items
        if item.is_completed and item.due_at is not None and item.completed_at is not None
    ]
    if not offsets:
        return 0.0
    return sum(offsets) / len(offsets)


def weekly_breakdown(selected: Sequence[TrackedItem], now: datetime) -> list[WeeklyBreakdown]:
    """Bucket a month selection into four contiguous 7-day slices ending at ``now``, oldest first.

    An item lands in a slice when its due date or completion date does, so an
    item due in one week and completed in the next counts in both.
    """
    tiles = weekly_tiles(now, Constants.BREAKDOWN_WEEKS)
    breakdown = []
    for index, tile in enumerate(tiles):
        is_last = index == len(tiles) - 1
        in_tile = [
            item
            for item in selected
            if tile_contains(tile, item.due_at, is_last=is_last)
            or tile_contains(tile, item.completed_at, is_last=is_last)
        ]
        completed = sum(1 for item in in_tile if item.is_completed)
        breakdown.append(
            WeeklyBreakdown(
                week=index + 1,
                start=tile.start,
                end=tile.end,
                completion_rate=completion_rate(completed, len(in_tile)),
                completed=completed,
                assigned=len(in_tile),
            )
        )
    return breakdown


def compute_user_month(
    items: Iterable[TrackedItem],
    member_id: str,
    now: datetime,
    *,
    party_size: int = Constants.EQUAL_SPLIT_PARTY_SIZE,
) -> MonthAnalytics:
    """Compute a member's analytics over the 30 days ending at ``now``.

    Args:
        items: Tracked items to aggregate (read, never modified)
        member_id: Member to compute analytics for
        now: Reference instant the window ends at
        party_size: Party size for equal-split expenses (defaults to the fixed 4-way split)

    Returns:
        MonthAnalytics for the member

    Raises:
        InvalidItemError: If an expense item lacks expense details
    """
    with span("analytics_service.compute_user_month"):
        items = tuple(items)
        window = window_ending_at(now, Constants.MONTH_WINDOW_DAYS)
        selected = select_member_tasks(items, member_id, window)

        assigned = len(selected)
        completed = sum(1 for item in selected if item.is_completed)

        result = MonthAnalytics(
            tasks_completed=completed,
            tasks_assigned=assigned,
            completion_rate=completion_rate(completed, assigned),
            avg_completion_offset_days=average_completion_offset_days(selected),
            weekly_breakdown=weekly_breakdown(selected, window.end),
            tasks_by_category=tally_by_category(selected),
            expense_summary=summarize_expenses(items, member_id, window, party_size=party_size),
        )

        log_with_member_context(
            logger,
            "debug",
            "Month analytics computed",
            member_id=member_id,
            tasks_assigned=assigned,
            tasks_completed=completed,
            categories=len(result.tasks_by_category),
        )

        return result


def compute_all_users(
    items: Iterable[TrackedItem],
    members: Iterable[Member],
    now: datetime,
    *,
    party_size: int = Constants.EQUAL_SPLIT_PARTY_SIZE,
) -> dict[str, UserAnalytics]:
    """Compute week and month analytics for every member, keyed by member ID in member order."""
    with span("analytics_service.compute_all_users"):
        items = tuple(items)
        result = {
            member.id: UserAnalytics(
                week=compute_user_week(items, member.id, now),
                month=compute_user_month(items, member.id, now, party_size=party_size),
            )
            for member in members
        }
        logger.info("Computed analytics for %d members", len(result))
        return result


def summarize_week_rates(rates: Sequence[float], *, group_id: str | None = None) -> GroupWeekAnalytics:
    """Roll member week completion rates up into a group status.

    A group needs attention when its mean rate is below 0.8 or any single
    member is below 0.6.

    Raises:
        EmptyGroupError: If there are no rates to aggregate
    """
    if not rates:
        raise EmptyGroupError(group_id)

    overall = sum(rates) / len(rates)
    needs_attention = overall < Constants.GROUP_BALANCED_MIN_COMPLETION or any(
        rate < Constants.MEMBER_MIN_COMPLETION for rate in rates
    )
    return GroupWeekAnalytics(
        overall_completion=overall,
        status=GroupStatus.NEEDS_ATTENTION if needs_attention else GroupStatus.BALANCED,
    )


def summarize_month_rates(rates: Sequence[float], *, group_id: str | None = None) -> GroupMonthAnalytics:
    """Roll member month completion rates up into mean, min and max.

    Raises:
        EmptyGroupError: If there are no rates to aggregate
    """
    if not rates:
        raise EmptyGroupError(group_id)

    return GroupMonthAnalytics(
        avg_completion_rate=sum(rates) / len(rates),
        range=CompletionRange(min=min(rates), max=max(rates)),
    )


def compute_group_week(
    items: Iterable[TrackedItem],
    members: Iterable[Member],
    now: datetime,
    *,
    group_id: str | None = None,
) -> GroupWeekAnalytics:
    """Compute the weekly group rollup over all given members.

    Raises:
        EmptyGroupError: If members is empty
    """
    with span("analytics_service.compute_group_week"):
        items = tuple(items)
        rates = [compute_user_week(items, member.id, now).completion_rate for member in members]
        result = summarize_week_rates(rates, group_id=group_id)
        logger.info(
            "Group week analytics computed",
            extra={"group_id": group_id, "members": len(rates), "status": str(result.status)},
        )
        return result


def compute_group_month(
    items: Iterable[TrackedItem],
    members: Iterable[Member],
    now: datetime,
    *,
    group_id: str | None = None,
) -> GroupMonthAnalytics:
    """Compute the monthly group rollup over all given members.

    Raises:
        EmptyGroupError: If members is empty
    """
    with span("analytics_service.compute_group_month"):
        items = tuple(items)
        rates = [compute_user_month(items, member.id, now).completion_rate for member in members]
        result = summarize_month_rates(rates, group_id=group_id)
        logger.info("Group month analytics computed", extra={"group_id": group_id, "members": len(rates)})
        return result
