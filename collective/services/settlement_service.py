"""Expense settlement: what a member paid, what they owe, and to whom.

Equal-split expenses are apportioned across a fixed party size
(``Constants.EQUAL_SPLIT_PARTY_SIZE``, 4) rather than the group's real member
count. Callers that want the real count pass ``party_size`` explicitly.
"""

import logging
from collections.abc import Iterable

from collective.core.config import Constants
from collective.core.errors import InvalidItemError
from collective.core.time_windows import TimeWindow
from collective.domain.item import ExpenseDetails, ItemKind, SplitMethod, TrackedItem
from collective.models.service_models import ExpenseSummary


logger = logging.getLogger(__name__)


def expense_details(item: TrackedItem) -> ExpenseDetails:
    """Return the expense payload of an expense item.

    Raises:
        InvalidItemError: If the item is an expense without expense details
    """
    match item.details:
        case ExpenseDetails() as details:
            return details
        case _:
            raise InvalidItemError(item.id, "expense item has no expense details")


def expenses_in_window(items: Iterable[TrackedItem], window: TimeWindow) -> list[tuple[TrackedItem, ExpenseDetails]]:
    """Select expense items whose spend date falls inside the window, in item order."""
    selected = []
    for item in items:
        if item.kind != ItemKind.EXPENSE:
            continue
        details = expense_details(item)
        if window.contains(details.occurred_at):
            selected.append((item, details))
    return selected


def summarize_expenses(
    items: Iterable[TrackedItem],
    member_id: str,
    window: TimeWindow,
    *,
    party_size: int = Constants.EQUAL_SPLIT_PARTY_SIZE,
) -> ExpenseSummary:
    """Summarize a member's expense position over a window.

    Args:
        items: Tracked items to scan (non-expenses are ignored)
        member_id: Member to summarize
        window: Window the expense date must fall in
        party_size: Number of people an equal split is divided across

    Returns:
        ExpenseSummary with paid totals, owed total and the largest creditor

    Raises:
        ValueError: If party_size is less than 1
        InvalidItemError: If an expense item lacks expense details
    """
    if party_size < 1:
        raise ValueError(f"party_size must be at least 1, got {party_size}")

    paid_amount = 0.0
    paid_count = 0
    owed_amount = 0.0
    # Insertion order doubles as the tie-break: first payer seen wins
    owed_by_payer: dict[str, float] = {}

    for _item, details in expenses_in_window(items, window):
        if details.payer_id == member_id:
            paid_amount += details.amount
            paid_count += 1
            continue

        if details.split_method != SplitMethod.EQUAL:
            continue

        share = details.amount / party_size
        owed_amount += share
        owed_by_payer[details.payer_id] = owed_by_payer.get(details.payer_id, 0.0) + share

    owed_to = max(owed_by_payer, key=owed_by_payer.__getitem__) if owed_by_payer else None

    logger.debug(
        "Expense summary computed",
        extra={
            "member_id": member_id,
            "paid_count": paid_count,
            "creditors": len(owed_by_payer),
            "party_size": party_size,
        },
    )

    return ExpenseSummary(
        paid_amount=paid_amount,
        paid_count=paid_count,
        owed_amount=owed_amount,
        owed_to=owed_to,
    )
