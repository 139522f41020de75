"""Pytest configuration and fixtures for unit tests."""

import itertools
from datetime import UTC, datetime

import pytest

from collective.domain.item import ExpenseDetails, ItemKind, ItemStatus, SplitMethod, TrackedItem
from collective.domain.member import Member


# Reference instant used across the suite (scenario dates are in November 2024)
REFERENCE_NOW = datetime(2024, 11, 21, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant so analytics are reproducible."""
    return REFERENCE_NOW


@pytest.fixture
def task_factory():
    """Factory for creating task items with custom data.

    Usage:
        task = task_factory(assignees=["sarah"], due_at=now, status=ItemStatus.COMPLETED, completed_at=now)
    """
    counter = itertools.count(1)

    def _create_task(**kwargs) -> TrackedItem:
        data = {
            "id": kwargs.pop("id", f"task-{next(counter):03d}"),
            "kind": ItemKind.TASK,
            "title": kwargs.pop("title", "Water plants"),
            "status": kwargs.pop("status", ItemStatus.PENDING),
            "assignees": kwargs.pop("assignees", ("sarah",)),
        }
        data.update(kwargs)
        return TrackedItem(**data)

    return _create_task


@pytest.fixture
def expense_factory():
    """Factory for creating expense items.

    Usage:
        expense = expense_factory(amount=94.5, payer_id="mike", occurred_at=now)
    """
    counter = itertools.count(1)

    def _create_expense(
        *,
        amount: float,
        payer_id: str,
        occurred_at: datetime,
        split_method: SplitMethod = SplitMethod.EQUAL,
        **kwargs,
    ) -> TrackedItem:
        return TrackedItem(
            id=kwargs.pop("id", f"expense-{next(counter):03d}"),
            kind=ItemKind.EXPENSE,
            title=kwargs.pop("title", "Groceries"),
            details=ExpenseDetails(
                amount=amount,
                payer_id=payer_id,
                split_method=split_method,
                occurred_at=occurred_at,
            ),
            **kwargs,
        )

    return _create_expense


@pytest.fixture
def household_members() -> list[Member]:
    """The four-person household used throughout the prototype."""
    return [
        Member(id="sarah", group_id="group-001", name="Sarah Chen", role="creator"),
        Member(id="mike", group_id="group-001", name="Mike Rodriguez"),
        Member(id="jessica", group_id="group-001", name="Jessica Taylor"),
        Member(id="bob", group_id="group-001", name="Bob Kim"),
    ]
