"""Domain models."""

from collective.domain.item import (
    ExpenseDetails,
    ItemKind,
    ItemStatus,
    Recurrence,
    ShoppingDetails,
    SplitMethod,
    TaskDetails,
    TrackedItem,
    Urgency,
)
from collective.domain.member import Group, GroupType, Member, MemberRole


__all__ = [
    "ExpenseDetails",
    "Group",
    "GroupType",
    "ItemKind",
    "ItemStatus",
    "Member",
    "MemberRole",
    "Recurrence",
    "ShoppingDetails",
    "SplitMethod",
    "TaskDetails",
    "TrackedItem",
    "Urgency",
]
