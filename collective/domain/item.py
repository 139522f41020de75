"""Tracked item domain models and enums."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from collective.core.time_windows import ensure_utc


class ItemKind(StrEnum):
    """Kind of coordinated work or spend."""

    TASK = "task"
    EXPENSE = "expense"
    SHOPPING_REQUEST = "shopping_request"
    BILL = "bill"
    MAINTENANCE = "maintenance"


class ItemStatus(StrEnum):
    """Item lifecycle status."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Completed and cancelled items never change again."""
        return self in (ItemStatus.COMPLETED, ItemStatus.CANCELLED)


class SplitMethod(StrEnum):
    """How an expense is shared across the group."""

    EQUAL = "equal"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"


class Recurrence(StrEnum):
    """Repeat cadence for tasks."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    ONE_TIME = "one-time"


class Urgency(StrEnum):
    """Shopping request urgency."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskDetails(BaseModel):
    """Details carried by tasks and maintenance jobs."""

    model_config = ConfigDict(frozen=True)

    variant: Literal["task"] = "task"
    difficulty: int | None = Field(default=None, ge=1, le=5, description="Relative effort from 1 to 5")
    estimated_minutes: int | None = Field(default=None, ge=0)
    location: str | None = None
    recurrence: Recurrence | None = None


class ExpenseDetails(BaseModel):
    """Details carried by expenses and bills."""

    model_config = ConfigDict(frozen=True)

    variant: Literal["expense"] = "expense"
    amount: float = Field(..., ge=0, description="Amount paid, in the expense currency")
    payer_id: str = Field(..., description="Member ID of whoever paid")
    split_method: SplitMethod = Field(default=SplitMethod.EQUAL)
    occurred_at: datetime = Field(..., description="When the money was spent")
    currency: str = Field(default="USD")
    category: str | None = None

    @field_validator("occurred_at")
    @classmethod
    def _occurred_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ShoppingDetails(BaseModel):
    """Details carried by shopping requests."""

    model_config = ConfigDict(frozen=True)

    variant: Literal["shopping"] = "shopping"
    quantity: int = Field(default=1, ge=1)
    store: str | None = None
    urgency: Urgency = Field(default=Urgency.MEDIUM)
    requested_by: str | None = None


ItemDetails = Annotated[TaskDetails | ExpenseDetails | ShoppingDetails, Field(discriminator="variant")]

# Detail variant implied by each kind when the payload omits it
DEFAULT_VARIANT: dict[ItemKind, str] = {
    ItemKind.TASK: "task",
    ItemKind.MAINTENANCE: "task",
    ItemKind.EXPENSE: "expense",
    ItemKind.BILL: "expense",
    ItemKind.SHOPPING_REQUEST: "shopping",
}

ALLOWED_DETAILS: dict[ItemKind, tuple[type[BaseModel], ...]] = {
    ItemKind.TASK: (TaskDetails,),
    ItemKind.MAINTENANCE: (TaskDetails,),
    ItemKind.EXPENSE: (ExpenseDetails,),
    ItemKind.BILL: (ExpenseDetails,),
    ItemKind.SHOPPING_REQUEST: (ShoppingDetails,),
}


class TrackedItem(BaseModel):
    """A unit of coordination work or spend."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable unique item ID")
    group_id: str = Field(default="default", description="Group the item belongs to")
    kind: ItemKind
    title: str = Field(default="", description="Short title (e.g., 'Clean kitchen')")
    description: str = Field(default="")
    status: ItemStatus = Field(default=ItemStatus.PENDING)
    assignees: tuple[str, ...] = Field(default=(), description="Ordered member IDs responsible for the item")
    due_at: datetime | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None
    details: ItemDetails | None = None

    @model_validator(mode="before")
    @classmethod
    def _tag_details(cls, data: Any) -> Any:
        """Fill in the detail variant from the item kind so payloads need not repeat it."""
        if isinstance(data, dict) and isinstance(data.get("details"), dict) and "variant" not in data["details"]:
            try:
                kind = ItemKind(data.get("kind"))
            except ValueError:
                return data
            data = {**data, "details": {**data["details"], "variant": DEFAULT_VARIANT[kind]}}
        return data

    @field_validator("due_at", "completed_at", "created_at")
    @classmethod
    def _timestamps_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @field_validator("assignees")
    @classmethod
    def _unique_assignees(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(v)) != len(v):
            raise ValueError("Assignees must not repeat")
        return v

    @model_validator(mode="after")
    def _check_contract(self) -> "TrackedItem":
        if self.kind == ItemKind.EXPENSE and not isinstance(self.details, ExpenseDetails):
            raise ValueError("Expense items require expense details")
        if self.details is not None and not isinstance(self.details, ALLOWED_DETAILS[self.kind]):
            raise ValueError(f"{type(self.details).__name__} is not valid for a {self.kind} item")
        if self.completed_at is not None and self.status != ItemStatus.COMPLETED:
            raise ValueError("completed_at may only be set on completed items")
        if self.completed_at is not None and self.created_at is not None and self.completed_at < self.created_at:
            raise ValueError("completed_at must not precede created_at")
        return self

    @property
    def expense(self) -> ExpenseDetails | None:
        """Expense details, when this item carries them."""
        return self.details if isinstance(self.details, ExpenseDetails) else None

    @property
    def is_completed(self) -> bool:
        return self.status == ItemStatus.COMPLETED

    def is_assigned_to(self, member_id: str) -> bool:
        return member_id in self.assignees
