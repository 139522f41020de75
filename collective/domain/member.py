"""Member and group domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Constants for validation
MAX_NAME_LENGTH = 50


class MemberRole(StrEnum):
    """Member role in a group."""

    CREATOR = "creator"
    MEMBER = "member"


class GroupType(StrEnum):
    """What kind of group is coordinating."""

    HOUSEHOLD = "household"
    TRIP = "trip"
    PROJECT = "project"
    OTHER = "other"


class Member(BaseModel):
    """Member data transfer object; used as a join key by analytics."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable member ID (e.g., 'sarah')")
    group_id: str = Field(default="default", description="Group the member belongs to")
    name: str = Field(..., description="Display name of the member")
    avatar: str = Field(default="")
    role: MemberRole = Field(default=MemberRole.MEMBER, description="Member role in the group")
    joined_at: datetime | None = None
    bio: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name_usable(cls, v: str) -> str:
        """Validate name is non-empty and reasonably short."""
        v = v.strip()

        if not v:
            raise ValueError("Name cannot be empty")

        if len(v) > MAX_NAME_LENGTH:
            raise ValueError(f"Name too long (max {MAX_NAME_LENGTH} characters)")

        return v


class Group(BaseModel):
    """Group of members coordinating together."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    group_type: GroupType = Field(default=GroupType.HOUSEHOLD)
    timezone: str = Field(default="UTC", description="IANA timezone name for display")
    created_at: datetime | None = None
