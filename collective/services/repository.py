"""In-memory item and member collections.

Collections own their records and hand out immutable snapshots; the analytics
engine only ever sees a tuple, never the live list. Writes are serialized with
a lock so a snapshot is always taken between whole writes.
"""

import json
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from collective.core.errors import InvalidItemError, UnknownMemberError
from collective.domain.item import ItemKind, ItemStatus, TrackedItem
from collective.domain.member import Group, Member


logger = logging.getLogger(__name__)

_item_adapter = TypeAdapter(TrackedItem)
_member_list_adapter = TypeAdapter(list[Member])
_group_list_adapter = TypeAdapter(list[Group])

UNKNOWN_MEMBER_NAME = "Unknown"


def parse_item(data: dict[str, Any]) -> TrackedItem:
    """Validate raw item data into a TrackedItem.

    Raises:
        InvalidItemError: If the data violates the item contract
    """
    try:
        return _item_adapter.validate_python(data)
    except ValidationError as e:
        item_id = data.get("id") if isinstance(data, dict) else None
        reasons = "; ".join(error["msg"] for error in e.errors())
        raise InvalidItemError(item_id, reasons) from e


class ItemRepository:
    """Collection of tracked items with snapshot reads."""

    def __init__(self, items: Iterable[TrackedItem] = ()) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, TrackedItem] = {}
        self.extend(items)

    def add(self, item: TrackedItem | dict[str, Any]) -> TrackedItem:
        """Add one item, validating raw dictionaries first.

        Raises:
            InvalidItemError: If the item is malformed or its ID is already taken
        """
        if not isinstance(item, TrackedItem):
            item = parse_item(item)
        with self._lock:
            if item.id in self._items:
                raise InvalidItemError(item.id, "duplicate item id")
            self._items[item.id] = item
        logger.debug("Item added", extra={"item_id": item.id, "kind": str(item.kind)})
        return item

    def extend(self, items: Iterable[TrackedItem | dict[str, Any]]) -> None:
        for item in items:
            self.add(item)

    def snapshot(self) -> tuple[TrackedItem, ...]:
        """Return all items in insertion order."""
        with self._lock:
            return tuple(self._items.values())

    def get(self, item_id: str) -> TrackedItem:
        """Return an item by ID.

        Raises:
            KeyError: If no item has this ID
        """
        with self._lock:
            try:
                return self._items[item_id]
            except KeyError:
                raise KeyError(f"Item {item_id} not found") from None

    def for_group(self, group_id: str) -> tuple[TrackedItem, ...]:
        return tuple(item for item in self.snapshot() if item.group_id == group_id)

    def by_assignee(self, member_id: str) -> tuple[TrackedItem, ...]:
        return tuple(item for item in self.snapshot() if item.is_assigned_to(member_id))

    def by_kind(self, kind: ItemKind) -> tuple[TrackedItem, ...]:
        return tuple(item for item in self.snapshot() if item.kind == kind)

    def by_status(self, status: ItemStatus) -> tuple[TrackedItem, ...]:
        return tuple(item for item in self.snapshot() if item.status == status)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class MemberDirectory:
    """Collection of members with snapshot reads."""

    def __init__(self, members: Iterable[Member] = ()) -> None:
        self._lock = threading.Lock()
        self._members: dict[str, Member] = {}
        for member in members:
            self.add(member)

    def add(self, member: Member) -> Member:
        """Add a member.

        Raises:
            ValueError: If a member with the same ID already exists
        """
        with self._lock:
            if member.id in self._members:
                raise ValueError(f"Member {member.id} already exists")
            self._members[member.id] = member
        return member

    def snapshot(self) -> tuple[Member, ...]:
        with self._lock:
            return tuple(self._members.values())

    def get(self, member_id: str) -> Member:
        """Return a member by ID.

        Raises:
            UnknownMemberError: If no member has this ID
        """
        with self._lock:
            member = self._members.get(member_id)
        if member is None:
            raise UnknownMemberError(member_id)
        return member

    def name_for(self, member_id: str) -> str:
        """Display name for a member, or "Unknown" when the ID is not registered."""
        with self._lock:
            member = self._members.get(member_id)
        return member.name if member else UNKNOWN_MEMBER_NAME

    def for_group(self, group_id: str) -> tuple[Member, ...]:
        return tuple(member for member in self.snapshot() if member.group_id == group_id)

    def __contains__(self, member_id: object) -> bool:
        with self._lock:
            return member_id in self._members

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)


@dataclass(frozen=True)
class Fixture:
    """Loaded fixture contents."""

    items: ItemRepository
    members: MemberDirectory
    groups: list[Group]


def load_fixture_data(data: dict[str, Any]) -> Fixture:
    """Build collections from already-parsed fixture data.

    Raises:
        InvalidItemError: If any item in the fixture is malformed
        ValidationError: If members or groups are malformed
    """
    groups = _group_list_adapter.validate_python(data.get("groups", []))
    members = MemberDirectory(_member_list_adapter.validate_python(data.get("members", [])))
    items = ItemRepository()
    items.extend(data.get("items", []))

    logger.info(
        "Fixture loaded",
        extra={"groups": len(groups), "members": len(members), "items": len(items)},
    )
    return Fixture(items=items, members=members, groups=groups)


def load_fixture(path: Path) -> Fixture:
    """Load members, groups and items from a JSON fixture file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidItemError: If any item in the fixture is malformed
    """
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    return load_fixture_data(data)
