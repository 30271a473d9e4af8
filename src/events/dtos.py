from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class EventValidationError(Exception):
    """Raised for malformed input, before the store is touched."""

    def __init__(self, message: str, field_name: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message)


class EventNotFoundError(Exception):
    """Raised when the referenced event does not exist (or was deleted)."""

    def __init__(self, event_id: UUID | str) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' not found")


class PersistenceError(Exception):
    """Raised when the event store is unreachable or times out. Safe to retry."""


class UnauthorizedError(Exception):
    """Raised when an actor attempts an owner-only operation on someone else's event."""

    def __init__(self, actor_id: str | None, event_id: UUID | str) -> None:
        self.actor_id = actor_id
        self.event_id = event_id
        super().__init__(f"Actor '{actor_id}' does not own event '{event_id}'")


class ResponseCategory(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


RESPONSE_DETAIL_FIELDS = ("name", "email", "phone")


@dataclass(frozen=True)
class ResponseFieldConfig:
    """Which contact details an event collects from responders."""

    name: bool = True
    email: bool = False
    phone: bool = False

    def requested(self) -> tuple[str, ...]:
        return tuple(f for f in RESPONSE_DETAIL_FIELDS if getattr(self, f))

    def to_dict(self) -> dict[str, bool]:
        return {f: getattr(self, f) for f in RESPONSE_DETAIL_FIELDS}

    @classmethod
    def from_dict(cls, data: dict | None) -> "ResponseFieldConfig":
        if not data:
            return cls()
        return cls(**{f: bool(data[f]) for f in RESPONSE_DETAIL_FIELDS if f in data})


@dataclass(frozen=True)
class ResponseDetails:
    """Contact details a guest typed in. Filtered against the event configuration."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class ResponseDTO:
    """One guest's reply, as stored."""

    id: UUID
    category: ResponseCategory
    submitted_at: datetime
    name: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class EventProfileDTO:
    """Owner-supplied fields used to create an event."""

    name: str
    date: str
    time: str
    location: str
    description: str = ""
    map_link: str | None = None
    images: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    template: str = "default"
    custom_styles: dict[str, Any] = field(default_factory=dict)
    collect_fields: ResponseFieldConfig = field(default_factory=ResponseFieldConfig)
    allow_sharing: bool = True


@dataclass(frozen=True)
class EventUpdate:
    """Partial update of an event. Fields left as None are not touched;
    an empty ``map_link`` clears the link.

    Only owner-editable fields exist here, so repository-managed fields
    (owner, counters, responses, timestamps) cannot be expressed at all.
    """

    name: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    description: str | None = None
    map_link: str | None = None
    images: list[str] | None = None
    tags: list[str] | None = None
    template: str | None = None
    custom_styles: dict[str, Any] | None = None
    collect_fields: ResponseFieldConfig | None = None
    allow_sharing: bool | None = None
    is_premium: bool | None = None

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class EventDTO:
    """An event record as held by the store."""

    id: UUID
    owner_id: str
    name: str
    date: str
    time: str
    location: str
    created_at: datetime
    description: str = ""
    map_link: str | None = None
    images: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    template: str = "default"
    custom_styles: dict[str, Any] = field(default_factory=dict)
    collect_fields: ResponseFieldConfig = field(default_factory=ResponseFieldConfig)
    allow_sharing: bool = True
    is_premium: bool = False
    views: int = 0
    tally: dict[ResponseCategory, int] = field(
        default_factory=lambda: {category: 0 for category in ResponseCategory}
    )
    responses: list[ResponseDTO] = field(default_factory=list)

    @property
    def total_responses(self) -> int:
        return sum(self.tally.values())

    def is_owned_by(self, actor_id: str | None) -> bool:
        return actor_id is not None and self.owner_id == actor_id
