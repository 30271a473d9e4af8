"""Event repository.

Sole mediator between the application and the event store. Validates input
before any store call, restricts owner updates to an allow-list of fields and
routes the concurrently-mutated fields (views, tally, responses) exclusively
through the store's atomic primitives.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import EmailStr, TypeAdapter, ValidationError

from src.events.dtos import (
    EventDTO,
    EventNotFoundError,
    EventProfileDTO,
    EventUpdate,
    EventValidationError,
    ResponseCategory,
    ResponseDetails,
    ResponseDTO,
    ResponseFieldConfig,
)
from src.events.repository.store import EventStore

logger = logging.getLogger(__name__)

# Fields an owner may change through update()
MUTABLE_FIELDS = frozenset(
    {
        "name",
        "date",
        "time",
        "location",
        "description",
        "map_link",
        "images",
        "tags",
        "template",
        "custom_styles",
        "collect_fields",
        "allow_sharing",
        "is_premium",
    }
)

# Fields only the repository writes
MANAGED_FIELDS = frozenset(
    {"id", "uuid", "owner_id", "created_at", "updated_at", "views", "tally", "responses"}
)

_STRING_FIELDS = ("name", "date", "time", "location", "description", "template")
_LIST_FIELDS = ("images", "tags")
_BOOL_FIELDS = ("allow_sharing", "is_premium")

_EMAIL = TypeAdapter(EmailStr)


def parse_event_id(event_id: UUID | str) -> UUID:
    """Malformed ids can never match an event, so they are reported as missing."""
    if isinstance(event_id, UUID):
        return event_id
    try:
        return UUID(str(event_id))
    except ValueError:
        raise EventNotFoundError(event_id) from None


def parse_category(category: ResponseCategory | str) -> ResponseCategory:
    try:
        return ResponseCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in ResponseCategory)
        raise EventValidationError(
            f"Unknown response category '{category}', expected one of: {allowed}",
            field_name="category",
        ) from None


def normalize_tags(tags: list[str]) -> list[str]:
    """Strip, drop empties and remove duplicates while keeping display order."""
    seen: set[str] = set()
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def filter_details(details: ResponseDetails | None, config: ResponseFieldConfig) -> dict[str, str]:
    """Keep only the non-empty contact details the event asks for.

    Details the event does not ask for are dropped unchecked; a requested
    email must be well formed.
    """
    if details is None:
        return {}
    kept = {}
    for field_name in config.requested():
        value = getattr(details, field_name)
        if value:
            kept[field_name] = value

    if "email" in kept:
        try:
            kept["email"] = str(_EMAIL.validate_python(kept["email"]))
        except ValidationError:
            raise EventValidationError(
                f"'{kept['email']}' is not a valid email address", field_name="email"
            ) from None
    return kept


def _validate_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in changes.items():
        if key in MANAGED_FIELDS:
            logger.warning(f"Ignoring attempt to update repository-managed field '{key}'")
            continue
        if key not in MUTABLE_FIELDS:
            raise EventValidationError(f"Unknown event field '{key}'", field_name=key)

        if key in _STRING_FIELDS:
            if not isinstance(value, str):
                raise EventValidationError(f"'{key}' must be a string", field_name=key)
        elif key == "map_link":
            if value is not None and not isinstance(value, str):
                raise EventValidationError("'map_link' must be a string", field_name=key)
            # an empty link clears it
            value = value or None
        elif key in _LIST_FIELDS:
            if not isinstance(value, list | tuple) or not all(isinstance(v, str) for v in value):
                raise EventValidationError(f"'{key}' must be a list of strings", field_name=key)
            value = normalize_tags(list(value)) if key == "tags" else list(value)
        elif key in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise EventValidationError(f"'{key}' must be a boolean", field_name=key)
        elif key == "custom_styles":
            if not isinstance(value, dict):
                raise EventValidationError("'custom_styles' must be an object", field_name=key)
            value = dict(value)
        elif key == "collect_fields":
            value = _collect_fields_to_dict(value)
        values[key] = value
    return values


def _collect_fields_to_dict(value: Any) -> dict[str, bool]:
    if isinstance(value, ResponseFieldConfig):
        return value.to_dict()
    if isinstance(value, Mapping):
        unknown = set(value) - set(ResponseFieldConfig().to_dict())
        if unknown:
            raise EventValidationError(
                f"Unknown response fields: {', '.join(sorted(unknown))}",
                field_name="collect_fields",
            )
        return ResponseFieldConfig.from_dict(dict(value)).to_dict()
    raise EventValidationError("'collect_fields' must be an object", field_name="collect_fields")


class EventRepository:
    """CRUD plus the two atomic engagement operations for events."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    async def create(self, profile: EventProfileDTO, owner_id: str) -> EventDTO:
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise EventValidationError("An owner id is required", field_name="owner_id")

        profile = replace(
            profile, tags=normalize_tags(list(profile.tags)), map_link=profile.map_link or None
        )
        event = await self._store.insert(owner_id, profile)
        logger.info(f"Created event {event.id} for owner {owner_id}")
        return event

    async def get_by_id(self, event_id: UUID | str) -> EventDTO:
        event_uuid = parse_event_id(event_id)
        event = await self._store.get(event_uuid)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def list_by_owner(self, owner_id: str) -> list[EventDTO]:
        return await self._store.list_by_owner(owner_id)

    async def update(
        self, event_id: UUID | str, changes: EventUpdate | Mapping[str, Any]
    ) -> EventDTO:
        """Apply a field-level merge of owner-editable fields.

        Repository-managed fields in a mapping payload are dropped, never
        applied. Unknown fields and badly typed values are rejected before the
        store is called.
        """
        event_uuid = parse_event_id(event_id)
        if isinstance(changes, EventUpdate):
            changes = changes.changes()
        values = _validate_changes(changes)

        if not values:
            return await self.get_by_id(event_uuid)

        event = await self._store.update_fields(event_uuid, values)
        if event is None:
            raise EventNotFoundError(event_id)
        logger.info(f"Updated event {event_uuid}: {', '.join(sorted(values))}")
        return event

    async def delete(self, event_id: UUID | str) -> None:
        try:
            event_uuid = parse_event_id(event_id)
        except EventNotFoundError:
            return
        await self._store.delete(event_uuid)
        logger.info(f"Deleted event {event_uuid}")

    async def record_view(self, event_id: UUID | str) -> None:
        event_uuid = parse_event_id(event_id)
        if not await self._store.increment_views(event_uuid, 1):
            raise EventNotFoundError(event_id)

    async def record_response(
        self,
        event_id: UUID | str,
        category: ResponseCategory | str,
        details: ResponseDetails | None = None,
    ) -> ResponseDTO:
        """Append a guest's response and bump its category tally in one store write.

        The event is read only for its response configuration; the tally and
        the response collection are never read back and rewritten here.
        """
        category = parse_category(category)
        event_uuid = parse_event_id(event_id)

        event = await self._store.get(event_uuid)
        if event is None:
            raise EventNotFoundError(event_id)

        response = ResponseDTO(
            id=uuid4(),
            category=category,
            submitted_at=datetime.now(UTC),
            **filter_details(details, event.collect_fields),
        )
        if not await self._store.append_response(event_uuid, response):
            # deleted between the configuration read and the write
            raise EventNotFoundError(event_id)
        logger.info(f"Recorded '{category.value}' response {response.id} for event {event_uuid}")
        return response

    async def mark_premium(self, event_id: UUID | str) -> EventDTO:
        """Idempotent: marking an already-premium event is a no-op."""
        event = await self.update(event_id, EventUpdate(is_premium=True))
        logger.info(f"Event {event.id} is premium")
        return event
