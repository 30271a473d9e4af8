"""Event store: the persistence capability the repository is written against.

The repository needs point get/insert/update/delete by id, an atomic numeric
increment, an atomic append-with-tally-increment and an equality query by
owner. Anything offering those can back an ``EventRepository``.
"""

import contextlib
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import AsyncIterator, Sequence
from datetime import UTC, datetime
from functools import partial
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.events.dtos import (
    EventDTO,
    EventProfileDTO,
    PersistenceError,
    ResponseCategory,
    ResponseDTO,
    ResponseFieldConfig,
)
from src.events.repository.orm_models import TALLY_COLUMNS, Event, EventResponse

logger = logging.getLogger(__name__)


class EventStore(ABC):
    """Abstract base class for event persistence."""

    @abstractmethod
    async def insert(self, owner_id: str, profile: EventProfileDTO) -> EventDTO:
        """Persist a new event with an empty aggregate.

        The store assigns the id and the creation timestamp.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[EventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def update_fields(self, event_id: UUID, values: dict[str, Any]) -> EventDTO | None:
        """Overwrite the given profile fields. Returns None if the event is missing."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, event_id: UUID) -> None:
        """Remove the event and all of its responses in one unit. Missing ids are ignored."""
        raise NotImplementedError

    @abstractmethod
    async def increment_views(self, event_id: UUID, amount: int = 1) -> bool:
        """Atomically add ``amount`` to the view counter. False if the event is missing."""
        raise NotImplementedError

    @abstractmethod
    async def append_response(self, event_id: UUID, response: ResponseDTO) -> bool:
        """Atomically append ``response`` and add 1 to its category tally.

        Both effects are applied together or not at all. False if the event is missing.
        """
        raise NotImplementedError


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _response_to_dto(row: EventResponse) -> ResponseDTO:
    return ResponseDTO(
        id=row.uuid,
        category=ResponseCategory(row.category),
        submitted_at=_as_utc(row.submitted_at),
        name=row.name,
        email=row.email,
        phone=row.phone,
    )


def _event_to_dto(row: Event, responses: Sequence[EventResponse]) -> EventDTO:
    return EventDTO(
        id=row.uuid,
        owner_id=row.owner_id,
        name=row.name,
        date=row.date,
        time=row.time,
        location=row.location,
        created_at=_as_utc(row.created_at),
        description=row.description or "",
        map_link=row.map_link,
        images=list(row.images or []),
        tags=list(row.tags or []),
        template=row.template,
        custom_styles=dict(row.custom_styles or {}),
        collect_fields=ResponseFieldConfig.from_dict(row.collect_fields),
        allow_sharing=row.allow_sharing,
        is_premium=row.is_premium,
        views=row.views,
        tally={category: getattr(row, column) for category, column in TALLY_COLUMNS.items()},
        responses=[_response_to_dto(r) for r in responses],
    )


class SqlEventStore(EventStore):
    """SQL implementation of the event store.

    Counters are only ever changed through ``UPDATE ... SET col = col + n``
    so concurrent writers never overwrite each other.
    """

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    @contextlib.asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Event store unavailable: {e}")
            raise PersistenceError(str(e)) from e

    async def _load_responses(
        self, session: AsyncSession, event_ids: list[UUID]
    ) -> dict[UUID, list[EventResponse]]:
        grouped: dict[UUID, list[EventResponse]] = defaultdict(list)
        if not event_ids:
            return grouped
        stmt = (
            select(EventResponse)
            .where(EventResponse.event_id.in_(event_ids))
            .order_by(EventResponse.submitted_at)
        )
        result = await session.execute(stmt)
        for response in result.scalars().all():
            grouped[response.event_id].append(response)
        return grouped

    async def _get(self, session: AsyncSession, event_id: UUID) -> EventDTO | None:
        stmt = (
            select(Event)
            .where(Event.uuid == event_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        event = result.scalar_one_or_none()
        if event is None:
            return None
        responses = await self._load_responses(session, [event.uuid])
        return _event_to_dto(event, responses[event.uuid])

    async def insert(self, owner_id: str, profile: EventProfileDTO) -> EventDTO:
        async with self._session() as session:
            event = Event(
                owner_id=owner_id,
                name=profile.name,
                date=profile.date,
                time=profile.time,
                location=profile.location,
                description=profile.description,
                map_link=profile.map_link,
                images=list(profile.images),
                tags=list(profile.tags),
                template=profile.template,
                custom_styles=dict(profile.custom_styles),
                collect_fields=profile.collect_fields.to_dict(),
                allow_sharing=profile.allow_sharing,
                is_premium=False,
                views=0,
                going_count=0,
                maybe_count=0,
                not_going_count=0,
            )
            session.add(event)
            await session.flush()  # assigns uuid and created_at
            return _event_to_dto(event, [])

    async def get(self, event_id: UUID) -> EventDTO | None:
        async with self._session() as session:
            return await self._get(session, event_id)

    async def list_by_owner(self, owner_id: str) -> list[EventDTO]:
        async with self._session() as session:
            result = await session.execute(select(Event).where(Event.owner_id == owner_id))
            events = result.scalars().all()
            responses = await self._load_responses(session, [e.uuid for e in events])
            return [_event_to_dto(e, responses[e.uuid]) for e in events]

    async def update_fields(self, event_id: UUID, values: dict[str, Any]) -> EventDTO | None:
        async with self._session() as session:
            stmt = (
                update(Event)
                .where(Event.uuid == event_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                return None
            return await self._get(session, event_id)

    async def delete(self, event_id: UUID) -> None:
        async with self._session() as session:
            await session.execute(delete(EventResponse).where(EventResponse.event_id == event_id))
            await session.execute(delete(Event).where(Event.uuid == event_id))

    async def increment_views(self, event_id: UUID, amount: int = 1) -> bool:
        async with self._session() as session:
            stmt = (
                update(Event)
                .where(Event.uuid == event_id)
                .values(views=Event.views + amount)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            return result.rowcount > 0

    async def append_response(self, event_id: UUID, response: ResponseDTO) -> bool:
        column = TALLY_COLUMNS[response.category]
        async with self._session() as session:
            # one transaction: the increment and the insert commit together
            stmt = (
                update(Event)
                .where(Event.uuid == event_id)
                .values({column: getattr(Event, column) + 1})
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                return False
            session.add(
                EventResponse(
                    uuid=response.id,
                    event_id=event_id,
                    category=response.category,
                    name=response.name,
                    email=response.email,
                    phone=response.phone,
                    submitted_at=response.submitted_at,
                )
            )
            return True
