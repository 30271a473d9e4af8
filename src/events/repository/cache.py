import logging
from collections import OrderedDict
from dataclasses import replace
from uuid import UUID

from src.events.dtos import EventDTO, PersistenceError
from src.events.repository.repository import EventRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_OWNERS = 1000


class OwnerEventCache:
    """In-memory list of the events each owner has, for fast listing.

    Not a source of truth: it is refreshed or patched explicitly after owner
    writes and may be stale in between. Guests' views and responses never go
    through it, so tallies shown here can lag behind the store.

    At most ``max_owners`` owners are kept, least recently used evicted first.
    Cached events carry counters but no responses, so guest contact details
    are never held here.
    """

    def __init__(self, repository: EventRepository, max_owners: int = DEFAULT_MAX_OWNERS) -> None:
        self._repository = repository
        self._max_owners = max_owners
        self._events: OrderedDict[str, list[EventDTO]] = OrderedDict()

    @staticmethod
    def _prepare(events: list[EventDTO]) -> list[EventDTO]:
        events = [replace(e, responses=[]) if e.responses else e for e in events]
        return sorted(events, key=lambda e: e.created_at, reverse=True)

    def _store(self, owner_id: str, events: list[EventDTO]) -> None:
        self._events[owner_id] = events
        self._events.move_to_end(owner_id)
        while len(self._events) > self._max_owners:
            evicted, _ = self._events.popitem(last=False)
            logger.debug(f"Evicted cached events for owner {evicted}")

    async def refresh(self, owner_id: str) -> list[EventDTO]:
        try:
            events = self._prepare(await self._repository.list_by_owner(owner_id))
        except PersistenceError:
            # a failed refresh leaves nothing stale behind
            self._events.pop(owner_id, None)
            raise
        self._store(owner_id, events)
        logger.debug(f"Refreshed {len(events)} cached events for owner {owner_id}")
        return list(events)

    def get(self, owner_id: str) -> list[EventDTO] | None:
        events = self._events.get(owner_id)
        if events is None:
            return None
        self._events.move_to_end(owner_id)
        return list(events)

    def upsert(self, event: EventDTO) -> None:
        # Owners that were never loaded are left alone; their first refresh picks it up
        events = self._events.get(event.owner_id)
        if events is None:
            return
        others = [e for e in events if e.id != event.id]
        self._store(event.owner_id, self._prepare([*others, event]))

    def discard(self, owner_id: str, event_id: UUID) -> None:
        events = self._events.get(owner_id)
        if events is not None:
            self._events[owner_id] = [e for e in events if e.id != event_id]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
