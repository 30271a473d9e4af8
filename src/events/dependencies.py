from functools import lru_cache

from fastapi import Header, HTTPException

from src.config.settings import settings
from src.events.dtos import EventDTO, UnauthorizedError
from src.events.repository import EventRepository, OwnerEventCache, SqlEventStore

ACTOR_HEADER = "X-Actor-Id"


def get_event_repository() -> EventRepository:
    """Dependency to get event repository instance."""
    return EventRepository(SqlEventStore())


@lru_cache
def get_event_cache() -> OwnerEventCache:
    """Dependency to get the process-wide owner event cache."""
    return OwnerEventCache(
        EventRepository(SqlEventStore()), max_owners=settings.owner_cache_max_owners
    )


def get_acting_actor(x_actor_id: str | None = Header(default=None)) -> str | None:
    """The acting actor, if the caller identified itself."""
    if x_actor_id is None or not x_actor_id.strip():
        return None
    return x_actor_id.strip()


def require_actor(x_actor_id: str | None = Header(default=None)) -> str:
    actor_id = get_acting_actor(x_actor_id)
    if actor_id is None:
        raise HTTPException(status_code=401, detail=f"Missing {ACTOR_HEADER} header")
    return actor_id


def ensure_owner(event: EventDTO, actor_id: str) -> None:
    if not event.is_owned_by(actor_id):
        raise UnauthorizedError(actor_id, event.id)
