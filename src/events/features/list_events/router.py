from fastapi import APIRouter, Depends, Query

from src.events.dependencies import get_event_cache, require_actor
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import OwnerEventCache
from src.events.schemas import EventDetailResponse
from src.events.urls import EVENTS_URL

router = APIRouter()


@router.get(EVENTS_URL, response_model=list[EventDetailResponse])
async def list_events(
    cached: bool = Query(default=False, description="Serve the last loaded list if there is one"),
    actor_id: str = Depends(require_actor),
    cache: OwnerEventCache = Depends(get_event_cache),
) -> list[EventDetailResponse]:
    """
    List the acting actor's events, most recently created first.
    Re-queries the store and replaces the cached list, unless ``cached`` is
    set and the list was loaded before; counters may then be stale.
    """
    events = cache.get(actor_id) if cached else None
    if events is None:
        try:
            events = await cache.refresh(actor_id)
        except EventErrors as e:
            raise to_http_exception(e)
    return [EventDetailResponse.from_dto(event) for event in events]
