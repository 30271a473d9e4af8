from fastapi import APIRouter, Depends, Response

from src.events.dependencies import (
    ensure_owner,
    get_event_cache,
    get_event_repository,
    require_actor,
)
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository, OwnerEventCache
from src.events.urls import EVENT_URL

router = APIRouter()


@router.delete(EVENT_URL, status_code=204)
async def delete_event(
    event_id: str,
    actor_id: str = Depends(require_actor),
    repository: EventRepository = Depends(get_event_repository),
    cache: OwnerEventCache = Depends(get_event_cache),
) -> Response:
    """
    Delete an event together with all of its responses.
    """
    try:
        event = await repository.get_by_id(event_id)
        ensure_owner(event, actor_id)
        await repository.delete(event.id)
    except EventErrors as e:
        raise to_http_exception(e)

    cache.discard(actor_id, event.id)
    return Response(status_code=204)
