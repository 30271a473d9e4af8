from fastapi import APIRouter, Depends

from src.events.dependencies import get_acting_actor, get_event_repository
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository
from src.events.schemas import EventDetailResponse, PublicEventResponse
from src.events.urls import EVENT_URL

router = APIRouter()


@router.get(EVENT_URL, response_model=EventDetailResponse | PublicEventResponse)
async def get_event(
    event_id: str,
    actor_id: str | None = Depends(get_acting_actor),
    repository: EventRepository = Depends(get_event_repository),
) -> EventDetailResponse | PublicEventResponse:
    """
    Get an invitation page by event id.
    Anyone may read the public profile; the owner also gets counters.
    Always read from the store, never from the owner cache, since guests
    may have responded since the owner's last refresh.
    """
    try:
        event = await repository.get_by_id(event_id)
    except EventErrors as e:
        raise to_http_exception(e)

    if event.is_owned_by(actor_id):
        return EventDetailResponse.from_dto(event)
    return PublicEventResponse.from_dto(event)
