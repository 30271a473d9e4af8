from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.events.dependencies import ensure_owner, get_event_repository, require_actor
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository
from src.events.schemas import GuestReplyResponse, TallySchema
from src.events.urls import EVENT_STATS_URL

router = APIRouter()


class EventStatsResponse(BaseModel):
    event_id: UUID
    name: str
    views: int
    tally: TallySchema
    total_responses: int
    responses: list[GuestReplyResponse]


@router.get(EVENT_STATS_URL, response_model=EventStatsResponse)
async def get_event_stats(
    event_id: str,
    actor_id: str = Depends(require_actor),
    repository: EventRepository = Depends(get_event_repository),
) -> EventStatsResponse:
    """
    Engagement statistics and the raw guest responses, owner only.
    """
    try:
        event = await repository.get_by_id(event_id)
        ensure_owner(event, actor_id)
    except EventErrors as e:
        raise to_http_exception(e)

    return EventStatsResponse(
        event_id=event.id,
        name=event.name,
        views=event.views,
        tally=TallySchema.from_tally(event.tally),
        total_responses=event.total_responses,
        responses=[GuestReplyResponse.from_dto(r) for r in event.responses],
    )
