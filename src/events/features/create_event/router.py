from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.events.dependencies import get_event_cache, get_event_repository, require_actor
from src.events.dtos import EventProfileDTO
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository, OwnerEventCache
from src.events.schemas import EventDetailResponse, ResponseFieldsSchema
from src.events.urls import EVENTS_URL

router = APIRouter()


class CreateEventRequest(BaseModel):
    """Profile of a new event. Counters, responses and ownership are not accepted here."""

    name: str = Field(min_length=1, max_length=255)
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str = Field(pattern=r"^\d{2}:\d{2}$")
    location: str = Field(min_length=1, max_length=500)
    description: str = ""
    map_link: str | None = None
    images: list[str] = []
    tags: list[str] = []
    template: str = "default"
    custom_styles: dict[str, Any] = {}
    collect_fields: ResponseFieldsSchema = ResponseFieldsSchema()
    allow_sharing: bool = True

    def to_profile(self) -> EventProfileDTO:
        return EventProfileDTO(
            name=self.name,
            date=self.date,
            time=self.time,
            location=self.location,
            description=self.description,
            map_link=self.map_link,
            images=self.images,
            tags=self.tags,
            template=self.template,
            custom_styles=self.custom_styles,
            collect_fields=self.collect_fields.to_config(),
            allow_sharing=self.allow_sharing,
        )


@router.post(EVENTS_URL, response_model=EventDetailResponse, status_code=201)
async def create_event(
    request: CreateEventRequest,
    actor_id: str = Depends(require_actor),
    repository: EventRepository = Depends(get_event_repository),
    cache: OwnerEventCache = Depends(get_event_cache),
) -> EventDetailResponse:
    """
    Create an event owned by the acting actor.
    The event starts with zero views, an empty tally and no responses.
    """
    try:
        event = await repository.create(request.to_profile(), owner_id=actor_id)
    except EventErrors as e:
        raise to_http_exception(e)

    cache.upsert(event)
    return EventDetailResponse.from_dto(event)
