from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from src.events.dependencies import (
    ensure_owner,
    get_event_cache,
    get_event_repository,
    require_actor,
)
from src.events.dtos import EventUpdate
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository, OwnerEventCache
from src.events.schemas import EventDetailResponse, ResponseFieldsSchema
from src.events.urls import EVENT_URL

router = APIRouter()


class UpdateEventRequest(BaseModel):
    """Owner-editable fields. Anything else in the payload is ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    date: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    location: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    map_link: str | None = None
    images: list[str] | None = None
    tags: list[str] | None = None
    template: str | None = None
    custom_styles: dict[str, Any] | None = None
    collect_fields: ResponseFieldsSchema | None = None
    allow_sharing: bool | None = None

    def _map_link(self) -> str | None:
        # an explicit null clears the link; the repository stores "" as null
        if "map_link" in self.model_fields_set and self.map_link is None:
            return ""
        return self.map_link

    def to_update(self) -> EventUpdate:
        return EventUpdate(
            name=self.name,
            date=self.date,
            time=self.time,
            location=self.location,
            description=self.description,
            map_link=self._map_link(),
            images=self.images,
            tags=self.tags,
            template=self.template,
            custom_styles=self.custom_styles,
            collect_fields=self.collect_fields.to_config() if self.collect_fields else None,
            allow_sharing=self.allow_sharing,
        )


@router.patch(EVENT_URL, response_model=EventDetailResponse)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    actor_id: str = Depends(require_actor),
    repository: EventRepository = Depends(get_event_repository),
    cache: OwnerEventCache = Depends(get_event_cache),
) -> EventDetailResponse:
    """
    Update an event's profile or response configuration.
    Ownership, counters and responses cannot be changed here.
    """
    try:
        event = await repository.get_by_id(event_id)
        ensure_owner(event, actor_id)
        event = await repository.update(event.id, request.to_update())
    except EventErrors as e:
        raise to_http_exception(e)

    cache.upsert(event)
    return EventDetailResponse.from_dto(event)
