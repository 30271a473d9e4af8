"""Pydantic request/response models shared by the event feature routers."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from src.config.settings import settings
from src.events.dtos import EventDTO, ResponseCategory, ResponseDTO, ResponseFieldConfig


def share_url_for(event_id: UUID) -> str:
    return f"{settings.frontend_url}/event/{event_id}"


class ResponseFieldsSchema(BaseModel):
    """Which details guests are asked for."""

    name: bool = True
    email: bool = False
    phone: bool = False

    def to_config(self) -> ResponseFieldConfig:
        return ResponseFieldConfig(name=self.name, email=self.email, phone=self.phone)


class TallySchema(BaseModel):
    going: int = 0
    maybe: int = 0
    not_going: int = 0

    @classmethod
    def from_tally(cls, tally: dict[ResponseCategory, int]) -> "TallySchema":
        return cls(**{category.value: count for category, count in tally.items()})


class GuestReplyResponse(BaseModel):
    id: UUID
    category: ResponseCategory
    submitted_at: datetime
    name: str | None = None
    email: str | None = None
    phone: str | None = None

    @classmethod
    def from_dto(cls, response: ResponseDTO) -> "GuestReplyResponse":
        return cls(
            id=response.id,
            category=response.category,
            submitted_at=response.submitted_at,
            name=response.name,
            email=response.email,
            phone=response.phone,
        )


class PublicEventResponse(BaseModel):
    """What anyone holding the link may see."""

    id: UUID
    name: str
    date: str
    time: str
    location: str
    description: str
    map_link: str | None = None
    images: list[str] = []
    tags: list[str] = []
    template: str
    custom_styles: dict[str, Any] = {}
    collect_fields: ResponseFieldsSchema
    allow_sharing: bool
    share_url: str | None = None
    is_owner: bool = False

    @classmethod
    def from_dto(cls, event: EventDTO) -> "PublicEventResponse":
        # the sharing link is a paid feature for everyone but the owner
        share_url = share_url_for(event.id) if event.allow_sharing and event.is_premium else None
        return cls(
            id=event.id,
            name=event.name,
            date=event.date,
            time=event.time,
            location=event.location,
            description=event.description,
            map_link=event.map_link,
            images=event.images,
            tags=event.tags,
            template=event.template,
            custom_styles=event.custom_styles,
            collect_fields=ResponseFieldsSchema(**event.collect_fields.to_dict()),
            allow_sharing=event.allow_sharing,
            share_url=share_url,
        )


class EventDetailResponse(PublicEventResponse):
    """The owner's view of an event."""

    owner_id: str
    is_premium: bool
    views: int
    tally: TallySchema
    total_responses: int
    created_at: datetime
    is_owner: bool = True

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventDetailResponse":
        public = PublicEventResponse.from_dto(event)
        return cls(
            **public.model_dump(exclude={"share_url", "is_owner"}),
            share_url=share_url_for(event.id),
            owner_id=event.owner_id,
            is_premium=event.is_premium,
            views=event.views,
            tally=TallySchema.from_tally(event.tally),
            total_responses=event.total_responses,
            created_at=event.created_at,
        )
