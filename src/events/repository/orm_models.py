from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy_utils import UUIDType

from src.config.table_names import TableNames
from src.events.dtos import ResponseCategory
from src.models.base import Base, TimeStamp, utcnow


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value
    __table_args__ = (CheckConstraint("views >= 0", name="ck_events_views_non_negative"),)

    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    map_link: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Presentation, passed through untouched
    template: Mapped[str] = mapped_column(String(64), nullable=False, default="default")
    custom_styles: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    # Response configuration
    collect_fields: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    allow_sharing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Engagement aggregate. Only ever changed with "col = col + 1" statements.
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    going_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    maybe_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    not_going_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Event {self.name} on {self.date}>"


# tally column per response category
TALLY_COLUMNS: dict[ResponseCategory, str] = {
    ResponseCategory.GOING: "going_count",
    ResponseCategory.MAYBE: "maybe_count",
    ResponseCategory.NOT_GOING: "not_going_count",
}


class EventResponse(Base):
    __tablename__ = TableNames.EVENT_RESPONSES.value

    event_id: Mapped[UUID] = mapped_column(
        UUIDType(binary=False),
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(
        Enum(
            ResponseCategory,
            name="response_category_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<EventResponse {self.category} for event {self.event_id}>"
