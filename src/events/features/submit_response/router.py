import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.config.settings import settings
from src.events.dependencies import get_event_repository
from src.events.dtos import PersistenceError, ResponseCategory, ResponseDetails, ResponseDTO
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository
from src.events.schemas import GuestReplyResponse
from src.events.urls import SUBMIT_RESPONSE_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class SubmitResponseRequest(BaseModel):
    """A guest's reply. Details the event does not collect are dropped."""

    # validated by the repository so unknown categories get the same error everywhere
    category: str
    name: str | None = Field(default=None, max_length=255)
    # checked by the repository only when the event collects it
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)

    def to_details(self) -> ResponseDetails:
        return ResponseDetails(
            name=self.name,
            email=self.email,
            phone=self.phone,
        )


class SubmitResponseResponse(BaseModel):
    message: str
    response: GuestReplyResponse


MESSAGES = {
    ResponseCategory.GOING: "Thanks for letting us know, see you there!",
    ResponseCategory.MAYBE: "Thanks! Your response has been recorded as maybe.",
    ResponseCategory.NOT_GOING: "We're sorry you can't make it. Your response has been recorded.",
}


async def submit_with_retry(
    repository: EventRepository,
    event_id: str,
    category: str,
    details: ResponseDetails,
    retries: int,
) -> ResponseDTO:
    """Record a response, retrying store failures.

    A lost reply is worse than a duplicated one, so transient failures are
    retried. Duplicates are not detected.
    """
    attempt = 0
    while True:
        try:
            return await repository.record_response(event_id, category, details)
        except PersistenceError as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning(f"Retrying response for event {event_id} after store error: {e}")


@router.post(SUBMIT_RESPONSE_URL, response_model=SubmitResponseResponse, status_code=201)
async def submit_response(
    event_id: str,
    request: SubmitResponseRequest,
    repository: EventRepository = Depends(get_event_repository),
) -> SubmitResponseResponse:
    """
    Submit a guest's attendance response.
    Open to anyone holding the invitation link.
    """
    try:
        response = await submit_with_retry(
            repository,
            event_id,
            request.category,
            request.to_details(),
            retries=settings.response_submit_retries,
        )
    except EventErrors as e:
        raise to_http_exception(e)

    return SubmitResponseResponse(
        message=MESSAGES[response.category],
        response=GuestReplyResponse.from_dto(response),
    )
