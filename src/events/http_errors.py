from fastapi import HTTPException

from src.events.dtos import (
    EventNotFoundError,
    EventValidationError,
    PersistenceError,
    UnauthorizedError,
)

NOT_FOUND_DETAIL = "Event not found"
RETRY_DETAIL = "Something went wrong while saving. Please try again."
NOT_OWNER_DETAIL = "Only the event owner can do this"

EventErrors = (EventNotFoundError, EventValidationError, PersistenceError, UnauthorizedError)


def to_http_exception(error: Exception) -> HTTPException:
    """Map a repository error onto the HTTP status the API reports for it."""
    if isinstance(error, EventNotFoundError):
        return HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    if isinstance(error, EventValidationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, UnauthorizedError):
        return HTTPException(status_code=403, detail=NOT_OWNER_DETAIL)
    if isinstance(error, PersistenceError):
        return HTTPException(status_code=503, detail=RETRY_DETAIL)
    raise error
