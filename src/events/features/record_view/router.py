from fastapi import APIRouter, Depends, Response

from src.events.dependencies import get_event_repository
from src.events.http_errors import EventErrors, to_http_exception
from src.events.repository import EventRepository
from src.events.urls import RECORD_VIEW_URL

router = APIRouter()


@router.post(RECORD_VIEW_URL, status_code=204)
async def record_view(
    event_id: str,
    repository: EventRepository = Depends(get_event_repository),
) -> Response:
    """
    Count one view of the invitation page.
    """
    try:
        await repository.record_view(event_id)
    except EventErrors as e:
        raise to_http_exception(e)
    return Response(status_code=204)
