from fastapi import APIRouter
from pydantic import BaseModel

from src.config.settings import APP_VERSION, settings

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    service: str = "eventlink"
    version: str = APP_VERSION
    environment: str


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Liveness check. Does not touch the event store.
    """
    return HealthCheckResponse(status="healthy", environment=settings.ENVIRONMENT)
