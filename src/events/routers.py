from fastapi import APIRouter

from .features.create_event.router import router as create_event_router
from .features.delete_event.router import router as delete_event_router
from .features.event_stats.router import router as event_stats_router
from .features.get_event.router import router as get_event_router
from .features.list_events.router import router as list_events_router
from .features.record_view.router import router as record_view_router
from .features.submit_response.router import router as submit_response_router
from .features.suggest_tags.router import router as suggest_tags_router
from .features.update_event.router import router as update_event_router

router = APIRouter()

router.include_router(suggest_tags_router)
router.include_router(create_event_router)
router.include_router(list_events_router)
router.include_router(get_event_router)
router.include_router(update_event_router)
router.include_router(delete_event_router)
router.include_router(record_view_router)
router.include_router(submit_response_router)
router.include_router(event_stats_router)
