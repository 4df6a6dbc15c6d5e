from fastapi import APIRouter, Depends
from devevent.api.v1.routes.events import get_event_service
from devevent.schemas import Categories
from devevent.services.event_service import EventService

router = APIRouter(prefix="/categories", tags=["insights"])


@router.get("", response_model=Categories)
async def get_categories(event_service: EventService = Depends(get_event_service)):
    """
    Distinct tags, modes and locations with event counts.

    Tags and modes are sorted by count; locations are limited to the top 50.
    """
    return await event_service.get_categories()
