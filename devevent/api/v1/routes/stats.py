from fastapi import APIRouter, Depends
from devevent.api.v1.routes.events import get_event_service
from devevent.schemas import Stats
from devevent.services.event_service import EventService

router = APIRouter(prefix="/stats", tags=["insights"])


@router.get("", response_model=Stats)
async def get_stats(event_service: EventService = Depends(get_event_service)):
    """Event/booking totals, upcoming vs past, per-mode counts, top tags and latest bookings."""
    return await event_service.get_stats()
