from fastapi import APIRouter, Depends, Query, Request, status
from devevent.api.limiter import limiter
from devevent.core.config import settings
from devevent.schemas import BookingCreate, BookingList, BookingWriteResult
from devevent.db.session import get_session
from devevent.services.booking_service import BookingService
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_service(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)


@router.get("", response_model=BookingList)
async def list_bookings(
    event_id: Optional[str] = Query(None, alias="eventId", description="Only bookings of this event"),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Latest 200 bookings, newest first."""
    return {"bookings": await booking_service.list_bookings(event_id)}


@router.post("", response_model=BookingWriteResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.BOOKING_RATE_LIMIT)
async def create_booking_endpoint(
    request: Request,
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service)
):
    """
    Book a seat for an event by email.

    Rate limit: BOOKING_RATE_LIMIT per client address
    """
    booking = await booking_service.create_booking(payload)
    return {"message": "Booking created", "booking": booking}
