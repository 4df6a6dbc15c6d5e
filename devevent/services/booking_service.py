import uuid
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from devevent.cache.cache_decorators import invalidate_views
from devevent.core.logging import logger
from devevent.db.models import Booking
from devevent.db.repositories import create_booking as db_create_booking, list_bookings as db_list_bookings
from devevent.domain.validators import prepare_booking
from devevent.schemas import BookingCreate


class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_booking(self, payload: BookingCreate) -> Booking:
        record = await prepare_booking(self.session, payload.model_dump())
        booking = await db_create_booking(self.session, record)
        await invalidate_views()
        logger.info(f"Booking created for event {booking.event_id}")
        return booking

    async def list_bookings(self, event_id: Optional[str] = None) -> List[Booking]:
        if not event_id:
            return await db_list_bookings(self.session)
        try:
            reference = uuid.UUID(event_id.strip())
        except ValueError:
            # Not an id any event can have
            return []
        return await db_list_bookings(self.session, event_id=reference)
