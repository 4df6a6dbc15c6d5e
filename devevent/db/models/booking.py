from sqlalchemy import Column, Text, DateTime, Uuid, Index
import uuid
from devevent.db.session import Base
from devevent.db.models.event import utcnow


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Weak reference: existence is checked when the booking is created, but
    # there is no foreign key and deleting an event leaves its bookings.
    event_id = Column(Uuid, nullable=False)
    email = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_booking_event', 'event_id'),
        Index('idx_booking_created_at', 'created_at'),
    )
