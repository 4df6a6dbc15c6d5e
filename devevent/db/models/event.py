from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Uuid, Index
import uuid
from sqlalchemy.orm import relationship
from devevent.db.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    slug = Column(Text, nullable=False, unique=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    venue = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    date = Column(String(10), nullable=False)   # YYYY-MM-DD
    time = Column(String(5), nullable=False)    # HH:mm, 24-hour
    mode = Column(Text, nullable=False)
    audience = Column(Text, nullable=False)
    organizer = Column(Text, nullable=False)
    agenda = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    tag_entries = relationship(
        "EventTag",
        order_by="EventTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # Indexes for frequently queried fields
    __table_args__ = (
        Index('idx_event_date', 'date'),
        Index('idx_event_mode', 'mode'),
        Index('idx_event_location', 'location'),
        Index('idx_event_created_at', 'created_at'),
    )

    @property
    def tags(self):
        return [entry.value for entry in self.tag_entries]

    @tags.setter
    def tags(self, values):
        self.tag_entries = [EventTag(value=value, position=i) for i, value in enumerate(values)]


class EventTag(Base):
    """One tag of an event; ``position`` keeps the submitted order."""
    __tablename__ = "event_tags"
    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    value = Column(Text, nullable=False)

    __table_args__ = (
        Index('idx_event_tag_event', 'event_id'),
        Index('idx_event_tag_value', 'value'),
    )
