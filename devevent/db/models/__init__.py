"""Database models package."""
from devevent.db.models.event import Event, EventTag
from devevent.db.models.booking import Booking

__all__ = ["Event", "EventTag", "Booking"]
