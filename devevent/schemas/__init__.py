from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from devevent.core.normalization import split_list


class CamelModel(BaseModel):
    """Wire models use camelCase names; snake_case is accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class EventIn(CamelModel):
    """
    Event fields as submitted by a client, before normalization.

    Every field is optional here: required-ness is decided by
    ``prepare_event`` so create and partial update share one schema.
    ``agenda`` and ``tags`` may arrive as lists, JSON array strings or
    delimited strings (newline for agenda, comma for tags).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    organizer: Optional[str] = None
    agenda: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    @field_validator("agenda", mode="before")
    @classmethod
    def _split_agenda(cls, value):
        return None if value is None else split_list(value, "\n")

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        return None if value is None else split_list(value, ",")


class EventOut(CamelModel):
    id: UUID
    slug: str
    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: List[str]
    tags: List[str]
    created_at: datetime
    updated_at: datetime


class BookingCreate(CamelModel):
    event_id: str
    email: str


class BookingOut(CamelModel):
    id: UUID
    event_id: UUID
    email: str
    created_at: datetime
    updated_at: datetime


class PaginationMetadata(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class NamedCount(CamelModel):
    name: Optional[str]
    count: int


class EventList(CamelModel):
    events: List[EventOut]


class EventSearchResults(CamelModel):
    events: List[EventOut]
    pagination: PaginationMetadata


class EventDetail(CamelModel):
    event: EventOut


class EventWriteResult(CamelModel):
    message: str
    event: EventOut


class MessageOut(CamelModel):
    message: str


class BookingList(CamelModel):
    bookings: List[BookingOut]


class BookingWriteResult(CamelModel):
    message: str
    booking: BookingOut


class Categories(CamelModel):
    tags: List[NamedCount]
    modes: List[NamedCount]
    locations: List[NamedCount]


class OverviewCounts(CamelModel):
    total_events: int
    total_bookings: int
    upcoming_events: int
    past_events: int


class Stats(CamelModel):
    overview: OverviewCounts
    events_by_mode: List[NamedCount]
    top_tags: List[NamedCount]
    recent_bookings: List[BookingOut]
