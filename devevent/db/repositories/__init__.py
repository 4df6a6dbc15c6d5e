"""
Repository layer for database operations.

Async functions for Event and Booking persistence. Records passed in are
expected to be already normalized by ``devevent.domain.validators``.
Aggregate views are cached in Redis via ``@cached``.
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from devevent.cache.cache_decorators import cached, CATEGORIES_KEY, STATS_KEY
from devevent.core.config import settings
from devevent.core.errors import DuplicateSlugError
from devevent.db.models import Event, Booking
from devevent.db.query_builder import (
    SearchPlan,
    search_query,
    search_count_query,
    tag_counts_query,
    mode_counts_query,
    location_counts_query,
    upcoming_count_query,
)
from devevent.schemas import BookingOut

EVENT_FIELDS = (
    "slug", "title", "description", "overview", "image", "venue", "location",
    "date", "time", "mode", "audience", "organizer", "agenda", "tags",
)

RECENT_EVENTS_LIMIT = 100
BOOKINGS_LIMIT = 200
TOP_TAGS_LIMIT = 10
RECENT_BOOKINGS_LIMIT = 5


def event_to_record(ev: Event) -> dict:
    """Writable fields of a stored event, as plain values."""
    return {field: getattr(ev, field) for field in EVENT_FIELDS}


async def _commit_event(db: AsyncSession, ev: Event) -> Event:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if "slug" in str(e.orig).lower():
            raise DuplicateSlugError(ev.slug) from e
        raise
    return ev


async def create_event(db: AsyncSession, record: dict) -> Event:
    """
    Insert a normalized event record.

    Raises:
        DuplicateSlugError: If another event already uses the slug
    """
    ev = Event(**{field: record[field] for field in EVENT_FIELDS})
    db.add(ev)
    return await _commit_event(db, ev)


async def update_event(db: AsyncSession, ev: Event, record: dict) -> Event:
    """Overwrite the writable fields of ``ev`` with a normalized record."""
    for field in EVENT_FIELDS:
        setattr(ev, field, record[field])
    # onupdate only fires when an events column changes; tags live in event_tags
    ev.updated_at = datetime.now(timezone.utc)
    return await _commit_event(db, ev)


async def delete_event(db: AsyncSession, ev: Event) -> None:
    # Bookings are intentionally left in place (weak reference, no cascade).
    await db.delete(ev)
    await db.commit()


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    q = select(Event).where(Event.slug == slug)
    res = await db.execute(q)
    return res.scalars().first()


async def event_exists(db: AsyncSession, event_id: uuid.UUID) -> bool:
    """Existence check only; no event columns are loaded."""
    q = select(Event.id).where(Event.id == event_id).limit(1)
    res = await db.execute(q)
    return res.first() is not None


async def list_recent_events(db: AsyncSession, limit: int = RECENT_EVENTS_LIMIT) -> List[Event]:
    q = select(Event).order_by(Event.created_at.desc()).limit(limit)
    res = await db.execute(q)
    return list(res.scalars().all())


async def search_events(db: AsyncSession, plan: SearchPlan) -> Tuple[int, List[Event]]:
    """
    Run a search plan.

    Returns:
        Tuple of (total matching events, events on the requested page)
    """
    total = (await db.execute(search_count_query(plan))).scalar() or 0
    res = await db.execute(search_query(plan))
    return total, list(res.scalars().all())


def _named_counts(rows) -> List[dict]:
    return [{"name": row.name, "count": row.count} for row in rows]


@cached(CATEGORIES_KEY, expire=settings.CACHE_TTL_SECONDS)
async def get_category_counts(db: AsyncSession) -> dict:
    """Distinct tags, modes and (top 50) locations with occurrence counts."""
    tags = (await db.execute(tag_counts_query())).all()
    modes = (await db.execute(mode_counts_query())).all()
    locations = (await db.execute(location_counts_query())).all()
    return {
        "tags": _named_counts(tags),
        "modes": _named_counts(modes),
        "locations": _named_counts(locations),
    }


@cached(STATS_KEY, expire=settings.CACHE_TTL_SECONDS)
async def get_overview_stats(db: AsyncSession, today: str) -> dict:
    """
    Overview counters plus per-mode counts, top tags and latest bookings.

    Args:
        db: Database session
        today: Current UTC date as YYYY-MM-DD; events on or after it are upcoming
    """
    total_events = (await db.execute(select(func.count(Event.id)))).scalar() or 0
    total_bookings = (await db.execute(select(func.count(Booking.id)))).scalar() or 0
    upcoming = (await db.execute(upcoming_count_query(today))).scalar() or 0
    modes = (await db.execute(mode_counts_query())).all()
    top_tags = (await db.execute(tag_counts_query(limit=TOP_TAGS_LIMIT))).all()
    recent = await list_bookings(db, limit=RECENT_BOOKINGS_LIMIT)
    return {
        "overview": {
            "total_events": total_events,
            "total_bookings": total_bookings,
            "upcoming_events": upcoming,
            "past_events": total_events - upcoming,
        },
        "events_by_mode": _named_counts(modes),
        "top_tags": _named_counts(top_tags),
        "recent_bookings": [BookingOut.model_validate(b).model_dump(mode="json") for b in recent],
    }


async def create_booking(db: AsyncSession, record: dict) -> Booking:
    booking = Booking(event_id=record["event_id"], email=record["email"])
    db.add(booking)
    await db.commit()
    return booking


async def list_bookings(
    db: AsyncSession,
    event_id: Optional[uuid.UUID] = None,
    limit: int = BOOKINGS_LIMIT,
) -> List[Booking]:
    """Bookings, newest first, optionally for a single event."""
    q = select(Booking).order_by(Booking.created_at.desc()).limit(limit)
    if event_id:
        q = q.where(Booking.event_id == event_id)
    res = await db.execute(q)
    return list(res.scalars().all())
