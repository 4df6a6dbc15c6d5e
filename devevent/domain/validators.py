"""
Normalization and validation of event and booking records.

These run explicitly in the write path, before any persistence call.
"""
import re
import uuid
from typing import Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from devevent.core.errors import (
    EmptyAgendaError,
    EmptyTagsError,
    EventNotFoundError,
    InvalidEmailError,
    RequiredFieldEmptyError,
    SlugEmptyError,
)
from devevent.core.normalization import canonical_date, canonical_time, clean_entries, slugify
from devevent.db import repositories

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "mode",
    "audience",
    "organizer",
)


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def prepare_event(record: dict, is_new: bool, changed_fields: Iterable[str] = ()) -> dict:
    """
    Normalize and validate an event record before it is written.

    Args:
        record: Full event record (for updates: stored fields merged with the changes)
        is_new: True when the record is being created
        changed_fields: Field names re-submitted by the client on update

    Returns:
        A new dict with slug, canonical date/time, cleaned agenda/tags and
        trimmed scalar fields

    Raises:
        SlugEmptyError, InvalidDateError, InvalidTimeError, EmptyAgendaError,
        EmptyTagsError, RequiredFieldEmptyError
    """
    prepared = dict(record)
    changed = set(changed_fields)

    if is_new or "title" in changed or not prepared.get("slug"):
        prepared["slug"] = slugify(_text(prepared.get("title")))
        if not prepared["slug"]:
            raise SlugEmptyError()

    prepared["date"] = canonical_date(prepared.get("date"))
    prepared["time"] = canonical_time(prepared.get("time"))

    prepared["agenda"] = clean_entries(prepared.get("agenda") or [])
    if not prepared["agenda"]:
        raise EmptyAgendaError()
    prepared["tags"] = clean_entries(prepared.get("tags") or [])
    if not prepared["tags"]:
        raise EmptyTagsError()

    for field in REQUIRED_FIELDS:
        value = _text(prepared.get(field))
        if not value:
            raise RequiredFieldEmptyError(field)
        prepared[field] = value

    return prepared


async def prepare_booking(db: AsyncSession, record: dict) -> dict:
    """
    Normalize the booking email and check that the referenced event exists.

    The existence check is a single read and is not transactional with the
    insert that follows; an event deleted in between leaves an orphaned
    booking.

    Raises:
        InvalidEmailError: If the email does not look like an address
        EventNotFoundError: If no event has the referenced id
    """
    email = _text(record.get("email")).lower()
    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidEmailError()

    reference = record.get("event_id")
    try:
        event_id = reference if isinstance(reference, uuid.UUID) else uuid.UUID(_text(reference))
    except ValueError:
        raise EventNotFoundError(reference)

    if not await repositories.event_exists(db, event_id):
        raise EventNotFoundError(reference)

    return {**record, "email": email, "event_id": event_id}
