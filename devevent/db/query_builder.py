"""
Query construction for event search and the aggregate views.

``build_search_filter`` turns the sparse, string-typed search parameters
into a SQLAlchemy predicate, a sort order and a pagination window. The
``*_counts_query`` helpers build the grouped selects behind the category
and overview-stats endpoints. Nothing here touches a session.
"""
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple
from sqlalchemy import and_, or_, select, func, true
from sqlalchemy.sql.elements import ColumnElement
from devevent.core.errors import InvalidDateError
from devevent.db.models import Event, EventTag

DEFAULT_LIMIT = 50
MAX_LIMIT = 100
LOCATION_LIMIT = 50
# OFFSET is bound as a signed 64-bit integer by both drivers
MAX_OFFSET = 2 ** 63 - 1

_CANONICAL_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_LEADING_INT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class SearchParams:
    """Raw search parameters as they arrive on the query string."""
    q: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[str] = None
    tag: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    limit: Optional[str] = None
    page: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def summary(self, total: int) -> dict:
        total_pages = math.ceil(total / self.limit) if total else 0
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_pages": total_pages,
            "has_next": self.page < total_pages,
            "has_prev": self.page > 1,
        }


@dataclass(frozen=True)
class SearchPlan:
    predicate: ColumnElement
    order_by: Tuple[ColumnElement, ...]
    pagination: Pagination


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _contains(value: str) -> str:
    """LIKE pattern matching ``value`` literally anywhere in the column."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _parse_int(value: Optional[str], default: int) -> int:
    """Leading integer of ``value`` ("20abc" -> 20), else ``default``."""
    match = _LEADING_INT.match(_clean(value))
    if not match:
        return default
    try:
        return int(match.group())
    except ValueError:
        # more digits than int() accepts from a string
        return default


def _date_bound(value: str) -> str:
    # Bounds are compared as strings, so only canonical dates are meaningful.
    if not _CANONICAL_DATE.fullmatch(value):
        raise InvalidDateError(value)
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidDateError(value)
    return value


def build_pagination(limit: Optional[str], page: Optional[str]) -> Pagination:
    effective_limit = min(max(_parse_int(limit, DEFAULT_LIMIT), 1), MAX_LIMIT)
    # Pages past the last addressable offset are clamped; they are empty either way
    effective_page = min(max(_parse_int(page, 1), 1), MAX_OFFSET // effective_limit + 1)
    return Pagination(page=effective_page, limit=effective_limit)


def build_search_filter(params: SearchParams) -> SearchPlan:
    """
    Translate search parameters into a predicate, sort and pagination plan.

    Blank parameters add no constraint. Text matches are case-insensitive
    substring matches; ``mode`` is an exact match against the lower-cased
    parameter.

    Raises:
        InvalidDateError: If ``date_from``/``date_to`` is not a canonical YYYY-MM-DD date
    """
    clauses = []

    q = _clean(params.q)
    if q:
        pattern = _contains(q)
        clauses.append(or_(
            Event.title.ilike(pattern, escape="\\"),
            Event.description.ilike(pattern, escape="\\"),
            Event.overview.ilike(pattern, escape="\\"),
            Event.organizer.ilike(pattern, escape="\\"),
        ))

    location = _clean(params.location)
    if location:
        clauses.append(Event.location.ilike(_contains(location), escape="\\"))

    mode = _clean(params.mode)
    if mode:
        clauses.append(Event.mode == mode.lower())

    tag = _clean(params.tag)
    if tag:
        clauses.append(Event.tag_entries.any(EventTag.value.ilike(_contains(tag), escape="\\")))

    date_from = _clean(params.date_from)
    if date_from:
        clauses.append(Event.date >= _date_bound(date_from))

    date_to = _clean(params.date_to)
    if date_to:
        clauses.append(Event.date <= _date_bound(date_to))

    predicate = and_(*clauses) if clauses else true()
    return SearchPlan(
        predicate=predicate,
        # same-day events: newest published first
        order_by=(Event.date.asc(), Event.created_at.desc()),
        pagination=build_pagination(params.limit, params.page),
    )


def search_query(plan: SearchPlan):
    return (
        select(Event)
        .where(plan.predicate)
        .order_by(*plan.order_by)
        .offset(plan.pagination.skip)
        .limit(plan.pagination.limit)
    )


def search_count_query(plan: SearchPlan):
    return select(func.count(Event.id)).where(plan.predicate)


def tag_counts_query(limit: Optional[int] = None):
    count = func.count(EventTag.id).label("count")
    q = select(EventTag.value.label("name"), count).group_by(EventTag.value).order_by(count.desc(), EventTag.value.asc())
    if limit:
        q = q.limit(limit)
    return q


def mode_counts_query():
    count = func.count(Event.id).label("count")
    return select(Event.mode.label("name"), count).group_by(Event.mode).order_by(count.desc(), Event.mode.asc())


def location_counts_query(limit: int = LOCATION_LIMIT):
    count = func.count(Event.id).label("count")
    return (
        select(Event.location.label("name"), count)
        .group_by(Event.location)
        .order_by(count.desc(), Event.location.asc())
        .limit(limit)
    )


def upcoming_count_query(today: str):
    return select(func.count(Event.id)).where(Event.date >= today)
