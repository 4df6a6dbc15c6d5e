"""
Pure normalization helpers for event records.

Slugs, canonical dates (YYYY-MM-DD), canonical 24-hour times (HH:mm) and
list-field decoding for form payloads.
"""
import json
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, List

from devevent.core.errors import InvalidDateError, InvalidTimeError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

_TIME_24H = re.compile(r"(?P<h>[01]?[0-9]|2[0-3]):(?P<m>[0-5][0-9])")
_TIME_12H = re.compile(r"(?P<h>1[0-2]|0?[1-9]):(?P<m>[0-5][0-9])\s*(?P<p>[AaPp][Mm])")

# Written date forms accepted besides ISO 8601. Order matters only for
# ambiguous numeric forms: slashes are read month/day/year.
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B, %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%a, %d %b %Y",
)
_TRAILING_CLOCK = re.compile(r"\s+\d{1,2}:\d{2}(:\d{2})?$")


def slugify(title: str) -> str:
    """
    Convert a title into a URL-safe slug.

    Diacritics are stripped, the result is lower-cased and every run of
    characters outside ``[a-z0-9]`` becomes a single hyphen. A title with no
    ASCII letters or digits yields an empty string.

    Example:
        >>> slugify("Node.js Meetup #3")
        'node-js-meetup-3'
    """
    decomposed = unicodedata.normalize("NFKD", title or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _NON_ALNUM.sub("-", stripped.lower().strip())
    return slug.strip("-")


def _parse_iso(value: str):
    candidate = value
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def canonical_date(value: Any) -> str:
    """
    Parse a free-form date and return its calendar part as ``YYYY-MM-DD``.

    Offset-aware ISO date-times are converted to UTC before the time of day
    is dropped.

    Raises:
        InvalidDateError: If the value cannot be read as a calendar date
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(value)
    text = " ".join(value.split())

    parsed = _parse_iso(text)
    if parsed is None:
        # "March 3, 2025 10:00" -> "March 3, 2025"
        without_clock = _TRAILING_CLOCK.sub("", text)
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(without_clock, fmt).date()
                break
            except ValueError:
                continue
    if parsed is None:
        raise InvalidDateError(value)
    return parsed.isoformat()


def canonical_time(value: Any) -> str:
    """
    Normalize ``H:mm``/``HH:mm`` or ``h:mm AM/PM`` to 24-hour ``HH:mm``.

    Raises:
        InvalidTimeError: If the value matches neither form
    """
    if not isinstance(value, str):
        raise InvalidTimeError(value)
    text = value.strip()

    match = _TIME_24H.fullmatch(text)
    if match:
        return f"{int(match.group('h')):02d}:{match.group('m')}"

    match = _TIME_12H.fullmatch(text)
    if match:
        hour = int(match.group("h"))
        if match.group("p").upper() == "AM":
            if hour == 12:
                hour = 0
        elif hour != 12:
            hour += 12
        return f"{hour:02d}:{match.group('m')}"

    raise InvalidTimeError(value)


def clean_entries(values) -> List[str]:
    """Trim every entry and drop the blank ones."""
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


def split_list(value: Any, separator: str = ",") -> List[str]:
    """
    Decode a list field that may arrive as a list, a JSON array string or a
    delimited string.

    ``separator`` is "," for tags and "\\n" for agenda items.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return clean_entries(value)
    text = str(value).strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            return clean_entries(decoded)
    if separator == "\n":
        return clean_entries(text.splitlines())
    return clean_entries(text.split(separator))
