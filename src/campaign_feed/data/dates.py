import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Callable, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Components missing from a free-form date ("March 2024") are taken from here,
# so the same text always yields the same instant.
_PARSE_DEFAULT = datetime(2000, 1, 1)
_DMY_SEPARATORS = re.compile(r"[-/.]")


@dataclass(frozen=True)
class ParsedDate:
    timestamp: datetime
    parsed: bool  # False when the value fell back to "now"


def normalize_date(value: Optional[str], now: Optional[Callable[[], datetime]] = None) -> ParsedDate:
    """
    Best-effort conversion of a sheet date cell to a UTC instant.

    Generic parsing first, then day/month/year split on - / or . (two-digit
    years are 20xx). Anything else, including an empty cell, resolves to the
    current time with parsed=False; such rows are misdated rather than rejected.
    """
    text = (value or "").strip()
    if text:
        parsed = _parse_generic(text) or _parse_day_first(text)
        if parsed is not None:
            return ParsedDate(timestamp=_as_utc(parsed), parsed=True)
        logger.debug("unparseable date, using current time", extra={"value": text})

    clock = now or (lambda: datetime.now(UTC))
    return ParsedDate(timestamp=_as_utc(clock()), parsed=False)


def _parse_generic(text: str) -> Optional[datetime]:
    try:
        return date_parser.parse(text, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError):
        return None


def _parse_day_first(text: str) -> Optional[datetime]:
    parts = [p.strip() for p in _DMY_SEPARATORS.split(text)]
    if len(parts) != 3 or not all(p.isdecimal() for p in parts):
        return None
    day, month, year = (int(p) for p in parts)
    if year < 100:
        year += 2000
    try:
        return datetime(year, month, day)
    except (ValueError, OverflowError):
        return None


def _as_utc(ts: datetime) -> datetime:
    return ts.astimezone(UTC) if ts.tzinfo else ts.replace(tzinfo=UTC)
