from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Protocol

from dateutil import parser as date_parser

# Fills components a partial string leaves out ("2024-03" -> 2024-03-01).
_PARSE_DEFAULT = datetime(1970, 1, 1)


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FixedClock:
    instant: datetime

    def now(self) -> datetime:
        return as_utc(self.instant)


SYSTEM_CLOCK = SystemClock()


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime] = None, clock: Optional[Clock] = None) -> datetime:
    if now is not None:
        return as_utc(now)
    return (clock or SYSTEM_CLOCK).now()


def parse_instant(value: Any) -> datetime:
    """Turn a datetime, date or date string into an aware UTC datetime.

    Raises TypeError for values that are not dates or strings and ValueError
    (or OverflowError) for strings that do not parse. Naive values are taken
    as UTC and a bare date is midnight UTC.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise TypeError(f"expected a date or string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise ValueError("empty date string")
    try:
        parsed = date_parser.isoparse(text)
    except ValueError:
        parsed = date_parser.parse(text, default=_PARSE_DEFAULT)
    return as_utc(parsed)
