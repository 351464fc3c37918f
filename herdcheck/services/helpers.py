from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta

from ..config import DEFAULT_RULES, ValidationRules
from ..schemas import AgeInfo, DistanceResult, PaginationInfo
from .clock import parse_instant, resolve_now

DATE_ONLY = "YYYY-MM-DD"
DATETIME = "YYYY-MM-DD HH:mm:ss"
TIME_ONLY = "HH:mm:ss"
DISPLAY_DATE = "DD/MM/YYYY"
DISPLAY_DATETIME = "DD/MM/YYYY HH:mm"

DATE_FORMATS = {
    DATE_ONLY: "%Y-%m-%d",
    DATETIME: "%Y-%m-%d %H:%M:%S",
    TIME_ONLY: "%H:%M:%S",
    DISPLAY_DATE: "%d/%m/%Y",
    DISPLAY_DATETIME: "%d/%m/%Y %H:%M",
}

EARTH_RADIUS = {"km": 6371.0, "miles": 3959.0}

# Months between doses; anything not listed is yearly.
VACCINATION_INTERVAL_MONTHS = {
    "foot_and_mouth": 6,
}
DEFAULT_VACCINATION_INTERVAL_MONTHS = 12


def calculate_pagination(
    total_items: Union[int, float],
    page: Union[int, float, None] = None,
    limit: Union[int, float, None] = None,
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> PaginationInfo:
    page = rules.default_page if page is None else page
    limit = rules.default_limit if limit is None else limit

    valid_page = max(1, math.floor(page))
    valid_limit = min(max(rules.min_limit, math.floor(limit)), rules.max_limit)
    valid_total = max(0, math.floor(total_items))

    total_pages = math.ceil(valid_total / valid_limit)
    current = min(valid_page, total_pages or 1)

    return PaginationInfo(
        page=current,
        limit=valid_limit,
        total_pages=total_pages,
        total_items=valid_total,
        has_next_page=current < total_pages,
        has_prev_page=current > 1,
    )


def format_date(value: Any, fmt: str = DISPLAY_DATE) -> str:
    try:
        when = parse_instant(value)
    except (TypeError, ValueError, OverflowError):
        return "Invalid date"
    pattern = DATE_FORMATS.get(fmt)
    if pattern is None:
        return when.date().isoformat()
    return when.strftime(pattern)


def calculate_distance(origin: Any, destination: Any, unit: str = "km") -> DistanceResult:
    """Great-circle distance (haversine) between two objects exposing
    ``latitude`` and ``longitude``, rounded to 2 decimals."""
    if unit not in EARTH_RADIUS:
        raise ValueError(f"unit must be one of {', '.join(EARTH_RADIUS)}")

    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    d_lat = math.radians(destination.latitude - origin.latitude)
    d_lng = math.radians(destination.longitude - origin.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return DistanceResult(distance=round(EARTH_RADIUS[unit] * c, 2), unit=unit)


def calculate_age(birth_date: Any, now: Optional[datetime] = None) -> AgeInfo:
    now = resolve_now(now)
    try:
        born = parse_instant(birth_date)
    except (TypeError, ValueError, OverflowError):
        born = None
    if born is None or born > now:
        return AgeInfo(years=0, months=0, days=0, total_days=0, category="calf")

    delta = relativedelta(now, born)
    total_days = (now - born).days

    if total_days < 365:
        category = "calf"
    elif total_days < 2 * 365:
        category = "young"
    elif total_days < 8 * 365:
        category = "adult"
    else:
        category = "senior"

    return AgeInfo(
        years=delta.years,
        months=delta.months,
        days=delta.days,
        total_days=total_days,
        category=category,
    )


def next_vaccination_date(last_vaccination: Union[date, datetime], vaccine_type: str) -> Union[date, datetime]:
    months = VACCINATION_INTERVAL_MONTHS.get(vaccine_type, DEFAULT_VACCINATION_INTERVAL_MONTHS)
    return last_vaccination + relativedelta(months=months)
