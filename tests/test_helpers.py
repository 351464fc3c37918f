from datetime import date, datetime, timezone

import pytest

from herdcheck.config import ValidationRules
from herdcheck.schemas import Coordinates
from herdcheck.services.clock import FixedClock, parse_instant, resolve_now
from herdcheck.services.helpers import (
    DATE_ONLY,
    DATETIME,
    DISPLAY_DATETIME,
    TIME_ONLY,
    calculate_age,
    calculate_distance,
    calculate_pagination,
    format_date,
    next_vaccination_date,
)


class TestPagination:

    def test_middle_page(self):
        info = calculate_pagination(95, 3, 10)
        assert info.total_pages == 10
        assert info.page == 3
        assert info.has_next_page and info.has_prev_page

    def test_empty_collection(self):
        info = calculate_pagination(0, 4, 10)
        assert info.page == 1
        assert info.total_pages == 0
        assert not info.has_next_page and not info.has_prev_page

    def test_limit_is_clamped(self):
        assert calculate_pagination(1000, 1, 500).limit == 100
        assert calculate_pagination(1000, 1, 0).limit == 1

    def test_page_is_clamped(self):
        assert calculate_pagination(25, 50, 10).page == 3
        assert calculate_pagination(25, 0, 10).page == 1

    def test_defaults(self):
        info = calculate_pagination(42)
        assert (info.page, info.limit, info.total_pages) == (1, 10, 5)

    def test_custom_max_limit(self):
        rules = ValidationRules(max_limit=20)
        assert calculate_pagination(100, 1, 50, rules=rules).limit == 20

    def test_serializes_camel_case(self):
        dumped = calculate_pagination(20, 1, 10).model_dump(by_alias=True)
        assert dumped == {
            "page": 1,
            "limit": 10,
            "totalPages": 2,
            "totalItems": 20,
            "hasNextPage": True,
            "hasPrevPage": False,
        }


class TestFormatDate:

    STAMP = "2024-03-05T14:07:09Z"

    def test_default_is_display_date(self):
        assert format_date(self.STAMP) == "05/03/2024"

    @pytest.mark.parametrize("fmt,expected", [
        (DATE_ONLY, "2024-03-05"),
        (DATETIME, "2024-03-05 14:07:09"),
        (DISPLAY_DATETIME, "05/03/2024 14:07"),
        (TIME_ONLY, "14:07:09"),
    ])
    def test_formats(self, fmt, expected):
        assert format_date(self.STAMP, fmt) == expected

    def test_invalid(self):
        assert format_date("garbage") == "Invalid date"
        assert format_date(None) == "Invalid date"


class TestDistance:

    def test_same_point(self):
        point = Coordinates(latitude=-34.6, longitude=-58.4)
        assert calculate_distance(point, point).distance == 0

    def test_one_degree_on_the_equator(self):
        origin = Coordinates(latitude=0, longitude=0)
        destination = Coordinates(latitude=0, longitude=1)
        assert calculate_distance(origin, destination).distance == 111.19
        assert calculate_distance(origin, destination, "miles").distance == 69.1

    def test_unknown_unit(self):
        origin = Coordinates(latitude=0, longitude=0)
        with pytest.raises(ValueError):
            calculate_distance(origin, origin, "leagues")


class TestAge:

    def test_adult(self, now):
        age = calculate_age("2022-03-10", now=now)
        assert (age.years, age.months, age.days) == (3, 3, 5)
        assert age.total_days == 1193
        assert age.category == "adult"

    @pytest.mark.parametrize("born,category", [
        ("2025-01-01", "calf"),
        ("2024-01-01", "young"),
        ("2015-01-01", "senior"),
    ])
    def test_categories(self, now, born, category):
        assert calculate_age(born, now=now).category == category

    @pytest.mark.parametrize("born", ["2030-01-01", "not a date"])
    def test_future_or_invalid(self, now, born):
        age = calculate_age(born, now=now)
        assert (age.years, age.total_days, age.category) == (0, 0, "calf")


class TestNextVaccination:

    def test_foot_and_mouth_is_every_six_months(self):
        assert next_vaccination_date(date(2024, 1, 31), "foot_and_mouth") == date(2024, 7, 31)

    def test_other_vaccines_are_yearly(self):
        assert next_vaccination_date(date(2024, 2, 29), "rabies") == date(2025, 2, 28)
        assert next_vaccination_date(date(2024, 5, 1), "something_new") == date(2025, 5, 1)


class TestClock:

    def test_fixed_clock(self, now):
        assert FixedClock(now).now() == now

    def test_naive_values_are_utc(self):
        naive = datetime(2024, 1, 1, 8, 30)
        assert resolve_now(naive).tzinfo == timezone.utc
        assert parse_instant("2024-01-01T08:30:00") == datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)

    def test_offsets_are_converted(self):
        assert parse_instant("2024-01-01T08:30:00-03:00") == datetime(2024, 1, 1, 11, 30, tzinfo=timezone.utc)

    def test_dates_are_midnight(self):
        assert parse_instant(date(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_clock_wins_over_system_time(self, now):
        assert resolve_now(clock=FixedClock(now)) == now
