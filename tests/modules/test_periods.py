import pytest
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from kmtracker.core.trip import Trip, PeriodKind
from kmtracker.modules.reporting.periods import (
    PeriodResolver, ReportSelection, whole_days, available_years, available_months,
)


@pytest.fixture
def resolver():
    return PeriodResolver()


def test_monthly_leap_february(resolver):
    p = resolver.monthly(2024, 2)
    assert p.kind is PeriodKind.MONTHLY
    assert p.start == datetime(2024, 2, 1, 0, 0, 0)
    assert p.end == datetime(2024, 3, 1, 0, 0, 0)
    assert p.contains(datetime(2024, 2, 29, 23, 59, 59))
    assert not p.contains(datetime(2024, 3, 1))

def test_monthly_december_rolls_over(resolver):
    p = resolver.monthly(2023, 12)
    assert p.start == datetime(2023, 12, 1)
    assert p.end == datetime(2024, 1, 1)

@pytest.mark.parametrize("month", [0, 13])
def test_monthly_rejects_bad_month(resolver, month):
    with pytest.raises(ValueError):
        resolver.monthly(2024, month)

def test_yearly(resolver):
    p = resolver.yearly(2023)
    assert p.kind is PeriodKind.YEARLY
    assert p.start == datetime(2023, 1, 1, 0, 0, 0)
    assert p.end == datetime(2024, 1, 1, 0, 0, 0)

def test_custom_used_as_is(resolver):
    start = datetime(2024, 5, 3, 14, 0)
    end = datetime(2024, 5, 9, 9, 30)
    p = resolver.custom(start, end)
    assert (p.kind, p.start, p.end) == (PeriodKind.CUSTOM, start, end)

def test_custom_end_before_start_is_clamped(resolver):
    start = datetime(2024, 5, 3, 14, 0)
    p = resolver.custom(start, start - timedelta(days=2))
    assert p.start == start
    assert p.end == start
    assert p.contains(start)
    assert not p.contains(start + timedelta(seconds=1))

def test_timezone_aware_boundaries():
    tz = ZoneInfo("Europe/Berlin")
    p = PeriodResolver(tz=tz).monthly(2024, 3)
    assert p.start == datetime(2024, 3, 1, tzinfo=tz)
    assert p.end.tzinfo is tz

def test_resolve_selection(resolver):
    assert resolver.resolve(ReportSelection(PeriodKind.MONTHLY, year=2024, month=2)) == resolver.monthly(2024, 2)
    assert resolver.resolve(ReportSelection(PeriodKind.YEARLY, year=2023)) == resolver.yearly(2023)

    start, end = datetime(2024, 1, 10), datetime(2024, 1, 5)
    assert resolver.resolve(ReportSelection(PeriodKind.CUSTOM, start=start, end=end)) == resolver.custom(start, end)

@pytest.mark.parametrize("selection", [
    ReportSelection(PeriodKind.MONTHLY, year=2024),
    ReportSelection(PeriodKind.YEARLY),
    ReportSelection(PeriodKind.CUSTOM, start=datetime(2024, 1, 1)),
])
def test_resolve_incomplete_selection(resolver, selection):
    with pytest.raises(ValueError):
        resolver.resolve(selection)

def test_whole_days():
    first, after_last = whole_days(datetime(2024, 5, 3, 14, 0), datetime(2024, 5, 9, 9, 30))
    assert first == datetime(2024, 5, 3)
    assert after_last == datetime(2024, 5, 10)

def test_whole_days_same_day_and_reversed():
    assert whole_days(datetime(2024, 5, 3, 8), datetime(2024, 5, 3, 8)) == (datetime(2024, 5, 3), datetime(2024, 5, 4))
    assert whole_days(datetime(2024, 5, 3, 8), datetime(2024, 5, 1)) == (datetime(2024, 5, 3), datetime(2024, 5, 4))

def test_available_years_and_months():
    trips = [
        Trip(id=str(i), date=d, driving_time_seconds=0, total_distance_km=0.0)
        for i, d in enumerate([
            datetime(2023, 11, 2), datetime(2024, 3, 1), datetime(2024, 1, 15), datetime(2024, 3, 20),
        ])
    ]
    assert available_years(trips) == [2023, 2024]
    assert available_months(trips, 2024) == [1, 3]
    assert available_months(trips, 2022) == []
