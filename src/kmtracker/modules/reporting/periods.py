from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, Tuple

from kmtracker.core.trip import Period, PeriodKind, Trip


@dataclass(frozen=True)
class ReportSelection:
    """
    What the user picked when asking for a report.
    Only the fields relevant to `kind` are read: year/month for MONTHLY,
    year for YEARLY, start/end for CUSTOM.
    """
    kind: PeriodKind
    year: Optional[int] = None
    month: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class PeriodResolver:
    """
    Maps a report request to a concrete [start, end) range.
    End bounds are the first instant of the next period, so trips are matched
    with start <= date < end.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        """
        Args:
            tz: Timezone for calendar boundaries. None produces naive datetimes.
        """
        self.tz = tz

    def _instant(self, year: int, month: int = 1, day: int = 1) -> datetime:
        return datetime(year, month, day, tzinfo=self.tz)

    def monthly(self, year: int, month: int) -> Period:
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1..12, got {month}")
        start = self._instant(year, month)
        if month == 12:
            end = self._instant(year + 1, 1)
        else:
            end = self._instant(year, month + 1)
        return Period(kind=PeriodKind.MONTHLY, start=start, end=end)

    def yearly(self, year: int) -> Period:
        return Period(kind=PeriodKind.YEARLY, start=self._instant(year), end=self._instant(year + 1))

    def custom(self, start: datetime, end: datetime) -> Period:
        # An end before the start collapses to a single-instant range.
        if end < start:
            end = start
        return Period(kind=PeriodKind.CUSTOM, start=start, end=end)

    def resolve(self, selection: ReportSelection) -> Period:
        if selection.kind is PeriodKind.MONTHLY:
            if selection.year is None or selection.month is None:
                raise ValueError("Monthly reports need a year and a month")
            return self.monthly(selection.year, selection.month)
        if selection.kind is PeriodKind.YEARLY:
            if selection.year is None:
                raise ValueError("Yearly reports need a year")
            return self.yearly(selection.year)
        if selection.start is None or selection.end is None:
            raise ValueError("Custom reports need a start and an end")
        return self.custom(selection.start, selection.end)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def whole_days(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """
    Widens a custom selection to cover the whole start and end days.
    Pass the result to PeriodResolver.custom when full-day inclusivity is wanted.
    """
    first = start_of_day(start)
    last = start_of_day(max(start, end))
    return first, last + timedelta(days=1)


def available_years(trips: Iterable[Trip]) -> List[int]:
    return sorted({t.date.year for t in trips})


def available_months(trips: Iterable[Trip], year: int) -> List[int]:
    return sorted({t.date.month for t in trips if t.date.year == year})
