from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from .fix import Fix


def format_duration(total_seconds: int) -> str:
    """Formats whole seconds as HH:MM:SS (hours are not wrapped at 24)."""
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_date(value: datetime) -> str:
    # e.g. "Feb 1, 2024"
    return f"{value:%b} {value.day}, {value.year}"


@dataclass(frozen=True)
class Trip:
    """
    One completed recording session.
    Only `is_new` ever changes after creation, and only through a repository
    (which stores a replaced copy).
    """
    id: str
    date: datetime
    driving_time_seconds: int
    total_distance_km: float
    path: tuple[Fix, ...] = field(default_factory=tuple)
    is_new: bool = True

    def __post_init__(self):
        if self.driving_time_seconds < 0:
            raise ValueError("driving_time_seconds must be non-negative")
        if self.total_distance_km < 0:
            raise ValueError("total_distance_km must be non-negative")


class PeriodKind(Enum):
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class Period:
    """
    A resolved [start, end) date range backing a report.
    A clamped custom period (start == end) only contains that exact instant.
    """
    kind: PeriodKind
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        if self.start == self.end:
            return instant == self.start
        return self.start <= instant < self.end

    @property
    def last_instant(self) -> datetime:
        """Last whole second inside the range, used for display."""
        if self.end <= self.start:
            return self.start
        return self.end - timedelta(seconds=1)


@dataclass(frozen=True)
class Report:
    """
    Aggregated totals over a date range of trips.
    Either a stored snapshot or a live recomputation; both come from
    ReportAggregator.summarize.
    """
    id: str
    kind: PeriodKind
    start_date: datetime
    end_date: datetime
    total_driving_time_seconds: int
    total_distance_km: float
    generated_at: datetime

    @property
    def period(self) -> Period:
        return Period(kind=self.kind, start=self.start_date, end=self.end_date)

    @property
    def title(self) -> str:
        return f"{format_date(self.start_date)} - {format_date(self.period.last_instant)}"

    @property
    def summary(self) -> str:
        return (
            f"Driving Time: {format_duration(self.total_driving_time_seconds)}\n"
            f"Total KMs: {self.total_distance_km:.2f}"
        )
