import logging
import math
import uuid
from datetime import datetime, tzinfo
from typing import Callable, Iterable, List, Optional, Tuple

from kmtracker.core.trip import Period, Report, Trip
from kmtracker.modules.storage.repository import TripRepository

logger = logging.getLogger(__name__)


class ReportAggregator:
    """
    Rolls trips inside a period up into a Report.
    Stored snapshots and live recomputations both go through summarize(), so
    they only differ when the underlying trips changed.
    """

    def __init__(self, tz: Optional[tzinfo] = None, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(tz))

    @staticmethod
    def summarize(trips: Iterable[Trip]) -> Tuple[int, float]:
        """
        Returns (total driving seconds, total kilometers).
        Kilometers use fsum so the result does not depend on trip order.
        """
        seconds = 0
        distances = []
        for trip in trips:
            seconds += trip.driving_time_seconds
            distances.append(trip.total_distance_km)
        return seconds, math.fsum(distances)

    def aggregate(self, period: Period, repository: TripRepository) -> Report:
        trips = repository.query(period)
        seconds, km = self.summarize(trips)
        report = Report(
            id=uuid.uuid4().hex,
            kind=period.kind,
            start_date=period.start,
            end_date=period.end,
            total_driving_time_seconds=seconds,
            total_distance_km=km,
            generated_at=self._clock(),
        )
        logger.info(
            "Report %s over [%s, %s): %d trips, %ds, %.3f km",
            report.id, period.start, period.end, len(trips), seconds, km,
        )
        return report

    def refresh(self, report: Report, repository: TripRepository) -> Report:
        """Recomputes a stored snapshot from the live trips of the same range."""
        seconds, km = self.summarize(repository.query(report.period))
        return Report(
            id=report.id,
            kind=report.kind,
            start_date=report.start_date,
            end_date=report.end_date,
            total_driving_time_seconds=seconds,
            total_distance_km=km,
            generated_at=self._clock(),
        )

    @staticmethod
    def trips_for(source: Report | Period, repository: TripRepository) -> List[Trip]:
        """Trips contributing to a report or period, oldest first."""
        period = source.period if isinstance(source, Report) else source
        return sorted(repository.query(period), key=lambda t: t.date)
