import abc
import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Sequence

from kmtracker.core.errors import StorageError
from kmtracker.core.trip import Period, Report, Trip
from kmtracker.modules.storage.codec import PathCodec

logger = logging.getLogger(__name__)


class TripRepository(abc.ABC):
    """Abstract store of finalized trips, supplied by the surrounding application."""

    @abc.abstractmethod
    def save(self, trip: Trip) -> None:
        """Persists a new trip. Raises StorageError on failure."""

    @abc.abstractmethod
    def query(self, period: Period) -> Sequence[Trip]:
        """Returns every trip whose date falls inside `period` (start inclusive, end exclusive)."""

    @abc.abstractmethod
    def delete(self, trip: Trip) -> None:
        pass

    @abc.abstractmethod
    def mark_seen(self, trip: Trip) -> Trip:
        """Clears `is_new` on the stored trip and returns the updated record."""

    @abc.abstractmethod
    def all(self) -> Sequence[Trip]:
        """Every stored trip, newest first."""


class ReportRepository(abc.ABC):
    """Abstract store of report snapshots."""

    @abc.abstractmethod
    def save_report(self, report: Report) -> None:
        pass

    @abc.abstractmethod
    def reports(self) -> Sequence[Report]:
        """Stored reports ordered by start date, oldest first."""

    @abc.abstractmethod
    def delete_report(self, report: Report) -> None:
        pass


@dataclass(frozen=True)
class _TripRow:
    # Trip without its path; the path is kept as persisted bytes.
    trip: Trip
    path_data: bytes


class InMemoryTripRepository(TripRepository, ReportRepository):
    """
    Thread-safe in-memory store for trips and report snapshots.
    Paths go through PathCodec exactly as a persistent store would keep them, and
    unreadable path bytes come back as an empty path.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._trips: Dict[str, _TripRow] = {}
        self._reports: Dict[str, Report] = {}

    # --- trips ---

    def save(self, trip: Trip) -> None:
        with self._lock:
            if trip.id in self._trips:
                raise StorageError(f"Trip {trip.id} already stored", trip=trip)
            row = _TripRow(trip=dataclasses.replace(trip, path=()), path_data=PathCodec.encode(trip.path))
            self._trips[trip.id] = row
        logger.debug("Stored trip %s (%d path bytes)", trip.id, len(row.path_data))

    def query(self, period: Period) -> List[Trip]:
        with self._lock:
            rows = [row for row in self._trips.values() if period.contains(row.trip.date)]
        return [self._load(row) for row in rows]

    def delete(self, trip: Trip) -> None:
        with self._lock:
            if self._trips.pop(trip.id, None) is None:
                raise StorageError(f"Trip {trip.id} not found")
        logger.debug("Deleted trip %s", trip.id)

    def mark_seen(self, trip: Trip) -> Trip:
        with self._lock:
            row = self._trips.get(trip.id)
            if row is None:
                raise StorageError(f"Trip {trip.id} not found")
            row = dataclasses.replace(row, trip=dataclasses.replace(row.trip, is_new=False))
            self._trips[trip.id] = row
        return self._load(row)

    def all(self) -> List[Trip]:
        with self._lock:
            rows = list(self._trips.values())
        rows.sort(key=lambda r: r.trip.date, reverse=True)
        return [self._load(row) for row in rows]

    def __len__(self) -> int:
        with self._lock:
            return len(self._trips)

    @staticmethod
    def _load(row: _TripRow) -> Trip:
        path = PathCodec.decode_or_empty(row.path_data)
        return dataclasses.replace(row.trip, path=tuple(path))

    # --- reports ---

    def save_report(self, report: Report) -> None:
        with self._lock:
            if report.id in self._reports:
                raise StorageError(f"Report {report.id} already stored")
            self._reports[report.id] = report
        logger.debug("Stored report %s", report.id)

    def reports(self) -> List[Report]:
        with self._lock:
            return sorted(self._reports.values(), key=lambda r: r.start_date)

    def delete_report(self, report: Report) -> None:
        with self._lock:
            if self._reports.pop(report.id, None) is None:
                raise StorageError(f"Report {report.id} not found")
        logger.debug("Deleted report %s", report.id)
