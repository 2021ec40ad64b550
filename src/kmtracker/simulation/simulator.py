import abc
import logging
import time
from pathlib import Path
from typing import Generator

from kmtracker.core.fix import Fix
from kmtracker.core.stream import FixBroadcaster, FixStream

logger = logging.getLogger(__name__)


class Simulator(abc.ABC):
    """Abstract base class for streaming simulators."""

    @abc.abstractmethod
    def stream(self) -> Generator[Fix, None, None]:
        """Yields Fix objects one by one."""
        pass

    def replay(self, source: FixBroadcaster) -> int:
        """
        Pushes every simulated fix into a live source, as a location sensor would.
        Returns the number of fixes emitted.
        """
        count = 0
        for fix in self.stream():
            source.emit(fix)
            count += 1
        logger.info("Replayed %d fixes", count)
        return count


class TrajectorySimulator(Simulator):
    """
    Simulates a location sensor by reading a trajectory CSV file and emitting
    fixes at a fixed interval.
    """

    def __init__(self, file_path: str | Path, interval: float = 1.0):
        """
        Args:
            file_path: Path to the CSV file with 'latitude' and 'longitude' columns.
            interval: Time in seconds to wait after emitting each fix.
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {self.file_path}")
        if interval < 0:
            raise ValueError("Interval must not be negative.")

        self._interval = interval

    def stream(self) -> Generator[Fix, None, None]:
        """
        Reads the CSV and yields fixes, sleeping `interval` seconds after each one.
        """
        for fix in FixStream(self.file_path).stream():
            yield fix

            # Wait for the next interval
            time.sleep(self._interval)
