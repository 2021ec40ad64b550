import logging
import threading
import pandas as pd
from typing import Callable, Iterator, Dict, List
from pathlib import Path
from .fix import Fix

logger = logging.getLogger(__name__)

FixCallback = Callable[[Fix], None]


class FixBroadcaster:
    """
    Live GeoFix source. Consumers register a callback while they want fixes and
    unregister when they stop caring (e.g. the recorder on pause/stop).
    Producers (platform sensor glue, simulators, tests) push fixes with emit().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: List[FixCallback] = []

    def subscribe(self, callback: FixCallback) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: FixCallback) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, fix: Fix) -> int:
        """
        Delivers a fix to every current subscriber.
        Returns the number of subscribers reached.
        """
        with self._lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            logger.debug("No subscribers for fix %s", fix.tuple)
        for callback in subscribers:
            callback(fix)
        return len(subscribers)


class FixStream:
    """
    Reads recorded fixes from a CSV file chunk by chunk.
    Column names can be remapped for exports that do not use latitude/longitude.
    """
    def __init__(
        self,
        filepath: str | Path,
        sep: str = ',',
        col_mapping: Dict[str, str] = None,
    ):
        self.filepath = Path(filepath)
        self.sep = sep

        self.mapping = col_mapping or {
            'latitude': 'latitude',
            'longitude': 'longitude',
        }

    def stream(self) -> Iterator[Fix]:
        """
        Yields fixes from the file one by one, in file order.
        """
        header = pd.read_csv(self.filepath, nrows=0, sep=self.sep)
        missing = [col for col in self.mapping.values() if col not in header.columns]
        if missing:
            raise ValueError(
                f"CSV must contain {sorted(self.mapping.values())} columns. Found: {list(header.columns)}"
            )

        lat_col = self.mapping['latitude']
        lon_col = self.mapping['longitude']

        # round_trip parsing keeps coordinates bit-exact with Python's float()
        with pd.read_csv(self.filepath, chunksize=1000, sep=self.sep, float_precision='round_trip') as reader:
            for chunk in reader:
                chunk[lat_col] = pd.to_numeric(chunk[lat_col], errors='coerce')
                chunk[lon_col] = pd.to_numeric(chunk[lon_col], errors='coerce')

                # Skip rows with invalid coordinates
                valid = chunk.dropna(subset=[lat_col, lon_col])
                if len(valid) < len(chunk):
                    logger.debug("Skipped %d rows with invalid coordinates", len(chunk) - len(valid))

                for lat, lon in zip(valid[lat_col], valid[lon_col]):
                    yield Fix(latitude=float(lat), longitude=float(lon))

    def read_all(self) -> List[Fix]:
        return list(self.stream())
