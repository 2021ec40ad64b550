"""
Persisted path format.

A path is stored as UTF-8 JSON: an array of objects
``{"latitude": <number>, "longitude": <number>}`` in capture order. The empty
path is ``[]``. Floats are written with Python's shortest round-trip repr, so
decode(encode(path)) reproduces every coordinate bit for bit.
Anything else (non-UTF-8 bytes, other JSON shapes, missing, non-numeric or
non-finite coordinates, numbers too large for a double) is rejected as
MalformedPathData.
"""
import json
import logging
import math
from typing import Iterable, List, Optional

from kmtracker.core.errors import MalformedPathData
from kmtracker.core.fix import Fix

logger = logging.getLogger(__name__)


class PathCodec:

    @staticmethod
    def encode(path: Iterable[Fix]) -> bytes:
        rows = [{"latitude": f.latitude, "longitude": f.longitude} for f in path]
        return json.dumps(rows, separators=(",", ":")).encode("utf-8")

    @staticmethod
    def decode(data: bytes) -> List[Fix]:
        """
        Parses persisted path bytes back into fixes.

        Raises:
            MalformedPathData: If the bytes are not a JSON list of latitude/longitude objects.
        """
        try:
            rows = json.loads(data.decode("utf-8"))
        # ValueError covers JSONDecodeError and over-long integer literals
        except (UnicodeDecodeError, ValueError, RecursionError, AttributeError) as exc:
            raise MalformedPathData(f"Path data is not JSON: {exc}") from exc

        if not isinstance(rows, list):
            raise MalformedPathData(f"Expected a list of fixes, got {type(rows).__name__}")

        path = []
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                raise MalformedPathData(f"Fix #{i} is not an object")
            lat = row.get("latitude")
            lon = row.get("longitude")
            if not _is_number(lat) or not _is_number(lon):
                raise MalformedPathData(f"Fix #{i} lacks numeric latitude/longitude")
            try:
                lat, lon = float(lat), float(lon)
            except OverflowError as exc:
                raise MalformedPathData(f"Fix #{i} coordinate out of range") from exc
            if not (math.isfinite(lat) and math.isfinite(lon)):
                raise MalformedPathData(f"Fix #{i} has a non-finite coordinate")
            path.append(Fix(latitude=lat, longitude=lon))
        return path

    @classmethod
    def decode_or_empty(cls, data: Optional[bytes]) -> List[Fix]:
        """Decodes path bytes, treating missing or malformed data as "no path available"."""
        if data is None:
            return []
        try:
            return cls.decode(data)
        except MalformedPathData as exc:
            logger.warning("Ignoring unreadable path data: %s", exc)
            return []


def _is_number(value) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, (int, float)) and not isinstance(value, bool)
