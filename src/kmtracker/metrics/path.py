from typing import Dict, Sequence
import numpy as np
from kmtracker.core.fix import Fix
from kmtracker.modules.distance.accumulator import EARTH_RADIUS_KM

def segment_lengths_km(path: Sequence[Fix], radius_km: float = EARTH_RADIUS_KM) -> np.ndarray:
    """
    Great-circle length of every consecutive pair of fixes.

    Args:
        path: Fixes in capture order.
        radius_km: Sphere radius.

    Returns:
        Array of len(path) - 1 distances in km (empty for paths shorter than 2).
    """
    if len(path) < 2:
        return np.zeros(0)

    coords = np.radians(np.array([[f.latitude, f.longitude] for f in path], dtype=float))
    lat1, lon1 = coords[:-1, 0], coords[:-1, 1]
    lat2, lon2 = coords[1:, 0], coords[1:, 1]

    a = np.sin((lat2 - lat1) / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2.0) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * radius_km * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))

def path_length_km(path: Sequence[Fix], radius_km: float = EARTH_RADIUS_KM) -> float:
    """
    Total length of a path, summing every consecutive segment.
    Matches the recorder's distance for a trip that was never paused.
    """
    return float(np.sum(segment_lengths_km(path, radius_km)))

def bounding_box(path: Sequence[Fix]) -> Dict[str, float]:
    """
    Returns min/max latitude and longitude of the path.
    Raises ValueError for an empty path.
    """
    if not path:
        raise ValueError("Cannot compute bounding box of an empty path")
    lats = np.array([f.latitude for f in path])
    lons = np.array([f.longitude for f in path])
    return {
        'min_lat': float(lats.min()),
        'max_lat': float(lats.max()),
        'min_lon': float(lons.min()),
        'max_lon': float(lons.max()),
    }
