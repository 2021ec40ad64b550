import math
from typing import Optional

from kmtracker.core.fix import Fix

EARTH_RADIUS_KM = 6371.0

def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float, radius_km: float = EARTH_RADIUS_KM) -> float:
    """
    Great-circle distance in kilometers between two lat/lon points (degrees).
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # Rounding can push `a` marginally past 1.0 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return radius_km * c

def fix_distance_km(f1: Fix, f2: Fix, radius_km: float = EARTH_RADIUS_KM) -> float:
    return haversine_km(f1.latitude, f1.longitude, f2.latitude, f2.longitude, radius_km)

class DistanceAccumulator:
    """
    Converts a stream of fixes into cumulative great-circle distance, one fix at a time.
    Every observed fix contributes, including jitter while stationary: no filtering.
    """

    def __init__(self, radius_km: float = EARTH_RADIUS_KM):
        if radius_km <= 0:
            raise ValueError("Earth radius must be positive.")
        self.radius_km = radius_km
        self.last_fix: Optional[Fix] = None
        self.total_km: float = 0.0

    def observe(self, fix: Fix) -> float:
        """
        Adds the distance from the previous fix to `fix` and returns that delta.
        The first fix after a reset or detach only anchors the next segment and returns 0.0.
        """
        if self.last_fix is None:
            self.last_fix = fix
            return 0.0

        delta = fix_distance_km(self.last_fix, fix, self.radius_km)
        self.total_km += delta
        self.last_fix = fix
        return delta

    def detach(self) -> None:
        """Forgets the anchor fix but keeps the accumulated total (used on resume)."""
        self.last_fix = None

    def reset(self) -> None:
        self.last_fix = None
        self.total_km = 0.0
