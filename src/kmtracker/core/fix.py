from dataclasses import dataclass

@dataclass(frozen=True)
class Fix:
    """
    Represents a single GPS fix (latitude, longitude) captured while driving.
    frozen=True keeps fixes immutable once they enter a trip path.
    """
    latitude: float
    longitude: float

    @property
    def tuple(self):
        return (self.latitude, self.longitude)
