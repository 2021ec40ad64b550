from .codec import PathCodec
from .repository import TripRepository, ReportRepository, InMemoryTripRepository
