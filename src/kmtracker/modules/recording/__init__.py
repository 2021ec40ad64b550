from .recorder import TripRecorder, RecorderState, RecorderSnapshot
from .ticker import SecondTicker
