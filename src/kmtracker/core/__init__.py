from .fix import Fix
from .trip import Trip, Report, Period, PeriodKind
from .errors import TrackerError, InvalidStateTransition, MalformedPathData, StorageError
