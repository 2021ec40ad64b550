"""Error kinds raised by the tracker core. None of them is fatal to the process."""


class TrackerError(Exception):
    """Base class for all tracker errors."""


class InvalidStateTransition(TrackerError):
    """A recorder lifecycle method was called from a state that forbids it."""

    def __init__(self, state, operation: str):
        self.state = state
        self.operation = operation
        super().__init__(f"Cannot {operation}() while recorder is {state.value}")


class MalformedPathData(TrackerError, ValueError):
    """Persisted path bytes do not parse as a list of latitude/longitude pairs."""


class StorageError(TrackerError):
    """
    A repository failed to save, query or update a record.
    `trip` carries the finalized trip when the failure happened on save, so the
    caller can retry instead of losing it.
    """

    def __init__(self, message: str, trip=None):
        super().__init__(message)
        self.trip = trip
