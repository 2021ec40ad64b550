import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Callable, List, Optional

from kmtracker.core.errors import InvalidStateTransition, StorageError
from kmtracker.core.fix import Fix
from kmtracker.core.stream import FixBroadcaster
from kmtracker.core.trip import Trip
from kmtracker.modules.distance.accumulator import DistanceAccumulator
from kmtracker.modules.storage.repository import TripRepository

logger = logging.getLogger(__name__)


class RecorderState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True)
class RecorderSnapshot:
    """Immutable view of the recorder handed to observers (e.g. a UI layer)."""
    state: RecorderState
    elapsed_seconds: int
    distance_km: float
    fix_count: int
    started_at: Optional[datetime]


SnapshotListener = Callable[[RecorderSnapshot], None]


class TripRecorder:
    """
    Owns the lifecycle of one live trip: Idle -> Recording <-> Paused -> Ended -> Idle.

    Fixes arrive through the FixBroadcaster subscription (only held while
    recording); elapsed time advances through tick(), which an external tick
    source calls once per second. Every mutation runs under a single lock, so a
    fix racing stop() is either fully applied before the trip is finalized or
    dropped afterwards.
    """

    def __init__(
        self,
        repository: TripRepository,
        source: Optional[FixBroadcaster] = None,
        accumulator: Optional[DistanceAccumulator] = None,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            repository: Store receiving each finalized trip.
            source: Live fix source. If None, fixes must be pushed through on_fix().
            accumulator: Distance accumulator. Defaults to a spherical-earth one.
            tz: Zone the trip start is stamped in. None keeps naive local time,
                which only compares against periods resolved without a zone.
            clock: Returns the current time; stamps the trip start. Defaults
                to datetime.now(tz).
        """
        self._repository = repository
        self._source = source
        self._accumulator = accumulator or DistanceAccumulator()
        self._clock = clock or (lambda: datetime.now(tz))

        self._lock = threading.RLock()
        self._state = RecorderState.IDLE
        self._elapsed_seconds = 0
        self._path: List[Fix] = []
        self._started_at: Optional[datetime] = None
        self._listeners: List[SnapshotListener] = []
        # Bumped on every subscribe; a handler from an older subscription is inert.
        self._generation = 0
        self._handler: Optional[Callable[[Fix], None]] = None

    @property
    def state(self) -> RecorderState:
        with self._lock:
            return self._state

    def snapshot(self) -> RecorderSnapshot:
        with self._lock:
            return RecorderSnapshot(
                state=self._state,
                elapsed_seconds=self._elapsed_seconds,
                distance_km=self._accumulator.total_km,
                fix_count=len(self._path),
                started_at=self._started_at,
            )

    def add_listener(self, listener: SnapshotListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # --- lifecycle ---

    def start(self) -> None:
        with self._lock:
            self._require("start", RecorderState.IDLE)
            self._accumulator.reset()
            self._elapsed_seconds = 0
            self._path = []
            self._started_at = self._clock()
            self._set_state(RecorderState.RECORDING)
            self._subscribe()

    def pause(self) -> None:
        with self._lock:
            self._require("pause", RecorderState.RECORDING)
            self._unsubscribe()
            self._set_state(RecorderState.PAUSED)

    def resume(self) -> None:
        with self._lock:
            self._require("resume", RecorderState.PAUSED)
            # The last fix before the pause is stale; the next one only re-anchors.
            self._accumulator.detach()
            self._set_state(RecorderState.RECORDING)
            self._subscribe()

    def stop(self) -> Trip:
        """
        Finalizes the trip, saves it and returns the recorder to Idle.

        Raises:
            InvalidStateTransition: If no trip is in progress.
            StorageError: If the repository rejects the trip. The recorder is
                Idle afterwards and the error carries the trip in `.trip`.
        """
        with self._lock:
            self._require("stop", RecorderState.RECORDING, RecorderState.PAUSED)
            self._unsubscribe()

            trip = Trip(
                id=uuid.uuid4().hex,
                date=self._started_at,
                driving_time_seconds=self._elapsed_seconds,
                total_distance_km=self._accumulator.total_km,
                path=tuple(self._path),
                is_new=True,
            )
            self._set_state(RecorderState.ENDED)
            logger.info(
                "Trip %s finalized: %ds, %.3f km, %d fixes",
                trip.id, trip.driving_time_seconds, trip.total_distance_km, len(trip.path),
            )

            try:
                self._repository.save(trip)
            except StorageError as exc:
                logger.error("Could not save trip %s: %s", trip.id, exc)
                if exc.trip is None:
                    exc.trip = trip
                raise
            finally:
                self._clear()
                self._set_state(RecorderState.IDLE)

            return trip

    # --- event inputs ---

    def tick(self) -> None:
        """Counts one second of driving time, but only while recording."""
        with self._lock:
            if self._state is not RecorderState.RECORDING:
                return
            self._elapsed_seconds += 1
            self._notify()

    def on_fix(self, fix: Fix) -> None:
        with self._lock:
            if self._state is not RecorderState.RECORDING:
                logger.debug("Dropped fix %s while %s", fix.tuple, self._state.value)
                return
            self._path.append(fix)
            delta = self._accumulator.observe(fix)
            logger.debug("Applied fix %s (+%.5f km)", fix.tuple, delta)
            self._notify()

    # --- internals ---

    def _require(self, operation: str, *allowed: RecorderState) -> None:
        if self._state not in allowed:
            raise InvalidStateTransition(self._state, operation)

    def _set_state(self, state: RecorderState) -> None:
        logger.info("Recorder %s -> %s", self._state.value, state.value)
        self._state = state
        self._notify()

    def _clear(self) -> None:
        self._accumulator.reset()
        self._elapsed_seconds = 0
        self._path = []
        self._started_at = None

    def _subscribe(self) -> None:
        if self._source is None:
            return
        self._generation += 1
        generation = self._generation
        self._handler = lambda fix: self._deliver(generation, fix)
        self._source.subscribe(self._handler)

    def _unsubscribe(self) -> None:
        if self._source is not None and self._handler is not None:
            self._source.unsubscribe(self._handler)
            self._handler = None

    def _deliver(self, generation: int, fix: Fix) -> None:
        # The broadcaster calls handlers outside its lock, so a fix copied
        # before pause/stop can arrive after the next subscribe.
        with self._lock:
            if generation != self._generation or self._handler is None:
                logger.debug("Dropped fix %s from an ended subscription", fix.tuple)
                return
            self.on_fix(fix)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Recorder listener %r failed", listener)
