import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SecondTicker:
    """
    Periodic tick source running on a daemon thread.
    It keeps ticking regardless of recorder state; the recorder decides whether
    a tick counts.
    """

    def __init__(self, callback: Callable[[], None], interval: float = 1.0, name: str = "kmtracker-ticker"):
        """
        Args:
            callback: Called once per interval from the ticker thread.
            interval: Seconds between ticks.
            name: Thread name, useful in logs.
        """
        if interval <= 0:
            raise ValueError("Tick interval must be positive.")
        self._callback = callback
        self._interval = interval
        self._name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.debug("Ticker started with interval %.3fs", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("Ticker stopped")

    def _run(self) -> None:
        # Event.wait returns True once stop() is called
        while not self._stop_event.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Tick callback failed")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
