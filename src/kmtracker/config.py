"""Runtime configuration, read from the environment (and a .env file when present)."""
import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from kmtracker.modules.distance.accumulator import EARTH_RADIUS_KM

ENV_PREFIX = "KMTRACKER_"


@dataclass(frozen=True)
class TrackerConfig:
    tick_interval_seconds: float = 1.0
    earth_radius_km: float = EARTH_RADIUS_KM
    timezone: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "TrackerConfig":
        """
        Builds a config from KMTRACKER_* variables.
        Values already in the environment win over the .env file.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is not positive.
        """
        load_dotenv(dotenv_path)
        return cls(
            tick_interval_seconds=_positive_float("TICK_INTERVAL", 1.0),
            earth_radius_km=_positive_float("EARTH_RADIUS_KM", EARTH_RADIUS_KM),
            timezone=os.getenv(ENV_PREFIX + "TIMEZONE") or None,
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
        )

    def tzinfo(self) -> Optional[tzinfo]:
        """Calendar timezone for report periods, or None for naive local datetimes."""
        if self.timezone is None:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {self.timezone!r}") from exc


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be positive, got {raw!r}")
    return value


def configure_logging(level: str = "INFO") -> None:
    """Basic console logging for scripts; the library itself never adds handlers."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
