"""
Tracker Configuration

Runtime settings are read from environment variables when a TrackerConfig
is constructed:

    ORBIT_TRACKER_LOG_LEVEL               Logging level name (default: INFO)
    ORBIT_TRACKER_LOG_JSON                Render logs as JSON (default: false)
    ORBIT_TRACKER_STRICT_CHECKSUM         Reject TLE lines with a bad checksum
                                          instead of warning (default: false)
    ORBIT_TRACKER_DISPLAY_EARTH_RADIUS    Earth radius in display units (default: 3.0)
    ORBIT_TRACKER_ENGINE                  sgp4 | skyfield | none (default: sgp4)
"""

import os
from typing import Callable, Optional

from orbit_tracker.constants import DISPLAY_EARTH_RADIUS

ENGINE_NAMES = ("sgp4", "skyfield", "none")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class TrackerConfig:
    """Environment-driven settings for the tracker."""

    def __init__(self):
        self.log_level = os.getenv("ORBIT_TRACKER_LOG_LEVEL", "INFO").upper()
        self.log_json = _env_flag("ORBIT_TRACKER_LOG_JSON")
        self.strict_checksum = _env_flag("ORBIT_TRACKER_STRICT_CHECKSUM")
        self.display_earth_radius = float(
            os.getenv("ORBIT_TRACKER_DISPLAY_EARTH_RADIUS", str(DISPLAY_EARTH_RADIUS))
        )
        self.engine = os.getenv("ORBIT_TRACKER_ENGINE", "sgp4").strip().lower()

        if self.engine not in ENGINE_NAMES:
            raise ValueError(
                f"Unknown engine '{self.engine}', expected one of {', '.join(ENGINE_NAMES)}"
            )
        if self.display_earth_radius <= 0:
            raise ValueError("Display Earth radius must be positive")

    def engine_factory(self) -> Optional[Callable]:
        """
        Map the configured engine name to an engine factory.

        Returns None for 'none', which runs the propagator on its
        fallback model only.
        """
        from orbit_tracker.engines import Sgp4Engine, SkyfieldEngine

        return {
            "sgp4": Sgp4Engine,
            "skyfield": SkyfieldEngine,
            "none": None,
        }[self.engine]

    def __repr__(self):
        return (
            f"TrackerConfig(log_level={self.log_level!r}, log_json={self.log_json}, "
            f"strict_checksum={self.strict_checksum}, "
            f"display_earth_radius={self.display_earth_radius}, engine={self.engine!r})"
        )
