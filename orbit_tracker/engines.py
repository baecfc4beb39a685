"""
Propagation Engines

The orbit propagation façade never integrates orbits itself. It talks to an
engine through a small capability interface:

    engine = EngineClass(name, line1, line2)       # built from raw TLE text
    state = engine.find_position(calendar_instant)  # explicit UTC instant

Two engines are provided:

- Sgp4Engine: the sgp4 library (Vallado et al. 2006 reference code).
  Positions are TEME, which the tracker treats as ECI.
- SkyfieldEngine: skyfield's EarthSatellite, which wraps the same SGP4
  model and returns GCRS coordinates.

Engines signal failure by raising: TLEFormatError when the TLE text cannot
be loaded, PropagationError when an instant cannot be propagated.

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
    Rhodes, B. sgp4 library: https://pypi.org/project/sgp4/
"""

import logging
from abc import ABC, abstractmethod
from typing import NamedTuple

import numpy as np
from sgp4.api import Satrec

from orbit_tracker.epoch import CalendarInstant
from orbit_tracker.exceptions import (
    PropagationError,
    SGP4_ERROR_CODES,
    TLEFormatError,
    check_sgp4_error,
)

logger = logging.getLogger(__name__)


class EciState(NamedTuple):
    """Position (km) and velocity (km/s) in an Earth-centered inertial frame."""

    position: np.ndarray
    velocity: np.ndarray


class PropagationEngine(ABC):
    """Capability interface for orbit propagation engines."""

    def __init__(self, name: str, line1: str, line2: str):
        self.name = name
        self.line1 = line1
        self.line2 = line2

    @abstractmethod
    def find_position(self, instant: CalendarInstant) -> EciState:
        """
        Propagate to a UTC calendar instant.

        Raises:
            PropagationError: if the engine cannot propagate to this instant
        """

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r})"


class Sgp4Engine(PropagationEngine):
    """Engine backed by sgp4.api.Satrec."""

    def __init__(self, name: str, line1: str, line2: str):
        super().__init__(name, line1, line2)

        try:
            self.satellite = Satrec.twoline2rv(line1, line2)
        except Exception as e:
            raise TLEFormatError(f"Failed to load satellite {name or ''}: {e}") from e

        if self.satellite.error != 0:
            message = SGP4_ERROR_CODES.get(self.satellite.error,
                                           f"Unknown error code {self.satellite.error}")
            raise TLEFormatError(f"SGP4 initialization failed for {name or ''}: {message}")

    def find_position(self, instant: CalendarInstant) -> EciState:
        jd, fr = instant.to_julian()
        error, position, velocity = self.satellite.sgp4(jd, fr)
        check_sgp4_error(error)

        position = np.array(position)
        velocity = np.array(velocity)
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
            raise PropagationError("SGP4 returned a non-finite state")

        return EciState(position, velocity)


_timescale = None


def _get_timescale():
    """Shared skyfield timescale built from skyfield's bundled data files."""
    global _timescale
    if _timescale is None:
        from skyfield.api import load

        _timescale = load.timescale()
    return _timescale


class SkyfieldEngine(PropagationEngine):
    """Engine backed by skyfield.api.EarthSatellite (GCRS output)."""

    def __init__(self, name: str, line1: str, line2: str):
        super().__init__(name, line1, line2)
        from skyfield.api import EarthSatellite

        self.timescale = _get_timescale()
        try:
            self.satellite = EarthSatellite(line1, line2, name or None, self.timescale)
        except Exception as e:
            raise TLEFormatError(f"Failed to load satellite {name or ''}: {e}") from e

    def find_position(self, instant: CalendarInstant) -> EciState:
        t = self.timescale.utc(instant.year, instant.month, instant.day,
                               instant.hour, instant.minute, instant.fractional_second)
        geocentric = self.satellite.at(t)

        position = np.array(geocentric.position.km)
        velocity = np.array(geocentric.velocity.km_per_s)
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
            message = getattr(geocentric, "message", None) or "non-finite state"
            raise PropagationError(f"Skyfield propagation failed: {message}")

        return EciState(position, velocity)
