"""
Satellite Propagator

Stateful façade between decoded TLE elements and a propagation engine,
used by the tracking view to place a satellite at a given time.

Features:
- Delegates to an engine (sgp4 by default) with an explicit UTC calendar instant
- Falls back to an approximate ellipse model when no engine is ready
- Reports every engine failure through the propagation_error signal and an
  error history instead of raising to the caller
- Converts ECI kilometers to display units for a 3D scene

States:
    Uninitialized -> Ready after a successful initialize(); a later
    initialize() that fails drops the propagator back to Uninitialized.
    Queries on an uninitialized propagator use the fallback model.

The propagator is not thread-safe. initialize() and queries on the same
instance must be serialized by the caller.
"""

import math
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

import numpy as np

from orbit_tracker.constants import (
    DISPLAY_EARTH_RADIUS,
    EARTH_MEAN_RADIUS_KM,
    MU_EARTH,
)
from orbit_tracker.engines import PropagationEngine, Sgp4Engine
from orbit_tracker.epoch import ensure_utc, to_calendar_instant
from orbit_tracker.signals import Signal
from orbit_tracker.tle_parser import OrbitalElements
from orbit_tracker.two_body_fallback import EllipseFallback

logger = logging.getLogger(__name__)

MAX_ERROR_HISTORY = 100

# Finite-difference step for fallback velocity (seconds)
VELOCITY_STEP_SECONDS = 1.0

EngineFactory = Callable[[str, str, str], PropagationEngine]


class SatellitePropagator:
    """
    Propagation façade for one satellite.

    Signals:
        propagation_error(message): initialization or propagation failed
        satellite_name_changed(name): satellite_name changed
        position_changed(): an engine query succeeded
    """

    def __init__(self, engine_factory: Optional[EngineFactory] = Sgp4Engine,
                 display_earth_radius: float = DISPLAY_EARTH_RADIUS):
        """
        Initialize propagator.

        Args:
            engine_factory: Callable building an engine from (name, line1, line2).
                None runs on the fallback model only.
            display_earth_radius: Radius of the Earth model in display units
        """
        self.engine_factory = engine_factory
        self.display_earth_radius = display_earth_radius

        self._initialized = False
        self._elements: Optional[OrbitalElements] = None
        self._engine: Optional[PropagationEngine] = None
        self._fallback: Optional[EllipseFallback] = None
        self._satellite_name = ""
        self.error_history: List[str] = []

        self.propagation_error = Signal("propagation_error")
        self.satellite_name_changed = Signal("satellite_name_changed")
        self.position_changed = Signal("position_changed")

    def initialize(self, elements: OrbitalElements) -> bool:
        """
        Load decoded elements and build the engine from their raw lines.

        Args:
            elements: Decoded TLE; line1 and line2 must hold the raw text

        Returns:
            True if the propagator is ready
        """
        self._initialized = False
        self._engine = None
        self._elements = elements
        self._fallback = EllipseFallback(elements)
        self.satellite_name = elements.name

        if not elements.line1.strip() or not elements.line2.strip():
            self._report_error("Raw TLE lines missing, cannot initialize propagator")
            return False

        if self.engine_factory is not None:
            try:
                self._engine = self.engine_factory(elements.name, elements.line1, elements.line2)
            except Exception as e:
                self._report_error(f"Propagator initialization failed: {e}")
                return False

        self._initialized = True

        logger.info(
            f"Propagator ready for {elements.name or elements.norad_id} "
            f"(engine: {self._engine or 'none, fallback model'})"
        )
        logger.debug(
            f"Altitude {elements.altitude:.1f} km, inclination {elements.inclination:.4f} deg, "
            f"period {elements.period:.2f} min"
        )

        return True

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def elements(self) -> Optional[OrbitalElements]:
        return self._elements

    @property
    def engine(self) -> Optional[PropagationEngine]:
        return self._engine

    @property
    def satellite_name(self) -> str:
        return self._satellite_name

    @satellite_name.setter
    def satellite_name(self, name: str):
        if name != self._satellite_name:
            self._satellite_name = name
            self.satellite_name_changed.emit(name)

    @property
    def altitude(self) -> float:
        """Mean altitude from the TLE mean motion (km); 0 when not ready."""
        if not self._initialized:
            return 0.0
        return self._elements.altitude

    @property
    def orbital_speed(self) -> float:
        """
        Ideal circular orbital speed sqrt(μ/a) (km/s); 0 when not ready.

        This is a theoretical value for the mean orbit, not the
        instantaneous speed returned by position_and_velocity_at().
        """
        if not self._initialized:
            return 0.0
        a = self._elements.semi_major_axis
        if a <= 0:
            return 0.0
        return math.sqrt(MU_EARTH / a)

    def position_at(self, when: datetime) -> np.ndarray:
        """
        ECI position at a given time.

        Args:
            when: Target time; aware datetimes are converted to UTC,
                naive ones are taken as UTC

        Returns:
            Position [x, y, z] in km. On engine failure the zero vector is
            returned and propagation_error is emitted. Without a ready
            engine the approximate fallback model is used.
        """
        if not self._initialized or self._engine is None:
            return self._fallback_position(when)

        try:
            state = self._engine.find_position(to_calendar_instant(when))
        except Exception as e:
            self._report_error(f"Propagation failed at {ensure_utc(when).isoformat()}: {e}")
            return np.zeros(3)

        self.position_changed.emit()
        return state.position

    def position_and_velocity_at(self, when: datetime) -> Tuple[np.ndarray, np.ndarray]:
        """
        ECI position and velocity at a given time.

        With a ready engine both come from one engine call. Otherwise the
        velocity is a forward finite difference of the fallback model over
        one second, which is only an approximation.

        Returns:
            Tuple of (position km, velocity km/s); zero vectors on engine failure
        """
        if not self._initialized or self._engine is None:
            when = ensure_utc(when)
            step = timedelta(seconds=VELOCITY_STEP_SECONDS)
            position = self._fallback_position(when)

            # Step backward at the end of the datetime range
            try:
                later = self._fallback_position(when + step)
            except OverflowError:
                earlier = self._fallback_position(when - step)
                return position, (position - earlier) / VELOCITY_STEP_SECONDS

            return position, (later - position) / VELOCITY_STEP_SECONDS

        try:
            state = self._engine.find_position(to_calendar_instant(when))
        except Exception as e:
            self._report_error(f"Propagation failed at {ensure_utc(when).isoformat()}: {e}")
            return np.zeros(3), np.zeros(3)

        self.position_changed.emit()
        return state.position, state.velocity

    def position_at_time(self, seconds_since_epoch: float) -> np.ndarray:
        """ECI position a number of seconds after the TLE epoch."""
        if self._elements is None:
            return np.zeros(3)
        try:
            when = self._elements.epoch + timedelta(seconds=seconds_since_epoch)
        except OverflowError:
            self._report_error(f"Time offset out of range: {seconds_since_epoch} s")
            return np.zeros(3)
        return self.position_at(when)

    def minutes_since_epoch(self, when: datetime) -> float:
        """Minutes elapsed from the TLE epoch to when (0 without elements)."""
        if self._elements is None:
            return 0.0
        return (ensure_utc(when) - self._elements.epoch).total_seconds() / 60.0

    @staticmethod
    def eci_to_display(eci, scale: float = 1.0,
                       earth_display_radius: float = DISPLAY_EARTH_RADIUS) -> np.ndarray:
        """
        Convert an ECI position (km) to display units.

        With an Earth model of radius 3 display units, one unit is
        6371 / 3 ≈ 2123.67 km.

        Args:
            eci: Position [x, y, z] in km
            scale: Extra scale factor applied after the conversion
            earth_display_radius: Radius of the Earth model in display units

        Returns:
            New array in display units; the input is not modified
        """
        km_per_unit = EARTH_MEAN_RADIUS_KM / earth_display_radius
        return np.asarray(eci, dtype=float) / km_per_unit * scale

    def display_position_at(self, when: datetime, scale: float = 1.0) -> np.ndarray:
        """Position at when, converted with this propagator's display radius."""
        return self.eci_to_display(self.position_at(when), scale, self.display_earth_radius)

    def get_error_history(self) -> List[str]:
        return list(self.error_history)

    def _fallback_position(self, when: datetime) -> np.ndarray:
        if self._fallback is None:
            return np.zeros(3)
        logger.debug("No propagation engine ready, using fallback ellipse model")
        return self._fallback.position_at(when)

    def _report_error(self, message: str):
        """Log, record and emit an error."""
        logger.error(message)

        self.error_history.append(message)
        if len(self.error_history) > MAX_ERROR_HISTORY:
            self.error_history = self.error_history[-MAX_ERROR_HISTORY:]

        self.propagation_error.emit(message)
