"""
Ellipse Fallback Propagation Module

Provides a simple Keplerian position model used when no propagation engine
is available for a satellite. The mean anomaly is advanced from the TLE
epoch at the TLE mean motion, Kepler's equation gives the true anomaly, and
the position is read off the same tilted ellipse that the cosmetic orbit
ring draws.

This is far less accurate than SGP4: the node and perigee orientation are
ignored (the ellipse plane is only tilted about the X axis) and there is no
drag or J2. It exists so that a view keeps moving instead of freezing when
the engine is missing.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
"""

import math
from datetime import datetime

import numpy as np

from orbit_tracker.constants import MINUTES_PER_DAY
from orbit_tracker.epoch import ensure_utc
from orbit_tracker.orbit_path import orbit_point


def solve_kepler_equation(M: float, e: float, tolerance: float = 1e-12, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation for eccentric anomaly.

    Args:
        M: Mean anomaly (rad)
        e: Eccentricity
        tolerance: Convergence tolerance
        max_iter: Maximum iterations

    Returns:
        Eccentric anomaly E (rad)
    """
    # Initial guess
    if e < 0.8:
        E = M
    else:
        E = math.pi if M > math.pi else -math.pi

    # Newton-Raphson iteration
    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)

        if abs(f) < tolerance:
            break

        if abs(fp) < 1e-12:
            break

        E = E - f / fp

    return E


def true_anomaly(E: float, e: float) -> float:
    """True anomaly (rad) from eccentric anomaly."""
    return 2 * math.atan2(
        math.sqrt(1 + e) * math.sin(E / 2),
        math.sqrt(1 - e) * math.cos(E / 2)
    )


class EllipseFallback:
    """
    Degraded position model built from decoded TLE elements.

    Positions are in km, in a frame that only approximates ECI.
    """

    def __init__(self, elements):
        """
        Initialize fallback model.

        Args:
            elements: OrbitalElements record
        """
        self.epoch = elements.epoch
        self.semi_major_axis = elements.semi_major_axis
        self.eccentricity = elements.eccentricity
        self.inclination = elements.inclination
        self.mean_anomaly0 = math.radians(elements.mean_anomaly)
        # rev/day -> rad/s
        self.mean_motion = elements.mean_motion * 2.0 * math.pi / (MINUTES_PER_DAY * 60.0)

    @property
    def usable(self) -> bool:
        """False when the elements cannot describe a closed orbit."""
        return (self.semi_major_axis > 0.0
                and self.mean_motion > 0.0
                and 0.0 <= self.eccentricity < 1.0)

    def position_at(self, when: datetime) -> np.ndarray:
        """
        Approximate position at a given time.

        Args:
            when: Target time (naive datetimes are taken as UTC)

        Returns:
            Position [x, y, z] in km; the zero vector if the elements are unusable
        """
        if not self.usable:
            return np.zeros(3)

        dt = (ensure_utc(when) - self.epoch).total_seconds()
        M = (self.mean_anomaly0 + self.mean_motion * dt) % (2 * math.pi)
        E = solve_kepler_equation(M, self.eccentricity)
        nu = true_anomaly(E, self.eccentricity)

        position = orbit_point(self.semi_major_axis, self.eccentricity, self.inclination, nu)
        if not np.all(np.isfinite(position)):
            return np.zeros(3)
        return position
