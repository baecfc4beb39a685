"""
Cosmetic Orbit Ring Generator

Produces a static closed ring of points from (semi-major axis, eccentricity,
inclination) for drawing an orbit in a 3D scene. There is no time
dependence and no perturbation: the ellipse is drawn with the focus at the
origin and its plane tilted about the X axis by the inclination.
"""

import math

import numpy as np

from orbit_tracker.signals import Signal

MIN_RESOLUTION = 32
MAX_RESOLUTION = 512
MAX_ECCENTRICITY = 0.99


def orbit_point(semi_major_axis: float, eccentricity: float,
                inclination_deg: float, angle: float) -> np.ndarray:
    """
    Point of the ellipse at a given angle from periapsis.

    Polar equation of the ellipse: r = a(1 - e²) / (1 + e·cos(θ)).

    Args:
        semi_major_axis: Semi-major axis (any length unit)
        eccentricity: Eccentricity [0, 1)
        inclination_deg: Tilt of the orbital plane about the X axis (degrees)
        angle: Angle from periapsis (radians)

    Returns:
        Position [x, y, z] in the unit of semi_major_axis
    """
    radius = (semi_major_axis * (1.0 - eccentricity ** 2)
              / (1.0 + eccentricity * math.cos(angle)))

    x_orb = radius * math.cos(angle)
    y_orb = radius * math.sin(angle)
    z_orb = 0.0

    inc = math.radians(inclination_deg)
    cos_inc = math.cos(inc)
    sin_inc = math.sin(inc)

    return np.array([
        x_orb,
        y_orb * cos_inc - z_orb * sin_inc,
        y_orb * sin_inc + z_orb * cos_inc,
    ])


def generate_orbit_points(semi_major_axis: float, eccentricity: float,
                          inclination_deg: float, resolution: int) -> np.ndarray:
    """
    Generate a closed ring of orbit points.

    Args:
        semi_major_axis: Semi-major axis
        eccentricity: Eccentricity [0, 1)
        inclination_deg: Inclination (degrees)
        resolution: Number of segments N; N + 1 points are returned so the
            first (θ = 0) and last (θ = 2π) points close the ring

    Returns:
        Array of shape (N + 1, 3)
    """
    if resolution < 1:
        raise ValueError("Resolution must be at least 1")

    return np.array([
        orbit_point(semi_major_axis, eccentricity, inclination_deg,
                    2.0 * math.pi * i / resolution)
        for i in range(resolution + 1)
    ])


class OrbitPath:
    """
    Orbit ring parameters for a 3D view.

    Eccentricity is clamped to [0, 0.99] so the curve stays a closed
    ellipse and resolution to [32, 512] points. orbit_changed is emitted
    whenever a parameter actually changes.
    """

    def __init__(self, semi_major_axis=500.0, eccentricity=0.3,
                 inclination=45.0, resolution=128):
        self._semi_major_axis = float(semi_major_axis)
        self._eccentricity = min(max(float(eccentricity), 0.0), MAX_ECCENTRICITY)
        self._inclination = float(inclination)
        self._resolution = min(max(int(resolution), MIN_RESOLUTION), MAX_RESOLUTION)
        self.orbit_changed = Signal("orbit_changed")

    @classmethod
    def from_elements(cls, elements, scale: float = 1.0, resolution: int = 128) -> "OrbitPath":
        """Build a ring from decoded elements (semi-major axis multiplied by scale)."""
        return cls(elements.semi_major_axis * scale, elements.eccentricity,
                   elements.inclination, resolution)

    def _changed(self):
        self.orbit_changed.emit()

    @property
    def semi_major_axis(self) -> float:
        return self._semi_major_axis

    @semi_major_axis.setter
    def semi_major_axis(self, value: float):
        if math.isclose(self._semi_major_axis, value):
            return
        self._semi_major_axis = float(value)
        self._changed()

    @property
    def eccentricity(self) -> float:
        return self._eccentricity

    @eccentricity.setter
    def eccentricity(self, value: float):
        value = min(max(float(value), 0.0), MAX_ECCENTRICITY)
        if math.isclose(self._eccentricity, value):
            return
        self._eccentricity = value
        self._changed()

    @property
    def inclination(self) -> float:
        return self._inclination

    @inclination.setter
    def inclination(self, value: float):
        if math.isclose(self._inclination, value):
            return
        self._inclination = float(value)
        self._changed()

    @property
    def resolution(self) -> int:
        return self._resolution

    @resolution.setter
    def resolution(self, value: int):
        value = min(max(int(value), MIN_RESOLUTION), MAX_RESOLUTION)
        if value == self._resolution:
            return
        self._resolution = value
        self._changed()

    def generate_orbit_points(self) -> np.ndarray:
        """Ring points for the current parameters."""
        return generate_orbit_points(self._semi_major_axis, self._eccentricity,
                                     self._inclination, self._resolution)
