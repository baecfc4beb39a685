"""
Orbit Tracker Package

Decodes NORAD Two-Line Element sets and propagates satellite positions for
3D visualization.

Modules:
    fields: Fixed-width TLE field reader and checksum
    epoch: TLE epoch resolution and UTC calendar conversion
    tle_parser: TLE decoder and the OrbitalElements record
    engines: Propagation engine interface (sgp4, skyfield)
    propagator: Propagation façade with fallback model and display transform
    orbit_path: Cosmetic orbit ring generator
    two_body_fallback: Approximate ellipse position model

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

from orbit_tracker.tle_parser import OrbitalElements, ParseWarning, TLEParser, decode
from orbit_tracker.propagator import SatellitePropagator

__version__ = "1.0.0"

__all__ = [
    "OrbitalElements",
    "ParseWarning",
    "SatellitePropagator",
    "TLEParser",
    "decode",
]
