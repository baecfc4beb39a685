"""
Physical Constants and Reference Data

Constants shared by the TLE decoder, the propagation façade and the
cosmetic orbit generator.

Note: The derived orbit parameters (period, semi-major axis, mean altitude)
use the mean Earth radius of 6371 km, not the WGS-72 equatorial radius
used internally by SGP4. They are display-grade quantities.

The reference ISS TLE below is used by the demo script and the test suite.
Update it periodically if it is used for anything beyond that.
"""

from typing import Dict, Any

# Earth gravitational parameter (km³/s²)
MU_EARTH: float = 398600.4418

# Earth mean radius (km)
EARTH_MEAN_RADIUS_KM: float = 6371.0

MINUTES_PER_DAY: float = 1440.0
SECONDS_PER_DAY: float = 86400.0

# Two-digit epoch years below the pivot belong to the 2000s (NORAD convention)
EPOCH_YEAR_PIVOT: int = 57

# Radius of the Earth model in the rendering scene, in display units
DISPLAY_EARTH_RADIUS: float = 3.0

# Fixed TLE line length, checksum digit included
TLE_LINE_LENGTH: int = 69

# Reference ISS TLE (epoch 2025-11-04)
REFERENCE_ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': 25544,
    'line1': '1 25544U 98067A   25308.55131963  .00010237  00000+0  18874-3 0  9994',
    'line2': '2 25544  51.6336 331.5320 0005028  16.6774 343.4380 15.49747070536934',
    'mean_motion': 15.49747070,
    'inclination': 51.6336,
    'eccentricity': 0.0005028,
}
