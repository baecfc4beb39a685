"""
Orbit Tracker Demonstration

This script demonstrates the tracker pipeline end to end:
- TLE decoding and validation
- Propagation through the configured engine (sgp4 by default)
- Fallback behaviour when no engine is available
- Conversion of ECI positions to display units
- Optional plot of the propagated track against the cosmetic orbit ring

Usage:
    python demo.py [--tle-file FILE] [--minutes N] [--step N] [--engine NAME]
                   [--plot FILE] [--verbose]

Arguments:
    --tle-file: File holding a 2-line or 3-line TLE (default: reference ISS TLE)
    --minutes: Propagation span after the TLE epoch (default: 90)
    --step: Time step in minutes (default: 10)
    --engine: sgp4, skyfield or none (default: ORBIT_TRACKER_ENGINE or sgp4)
    --plot: Save a 3D plot of track and ring to this file
    --verbose: Enable debug logging
"""

import argparse
import logging
from datetime import timedelta
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt

from logging_config import configure_from_config, configure_logging, get_logger
from orbit_tracker.config import TrackerConfig
from orbit_tracker.constants import EARTH_MEAN_RADIUS_KM, REFERENCE_ISS_TLE
from orbit_tracker.orbit_path import OrbitPath
from orbit_tracker.propagator import SatellitePropagator
from orbit_tracker.tle_parser import OrbitalElements, TLEParser

logger = get_logger(__name__)


def load_elements(parser: TLEParser, tle_file: Optional[str]) -> OrbitalElements:
    """Decode the TLE from a file, or the reference ISS TLE."""
    if tle_file:
        with open(tle_file, "r", encoding="utf-8") as f:
            return parser.parse_tle_lines(f.read())

    return parser.parse_tle(
        REFERENCE_ISS_TLE["line1"], REFERENCE_ISS_TLE["line2"], REFERENCE_ISS_TLE["name"]
    )


def report_elements(elements: OrbitalElements) -> None:
    logger.info("Decoded TLE", name=elements.name, norad_id=elements.norad_id,
                designator=elements.international_designator,
                epoch=elements.epoch.isoformat())
    logger.info("Orbital elements",
                inclination_deg=round(elements.inclination, 4),
                raan_deg=round(elements.raan, 4),
                eccentricity=elements.eccentricity,
                mean_motion_rev_day=elements.mean_motion,
                bstar=elements.bstar)
    logger.info("Derived parameters",
                period_min=round(elements.period, 2),
                semi_major_axis_km=round(elements.semi_major_axis, 1),
                altitude_km=round(elements.altitude, 1))

    for warning in elements.warnings:
        logger.warning("Decode warning", field=warning.field_name, detail=warning.message)


def propagate_track(propagator: SatellitePropagator, minutes: float,
                    step: float) -> np.ndarray:
    """
    Propagate from the TLE epoch over a time span.

    Returns
    -------
    ndarray
        ECI positions (km), one row per time step
    """
    epoch = propagator.elements.epoch
    positions: List[np.ndarray] = []

    for t in np.arange(0.0, minutes + step / 2, step):
        when = epoch + timedelta(minutes=float(t))
        position, velocity = propagator.position_and_velocity_at(when)
        positions.append(position)

        logger.info(
            f"t={t:5.0f}min: "
            f"x={position[0]:9.2f}km y={position[1]:9.2f}km z={position[2]:9.2f}km "
            f"|v|={np.linalg.norm(velocity):6.3f}km/s"
        )

    return np.array(positions)


def plot_track(elements: OrbitalElements, track_km: np.ndarray, output_file: str,
               display_earth_radius: float) -> None:
    """Save a 3D plot of the track and the cosmetic ring, in display units."""
    track = SatellitePropagator.eci_to_display(track_km, 1.0, display_earth_radius)
    ring = OrbitPath.from_elements(
        elements, scale=display_earth_radius / EARTH_MEAN_RADIUS_KM).generate_orbit_points()

    fig = plt.figure(figsize=(10, 10))
    ax = fig.add_subplot(111, projection="3d")
    ax.plot(ring[:, 0], ring[:, 1], ring[:, 2], color="gray", linewidth=1, label="Orbit ring")
    ax.plot(track[:, 0], track[:, 1], track[:, 2], color="red", linewidth=2, label="Propagated track")
    ax.set_xlabel("X (display units)")
    ax.set_ylabel("Y (display units)")
    ax.set_zlabel("Z (display units)")
    ax.set_title(f"{elements.name or elements.norad_id}")
    ax.legend()

    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    logger.info(f"Saved track plot to {output_file}")
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Orbit Tracker Demonstration")
    parser.add_argument("--tle-file", help="File holding a 2-line or 3-line TLE")
    parser.add_argument("--minutes", type=float, default=90.0, help="Propagation span (minutes)")
    parser.add_argument("--step", type=float, default=10.0, help="Time step (minutes)")
    parser.add_argument("--engine", choices=["sgp4", "skyfield", "none"],
                        help="Propagation engine")
    parser.add_argument("--plot", metavar="FILE", help="Save a 3D plot to FILE")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    config = TrackerConfig()
    if args.engine:
        config.engine = args.engine

    configure_from_config(config)
    if args.verbose:
        configure_logging(level=logging.DEBUG, json_format=config.log_json)

    if args.step <= 0:
        logger.error("Time step must be positive")
        return 2

    logger.info("Orbit Tracker Demonstration", engine=config.engine)

    tle_parser = TLEParser(strict_checksum=config.strict_checksum)
    elements = load_elements(tle_parser, args.tle_file)
    report_elements(elements)

    propagator = SatellitePropagator(
        engine_factory=config.engine_factory(),
        display_earth_radius=config.display_earth_radius,
    )
    propagator.propagation_error.connect(
        lambda message: logger.warning("Propagation error", detail=message))

    if not propagator.initialize(elements):
        logger.warning("Propagator not ready, positions come from the fallback model")

    logger.info("Propagator state",
                ready=propagator.is_initialized,
                altitude_km=round(propagator.altitude, 1),
                circular_speed_kms=round(propagator.orbital_speed, 3))

    track = propagate_track(propagator, args.minutes, args.step)

    if args.plot:
        plot_track(elements, track, args.plot, config.display_earth_radius)

    logger.info("Demonstration complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
