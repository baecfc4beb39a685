"""Exception classes for orbit_tracker errors."""


class OrbitTrackerError(Exception):
    """Base exception for orbit_tracker errors."""

    pass


class TLEFormatError(OrbitTrackerError):
    """TLE text could not be handed to a propagation engine."""

    pass


class TLEChecksumError(TLEFormatError):
    """TLE line checksum mismatch (strict checksum mode only)."""

    pass


class PropagationError(OrbitTrackerError):
    """Propagation engine failed for a given instant."""

    def __init__(self, message: str, error_code: int = 0):
        super().__init__(message)
        self.error_code = error_code


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Satellite has decayed",
    6: "Satellite has decayed (low altitude)",
}


def check_sgp4_error(code: int) -> None:
    """Raise PropagationError if an sgp4 error code is non-zero."""
    if code == 0:
        return
    message = SGP4_ERROR_CODES.get(code, f"Unknown error code {code}")
    raise PropagationError(f"SGP4 error {code}: {message}", error_code=code)
