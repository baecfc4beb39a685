"""
TLE Parser Module

Decodes NORAD Two-Line Element (TLE) sets into an immutable OrbitalElements
record and derives the secondary Keplerian quantities used for display
(period, semi-major axis, mean altitude).

TLE Format:
    Optional 24-character name line, then two 69-character lines with fixed
    columns. Each line ends in a modulo-10 checksum digit.

Decoding is tolerant: a field that cannot be read is set to zero and
reported as a ParseWarning on the record, and a checksum mismatch is a
warning unless strict checksum mode is enabled. Real-world feeds sometimes
carry stale checksums or padded fields, and a best-effort record is more
useful to a tracker than an exception.

References:
    CelesTrak TLE format documentation: https://celestrak.org/NORAD/documentation/tle-fmt.php
"""

import math
import logging
from datetime import datetime
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, computed_field

from orbit_tracker.constants import (
    EARTH_MEAN_RADIUS_KM,
    MINUTES_PER_DAY,
    MU_EARTH,
    TLE_LINE_LENGTH,
)
from orbit_tracker.epoch import epoch_to_datetime, resolve_year
from orbit_tracker.exceptions import TLEChecksumError, TLEFormatError
from orbit_tracker.fields import (
    FieldValue,
    extract_float,
    extract_int,
    extract_string,
    parse_compact_scientific,
    verify_checksum,
)

logger = logging.getLogger(__name__)

# Eccentricity is stored as seven digits with an implied leading "0."
ECCENTRICITY_SCALE = 10000000.0

# (attribute, line number, start column, width, kind)
LINE1_FIELDS = [
    ("norad_id", 1, 2, 5, "int"),
    ("classification", 1, 7, 1, "str"),
    ("international_designator", 1, 9, 8, "str"),
    ("epoch_year", 1, 18, 2, "int"),
    ("epoch_day", 1, 20, 12, "float"),
    ("mean_motion_dot", 1, 33, 10, "float"),
    ("mean_motion_ddot", 1, 44, 8, "sci"),
    ("bstar", 1, 53, 8, "sci"),
    ("element_set_number", 1, 64, 4, "int"),
]

LINE2_FIELDS = [
    ("inclination", 2, 8, 8, "float"),
    ("raan", 2, 17, 8, "float"),
    ("eccentricity", 2, 26, 7, "int"),
    ("arg_perigee", 2, 34, 8, "float"),
    ("mean_anomaly", 2, 43, 8, "float"),
    ("mean_motion", 2, 52, 11, "float"),
    ("revolution_number", 2, 63, 5, "int"),
]


class DerivedParameters(NamedTuple):
    """Quantities derived from mean motion alone."""

    period: float  # minutes
    semi_major_axis: float  # km
    altitude: float  # km above the mean Earth radius


def derive_orbit_parameters(mean_motion: float) -> DerivedParameters:
    """
    Derive period, semi-major axis and mean altitude from mean motion.

    Kepler's third law: a³ = μT² / (4π²), with T in seconds.

    Args:
        mean_motion: Mean motion in revolutions per day

    Returns:
        DerivedParameters; all zero when mean motion is not positive
    """
    if not mean_motion > 0:
        return DerivedParameters(0.0, 0.0, 0.0)

    period = MINUTES_PER_DAY / mean_motion
    period_seconds = period * 60.0
    a3 = MU_EARTH * period_seconds ** 2 / (4.0 * math.pi ** 2)
    semi_major_axis = a3 ** (1.0 / 3.0)

    return DerivedParameters(period, semi_major_axis, semi_major_axis - EARTH_MEAN_RADIUS_KM)


class ParseWarning(BaseModel):
    """A non-fatal problem found while decoding a TLE."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    line: int
    start: int = 0
    length: int = 0
    raw: str = ""
    message: str


class OrbitalElements(BaseModel):
    """
    Decoded orbital state of one TLE.

    The record is immutable. Period, semi-major axis and altitude are
    computed from mean_motion on every access, so they always agree with
    it; use with_mean_motion() to obtain a record with a different mean
    motion.
    """

    model_config = ConfigDict(frozen=True)

    # Identification
    name: str = ""
    norad_id: int = 0
    classification: str = ""
    international_designator: str = ""

    # Raw lines, kept verbatim for the propagation engine
    line0: str = ""
    line1: str = ""
    line2: str = ""

    # Epoch
    epoch: datetime
    epoch_year: int = 0
    epoch_full_year: int = 0
    epoch_day: float = 0.0

    # Orbital elements (line 2)
    inclination: float = 0.0  # degrees
    raan: float = 0.0  # degrees
    eccentricity: float = 0.0
    arg_perigee: float = 0.0  # degrees
    mean_anomaly: float = 0.0  # degrees
    mean_motion: float = 0.0  # rev/day

    # Perturbation terms (line 1)
    bstar: float = 0.0
    mean_motion_dot: float = 0.0
    mean_motion_ddot: float = 0.0

    element_set_number: int = 0
    revolution_number: int = 0

    warnings: Tuple[ParseWarning, ...] = ()

    @computed_field
    @property
    def period(self) -> float:
        """Orbital period (minutes)."""
        return derive_orbit_parameters(self.mean_motion).period

    @computed_field
    @property
    def semi_major_axis(self) -> float:
        """Semi-major axis (km)."""
        return derive_orbit_parameters(self.mean_motion).semi_major_axis

    @computed_field
    @property
    def altitude(self) -> float:
        """Mean altitude above the mean Earth radius (km)."""
        return derive_orbit_parameters(self.mean_motion).altitude

    @property
    def is_valid(self) -> bool:
        """True when decoding produced no warnings."""
        return not self.warnings

    def with_mean_motion(self, mean_motion: float) -> "OrbitalElements":
        """Return a copy with a new mean motion (derived values follow it)."""
        return self.model_copy(update={"mean_motion": mean_motion})


class TLEParser:
    """
    Decoder for Two-Line Element sets.

    Provides methods for:
    - Decoding 2-line and 3-line TLEs into OrbitalElements
    - Splitting a text block into TLE lines
    - Checksum validation (tolerant or strict)
    """

    def __init__(self, strict_checksum: bool = False):
        """
        Initialize TLE parser.

        Args:
            strict_checksum: Raise TLEChecksumError on checksum mismatch
                instead of recording a warning
        """
        self.strict_checksum = strict_checksum

    def parse_tle(self, line1: str, line2: str, line0: Optional[str] = None) -> OrbitalElements:
        """
        Decode a TLE.

        Args:
            line1: First line of TLE
            line2: Second line of TLE
            line0: Optional name line

        Returns:
            OrbitalElements; problems are listed in its warnings

        Raises:
            TLEChecksumError: only in strict checksum mode
        """
        line1 = line1.rstrip("\r\n")
        line2 = line2.rstrip("\r\n")
        warnings: List[ParseWarning] = []

        for line_no, line in ((1, line1), (2, line2)):
            for warning in self._check_line(line_no, line):
                if self.strict_checksum:
                    if warning.field_name == "checksum":
                        raise TLEChecksumError(warning.message)
                    raise TLEFormatError(warning.message)
                logger.warning(warning.message)
                warnings.append(warning)

        values = {}
        for attr, line_no, start, length, kind in LINE1_FIELDS + LINE2_FIELDS:
            line = line1 if line_no == 1 else line2
            if kind == "str":
                values[attr] = extract_string(line, start, length)
                continue

            if kind == "int":
                result = extract_int(line, start, length)
            elif kind == "float":
                result = extract_float(line, start, length)
            else:
                result = parse_compact_scientific(line[start:start + length])

            values[attr] = result.value
            if not result.ok:
                warnings.append(self._field_warning(attr, line_no, start, length, result))

        values["eccentricity"] = values["eccentricity"] / ECCENTRICITY_SCALE
        warnings.extend(self._check_ranges(values))

        name = ""
        if line0 is not None:
            line0 = line0.rstrip("\r\n")
            name = self._clean_name(line0)

        elements = OrbitalElements(
            name=name,
            line0=line0 or "",
            line1=line1,
            line2=line2,
            epoch=self._resolve_epoch(values, warnings),
            epoch_full_year=resolve_year(values["epoch_year"]),
            warnings=tuple(warnings),
            **values,
        )

        logger.debug(
            f"Decoded TLE {elements.norad_id} ({elements.name or 'unnamed'}): "
            f"period={elements.period:.2f} min, a={elements.semi_major_axis:.1f} km, "
            f"alt={elements.altitude:.1f} km"
        )

        return elements

    def parse_tle_lines(self, lines: Union[str, Iterable[str]]) -> OrbitalElements:
        """
        Decode a TLE given as a text block or a sequence of lines.

        Blank lines are ignored. Two lines are read as line 1 and line 2,
        three lines as name, line 1 and line 2.

        Raises:
            TLEFormatError: if the input does not hold two or three lines
        """
        if isinstance(lines, str):
            lines = lines.splitlines()
        cleaned = [line.rstrip("\r\n") for line in lines if line.strip()]

        if len(cleaned) == 2:
            return self.parse_tle(cleaned[0], cleaned[1])
        if len(cleaned) == 3:
            return self.parse_tle(cleaned[1], cleaned[2], cleaned[0])

        raise TLEFormatError(f"Expected 2 or 3 TLE lines, got {len(cleaned)}")

    def _check_line(self, line_no: int, line: str) -> List[ParseWarning]:
        """Validate line number marker, length and checksum."""
        warnings = []
        if not line.startswith(str(line_no)):
            warnings.append(ParseWarning(
                field_name="line_number", line=line_no, start=0, length=1,
                raw=line[:1],
                message=f"Line {line_no} does not start with '{line_no}'",
            ))

        # The checksum digit is only meaningful on a full-length line
        if len(line) != TLE_LINE_LENGTH:
            warnings.append(ParseWarning(
                field_name="line_length", line=line_no, start=0, length=len(line),
                message=(f"Line {line_no} is {len(line)} characters long, "
                         f"expected {TLE_LINE_LENGTH}"),
            ))
        elif not verify_checksum(line):
            warnings.append(ParseWarning(
                field_name="checksum", line=line_no, start=68, length=1,
                raw=line[68:69],
                message=f"Invalid checksum on line {line_no}: {line!r}",
            ))
        return warnings

    def _resolve_epoch(self, values: dict, warnings: List[ParseWarning]) -> datetime:
        """Epoch datetime; a day of year outside [1, 367) falls back to Jan 1."""
        day = values["epoch_day"]
        if not 1.0 <= day < 367.0:
            message = f"epoch_day out of range: {day}"
            logger.warning(message)
            warnings.append(ParseWarning(field_name="epoch_day", line=1, start=20,
                                         length=12, message=message))
            day = 1.0
        return epoch_to_datetime(values["epoch_year"], day)

    def _field_warning(self, attr: str, line_no: int, start: int, length: int,
                       result: FieldValue) -> ParseWarning:
        return ParseWarning(
            field_name=attr, line=line_no, start=start, length=length, raw=result.raw,
            message=f"Cannot read {attr} from '{result.raw}' (line {line_no}, column {start})",
        )

    def _check_ranges(self, values: dict) -> List[ParseWarning]:
        """Flag elements outside their physical range."""
        warnings = []
        checks = [
            ("inclination", 0.0 <= values["inclination"] <= 180.0),
            ("raan", 0.0 <= values["raan"] < 360.0),
            ("arg_perigee", 0.0 <= values["arg_perigee"] < 360.0),
            ("mean_anomaly", 0.0 <= values["mean_anomaly"] < 360.0),
            ("eccentricity", 0.0 <= values["eccentricity"] < 1.0),
            ("mean_motion", values["mean_motion"] > 0.0),
        ]
        for attr, in_range in checks:
            if not in_range:
                message = f"{attr} out of range: {values[attr]}"
                logger.warning(message)
                warnings.append(ParseWarning(field_name=attr, line=2, message=message))
        return warnings

    @staticmethod
    def _clean_name(line0: str) -> str:
        """Trim the name line, dropping the '0 ' prefix used by 3LE feeds."""
        name = line0.strip()
        if name.startswith("0 "):
            name = name[2:].strip()
        return name


def decode(line1: str, line2: str, line0: Optional[str] = None,
           strict_checksum: bool = False) -> OrbitalElements:
    """Decode a TLE with a one-off parser."""
    return TLEParser(strict_checksum=strict_checksum).parse_tle(line1, line2, line0)
