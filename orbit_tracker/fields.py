"""
Fixed-Width Field Reader

Column-range extraction for the NORAD TLE format. Every numeric reader
returns a FieldValue carrying an explicit success flag: on failure the value
is the documented default (0 or 0.0) and a warning is logged, so a bad field
never slips into downstream math unnoticed.

TLE compact scientific notation:
    The drag term and the second derivative of mean motion are stored as
    "[sign]DDDDD[sign]E", meaning 0.DDDDD x 10^E. For example "12345-3"
    is 0.12345e-3 and "-11606-4" is -0.11606e-4.
"""

import math
import logging
from typing import NamedTuple, Union

from orbit_tracker.constants import TLE_LINE_LENGTH

logger = logging.getLogger(__name__)

DIGITS = "0123456789"


class FieldValue(NamedTuple):
    """Result of a field extraction."""

    value: Union[int, float]
    ok: bool
    raw: str


def extract_string(line: str, start: int, length: int) -> str:
    """Return the trimmed substring at [start, start + length)."""
    return line[start:start + length].strip()


def extract_int(line: str, start: int, length: int) -> FieldValue:
    """
    Extract an integer field.

    Args:
        line: TLE line
        start: Zero-based start column
        length: Field width

    Returns:
        FieldValue; value is 0 when the field is empty or not an integer
    """
    raw = extract_string(line, start, length)
    try:
        return FieldValue(int(raw), True, raw)
    except ValueError:
        logger.warning(f"Cannot read integer from '{raw}' at column {start}")
        return FieldValue(0, False, raw)


def extract_float(line: str, start: int, length: int) -> FieldValue:
    """
    Extract a decimal field.

    Args:
        line: TLE line
        start: Zero-based start column
        length: Field width

    Returns:
        FieldValue; value is 0.0 when the field is empty, not a number,
        or not finite
    """
    raw = extract_string(line, start, length)
    try:
        value = float(raw)
    except ValueError:
        value = None

    if value is None or not math.isfinite(value):
        logger.warning(f"Cannot read decimal from '{raw}' at column {start}")
        return FieldValue(0.0, False, raw)

    return FieldValue(value, True, raw)


def parse_compact_scientific(token: str) -> FieldValue:
    """
    Decode TLE compact scientific notation.

    The exponent sign is searched from the second character on, since the
    first character may be the mantissa sign. A token without an embedded
    sign is read as a plain decimal. An empty field decodes to 0.0.

    Args:
        token: Field text, e.g. "18874-3" or " 00000+0"

    Returns:
        FieldValue with the decoded float
    """
    cleaned = token.strip()
    if not cleaned:
        return FieldValue(0.0, True, cleaned)

    exp_pos = -1
    for i in range(1, len(cleaned)):
        if cleaned[i] in "+-":
            exp_pos = i
            break

    try:
        if exp_pos == -1:
            value = float(cleaned)
        else:
            mantissa = float(cleaned[:exp_pos]) / 100000.0
            exponent = int(cleaned[exp_pos:])
            value = mantissa * 10.0 ** exponent
    except (ValueError, OverflowError):
        value = None

    if value is None or not math.isfinite(value):
        logger.warning(f"Cannot read compact scientific value from '{cleaned}'")
        return FieldValue(0.0, False, cleaned)

    return FieldValue(value, True, cleaned)


def compute_checksum(line: str) -> int:
    """Calculate the modulo-10 TLE checksum over the first 68 characters."""
    checksum = 0
    for char in line[:TLE_LINE_LENGTH - 1]:
        if char in DIGITS:
            checksum += int(char)
        elif char == "-":
            checksum += 1
    return checksum % 10


def verify_checksum(line: str) -> bool:
    """
    Check a TLE line against its declared checksum digit.

    The line must be exactly 69 characters long and end in a digit.
    """
    if len(line) != TLE_LINE_LENGTH:
        return False

    declared = line[TLE_LINE_LENGTH - 1]
    if declared not in DIGITS:
        return False

    return compute_checksum(line) == int(declared)
