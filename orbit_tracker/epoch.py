"""
Epoch Resolver

Converts the TLE epoch (two-digit year + fractional day of year) into an
absolute UTC datetime, and converts query datetimes into the explicit UTC
calendar instant that propagation engines consume.
"""

import math
from datetime import datetime, timezone, timedelta
from typing import NamedTuple, Tuple

from sgp4.api import jday

from orbit_tracker.constants import EPOCH_YEAR_PIVOT, SECONDS_PER_DAY


class CalendarInstant(NamedTuple):
    """Explicit UTC calendar instant handed to propagation engines."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: int

    @property
    def fractional_second(self) -> float:
        return self.second + self.microsecond / 1e6

    def to_julian(self) -> Tuple[float, float]:
        """
        Convert to a two-part Julian date.

        Returns:
            Tuple of (julian_day, fraction) as expected by Satrec.sgp4
        """
        return jday(self.year, self.month, self.day,
                    self.hour, self.minute, self.fractional_second)


def resolve_year(two_digit_year: int) -> int:
    """Expand a two-digit TLE year: 00-56 are 2000-2056, 57-99 are 1957-1999."""
    if two_digit_year < EPOCH_YEAR_PIVOT:
        return 2000 + two_digit_year
    return 1900 + two_digit_year


def epoch_to_datetime(two_digit_year: int, day_of_year: float) -> datetime:
    """
    Convert TLE epoch to datetime.

    Args:
        two_digit_year: Two-digit year (0-99)
        day_of_year: Day of year with fractional part; day 1.0 is Jan 1 00:00

    Returns:
        Timezone-aware datetime in UTC
    """
    year = resolve_year(two_digit_year)
    whole_days = math.floor(day_of_year)
    fraction = day_of_year - whole_days

    dt = datetime(year, 1, 1, tzinfo=timezone.utc)
    dt += timedelta(days=whole_days - 1)  # day 1 is Jan 1
    dt += timedelta(seconds=fraction * SECONDS_PER_DAY)

    return dt


def ensure_utc(dt: datetime) -> datetime:
    """
    Return dt as an aware UTC datetime.

    Naive datetimes are taken to already be UTC; local time is never assumed.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_calendar_instant(dt: datetime) -> CalendarInstant:
    """Break a datetime down into its UTC calendar fields."""
    utc = ensure_utc(dt)
    return CalendarInstant(
        utc.year, utc.month, utc.day,
        utc.hour, utc.minute, utc.second, utc.microsecond,
    )
