"""
Tests for TLE epoch resolution and UTC calendar conversion

Run with:
    python -m pytest tests/test_epoch.py -v
"""

import unittest
from datetime import datetime, timedelta, timezone

from orbit_tracker.epoch import (
    CalendarInstant,
    ensure_utc,
    epoch_to_datetime,
    resolve_year,
    to_calendar_instant,
)


class TestEpochResolver(unittest.TestCase):
    """Two-digit year pivot and day-of-year conversion."""

    def test_year_pivot(self):
        self.assertEqual(resolve_year(0), 2000)
        self.assertEqual(resolve_year(25), 2025)
        self.assertEqual(resolve_year(56), 2056)
        self.assertEqual(resolve_year(57), 1957)
        self.assertEqual(resolve_year(98), 1998)
        self.assertEqual(resolve_year(99), 1999)

    def test_iss_epoch(self):
        epoch = epoch_to_datetime(25, 308.55131963)

        # 0.55131963 * 86400 s = 47634.016032 s = 13:13:54.016032
        self.assertEqual((epoch.year, epoch.month, epoch.day), (2025, 11, 4))
        self.assertEqual((epoch.hour, epoch.minute, epoch.second), (13, 13, 54))
        self.assertAlmostEqual(epoch.microsecond, 16032, delta=2)
        self.assertEqual(epoch.utcoffset(), timedelta(0))

    def test_day_one_is_january_first(self):
        self.assertEqual(epoch_to_datetime(24, 1.0), datetime(2024, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(epoch_to_datetime(24, 1.5), datetime(2024, 1, 1, 12, tzinfo=timezone.utc))

    def test_leap_year_last_day(self):
        self.assertEqual(epoch_to_datetime(24, 366.0), datetime(2024, 12, 31, tzinfo=timezone.utc))

    def test_twentieth_century_epoch(self):
        epoch = epoch_to_datetime(98, 324.0)
        self.assertEqual((epoch.year, epoch.month, epoch.day), (1998, 11, 20))


class TestCalendarConversion(unittest.TestCase):
    """Conversion of query times to an explicit UTC calendar instant."""

    def test_aware_datetime_converted_to_utc(self):
        cest = timezone(timedelta(hours=2))
        instant = to_calendar_instant(datetime(2025, 1, 1, 1, 30, 15, 250000, tzinfo=cest))

        self.assertEqual(instant, CalendarInstant(2024, 12, 31, 23, 30, 15, 250000))

    def test_naive_datetime_taken_as_utc(self):
        instant = to_calendar_instant(datetime(2025, 11, 4, 13, 13, 54, 16032))
        self.assertEqual(instant, CalendarInstant(2025, 11, 4, 13, 13, 54, 16032))

    def test_fractional_second(self):
        instant = CalendarInstant(2025, 11, 4, 13, 13, 54, 500000)
        self.assertAlmostEqual(instant.fractional_second, 54.5)

    def test_to_julian_j2000(self):
        jd, fr = CalendarInstant(2000, 1, 1, 12, 0, 0, 0).to_julian()
        self.assertAlmostEqual(jd + fr, 2451545.0, places=9)

    def test_ensure_utc(self):
        naive = datetime(2025, 1, 1)
        self.assertEqual(ensure_utc(naive).tzinfo, timezone.utc)

        est = timezone(timedelta(hours=-5))
        converted = ensure_utc(datetime(2025, 1, 1, tzinfo=est))
        self.assertEqual(converted.hour, 5)
        self.assertEqual(converted.utcoffset(), timedelta(0))


if __name__ == "__main__":
    unittest.main()
