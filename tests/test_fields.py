"""
Tests for the fixed-width TLE field reader and checksum

Run with:
    python -m pytest tests/test_fields.py -v
"""

import unittest

from orbit_tracker.fields import (
    compute_checksum,
    extract_float,
    extract_int,
    extract_string,
    parse_compact_scientific,
    verify_checksum,
)

ISS_LINE1 = "1 25544U 98067A   25308.55131963  .00010237  00000+0  18874-3 0  9994"
ISS_LINE2 = "2 25544  51.6336 331.5320 0005028  16.6774 343.4380 15.49747070536934"


class TestFieldExtraction(unittest.TestCase):
    """Column extraction with explicit success flags."""

    def test_extract_string_trims(self):
        self.assertEqual(extract_string(ISS_LINE1, 9, 8), "98067A")

    def test_extract_string_past_end_of_line(self):
        self.assertEqual(extract_string("1 25544U", 20, 12), "")

    def test_extract_int(self):
        result = extract_int(ISS_LINE1, 2, 5)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 25544)
        self.assertEqual(result.raw, "25544")

    def test_extract_int_failure_is_reported(self):
        line = ISS_LINE1[:2] + "25A44" + ISS_LINE1[7:]

        with self.assertLogs("orbit_tracker.fields", level="WARNING") as logs:
            result = extract_int(line, 2, 5)

        self.assertFalse(result.ok)
        self.assertEqual(result.value, 0)
        self.assertEqual(result.raw, "25A44")
        self.assertIn("25A44", logs.output[0])

    def test_extract_float(self):
        result = extract_float(ISS_LINE1, 33, 10)
        self.assertTrue(result.ok)
        self.assertAlmostEqual(result.value, 0.00010237, places=12)

    def test_extract_float_failure_defaults_to_zero(self):
        with self.assertLogs("orbit_tracker.fields", level="WARNING"):
            result = extract_float("2 25544  51.6X36", 8, 8)

        self.assertFalse(result.ok)
        self.assertEqual(result.value, 0.0)

    def test_extract_float_rejects_non_finite(self):
        with self.assertLogs("orbit_tracker.fields", level="WARNING"):
            result = extract_float("     nan", 0, 8)

        self.assertFalse(result.ok)
        self.assertEqual(result.value, 0.0)

    def test_empty_numeric_field_is_a_failure(self):
        with self.assertLogs("orbit_tracker.fields", level="WARNING"):
            result = extract_int("1 25544", 64, 4)

        self.assertFalse(result.ok)


class TestCompactScientific(unittest.TestCase):
    """TLE implicit-mantissa exponent notation."""

    def test_negative_exponent(self):
        result = parse_compact_scientific("12345-3")
        self.assertTrue(result.ok)
        self.assertAlmostEqual(result.value, 0.12345e-3, places=15)

    def test_iss_drag_term(self):
        self.assertAlmostEqual(parse_compact_scientific("18874-3").value, 1.8874e-4, places=15)

    def test_leading_space_is_positive(self):
        self.assertAlmostEqual(parse_compact_scientific(" 18874-3").value, 1.8874e-4, places=15)

    def test_negative_mantissa(self):
        self.assertAlmostEqual(parse_compact_scientific("-11606-4").value, -1.1606e-5, places=15)

    def test_positive_exponent(self):
        self.assertAlmostEqual(parse_compact_scientific("50000+1").value, 5.0, places=12)

    def test_zero_forms(self):
        for token in ("00000+0", " 00000-0", "00000-0", "0"):
            result = parse_compact_scientific(token)
            self.assertTrue(result.ok, token)
            self.assertEqual(result.value, 0.0, token)

    def test_empty_field(self):
        result = parse_compact_scientific("        ")
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 0.0)

    def test_no_embedded_sign_is_plain_decimal(self):
        self.assertAlmostEqual(parse_compact_scientific("0.5").value, 0.5)

    def test_garbage_is_reported(self):
        with self.assertLogs("orbit_tracker.fields", level="WARNING"):
            result = parse_compact_scientific("abcde-3")

        self.assertFalse(result.ok)
        self.assertEqual(result.value, 0.0)

    def test_missing_exponent_digits(self):
        with self.assertLogs("orbit_tracker.fields", level="WARNING"):
            result = parse_compact_scientific("18874-")

        self.assertFalse(result.ok)


class TestChecksum(unittest.TestCase):
    """NORAD modulo-10 checksum."""

    def test_valid_lines(self):
        self.assertTrue(verify_checksum(ISS_LINE1))
        self.assertTrue(verify_checksum(ISS_LINE2))
        self.assertEqual(compute_checksum(ISS_LINE1), 4)

    def test_minus_sign_counts_as_one(self):
        self.assertEqual(compute_checksum("-"), 1)
        self.assertEqual(compute_checksum("1-A+ 9"), 1)

    def test_any_single_digit_corruption_is_detected(self):
        for line in (ISS_LINE1, ISS_LINE2):
            for i, char in enumerate(line[:68]):
                if char not in "0123456789":
                    continue
                corrupted = line[:i] + str((int(char) + 1) % 10) + line[i + 1:]
                self.assertFalse(verify_checksum(corrupted), f"column {i} of {line!r}")

    def test_wrong_length(self):
        self.assertFalse(verify_checksum(ISS_LINE1[:68]))
        self.assertFalse(verify_checksum(ISS_LINE1 + " "))

    def test_non_digit_checksum_character(self):
        self.assertFalse(verify_checksum(ISS_LINE1[:68] + "X"))


if __name__ == "__main__":
    unittest.main()
