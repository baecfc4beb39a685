"""
Smoke tests for the demonstration script

Run with:
    python -m pytest tests/test_demo.py -v
"""

import io
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import matplotlib

matplotlib.use("Agg")

import numpy as np
import structlog

import demo
from orbit_tracker.constants import EARTH_MEAN_RADIUS_KM
from orbit_tracker.propagator import SatellitePropagator
from orbit_tracker.tle_parser import TLEParser

ISS_TLE = """ISS (ZARYA)
1 25544U 98067A   25308.55131963  .00010237  00000+0  18874-3 0  9994
2 25544  51.6336 331.5320 0005028  16.6774 343.4380 15.49747070536934
"""


class TestDemo(unittest.TestCase):
    """End-to-end runs of demo.main()."""

    def setUp(self):
        self.env = mock.patch.dict(os.environ, {}, clear=True)
        self.env.start()
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
        structlog.reset_defaults()
        self.tmp.cleanup()
        self.env.stop()

    def run_demo(self, *args):
        output = io.StringIO()
        with redirect_stdout(output):
            code = demo.main(list(args))
        return code, output.getvalue()

    def test_default_run(self):
        code, output = self.run_demo("--minutes", "30", "--step", "10")

        self.assertEqual(code, 0)
        self.assertIn("Decoded TLE", output)
        self.assertIn("Demonstration complete", output)

    def test_without_engine(self):
        code, output = self.run_demo("--engine", "none", "--minutes", "20")
        self.assertEqual(code, 0)

    def test_tle_file_and_plot(self):
        tle_path = os.path.join(self.tmp.name, "iss.tle")
        plot_path = os.path.join(self.tmp.name, "track.png")
        with open(tle_path, "w", encoding="utf-8") as f:
            f.write(ISS_TLE)

        code, output = self.run_demo("--tle-file", tle_path, "--plot", plot_path,
                                     "--minutes", "90")

        self.assertEqual(code, 0)
        self.assertIn("ISS (ZARYA)", output)
        self.assertTrue(os.path.exists(plot_path))
        self.assertGreater(os.path.getsize(plot_path), 0)

    def test_plot_ring_uses_display_scale(self):
        elements = TLEParser().parse_tle_lines(ISS_TLE)
        track = np.array([[6371.0, 0.0, 0.0], [0.0, 6371.0, 0.0]])
        plot_path = os.path.join(self.tmp.name, "ring.png")

        with mock.patch.object(demo.OrbitPath, "from_elements",
                               wraps=demo.OrbitPath.from_elements) as from_elements:
            with redirect_stdout(io.StringIO()):
                demo.plot_track(elements, track, plot_path, 1.5)

        self.assertAlmostEqual(from_elements.call_args.kwargs["scale"],
                               1.5 / EARTH_MEAN_RADIUS_KM)
        self.assertTrue(os.path.exists(plot_path))

    def test_invalid_step(self):
        code, _ = self.run_demo("--step", "0")
        self.assertEqual(code, 2)

    def test_propagate_track_shape(self):
        elements = TLEParser().parse_tle_lines(ISS_TLE)
        propagator = SatellitePropagator()
        propagator.initialize(elements)

        with redirect_stdout(io.StringIO()):
            track = demo.propagate_track(propagator, 60.0, 15.0)

        # t = 0, 15, 30, 45, 60
        self.assertEqual(track.shape, (5, 3))


if __name__ == "__main__":
    unittest.main()
