#!/usr/bin/env python3
# windowseat/utils/tests/test_coordinates.py

import sys
from pathlib import Path
import unittest

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent.parent
sys.path.append(str(project_root))

from windowseat.route.data_models import RoutePoint
from windowseat.utils.coordinates import CoordinateCalculations
from windowseat.utils.formatting import format_bytes

ONE_DEGREE_M = 6371000 * 3.141592653589793 / 180


class TestCoordinateCalculations(unittest.TestCase):
    def test_distance_along_meridian(self):
        self.assertAlmostEqual(CoordinateCalculations.distance_m(0, 0, 1, 0), ONE_DEGREE_M, delta=1)
        self.assertEqual(CoordinateCalculations.distance_m(51.47, -0.4543, 51.47, -0.4543), 0.0)

    def test_distance_heathrow_to_jfk(self):
        distance = CoordinateCalculations.distance_m(51.47, -0.4543, 40.6413, -73.7781)
        self.assertGreater(distance, 5_500_000)
        self.assertLess(distance, 5_600_000)

    def test_bearing_and_compass(self):
        self.assertAlmostEqual(CoordinateCalculations.bearing_deg(0, 0, 0, 10), 90.0, places=6)
        self.assertAlmostEqual(CoordinateCalculations.bearing_deg(0, 0, 10, 0), 0.0, places=6)
        self.assertEqual(CoordinateCalculations.bearing_to_compass(0), 'N')
        self.assertEqual(CoordinateCalculations.bearing_to_compass(90), 'E')
        self.assertEqual(CoordinateCalculations.bearing_to_compass(225), 'SW')
        self.assertEqual(CoordinateCalculations.bearing_to_compass(350), 'N')

    def test_route_distance_sums_legs(self):
        route = [RoutePoint(0, 0), RoutePoint(1, 0), RoutePoint(2, 0)]
        self.assertAlmostEqual(CoordinateCalculations.route_distance_m(route), 2 * ONE_DEGREE_M, delta=1)
        self.assertEqual(CoordinateCalculations.route_distance_m(route[:1]), 0.0)
        self.assertEqual(len(CoordinateCalculations.segment_distances_m(route)), 2)

    def test_great_circle_midpoint_on_equator(self):
        lat, lon = CoordinateCalculations.interpolate_great_circle(0, 0, 0, 10, 0.5)
        self.assertAlmostEqual(lat, 0.0, places=6)
        self.assertAlmostEqual(lon, 5.0, places=6)

    def test_great_circle_same_point(self):
        self.assertEqual(CoordinateCalculations.interpolate_great_circle(10, 20, 10, 20, 0.3), (10.0, 20.0))

    def test_interpolate_position(self):
        route = [RoutePoint(0, 0), RoutePoint(0, 10)]
        lat, lon = CoordinateCalculations.interpolate_position(route, 0.5)
        self.assertAlmostEqual(lon, 5.0, places=6)
        self.assertEqual(CoordinateCalculations.interpolate_position(route, 2.0), (0, 10))
        self.assertEqual(CoordinateCalculations.interpolate_position(route, -1.0), (0, 0))
        self.assertIsNone(CoordinateCalculations.interpolate_position([], 0.5))

    def test_destination_point(self):
        lat, lon = CoordinateCalculations.destination_point(0, 0, ONE_DEGREE_M, 0)
        self.assertAlmostEqual(lat, 1.0, places=4)
        self.assertAlmostEqual(lon, 0.0, places=4)

        # Crossing the antimeridian wraps the longitude
        lat, lon = CoordinateCalculations.destination_point(0, 179.5, ONE_DEGREE_M, 90)
        self.assertAlmostEqual(lon, -179.5, places=4)

    def test_route_center(self):
        self.assertEqual(CoordinateCalculations.route_center([RoutePoint(0, 0), RoutePoint(10, 20)]), (5.0, 10.0))
        self.assertIsNone(CoordinateCalculations.route_center([]))


class TestFormatBytes(unittest.TestCase):
    def test_format_bytes(self):
        self.assertEqual(format_bytes(0), '0 Bytes')
        self.assertEqual(format_bytes(500), '500 Bytes')
        self.assertEqual(format_bytes(1536), '1.5 KB')
        self.assertEqual(format_bytes(1024 * 1024), '1 MB')


if __name__ == '__main__':
    unittest.main()
