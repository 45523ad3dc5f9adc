#!/usr/bin/env python3
# windowseat/route/tests/test_checkpoints.py

import sys
from pathlib import Path
import unittest

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent.parent
sys.path.append(str(project_root))

from windowseat.route.checkpoints import (
    build_checkpoints, densify_route, estimate_flight_duration, format_duration,
    get_eta_to_checkpoint, get_next_checkpoint, get_route_progress
)
from windowseat.route.data_models import CheckpointKind, FlightDuration, RoutePoint

LHR = RoutePoint(latitude=51.47, longitude=-0.4543)
JFK = RoutePoint(latitude=40.6413, longitude=-73.7781)


class TestBuildCheckpoints(unittest.TestCase):
    def test_two_point_transatlantic_route(self):
        checkpoints = build_checkpoints([LHR, JFK], num_checkpoints=20, min_spacing_meters=80000,
                                        geofence_radius_meters=15000)
        self.assertEqual(len(checkpoints), 20)
        self.assertEqual(checkpoints[0].kind, CheckpointKind.DEPARTURE)
        self.assertEqual(checkpoints[-1].kind, CheckpointKind.ARRIVAL)
        self.assertTrue(all(c.kind == CheckpointKind.WAYPOINT for c in checkpoints[1:-1]))
        self.assertEqual([c.index for c in checkpoints], list(range(20)))
        self.assertEqual(len({c.id for c in checkpoints}), 20)
        self.assertEqual(checkpoints[5].id, 'checkpoint_5')
        self.assertTrue(all(c.radius_meters == 15000 for c in checkpoints))
        self.assertEqual((checkpoints[0].latitude, checkpoints[0].longitude), (51.47, -0.4543))
        self.assertEqual((checkpoints[-1].latitude, checkpoints[-1].longitude), (40.6413, -73.7781))

    def test_waypoints_move_west_in_order(self):
        checkpoints = build_checkpoints([LHR, JFK])
        longitudes = [c.longitude for c in checkpoints]
        self.assertEqual(longitudes, sorted(longitudes, reverse=True))

    def test_default_names(self):
        checkpoints = build_checkpoints([LHR, JFK])
        self.assertEqual(checkpoints[0].name, 'Departure')
        self.assertEqual(checkpoints[3].name, 'Waypoint 3')
        self.assertEqual(checkpoints[-1].name, 'Arrival')

        named = build_checkpoints([RoutePoint(51.47, -0.4543, name='London Heathrow'), JFK])
        self.assertEqual(named[0].name, 'London Heathrow')

    def test_short_route_keeps_only_endpoints(self):
        route = [RoutePoint(51.47, -0.4543), RoutePoint(51.50, -0.30)]
        checkpoints = build_checkpoints(route, min_spacing_meters=50000)
        self.assertEqual(len(checkpoints), 2)
        self.assertEqual(checkpoints[1].kind, CheckpointKind.ARRIVAL)
        self.assertEqual(checkpoints[1].index, 1)

    def test_degenerate_routes(self):
        self.assertEqual(build_checkpoints([]), [])
        self.assertEqual(build_checkpoints([LHR]), [])

    def test_invalid_options_are_rejected(self):
        for radius in (0, -5):
            with self.assertRaises(ValueError):
                build_checkpoints([LHR, JFK], geofence_radius_meters=radius)
        for count in (-1, 0, 1):
            with self.assertRaises(ValueError):
                build_checkpoints([LHR, JFK], num_checkpoints=count)

    def test_count_is_capped(self):
        route = [RoutePoint(0, i) for i in range(60)]
        checkpoints = build_checkpoints(route, num_checkpoints=5, min_spacing_meters=10000)
        self.assertLessEqual(len(checkpoints), 5)
        self.assertEqual(checkpoints[-1].kind, CheckpointKind.ARRIVAL)

    def test_altitude_default_only_when_missing(self):
        route = [RoutePoint(51.47, -0.4543, altitude=0), RoutePoint(40.6413, -73.7781)]
        checkpoints = build_checkpoints(route)
        self.assertEqual(checkpoints[0].altitude, 0)
        self.assertEqual(checkpoints[-1].altitude, 10668)

    def test_rebuilding_gives_same_ids(self):
        first = build_checkpoints([LHR, JFK])
        second = build_checkpoints([LHR, JFK])
        self.assertEqual([c.id for c in first], [c.id for c in second])
        self.assertEqual(first, second)


class TestRouteHelpers(unittest.TestCase):
    def test_densify_route(self):
        route = [RoutePoint(0, 0, altitude=0), RoutePoint(0, 10, altitude=1000)]
        dense = densify_route(route, 200000)
        self.assertEqual(len(dense), 7)
        self.assertIs(dense[0], route[0])
        self.assertIs(dense[-1], route[-1])
        self.assertAlmostEqual(dense[3].altitude, 500)

        no_alt = densify_route([RoutePoint(0, 0), RoutePoint(0, 10)], 200000)
        self.assertIsNone(no_alt[2].altitude)

    def test_estimate_and_format_duration(self):
        duration = estimate_flight_duration([RoutePoint(0, 0), RoutePoint(0, 10)])
        self.assertEqual(duration, FlightDuration(hours=1, minutes=20, total_minutes=80))
        self.assertEqual(format_duration(duration), '1h 20m')
        self.assertIsNone(estimate_flight_duration([RoutePoint(0, 0)]))
        self.assertEqual(format_duration(None), 'Unknown')

    def test_route_progress(self):
        route = [RoutePoint(0, 0), RoutePoint(0, 5), RoutePoint(0, 10)]
        self.assertAlmostEqual(get_route_progress(0, 0, route), 0.0)
        self.assertAlmostEqual(get_route_progress(0, 10, route), 1.0)
        self.assertAlmostEqual(get_route_progress(0, 5, route), 0.5, places=3)
        self.assertEqual(get_route_progress(0, 0, route[:1]), 0.0)

    def test_next_checkpoint_skips_triggered(self):
        checkpoints = build_checkpoints([LHR, JFK])
        cp, distance = get_next_checkpoint(51.47, -0.4543, checkpoints)
        self.assertEqual(cp.id, 'checkpoint_0')
        self.assertAlmostEqual(distance, 0.0)

        cp, _ = get_next_checkpoint(51.47, -0.4543, checkpoints, {'checkpoint_0'})
        self.assertEqual(cp.id, 'checkpoint_1')
        self.assertIsNone(get_next_checkpoint(0, 0, checkpoints, {c.id for c in checkpoints}))

    def test_eta(self):
        self.assertIsNone(get_eta_to_checkpoint(1000, None))
        self.assertIsNone(get_eta_to_checkpoint(1000, 0))
        self.assertEqual(get_eta_to_checkpoint(1000, 250), 'Less than 1 min')
        self.assertEqual(get_eta_to_checkpoint(30000, 250), '2 min')
        self.assertEqual(get_eta_to_checkpoint(100000, 20), '1h 23m')


if __name__ == '__main__':
    unittest.main()
