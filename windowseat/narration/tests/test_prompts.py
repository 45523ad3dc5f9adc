#!/usr/bin/env python3
# windowseat/narration/tests/test_prompts.py

import sys
from pathlib import Path
import unittest

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent.parent
sys.path.append(str(project_root))

from windowseat.config import NarrationPreferences
from windowseat.narration.prompts import (
    FlightContext, build_landmark_context, build_narration_prompt, build_route_context, fallback_narration
)
from windowseat.route.data_models import Checkpoint, CheckpointKind, LandmarkInfo, NearbyFeature


def make_checkpoint(index=4, kind=CheckpointKind.WAYPOINT, landmark=None, name='Waypoint 4'):
    return Checkpoint(id=f"checkpoint_{index}", index=index, name=name, latitude=51.47, longitude=-0.4543,
                      altitude=10668, radius_meters=15000, kind=kind, landmark=landmark)


class TestPrompts(unittest.TestCase):
    def setUp(self):
        self.context = FlightContext(flight_info='British Airways flight BA115', origin='London Heathrow',
                                     destination='John F. Kennedy International', total_checkpoints=20)

    def test_prompt_carries_position_and_journey(self):
        prompt = build_narration_prompt(make_checkpoint(), self.context)
        self.assertIn('Location: 51.4700°, -0.4543°', prompt)
        self.assertIn('approximately 35,000 feet altitude', prompt)
        self.assertIn('Flight: British Airways flight BA115', prompt)
        self.assertIn('Route: London Heathrow → John F. Kennedy International', prompt)
        self.assertIn('Journey progress: 20% (checkpoint 5 of 20)', prompt)
        self.assertNotIn('IMPORTANT: Write the narration in', prompt)

    def test_preferences_change_instructions(self):
        prefs = NarrationPreferences(content_focus='historical', length='short', language='fr')
        prompt = build_narration_prompt(make_checkpoint(), self.context, prefs)
        self.assertIn('Focus primarily on historical events', prompt)
        self.assertIn('Write 1-2 sentences', prompt)
        self.assertIn('IMPORTANT: Write the narration in French.', prompt)

    def test_landmark_context(self):
        landmark = LandmarkInfo(name='Cork', type='river', category='water_feature', region='Munster',
                                country='Ireland', nearby_features=[NearbyFeature('Lee', 'river'),
                                                                    NearbyFeature('Unknown', 'feature')])
        text = build_landmark_context(make_checkpoint(landmark=landmark, name='Cork'))
        self.assertEqual(text, "Location: Cork\nType: river\nRegion: Munster, Ireland\nNearby: Lee")
        self.assertEqual(build_landmark_context(make_checkpoint()), 'Landmark: Waypoint 4')
        self.assertEqual(build_landmark_context(None), '')

    def test_route_context_partial(self):
        self.assertEqual(build_route_context(FlightContext(origin='London Heathrow')),
                         'Departed from: London Heathrow')
        self.assertEqual(build_route_context(FlightContext()), '')

    def test_fallback_by_kind(self):
        self.assertIn('just departed', fallback_narration(make_checkpoint(kind=CheckpointKind.DEPARTURE)))
        self.assertIn('descent', fallback_narration(make_checkpoint(kind=CheckpointKind.ARRIVAL)))
        self.assertIn('cruising', fallback_narration(make_checkpoint()))


if __name__ == '__main__':
    unittest.main()
