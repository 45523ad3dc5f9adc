#!/usr/bin/env python3
# windowseat/tests/test_config.py

import sys
from pathlib import Path
import unittest

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent
sys.path.append(str(project_root))

from windowseat.config import TileOptions, WindowSeatConfig, is_api_key_configured


class TestConfig(unittest.TestCase):
    def test_placeholder_keys(self):
        self.assertFalse(is_api_key_configured(None))
        self.assertFalse(is_api_key_configured(''))
        self.assertFalse(is_api_key_configured('YOUR_CLAUDE_API_KEY'))
        self.assertTrue(is_api_key_configured('sk-ant-123'))

    def test_defaults(self):
        config = WindowSeatConfig()
        self.assertEqual(config.checkpoints.num_checkpoints, 20)
        self.assertEqual(config.checkpoints.geofence_radius_meters, 15000)
        self.assertEqual(config.storage_backend, 'file')
        self.assertFalse(config.has_text_generation)
        self.assertFalse(config.has_voice)
        self.assertFalse(config.has_flight_data)

    def test_from_env(self):
        config = WindowSeatConfig.from_env({
            'WINDOWSEAT_CLAUDE_API_KEY': 'sk-ant-123',
            'WINDOWSEAT_ELEVENLABS_API_KEY': 'YOUR_KEY',
            'WINDOWSEAT_STORAGE_BACKEND': 'sqlite',
            'WINDOWSEAT_VOICE_ID': 'voice-9',
            'WINDOWSEAT_LANGUAGE': 'de',
            'WINDOWSEAT_HIGH_DETAIL_MAPS': 'true',
        })
        self.assertTrue(config.has_text_generation)
        self.assertFalse(config.has_voice)
        self.assertEqual(config.storage_backend, 'sqlite')
        self.assertEqual(config.voice.voice_id, 'voice-9')
        self.assertEqual(config.narration.language, 'de')
        self.assertEqual(config.tiles.effective_zoom_levels(), (4, 5, 6, 7, 8))

    def test_zoom_levels(self):
        self.assertEqual(TileOptions().effective_zoom_levels(), (4, 5, 6, 7))


if __name__ == '__main__':
    unittest.main()
