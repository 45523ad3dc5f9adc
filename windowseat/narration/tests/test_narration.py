#!/usr/bin/env python3
# windowseat/narration/tests/test_narration.py

import sys
from pathlib import Path
import unittest
from unittest.mock import MagicMock

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent.parent
sys.path.append(str(project_root))

from windowseat.config import VoiceSettings
from windowseat.exceptions import ConfigurationError, ProviderError
from windowseat.narration.core import NarrationGenerator, NarrationTier, audio_key
from windowseat.narration.prompts import FlightContext, fallback_narration
from windowseat.narration.providers import ClaudeTextGenerator, ElevenLabsSynthesizer
from windowseat.route.checkpoints import build_checkpoints
from windowseat.route.data_models import RoutePoint
from windowseat.storage.backends import MemoryBlobStore


def _response(payload=None, status=200, content=b''):
    response = MagicMock()
    response.ok = status < 400
    response.status_code = status
    response.json.return_value = payload or {}
    response.content = content
    return response


def make_checkpoints(n=5):
    return build_checkpoints([RoutePoint(51.47, -0.4543), RoutePoint(40.6413, -73.7781)], num_checkpoints=n)


class TestNarrationTiers(unittest.TestCase):
    def test_tier_selection(self):
        text = MagicMock()
        voice = MagicMock()
        store = MemoryBlobStore()
        self.assertEqual(NarrationGenerator(text, voice, store).tier, NarrationTier.FULL)
        self.assertEqual(NarrationGenerator(text, None, store).tier, NarrationTier.TEXT_ONLY)
        self.assertEqual(NarrationGenerator(text, voice, None).tier, NarrationTier.TEXT_ONLY)
        self.assertEqual(NarrationGenerator(None, voice, store).tier, NarrationTier.STATIC)
        self.assertEqual(NarrationGenerator().tier, NarrationTier.STATIC)

    def test_unconfigured_providers_count_as_missing(self):
        generator = NarrationGenerator(ClaudeTextGenerator(None), ElevenLabsSynthesizer('YOUR_KEY'),
                                       MemoryBlobStore())
        self.assertEqual(generator.tier, NarrationTier.STATIC)


class TestGenerateNarrations(unittest.TestCase):
    def setUp(self):
        self.checkpoints = make_checkpoints()

    def test_static_tier_uses_fallbacks(self):
        narrated = NarrationGenerator().generate_narrations(self.checkpoints)
        self.assertEqual([c.narration for c in narrated], [fallback_narration(c) for c in self.checkpoints])
        self.assertIsNone(self.checkpoints[0].narration)

    def test_failed_checkpoint_falls_back_alone(self):
        text = MagicMock()
        text.generate_text.side_effect = [
            'Climbing out over Berkshire.', ProviderError("overloaded", status=529), '   ',
            'Over the Atlantic.', 'Descending into New York.',
        ]
        progress = []
        narrated = NarrationGenerator(text_generator=text).generate_narrations(
            self.checkpoints, FlightContext(flight_info='BA115'), on_progress=lambda d, t: progress.append(d))

        self.assertEqual(narrated[0].narration, 'Climbing out over Berkshire.')
        self.assertEqual(narrated[1].narration, fallback_narration(self.checkpoints[1]))
        self.assertEqual(narrated[2].narration, fallback_narration(self.checkpoints[2]))
        self.assertEqual(narrated[4].narration, 'Descending into New York.')
        self.assertEqual(progress, [1, 2, 3, 4, 5])

    def test_prompt_counts_all_checkpoints(self):
        text = MagicMock()
        text.generate_text.return_value = 'ok'
        NarrationGenerator(text_generator=text).generate_narrations(self.checkpoints[:1])
        prompt = text.generate_text.call_args.args[0]
        self.assertIn('(checkpoint 1 of 1)', prompt)


class TestGenerateAudio(unittest.TestCase):
    def setUp(self):
        self.store = MemoryBlobStore()
        self.voice = MagicMock()
        self.checkpoints = NarrationGenerator().generate_narrations(make_checkpoints(3))

    def test_audio_stored_and_assigned(self):
        self.voice.synthesize.side_effect = [b'mp3-0', ProviderError("quota"), b'mp3-2']
        generator = NarrationGenerator(speech_synthesizer=self.voice, audio_store=self.store,
                                       voice_options={'voice_id': 'abc'})

        assignments = generator.generate_audio(self.checkpoints, 'BA115')

        self.assertEqual([a.checkpoint_id for a in assignments], ['checkpoint_0', 'checkpoint_1', 'checkpoint_2'])
        self.assertEqual(assignments[0].audio_ref, 'audio/BA115/checkpoint_0.mp3')
        self.assertIsNone(assignments[1].audio_ref)
        self.assertEqual(assignments[1].error, 'quota')
        self.assertEqual(self.store.get(audio_key('BA115', 'checkpoint_2')), b'mp3-2')
        self.voice.synthesize.assert_any_call(self.checkpoints[0].narration, {'voice_id': 'abc'})

        updated = NarrationGenerator.apply_audio(self.checkpoints, assignments)
        self.assertEqual([c.audio_ref for c in updated],
                         ['audio/BA115/checkpoint_0.mp3', None, 'audio/BA115/checkpoint_2.mp3'])

    def test_no_voice_means_no_assignments(self):
        self.assertEqual(NarrationGenerator(audio_store=self.store).generate_audio(self.checkpoints, 'BA115'), [])
        self.assertEqual(self.store.list_keys(), [])


class TestProviders(unittest.TestCase):
    def test_claude_request_and_response(self):
        session = MagicMock()
        session.post.return_value = _response({'content': [{'type': 'text', 'text': 'Below lies Wales.'}]})
        generator = ClaudeTextGenerator('sk-test', session=session, retry_sleep=MagicMock())

        self.assertEqual(generator.generate_text('prompt'), 'Below lies Wales.')
        kwargs = session.post.call_args.kwargs
        self.assertEqual(kwargs['headers']['x-api-key'], 'sk-test')
        self.assertEqual(kwargs['headers']['anthropic-version'], '2023-06-01')
        self.assertEqual(kwargs['json']['messages'], [{'role': 'user', 'content': 'prompt'}])

    def test_claude_invalid_key_not_retried(self):
        session = MagicMock()
        session.post.return_value = _response({'error': {'message': 'invalid x-api-key'}}, status=401)
        generator = ClaudeTextGenerator('sk-test', session=session, retry_sleep=MagicMock())

        with self.assertRaises(ProviderError) as ctx:
            generator.generate_text('prompt')
        self.assertEqual(str(ctx.exception), 'invalid x-api-key')
        self.assertEqual(session.post.call_count, 1)

    def test_claude_retries_server_errors(self):
        session = MagicMock()
        session.post.side_effect = [_response({}, status=503), _response({'content': [{'text': 'ok'}]})]
        sleep = MagicMock()
        generator = ClaudeTextGenerator('sk-test', session=session, retry_sleep=sleep)
        self.assertEqual(generator.generate_text('prompt'), 'ok')
        self.assertEqual(sleep.call_count, 1)

    def test_claude_unconfigured(self):
        with self.assertRaises(ConfigurationError):
            ClaudeTextGenerator(None).generate_text('prompt')

    def test_elevenlabs_request(self):
        session = MagicMock()
        session.post.return_value = _response(content=b'ID3audio')
        synthesizer = ElevenLabsSynthesizer('el-test', settings=VoiceSettings(voice_id='voice1'),
                                            session=session, retry_sleep=MagicMock())

        audio = synthesizer.synthesize('Hello', {'stability': 0.9})

        self.assertEqual(audio, b'ID3audio')
        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        self.assertTrue(url.endswith('/text-to-speech/voice1'))
        self.assertEqual(kwargs['headers']['xi-api-key'], 'el-test')
        self.assertEqual(kwargs['json']['voice_settings']['stability'], 0.9)
        self.assertEqual(kwargs['json']['model_id'], 'eleven_turbo_v2_5')


if __name__ == '__main__':
    unittest.main()
