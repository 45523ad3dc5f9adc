# windowseat/narration/providers.py
"""
Thin HTTP clients for the text-generation (Anthropic Messages API) and
speech-synthesis (ElevenLabs) services.

Both retry transient failures through ``with_retry`` and raise
ProviderError when the service keeps answering with an error. An invalid
key (401) is never retried.
"""
import logging
import time
from typing import Callable, Dict, Optional

import requests

from ..config import VoiceSettings, is_api_key_configured
from ..constants import APIConstants
from ..exceptions import ConfigurationError, ProviderError
from ..utils.retry import with_retry, RetryEvent


def _error_from_response(response: requests.Response, service: str) -> ProviderError:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    message = None
    if isinstance(payload, dict):
        error = payload.get('error') or payload.get('detail')
        if isinstance(error, dict):
            message = error.get('message')
        elif isinstance(error, str):
            message = error
    return ProviderError(message or f"{service} HTTP {response.status_code}", status=response.status_code)


def _log_retry(service: str) -> Callable[[RetryEvent], None]:
    def on_retry(event: RetryEvent) -> None:
        logging.info(f"{service}: will retry in {event.delay}ms "
                     f"(attempt {event.attempt}/{event.max_retries}, error: {event.error})")
    return on_retry


class ClaudeTextGenerator:
    """Generates narration text with the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str], model: str = 'claude-sonnet-4-20250514',
                 max_tokens: int = 500, session: Optional[requests.Session] = None,
                 timeout: int = 60, retry_sleep: Callable[[float], None] = time.sleep):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retry_sleep = retry_sleep

    def is_configured(self) -> bool:
        return is_api_key_configured(self.api_key)

    def generate_text(self, prompt: str) -> str:
        if not self.is_configured():
            raise ConfigurationError("Claude API key not configured")

        def attempt(n: int) -> Dict:
            if n > 0:
                logging.debug(f"Claude retry attempt {n}")
            response = self.session.post(
                APIConstants.ANTHROPIC_API_URL,
                headers={
                    'Content-Type': 'application/json',
                    'x-api-key': self.api_key,
                    'anthropic-version': APIConstants.ANTHROPIC_VERSION,
                },
                json={
                    'model': self.model,
                    'max_tokens': self.max_tokens,
                    'messages': [{'role': 'user', 'content': prompt}],
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise _error_from_response(response, 'Claude')
            return response.json()

        data = with_retry(attempt, on_retry=_log_retry('Claude'), sleep=self.retry_sleep)
        try:
            return data['content'][0]['text']
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected Claude response shape: {e}") from e


class ElevenLabsSynthesizer:
    """Turns narration text into MP3 audio with ElevenLabs text-to-speech."""

    def __init__(self, api_key: Optional[str], settings: Optional[VoiceSettings] = None,
                 session: Optional[requests.Session] = None, timeout: int = 60,
                 retry_sleep: Callable[[float], None] = time.sleep):
        self.api_key = api_key
        self.settings = settings or VoiceSettings()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retry_sleep = retry_sleep

    def is_configured(self) -> bool:
        return is_api_key_configured(self.api_key)

    def synthesize(self, text: str, voice_options: Optional[Dict] = None) -> bytes:
        """
        Args:
            text: The narration to speak.
            voice_options: Per-call overrides: ``voice_id``, ``model_id`` and
                any of the VoiceSettings payload fields.
        """
        if not self.is_configured():
            raise ConfigurationError("ElevenLabs API key not configured")

        options = dict(voice_options or {})
        voice_id = options.pop('voice_id', None) or self.settings.voice_id
        model_id = options.pop('model_id', None) or self.settings.model_id
        voice_settings = self.settings.to_payload()
        voice_settings.update({k: v for k, v in options.items() if k in voice_settings})

        def attempt(_n: int) -> bytes:
            response = self.session.post(
                f"{APIConstants.ELEVENLABS_API_URL}/text-to-speech/{voice_id}",
                headers={
                    'Content-Type': 'application/json',
                    'Accept': 'audio/mpeg',
                    'xi-api-key': self.api_key,
                },
                json={
                    'text': text,
                    'model_id': model_id,
                    'voice_settings': voice_settings,
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise _error_from_response(response, 'ElevenLabs')
            return response.content

        audio = with_retry(attempt, on_retry=_log_retry('ElevenLabs'), sleep=self.retry_sleep)
        logging.debug(f"Speech generated ({len(audio)} bytes)")
        return audio
