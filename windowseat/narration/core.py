# windowseat/narration/core.py
"""
Narration and audio generation for a checkpoint set.

Narration text comes from a text-generation collaborator, one request per
checkpoint; any checkpoint whose request fails gets a fixed sentence for
its kind instead. Audio is synthesized from the narration text and stored
as a blob whose key becomes the checkpoint's ``audio_ref``. Neither step
ever aborts the batch because of one checkpoint.
"""
import dataclasses
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..config import NarrationPreferences
from ..route.data_models import AudioAssignment, Checkpoint
from .prompts import FlightContext, build_narration_prompt, fallback_narration


class NarrationTier(Enum):
    FULL = 'full'            # generated text and synthesized voice
    TEXT_ONLY = 'text_only'  # generated text, no voice
    STATIC = 'static'        # fixed sentences only


def audio_key(flight_id: str, checkpoint_id: str) -> str:
    return f"audio/{flight_id}/{checkpoint_id}.mp3"


def _configured(collaborator) -> bool:
    if collaborator is None:
        return False
    check = getattr(collaborator, 'is_configured', None)
    return bool(check()) if callable(check) else True


class NarrationGenerator:
    """Produces narration text and audio for checkpoints."""

    def __init__(self, text_generator=None, speech_synthesizer=None, audio_store=None,
                 preferences: Optional[NarrationPreferences] = None,
                 voice_options: Optional[Dict] = None):
        """
        Args:
            text_generator: Object with ``generate_text(prompt) -> str``.
            speech_synthesizer: Object with ``synthesize(text, voice_options) -> bytes``.
            audio_store: BlobStore receiving the synthesized audio.
            preferences: Content focus, length and language of the narration.
            voice_options: Passed through to every ``synthesize`` call.
        """
        self.text_generator = text_generator
        self.speech_synthesizer = speech_synthesizer
        self.audio_store = audio_store
        self.preferences = preferences or NarrationPreferences()
        self.voice_options = voice_options or {}

    @property
    def has_text(self) -> bool:
        return _configured(self.text_generator)

    @property
    def has_voice(self) -> bool:
        return _configured(self.speech_synthesizer) and self.audio_store is not None

    @property
    def tier(self) -> NarrationTier:
        if self.has_text and self.has_voice:
            return NarrationTier.FULL
        if self.has_text:
            return NarrationTier.TEXT_ONLY
        return NarrationTier.STATIC

    def generate_narrations(self, checkpoints: List[Checkpoint], flight_context: Optional[FlightContext] = None,
                            on_progress: Optional[Callable[[int, int], None]] = None) -> List[Checkpoint]:
        total = len(checkpoints)
        context = flight_context or FlightContext()
        if context.total_checkpoints is None:
            context = dataclasses.replace(context, total_checkpoints=total)

        if not self.has_text:
            logging.info("Text generation not configured, using fixed narrations")

        narrated = []
        for i, checkpoint in enumerate(checkpoints):
            text = None
            if self.has_text:
                try:
                    prompt = build_narration_prompt(checkpoint, context, self.preferences)
                    text = self.text_generator.generate_text(prompt)
                except Exception as e:
                    logging.warning(f"Narration for {checkpoint.id} failed, using fallback: {e}")
            if not text or not str(text).strip():
                text = fallback_narration(checkpoint)
            narrated.append(dataclasses.replace(checkpoint, narration=str(text).strip()))

            if on_progress:
                on_progress(i + 1, total)
        return narrated

    def generate_audio(self, checkpoints: List[Checkpoint], flight_id: str,
                       on_progress: Optional[Callable[[int, int], None]] = None) -> List[AudioAssignment]:
        """
        Synthesizes audio for every checkpoint that has narration text.
        Returns one assignment per such checkpoint, in order.
        """
        if not self.has_voice:
            logging.debug("Speech synthesis not configured, skipping audio")
            return []

        to_speak = [c for c in checkpoints if c.narration]
        total = len(to_speak)
        assignments = []
        for i, checkpoint in enumerate(to_speak):
            key = audio_key(flight_id, checkpoint.id)
            try:
                audio = self.speech_synthesizer.synthesize(checkpoint.narration, self.voice_options)
                if not audio:
                    raise ValueError("empty audio")
                self.audio_store.put(key, audio)
                assignments.append(AudioAssignment(checkpoint_id=checkpoint.id, audio_ref=key))
            except Exception as e:
                logging.warning(f"Audio for {checkpoint.id} failed: {e}")
                assignments.append(AudioAssignment(checkpoint_id=checkpoint.id, error=str(e)))

            if on_progress:
                on_progress(i + 1, total)

        generated = sum(1 for a in assignments if a.audio_ref)
        logging.info(f"Generated audio for {generated}/{total} checkpoints")
        return assignments

    @staticmethod
    def apply_audio(checkpoints: List[Checkpoint], assignments: List[AudioAssignment]) -> List[Checkpoint]:
        """New checkpoints carrying the audio refs of successful assignments."""
        refs = {a.checkpoint_id: a.audio_ref for a in assignments if a.audio_ref}
        return [dataclasses.replace(c, audio_ref=refs[c.id]) if c.id in refs else c for c in checkpoints]
