from .core import NarrationGenerator, NarrationTier, audio_key
from .prompts import FlightContext, build_narration_prompt, fallback_narration
from .providers import ClaudeTextGenerator, ElevenLabsSynthesizer

__all__ = [
    "NarrationGenerator",
    "NarrationTier",
    "audio_key",
    "FlightContext",
    "build_narration_prompt",
    "fallback_narration",
    "ClaudeTextGenerator",
    "ElevenLabsSynthesizer"
]
