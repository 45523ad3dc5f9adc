# windowseat/config.py
"""
Configuration for the Flight Pack pipeline.

Every option has a working default so a bare ``WindowSeatConfig()`` builds
a demo-capable pipeline. API keys are normally pulled from the environment
with ``WindowSeatConfig.from_env()``.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .constants import APIConstants, MapConstants


def is_api_key_configured(key: Optional[str]) -> bool:
    """Placeholder keys such as 'YOUR_API_KEY' count as missing."""
    if not key:
        return False
    return not key.strip().upper().startswith(APIConstants.PLACEHOLDER_KEY_PREFIX)


@dataclass
class CheckpointOptions:
    num_checkpoints: int = 20
    min_spacing_meters: float = 80000
    geofence_radius_meters: float = 15000


@dataclass
class LandmarkOptions:
    user_agent: str = APIConstants.DEFAULT_USER_AGENT
    request_delay_ms: int = 1100  # Nominatim allows one request per second
    search_radius_m: int = 50000
    request_timeout: int = 25
    cache_enabled: bool = True
    cache_name: str = 'osm_cache'


@dataclass
class NarrationPreferences:
    """What the narration should talk about and how long it should be."""
    content_focus: str = 'mixed'  # 'geological' | 'historical' | 'cultural' | 'mixed'
    length: str = 'medium'  # 'short' | 'medium' | 'long'
    language: str = 'en'
    model: str = 'claude-sonnet-4-20250514'
    max_tokens: int = 500


@dataclass
class VoiceSettings:
    voice_id: str = 'EXAVITQu4vr4xnSDxMaL'
    model_id: str = 'eleven_turbo_v2_5'
    stability: float = 0.5
    similarity_boost: float = 0.75
    style: float = 0.0
    use_speaker_boost: bool = True

    def to_payload(self) -> Dict:
        return {
            'stability': self.stability,
            'similarity_boost': self.similarity_boost,
            'style': self.style,
            'use_speaker_boost': self.use_speaker_boost,
        }


@dataclass
class TileOptions:
    tile_url_template: str = MapConstants.DEFAULT_TILE_URL
    zoom_levels: Tuple[int, ...] = MapConstants.DEFAULT_ZOOM_LEVELS
    high_detail: bool = False
    buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS
    batch_size: int = MapConstants.BATCH_SIZE
    download_timeout: int = MapConstants.DOWNLOAD_TIMEOUT_S
    strategy: str = 'tiles'  # 'tiles' | 'static'

    def effective_zoom_levels(self) -> Tuple[int, ...]:
        if self.high_detail:
            return tuple(sorted(set(self.zoom_levels) | {8}))
        return tuple(self.zoom_levels)


@dataclass
class WindowSeatConfig:
    """Top-level configuration handed to the download orchestrator."""
    claude_api_key: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None
    flight_api_key: Optional[str] = None
    cache_dir: str = '.windowseat'
    storage_backend: str = 'file'  # 'file' | 'sqlite' | 'memory'
    checkpoints: CheckpointOptions = field(default_factory=CheckpointOptions)
    landmarks: LandmarkOptions = field(default_factory=LandmarkOptions)
    narration: NarrationPreferences = field(default_factory=NarrationPreferences)
    voice: VoiceSettings = field(default_factory=VoiceSettings)
    tiles: TileOptions = field(default_factory=TileOptions)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'WindowSeatConfig':
        """Builds a config from WINDOWSEAT_* environment variables."""
        env = os.environ if environ is None else environ
        config = cls(
            claude_api_key=env.get('WINDOWSEAT_CLAUDE_API_KEY'),
            elevenlabs_api_key=env.get('WINDOWSEAT_ELEVENLABS_API_KEY'),
            flight_api_key=env.get('WINDOWSEAT_FLIGHT_API_KEY'),
            cache_dir=env.get('WINDOWSEAT_CACHE_DIR', '.windowseat'),
            storage_backend=env.get('WINDOWSEAT_STORAGE_BACKEND', 'file'),
        )
        if env.get('WINDOWSEAT_VOICE_ID'):
            config.voice.voice_id = env['WINDOWSEAT_VOICE_ID']
        if env.get('WINDOWSEAT_LANGUAGE'):
            config.narration.language = env['WINDOWSEAT_LANGUAGE']
        if env.get('WINDOWSEAT_USER_AGENT'):
            config.landmarks.user_agent = env['WINDOWSEAT_USER_AGENT']
        if env.get('WINDOWSEAT_HIGH_DETAIL_MAPS', '').lower() in ('1', 'true', 'yes'):
            config.tiles.high_detail = True
        return config

    @property
    def has_text_generation(self) -> bool:
        return is_api_key_configured(self.claude_api_key)

    @property
    def has_voice(self) -> bool:
        return is_api_key_configured(self.elevenlabs_api_key)

    @property
    def has_flight_data(self) -> bool:
        return is_api_key_configured(self.flight_api_key)
