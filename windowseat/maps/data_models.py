# windowseat/maps/data_models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TileRecord:
    """A cached tile as indexed for one flight. ``blob`` is only set when read back."""
    key: str  # "{z}/{x}/{y}"
    flight_id: str
    size_bytes: int
    stored_at: float
    blob: Optional[bytes] = None

    def to_meta(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'flight_id': self.flight_id,
            'size_bytes': self.size_bytes,
            'stored_at': self.stored_at,
        }

    @classmethod
    def from_meta(cls, data: Dict[str, Any]) -> 'TileRecord':
        return cls(
            key=data['key'],
            flight_id=data['flight_id'],
            size_bytes=data.get('size_bytes', 0),
            stored_at=data.get('stored_at', 0.0),
        )


@dataclass
class DownloadProgress:
    """Reported to ``on_progress`` while maps for a flight are downloading."""
    status: str  # 'preparing' | 'downloading' | 'complete'
    total: int
    current: int
    downloaded: int = 0
    failed: int = 0
    bytes_downloaded: int = 0
    estimated_bytes: int = 0

    @property
    def percent(self) -> int:
        if not self.total:
            return 100
        return int(round(self.current / self.total * 100))


@dataclass
class PreCacheResult:
    success: bool
    tiles_downloaded: int = 0
    tiles_failed: int = 0
    bytes_downloaded: int = 0
    strategy: str = 'tiles'
    errors: List[str] = field(default_factory=list)
