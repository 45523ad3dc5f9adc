# windowseat/storage/flight_pack_store.py
"""
Persistence of complete flight packs.

Packs are stored as JSON under ``packs/<ID>.json`` where ID is the
normalized flight id. Saving the same id again overwrites the previous pack
(last write wins). Loads are served from an in-memory cache when possible.
"""
import json
import logging
from typing import Dict, List, Optional

from ..route.data_models import FlightPack, PackSummary
from ..route.flight_data import normalize_flight_number as normalize_flight_id
from .backends import BlobStore

PACK_PREFIX = 'packs/'
AUDIO_PREFIX = 'audio/'


def pack_key(flight_id: str) -> str:
    return f"{PACK_PREFIX}{normalize_flight_id(flight_id)}.json"


class FlightPackStore:
    """Saves, loads, lists and deletes flight packs on a BlobStore."""

    def __init__(self, backend: BlobStore, tile_cache=None):
        """
        Args:
            backend: Where packs (and their audio) live.
            tile_cache: Optional OfflineTileCache whose per-flight data is
                removed along with a pack.
        """
        self.backend = backend
        self.tile_cache = tile_cache
        self._hot: Dict[str, FlightPack] = {}

    def save(self, pack: FlightPack) -> None:
        flight_id = normalize_flight_id(pack.id)
        payload = json.dumps(pack.to_dict()).encode('utf-8')
        self.backend.put(pack_key(flight_id), payload)
        self._hot[flight_id] = FlightPack.from_dict(json.loads(payload))
        logging.info(f"Saved flight pack {flight_id} ({len(pack.checkpoints)} checkpoints, {len(payload)} bytes)")

    def load(self, flight_id: str) -> Optional[FlightPack]:
        flight_id = normalize_flight_id(flight_id)
        if flight_id in self._hot:
            return self._hot[flight_id]

        raw = self.backend.get(pack_key(flight_id))
        if raw is None:
            return None
        try:
            pack = FlightPack.from_dict(json.loads(raw.decode('utf-8')))
        except (ValueError, KeyError, TypeError) as e:
            logging.warning(f"Stored pack {flight_id} is unreadable: {e}")
            return None
        self._hot[flight_id] = FlightPack.from_dict(json.loads(payload))
        return pack

    def list(self) -> List[PackSummary]:
        """Summaries of every stored pack, newest download first."""
        summaries = []
        for key in self.backend.list_keys(PACK_PREFIX):
            flight_id = key[len(PACK_PREFIX):-len('.json')]
            pack = self.load(flight_id)
            if pack is None:
                continue
            summaries.append(PackSummary(
                id=pack.id,
                flight_number=pack.flight_number,
                downloaded_at=pack.downloaded_at,
                checkpoint_count=len(pack.checkpoints),
                has_audio=pack.has_audio,
                has_offline_maps=pack.has_offline_maps,
            ))
        return sorted(summaries, key=lambda s: s.downloaded_at, reverse=True)

    def delete(self, flight_id: str) -> None:
        flight_id = normalize_flight_id(flight_id)
        self.backend.delete(pack_key(flight_id))
        self.backend.delete_prefix(f"{AUDIO_PREFIX}{flight_id}/")
        self._hot.pop(flight_id, None)
        logging.info(f"Deleted flight pack {flight_id}")

        if self.tile_cache is not None:
            try:
                self.tile_cache.clear_for_flight(flight_id)
            except Exception as e:
                logging.warning(f"Failed to clear map tiles for {flight_id}: {e}")

    def clear(self) -> None:
        self.backend.delete_prefix(PACK_PREFIX)
        self.backend.delete_prefix(AUDIO_PREFIX)
        self._hot.clear()
        logging.info("Cleared all flight packs")

        if self.tile_cache is not None:
            try:
                self.tile_cache.clear_all()
            except Exception as e:
                logging.warning(f"Failed to clear map tiles: {e}")

    def size_bytes(self) -> int:
        return self.backend.total_size(PACK_PREFIX) + self.backend.total_size(AUDIO_PREFIX)

    def get_audio(self, audio_ref: str) -> Optional[bytes]:
        return self.backend.get(audio_ref)
