# windowseat/core.py
"""
The download orchestrator. Turns a flight number into a stored FlightPack:
route, checkpoints, landmarks, narration, offline maps and audio, saved
once at the end so a failed download never leaves a partial pack behind.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .config import WindowSeatConfig
from .exceptions import FlightPackError
from .landmarks import LandmarkEnricher, NominatimGeocoder, OverpassPOIClient, RateLimiter, build_osm_session
from .maps import MapDownloader, OfflineTileCache, create_tile_cache
from .narration import ClaudeTextGenerator, ElevenLabsSynthesizer, FlightContext, NarrationGenerator
from .route import Checkpoint, FlightPack, FlightRoute, PackSummary, RoutePoint, FlightDataService, build_checkpoints
from .storage import BlobStore, FlightPackStore, create_blob_store, normalize_flight_id

ProgressCallback = Callable[[str], None]


class FlightPackDownloader:
    """Builds, stores and manages flight packs."""

    def __init__(self, config: Optional[WindowSeatConfig] = None,
                 flight_data: Optional[FlightDataService] = None,
                 enricher: Optional[LandmarkEnricher] = None,
                 narrator: Optional[NarrationGenerator] = None,
                 tile_cache: Optional[OfflineTileCache] = None,
                 store: Optional[FlightPackStore] = None,
                 blob_store: Optional[BlobStore] = None):
        self.config = config or WindowSeatConfig()
        self.blob_store = blob_store or create_blob_store(self.config.storage_backend, self.config.cache_dir)
        self.flight_data = flight_data or FlightDataService(api_key=self.config.flight_api_key)
        self.enricher = enricher or self._build_enricher()
        self.narrator = narrator or self._build_narrator()
        self.tile_cache = tile_cache or create_tile_cache(
            self.blob_store,
            strategy=self.config.tiles.strategy,
            downloader=MapDownloader(timeout=self.config.tiles.download_timeout),
            url_template=self.config.tiles.tile_url_template,
            batch_size=self.config.tiles.batch_size,
        )
        self.store = store or FlightPackStore(self.blob_store, tile_cache=self.tile_cache)
        logging.info(f"FlightPackDownloader initialized (narration tier: {self.narrator.tier.value}, "
                     f"storage: {self.config.storage_backend})")

    def _build_enricher(self) -> LandmarkEnricher:
        opts = self.config.landmarks
        session = build_osm_session(opts.cache_enabled, os.path.join(self.config.cache_dir, opts.cache_name))
        geocoder = NominatimGeocoder(
            session=session,
            user_agent=opts.user_agent,
            timeout=opts.request_timeout,
            rate_limiter=RateLimiter(opts.request_delay_ms),
        )
        poi_client = OverpassPOIClient(session=session, timeout=opts.request_timeout)
        return LandmarkEnricher(geocoder, poi_client, search_radius_m=opts.search_radius_m)

    def _build_narrator(self) -> NarrationGenerator:
        prefs = self.config.narration
        return NarrationGenerator(
            text_generator=ClaudeTextGenerator(self.config.claude_api_key, model=prefs.model,
                                               max_tokens=prefs.max_tokens),
            speech_synthesizer=ElevenLabsSynthesizer(self.config.elevenlabs_api_key, settings=self.config.voice),
            audio_store=self.blob_store,
            preferences=prefs,
        )

    def download(self, flight_number: str, on_progress: Optional[ProgressCallback] = None) -> FlightPack:
        """
        Runs the full pipeline for one flight and saves the resulting pack.

        Raises:
            FlightPackError: The route could not be obtained or has fewer
                than two points. Nothing is saved in that case.
        """
        def report(message: str) -> None:
            if on_progress:
                on_progress(message)

        flight_id = normalize_flight_id(flight_number)
        if not flight_id:
            raise FlightPackError("A flight number is required", flight_number)
        logging.info(f"Starting flight pack download for {flight_id}")

        report("Fetching flight route...")
        try:
            flight = self.flight_data.get_flight_route(flight_id)
        except Exception as e:
            raise FlightPackError(f"Failed to fetch route for {flight_id}: {e}", flight_id) from e
        if flight is None or not flight.route or len(flight.route) < 2:
            raise FlightPackError(f"Route for {flight_id} has fewer than 2 points", flight_id)

        report("Creating checkpoints...")
        checkpoints = self.checkpoints_for(flight.route)

        if flight.using_demo_data:
            logging.info(f"{flight_id} uses a demo route")
        report("Identifying landmarks...")
        checkpoints = self.enricher.enrich(
            checkpoints, on_progress=lambda done, total: report(f"Identifying landmarks ({done}/{total})..."))

        report("Generating AI narrations...")
        context = FlightContext(
            flight_info=f"{flight.airline or ''} flight {flight_id}".strip(),
            origin=flight.origin.name,
            destination=flight.destination.name,
            total_checkpoints=len(checkpoints),
        )
        checkpoints = self.narrator.generate_narrations(
            checkpoints, context, on_progress=lambda done, total: report(f"Generating narration {done}/{total}..."))

        report("Downloading offline maps...")
        has_offline_maps, tiles_downloaded = self._download_maps(flight.route, flight_id, report)

        checkpoints = self._generate_audio(checkpoints, flight_id, report)
        has_audio = any(c.audio_ref for c in checkpoints)

        pack = FlightPack(
            id=flight_id,
            flight_number=flight_id,
            downloaded_at=datetime.now(timezone.utc).isoformat(),
            airline=flight.airline,
            origin=flight.origin,
            destination=flight.destination,
            route=list(flight.route),
            checkpoints=checkpoints,
            estimated_duration=flight.estimated_duration,
            has_offline_maps=has_offline_maps,
            has_audio=has_audio,
            map_tiles_downloaded=tiles_downloaded,
        )
        self.store.save(pack)
        logging.info(f"Flight pack {flight_id} ready: {len(checkpoints)} checkpoints, "
                     f"maps={has_offline_maps}, audio={has_audio}")
        return pack

    def _download_maps(self, route: List[RoutePoint], flight_id: str,
                       report: ProgressCallback) -> Tuple[bool, int]:
        def on_map_progress(progress) -> None:
            if progress.status == 'downloading':
                report(f"Downloading maps ({progress.percent}%)...")

        try:
            result = self.tile_cache.pre_cache(
                route, flight_id,
                on_progress=on_map_progress,
                zoom_levels=self.config.tiles.effective_zoom_levels(),
                buffer_meters=self.config.tiles.buffer_meters,
            )
        except Exception as e:
            logging.warning(f"Offline maps for {flight_id} failed: {e}")
            return False, 0
        return result.success, result.tiles_downloaded

    def _generate_audio(self, checkpoints: List[Checkpoint], flight_id: str,
                        report: ProgressCallback) -> List[Checkpoint]:
        if not self.narrator.has_voice:
            return checkpoints

        report("Generating voice narrations...")
        try:
            assignments = self.narrator.generate_audio(
                checkpoints, flight_id, on_progress=lambda done, total: report(f"Generating voice {done}/{total}..."))
        except Exception as e:
            logging.warning(f"Voice generation for {flight_id} failed: {e}")
            return checkpoints
        return self.narrator.apply_audio(checkpoints, assignments)

    def checkpoints_for(self, route: List[RoutePoint]) -> List[Checkpoint]:
        opts = self.config.checkpoints
        return build_checkpoints(
            route,
            num_checkpoints=opts.num_checkpoints,
            min_spacing_meters=opts.min_spacing_meters,
            geofence_radius_meters=opts.geofence_radius_meters,
        )

    def checkpoint_locations(self, route: List[RoutePoint]) -> List[Dict]:
        """Where the checkpoints of a route would fall, for previewing on a map."""
        return [
            {'id': c.id, 'name': c.name, 'latitude': c.latitude, 'longitude': c.longitude, 'kind': c.kind.value}
            for c in self.checkpoints_for(route)
        ]

    def preview_route(self, flight_number: str) -> FlightRoute:
        return self.flight_data.get_flight_route(normalize_flight_id(flight_number))

    def estimate_maps(self, route: List[RoutePoint]) -> Dict:
        return self.tile_cache.estimate(route, zoom_levels=self.config.tiles.effective_zoom_levels(),
                                        buffer_meters=self.config.tiles.buffer_meters)

    def get_pack(self, flight_id: str) -> Optional[FlightPack]:
        return self.store.load(flight_id)

    def list_packs(self) -> List[PackSummary]:
        return self.store.list()

    def delete_pack(self, flight_id: str) -> None:
        self.store.delete(flight_id)

    def storage_used(self) -> Dict[str, int]:
        return {
            'packs': self.store.size_bytes(),
            'maps': self.tile_cache.cache_size(),
        }
