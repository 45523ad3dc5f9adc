# windowseat/landmarks/core.py
"""
The enrichment stage of the pipeline. Attaches a real-world landmark name
and category to each checkpoint using a reverse geocoder and a POI lookup.

Enrichment is best effort: a checkpoint whose lookup fails is returned
exactly as it came in, and the output always has the same length and order
as the input.
"""
import dataclasses
import logging
from typing import Callable, List, Optional

from ..route.data_models import Checkpoint, LandmarkInfo, NearbyFeature
from .utils.scoring import POIScoring

MAX_NEARBY_FEATURES = 5


class LandmarkEnricher:
    """Looks up landmarks for checkpoints, one checkpoint at a time."""

    def __init__(self, geocoder, poi_client, search_radius_m: float = 50000):
        """
        Args:
            geocoder: Object with ``reverse_geocode(lat, lon) -> dict | None``.
            poi_client: Object with ``query_pois(lat, lon, radius_m) -> list``
                returning elements already ranked by relevance.
            search_radius_m: Radius of the POI search around each checkpoint.
        """
        self.geocoder = geocoder
        self.poi_client = poi_client
        self.search_radius_m = search_radius_m

    def enrich(self, checkpoints: List[Checkpoint],
               on_progress: Optional[Callable[[int, int], None]] = None) -> List[Checkpoint]:
        total = len(checkpoints)
        logging.info(f"Enriching {total} checkpoints...")
        enriched = []

        for i, checkpoint in enumerate(checkpoints):
            try:
                landmark = self.lookup_landmark(checkpoint.latitude, checkpoint.longitude)
            except Exception as e:
                logging.warning(f"Checkpoint {checkpoint.id} lookup failed: {e}")
                landmark = None

            if landmark:
                logging.debug(f"Checkpoint {checkpoint.id}: '{checkpoint.name}' -> '{landmark.name}'")
                enriched.append(dataclasses.replace(checkpoint, name=landmark.name, landmark=landmark))
            else:
                enriched.append(checkpoint)

            if on_progress:
                on_progress(i + 1, total)

        logging.info("Enrichment complete")
        return enriched

    def lookup_landmark(self, lat: float, lon: float) -> Optional[LandmarkInfo]:
        """Landmark for one coordinate, or None when nothing nameable is found."""
        geocode = self.geocoder.reverse_geocode(lat, lon)

        # Open water has nothing for the POI search to find
        if POIScoring.is_over_ocean(geocode):
            pois = []
        else:
            pois = self.poi_client.query_pois(lat, lon, self.search_radius_m) or []

        name = POIScoring.best_name(geocode, pois)
        if not name:
            return None

        address = (geocode or {}).get('address') or {}
        return LandmarkInfo(
            name=name,
            type=POIScoring.location_type(geocode, pois),
            category=POIScoring.category(geocode, pois),
            region=address.get('state') or address.get('region'),
            country=address.get('country'),
            nearby_features=[
                NearbyFeature(name=POIScoring.poi_label(poi), type=POIScoring.poi_type(poi))
                for poi in pois[:MAX_NEARBY_FEATURES]
            ],
        )
