# windowseat/landmarks/utils/scoring.py
"""
Ranking and classification of OpenStreetMap features found near a
checkpoint, plus the Overpass query that finds them.
"""
from typing import Dict, List, Optional

NOTABLE_NATURAL = ('peak', 'mountain_range', 'volcano')
WATER_TYPES = ('ocean', 'sea', 'water', 'bay')
PLACE_NAME_FIELDS = ('city', 'town', 'village', 'county', 'state', 'country')


class POIScoring:
    """Scores and classifies POI elements (Overpass JSON dictionaries)."""

    @staticmethod
    def relevance_score(poi: Dict) -> int:
        tags = poi.get('tags') or {}
        score = 0
        if tags.get('boundary') == 'national_park':
            score += 100
        if tags.get('natural') == 'mountain_range':
            score += 90
        if tags.get('natural') == 'volcano':
            score += 85
        if tags.get('natural') == 'peak':
            score += 80
        if tags.get('tourism') == 'attraction':
            score += 70
        if tags.get('waterway') == 'river' and tags.get('name'):
            score += 60
        if tags.get('natural') in ('lake', 'water'):
            score += 50
        if tags.get('name'):
            score += 20
        return score

    @staticmethod
    def rank(elements: List[Dict]) -> List[Dict]:
        """Named elements only, most relevant first (stable for ties)."""
        named = [el for el in elements if (el.get('tags') or {}).get('name')]
        return sorted(named, key=POIScoring.relevance_score, reverse=True)

    @staticmethod
    def is_over_ocean(geocode: Optional[Dict]) -> bool:
        """No result, no land address, or a water-typed result means open water."""
        if not geocode:
            return True
        address = geocode.get('address') or {}
        if not any(address.get(k) for k in ('country', 'state', 'county', 'city')):
            return True
        return geocode.get('type') in WATER_TYPES

    @staticmethod
    def is_notable(poi: Dict) -> bool:
        tags = poi.get('tags') or {}
        return tags.get('boundary') == 'national_park' or tags.get('natural') in NOTABLE_NATURAL

    @staticmethod
    def best_name(geocode: Optional[Dict], pois: List[Dict]) -> Optional[str]:
        """
        A notable POI wins; then the most specific geocoded place name;
        then whichever POI ranked first.
        """
        for poi in pois:
            if POIScoring.is_notable(poi) and poi['tags'].get('name'):
                return poi['tags']['name']

        address = (geocode or {}).get('address') or {}
        for field_name in PLACE_NAME_FIELDS:
            if address.get(field_name):
                return address[field_name]

        if pois and (pois[0].get('tags') or {}).get('name'):
            return pois[0]['tags']['name']
        return None

    @staticmethod
    def location_type(geocode: Optional[Dict], pois: List[Dict]) -> str:
        for poi in pois:
            tags = poi.get('tags') or {}
            if tags.get('boundary') == 'national_park':
                return 'national_park'
            natural = tags.get('natural')
            if natural == 'peak':
                return 'mountain_peak'
            if natural in ('mountain_range', 'volcano', 'glacier'):
                return natural
            if tags.get('waterway') == 'river':
                return 'river'
            if natural in ('lake', 'bay', 'coastline'):
                return natural

        geocode = geocode or {}
        category = geocode.get('category')
        if category == 'natural':
            return geocode.get('type') or 'natural_feature'
        if category == 'boundary':
            return 'administrative'
        if category == 'place':
            return geocode.get('type') or 'settlement'
        return 'waypoint'

    @staticmethod
    def category(geocode: Optional[Dict], pois: List[Dict]) -> str:
        for poi in pois:
            tags = poi.get('tags') or {}
            if tags.get('boundary') == 'national_park' or tags.get('leisure') == 'nature_reserve':
                return 'protected_area'
            if tags.get('natural'):
                return 'natural_feature'
            if tags.get('waterway'):
                return 'water_feature'

        category = (geocode or {}).get('category')
        if category == 'natural':
            return 'natural_feature'
        if category == 'place':
            return 'settlement'
        return 'general'

    @staticmethod
    def poi_type(poi: Dict) -> str:
        tags = poi.get('tags') or {}
        if tags.get('boundary') == 'national_park':
            return 'national_park'
        for key in ('natural', 'waterway', 'tourism'):
            if tags.get(key):
                return tags[key]
        return 'feature'

    @staticmethod
    def poi_label(poi: Dict) -> str:
        tags = poi.get('tags') or {}
        return tags.get('name') or tags.get('natural') or tags.get('tourism') or 'Unknown'


class POIQueryBuilder:
    """Builds the Overpass QL query for scenic features around a point."""

    @staticmethod
    def build_query(lat: float, lon: float, radius_m: float, timeout_sec: int = 10, limit: int = 10) -> str:
        around = f"(around:{int(radius_m)},{lat},{lon})"
        selectors = [
            'node["natural"~"peak|mountain_range|volcano|cliff|ridge|valley|glacier|bay|beach|coastline"]',
            'node["tourism"~"attraction|viewpoint"]',
            'node["boundary"="national_park"]',
            'way["natural"~"water|river|lake|sea"]',
            'way["waterway"="river"]',
            'way["boundary"="national_park"]',
            'relation["boundary"="national_park"]',
            'relation["natural"="mountain_range"]',
        ]
        body = "\n".join(f"  {selector}{around};" for selector in selectors)
        return f"[out:json][timeout:{timeout_sec}];\n(\n{body}\n);\nout tags center {limit};"
