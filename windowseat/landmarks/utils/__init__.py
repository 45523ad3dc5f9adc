from .scoring import POIScoring, POIQueryBuilder

__all__ = [
    "POIScoring",
    "POIQueryBuilder"
]
