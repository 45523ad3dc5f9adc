# windowseat/route/data_models.py
"""
Defines the core data structures shared by the Flight Pack pipeline:
route points, checkpoints and their landmark annotations, and the flight
pack that is persisted for offline use.

Every record converts to and from plain dictionaries so packs can be
stored as JSON.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class CheckpointKind(str, Enum):
    DEPARTURE = 'departure'
    WAYPOINT = 'waypoint'
    ARRIVAL = 'arrival'


@dataclass(frozen=True)
class RoutePoint:
    """A single sample along the flight path."""
    latitude: float
    longitude: float
    altitude: Optional[float] = None  # meters
    timestamp: Optional[str] = None
    groundspeed: Optional[float] = None  # knots
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
            'timestamp': self.timestamp,
            'groundspeed': self.groundspeed,
            'name': self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoutePoint':
        return cls(
            latitude=data['latitude'],
            longitude=data['longitude'],
            altitude=data.get('altitude'),
            timestamp=data.get('timestamp'),
            groundspeed=data.get('groundspeed'),
            name=data.get('name'),
        )


@dataclass
class NearbyFeature:
    name: str
    type: str


@dataclass
class LandmarkInfo:
    """What the enrichment step learned about the ground below a checkpoint."""
    name: str
    type: str
    category: str
    region: Optional[str] = None
    country: Optional[str] = None
    nearby_features: List[NearbyFeature] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.type,
            'category': self.category,
            'region': self.region,
            'country': self.country,
            'nearby_features': [{'name': f.name, 'type': f.type} for f in self.nearby_features],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LandmarkInfo':
        return cls(
            name=data['name'],
            type=data.get('type', 'place'),
            category=data.get('category', 'general'),
            region=data.get('region'),
            country=data.get('country'),
            nearby_features=[NearbyFeature(f['name'], f['type']) for f in data.get('nearby_features', [])],
        )


@dataclass
class Checkpoint:
    """A point on the route with a geofence and, eventually, a narration."""
    id: str
    index: int
    name: str
    latitude: float
    longitude: float
    altitude: float
    radius_meters: float
    kind: CheckpointKind
    narration: Optional[str] = None
    audio_ref: Optional[str] = None
    landmark: Optional[LandmarkInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'index': self.index,
            'name': self.name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
            'radius_meters': self.radius_meters,
            'kind': self.kind.value,
            'narration': self.narration,
            'audio_ref': self.audio_ref,
            'landmark': self.landmark.to_dict() if self.landmark else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Checkpoint':
        landmark = data.get('landmark')
        return cls(
            id=data['id'],
            index=data['index'],
            name=data['name'],
            latitude=data['latitude'],
            longitude=data['longitude'],
            altitude=data['altitude'],
            radius_meters=data['radius_meters'],
            kind=CheckpointKind(data['kind']),
            narration=data.get('narration'),
            audio_ref=data.get('audio_ref'),
            landmark=LandmarkInfo.from_dict(landmark) if landmark else None,
        )


@dataclass
class Airport:
    code: str
    name: str
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'name': self.name,
            'city': self.city,
            'latitude': self.latitude,
            'longitude': self.longitude,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Airport':
        return cls(
            code=data['code'],
            name=data.get('name', data['code']),
            city=data.get('city'),
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
        )


@dataclass
class FlightDuration:
    hours: int
    minutes: int
    total_minutes: int

    def to_dict(self) -> Dict[str, int]:
        return {'hours': self.hours, 'minutes': self.minutes, 'total_minutes': self.total_minutes}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlightDuration':
        return cls(hours=data['hours'], minutes=data['minutes'], total_minutes=data['total_minutes'])


@dataclass
class FlightRoute:
    """What the flight route source returns for a flight number."""
    flight_number: str
    origin: Airport
    destination: Airport
    route: List[RoutePoint]
    airline: Optional[str] = None
    estimated_duration: Optional[FlightDuration] = None
    using_demo_data: bool = False


@dataclass
class FlightPack:
    """Everything needed to narrate one flight with no network."""
    id: str
    flight_number: str
    downloaded_at: str
    origin: Airport
    destination: Airport
    route: List[RoutePoint]
    checkpoints: List[Checkpoint]
    airline: Optional[str] = None
    estimated_duration: Optional[FlightDuration] = None
    has_offline_maps: bool = False
    has_audio: bool = False
    map_tiles_downloaded: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'flight_number': self.flight_number,
            'downloaded_at': self.downloaded_at,
            'airline': self.airline,
            'origin': self.origin.to_dict(),
            'destination': self.destination.to_dict(),
            'route': [p.to_dict() for p in self.route],
            'checkpoints': [c.to_dict() for c in self.checkpoints],
            'estimated_duration': self.estimated_duration.to_dict() if self.estimated_duration else None,
            'has_offline_maps': self.has_offline_maps,
            'has_audio': self.has_audio,
            'map_tiles_downloaded': self.map_tiles_downloaded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlightPack':
        duration = data.get('estimated_duration')
        return cls(
            id=data['id'],
            flight_number=data['flight_number'],
            downloaded_at=data['downloaded_at'],
            airline=data.get('airline'),
            origin=Airport.from_dict(data['origin']),
            destination=Airport.from_dict(data['destination']),
            route=[RoutePoint.from_dict(p) for p in data.get('route', [])],
            checkpoints=[Checkpoint.from_dict(c) for c in data.get('checkpoints', [])],
            estimated_duration=FlightDuration.from_dict(duration) if duration else None,
            has_offline_maps=data.get('has_offline_maps', False),
            has_audio=data.get('has_audio', False),
            map_tiles_downloaded=data.get('map_tiles_downloaded', 0),
        )


@dataclass
class PackSummary:
    id: str
    flight_number: str
    downloaded_at: str
    checkpoint_count: int
    has_audio: bool = False
    has_offline_maps: bool = False


@dataclass
class AudioAssignment:
    """Outcome of synthesizing one checkpoint's narration."""
    checkpoint_id: str
    audio_ref: Optional[str] = None
    error: Optional[str] = None
