# windowseat/tracking/core.py

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple

from ..route.checkpoints import get_next_checkpoint, get_route_progress
from ..route.data_models import Checkpoint, FlightPack
from .geofence import check_geofences


class TrackingState(str, Enum):
    IDLE = 'idle'
    TRACKING = 'tracking'


@dataclass
class PositionSample:
    """A single reading from the device's location source."""
    latitude: float
    longitude: float
    altitude: Optional[float] = None  # meters
    speed: Optional[float] = None  # m/s
    heading: Optional[float] = None
    timestamp: float = field(default_factory=time.time)


class TrackingSession:
    """Feeds positions through the geofence check while a flight is in progress."""

    def __init__(self, on_checkpoint_entered: Optional[Callable[[Checkpoint], None]] = None):
        """
        Args:
            on_checkpoint_entered: Called once for every checkpoint entered,
                in checkpoint order. Usually starts narration playback.
        """
        self.on_checkpoint_entered = on_checkpoint_entered
        self.state = TrackingState.IDLE
        self.pack: Optional[FlightPack] = None
        self.checkpoints: List[Checkpoint] = []
        self.triggered: Set[str] = set()
        self.last_position: Optional[PositionSample] = None

    @property
    def is_tracking(self) -> bool:
        return self.state == TrackingState.TRACKING

    def load_pack(self, pack: FlightPack) -> None:
        """Makes ``pack`` the current flight; anything triggered for the previous one is forgotten."""
        if self.is_tracking:
            self.stop()
        self.pack = pack
        self.checkpoints = list(pack.checkpoints)
        self.reset()
        logging.info(f"Loaded flight pack {pack.id} with {len(self.checkpoints)} checkpoints")

    def start(self, checkpoints: Optional[List[Checkpoint]] = None) -> None:
        if checkpoints is not None:
            self.checkpoints = list(checkpoints)
        self.triggered = set()
        self.last_position = None
        self.state = TrackingState.TRACKING
        logging.info(f"Tracking started with {len(self.checkpoints)} checkpoints")

    def stop(self) -> None:
        self.state = TrackingState.IDLE
        logging.info(f"Tracking stopped ({len(self.triggered)} checkpoints triggered)")

    def reset(self) -> None:
        self.triggered = set()
        self.last_position = None

    def on_position(self, sample: PositionSample) -> List[Checkpoint]:
        """Returns the checkpoints newly entered at this position (empty while idle)."""
        if not self.is_tracking:
            return []

        self.last_position = sample
        entered = check_geofences(sample.latitude, sample.longitude, self.checkpoints, self.triggered)
        for checkpoint in entered:
            logging.info(f"Checkpoint reached: {checkpoint.name} ({checkpoint.id})")
            if self.on_checkpoint_entered:
                try:
                    self.on_checkpoint_entered(checkpoint)
                except Exception as e:
                    logging.error(f"Checkpoint handler failed for {checkpoint.id}: {e}")
        return entered

    def next_checkpoint(self) -> Optional[Tuple[Checkpoint, float]]:
        """Nearest checkpoint not yet triggered, with its distance in meters."""
        if self.last_position is None:
            return None
        return get_next_checkpoint(self.last_position.latitude, self.last_position.longitude,
                                   self.checkpoints, self.triggered)

    def progress(self) -> Optional[float]:
        """Fraction of the loaded pack's route flown so far."""
        if self.last_position is None or self.pack is None:
            return None
        return get_route_progress(self.last_position.latitude, self.last_position.longitude, self.pack.route)
