# run_flight_pack.py
import logging
import math
import os
import sys

# Add the project root to the Python path to ensure imports work correctly
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from windowseat.config import WindowSeatConfig
from windowseat.core import FlightPackDownloader
from windowseat.exceptions import FlightPackError
from windowseat.route.checkpoints import format_duration
from windowseat.tracking.core import PositionSample, TrackingSession
from windowseat.utils.coordinates import CoordinateCalculations
from windowseat.utils.formatting import format_bytes

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def simulate_flight(pack, step_m=900):
    """Walks the stored route from origin to destination and prints every narration as it triggers."""
    session = TrackingSession(on_checkpoint_entered=lambda cp: print(f"\n  > [{cp.index}] {cp.name}\n    {cp.narration}"))
    session.load_pack(pack)
    session.start()

    for start, end in zip(pack.route, pack.route[1:]):
        leg = CoordinateCalculations.distance_m(start.latitude, start.longitude, end.latitude, end.longitude)
        steps = max(1, int(math.ceil(leg / step_m)))
        for i in range(steps + 1):
            lat, lon = CoordinateCalculations.interpolate_great_circle(
                start.latitude, start.longitude, end.latitude, end.longitude, i / steps)
            session.on_position(PositionSample(latitude=lat, longitude=lon))

    session.stop()
    return len(session.triggered)


def main():
    flight_number = sys.argv[1] if len(sys.argv) > 1 else 'BA115'

    # --- Configuration ---
    config = WindowSeatConfig.from_env()

    print("--- Window Seat: Flight Pack Download ---")
    print(f"Flight: {flight_number}")
    print("-" * 40)

    downloader = FlightPackDownloader(config)
    try:
        pack = downloader.download(flight_number, on_progress=lambda message: print(f"  {message}"))
    except FlightPackError as e:
        print(f"\n[!] Could not build a flight pack for {e.flight_id}: {e}")
        sys.exit(1)

    print(f"\n{pack.origin.name} -> {pack.destination.name} ({format_duration(pack.estimated_duration)})")
    print(f"{len(pack.checkpoints)} checkpoints | maps: {pack.has_offline_maps} "
          f"({pack.map_tiles_downloaded} tiles) | audio: {pack.has_audio}")
    usage = downloader.storage_used()
    print(f"Storage: packs {format_bytes(usage['packs'])}, maps {format_bytes(usage['maps'])}")
    print("-" * 40)

    print("\n[Simulating the flight]")
    triggered = simulate_flight(pack)
    print(f"\n--- {triggered}/{len(pack.checkpoints)} checkpoints narrated ---")


if __name__ == "__main__":
    main()
