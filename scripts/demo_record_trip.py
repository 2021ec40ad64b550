import os
import sys
import time
import threading
from datetime import datetime
import matplotlib.pyplot as plt

# Add project root to sys.path to find packages
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.join(current_dir, "..")
sys.path.append(os.path.join(project_root, "src"))

from kmtracker.config import TrackerConfig, configure_logging
from kmtracker.core.stream import FixBroadcaster
from kmtracker.metrics import path_length_km, bounding_box
from kmtracker.modules.distance.accumulator import DistanceAccumulator
from kmtracker.modules.recording import TripRecorder, SecondTicker
from kmtracker.modules.reporting import PeriodResolver, ReportAggregator, report_csv, report_details
from kmtracker.modules.storage import InMemoryTripRepository
from kmtracker.simulation import TrajectorySimulator
from kmtracker.core.trip import format_duration

# Simulated time runs this many times faster than real time
SPEEDUP = 50.0

def main():
    config = TrackerConfig.from_env()
    configure_logging(config.log_level)

    data_path = os.path.join(project_root, "data", "raw", "sample_drive.csv")
    if not os.path.exists(data_path):
        print(f"Error: File not found at {data_path}")
        print("Run scripts/generate_sample_fixes.py first.")
        return

    tz = config.tzinfo()
    repository = InMemoryTripRepository()
    source = FixBroadcaster()
    recorder = TripRecorder(
        repository,
        source=source,
        tz=tz,
        accumulator=DistanceAccumulator(radius_km=config.earth_radius_km),
    )
    recorder.add_listener(
        lambda snap: print(f"\r{snap.state.value:>9}  {format_duration(snap.elapsed_seconds)}  {snap.distance_km:7.2f} km", end="")
    )

    interval = config.tick_interval_seconds / SPEEDUP
    simulator = TrajectorySimulator(data_path, interval=interval)

    print(f"Replaying {data_path} ...")
    with SecondTicker(recorder.tick, interval=interval):
        recorder.start()

        # Pause halfway through the drive from another thread, as a user would
        def pause_and_resume():
            time.sleep(interval * 200)
            recorder.pause()
            time.sleep(interval * 20)
            recorder.resume()

        user = threading.Thread(target=pause_and_resume, daemon=True)
        user.start()
        simulator.replay(source)
        user.join()
        trip = recorder.stop()
    print()

    print(f"Trip saved: {format_duration(trip.driving_time_seconds)}, {trip.total_distance_km:.2f} km, {len(trip.path)} fixes")
    print(f" - Path length (recomputed): {path_length_km(trip.path):.2f} km")

    # --- Monthly report for the trip ---
    resolver = PeriodResolver(tz=tz)
    aggregator = ReportAggregator(tz=tz)
    period = resolver.monthly(trip.date.year, trip.date.month)
    report = aggregator.aggregate(period, repository)
    repository.save_report(report)
    print(report_details(report))

    # --- Save outputs ---
    script_name = "demo_record_trip"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = os.path.join(project_root, "data", "processed", script_name, timestamp)
    os.makedirs(output_dir, exist_ok=True)

    csv_path = os.path.join(output_dir, "report.csv")
    with open(csv_path, "w", newline="") as f:
        f.write(report_csv(report, aggregator.trips_for(report, repository)))
    print(f"Report CSV saved to {csv_path}")

    if not trip.path:
        print("No path to plot.")
        return

    box = bounding_box(trip.path)
    fig, ax = plt.subplots(figsize=(10, 10))
    ax.plot([f.longitude for f in trip.path], [f.latitude for f in trip.path], color='blue', linewidth=2)
    ax.scatter([trip.path[0].longitude], [trip.path[0].latitude], color='green', s=80, zorder=5, label='Start')
    ax.scatter([trip.path[-1].longitude], [trip.path[-1].latitude], color='red', s=80, zorder=5, label='End')
    ax.set_xlim(box['min_lon'], box['max_lon'])
    ax.set_ylim(box['min_lat'], box['max_lat'])
    ax.set_title(f"{report.title}: {trip.total_distance_km:.2f} km")
    ax.legend()

    output_img = os.path.join(output_dir, "trip_path.png")
    plt.savefig(output_img, dpi=150, bbox_inches='tight')
    print(f"Visualization saved to {output_img}")

    print("Done!")

if __name__ == "__main__":
    main()
