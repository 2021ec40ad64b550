import os
import argparse
import numpy as np
import pandas as pd

def generate_drive(n_fixes: int, seed: int, start_lat: float, start_lon: float) -> pd.DataFrame:
    """
    Synthetic drive: a heading that drifts slowly, a speed around 50 km/h,
    one fix per second and a red-light stop in the middle (stationary jitter).
    """
    rng = np.random.default_rng(seed)

    heading = np.cumsum(rng.normal(0.0, 0.05, n_fixes)) + rng.uniform(0, 2 * np.pi)
    speed_kmh = np.clip(rng.normal(50.0, 8.0, n_fixes), 0.0, None)

    stop_start = n_fixes // 2
    stop_end = min(n_fixes, stop_start + 30)
    speed_kmh[stop_start:stop_end] = 0.0

    step_km = speed_kmh / 3600.0
    d_lat = step_km * np.cos(heading) / 111.32
    d_lon = step_km * np.sin(heading) / (111.32 * np.cos(np.radians(start_lat)))

    # GPS jitter of a few meters on every fix
    jitter = rng.normal(0.0, 0.00002, (n_fixes, 2))

    lat = start_lat + np.cumsum(d_lat) + jitter[:, 0]
    lon = start_lon + np.cumsum(d_lon) + jitter[:, 1]
    return pd.DataFrame({"latitude": lat, "longitude": lon})

def main():
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.join(current_dir, "..")

    parser = argparse.ArgumentParser(description="Write a synthetic drive as a latitude/longitude CSV.")
    parser.add_argument("--fixes", type=int, default=600)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--lat", type=float, default=43.6532)
    parser.add_argument("--lon", type=float, default=-79.3832)
    parser.add_argument("--out", default=os.path.join(project_root, "data", "raw", "sample_drive.csv"))
    args = parser.parse_args()

    os.makedirs(os.path.dirname(os.path.abspath(args.out)), exist_ok=True)
    df = generate_drive(args.fixes, args.seed, args.lat, args.lon)
    df.to_csv(args.out, index=False)
    print(f"Wrote {len(df)} fixes to {args.out}")

if __name__ == "__main__":
    main()
