#!/usr/bin/env python3
"""
replay_trip.py

Replay a logged drive through the motion pipeline and print the trip
summary. The CSV needs the columns

    timestamp_ms, latitude, longitude, speed

where an empty speed cell means the receiver reported no speed.

Usage:
    python tools/replay_trip.py drive.csv [--units imperial] [--plot]
"""

from __future__ import annotations
import argparse
import csv
import os
import sys
from typing import List

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from speedo.config import Config
from speedo.math import path_length, distance_to_display, speed_to_display
from speedo.sensors import Fix
from speedo.trip import MotionPipeline

def load_fixes(path: str) -> List[Fix]:
    """Read fixes from a CSV log, skipping rows that cannot be parsed."""
    fixes = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                speed = (row.get("speed") or "").strip()
                fixes.append(Fix.from_location(
                    latitude=float(row["latitude"]),
                    longitude=float(row["longitude"]),
                    speed=float(speed) if speed else None,
                    timestamp_ms=int(float(row["timestamp_ms"]))
                ))
            except (KeyError, ValueError) as e:
                print(f"Skipping line {line_no}: {e}")
    return fixes

def plot_trip(times_s: np.ndarray, raw: np.ndarray, filtered: np.ndarray, label: str) -> None:
    """Plot raw and filtered speed against time."""
    import matplotlib.pyplot as plt

    plt.figure(figsize=(10, 5))
    plt.plot(times_s, raw, ".", alpha=0.5, label="Receiver speed")
    plt.plot(times_s, filtered, "-", linewidth=2, label="Filtered speed")
    plt.xlabel("Time [s]")
    plt.ylabel(f"Speed [{label}]")
    plt.title("Trip replay")
    plt.grid(True)
    plt.legend()
    plt.tight_layout()
    plt.show()

def main() -> int:
    parser = argparse.ArgumentParser(description="Replay a logged drive through the motion pipeline")
    parser.add_argument("csvfile", help="CSV log with timestamp_ms, latitude, longitude, speed")
    parser.add_argument("--config", default=None, help="JSON config file (defaults if omitted)")
    parser.add_argument("--units", default=None, help="metric or imperial (overrides config)")
    parser.add_argument("--plot", action="store_true", help="Plot raw vs filtered speed")
    parser.add_argument("--verbose", action="store_true", help="Print every processed fix")
    args = parser.parse_args()

    config = Config(config_file=args.config)
    if args.units:
        config.set("units", args.units)
    if args.verbose:
        config.set("verbose", True)

    fixes = load_fixes(args.csvfile)
    if len(fixes) < 2:
        print("Need at least two fixes to replay a trip")
        return 1

    pipeline = MotionPipeline.from_config(config)

    times_s, raw, filtered = [], [], []
    for fix in fixes:
        snapshot = pipeline.process_fix(fix)
        if snapshot is None:
            continue
        times_s.append((fix.timestamp_ms - fixes[0].timestamp_ms) / 1000.0)
        raw.append(speed_to_display(fix.speed_or_zero, pipeline.units))
        filtered.append(snapshot.speed)

    # Cross-check accumulated distance against the whole-track length
    lats = [fix.coordinate.latitude for fix in fixes]
    lons = [fix.coordinate.longitude for fix in fixes]
    track_length = distance_to_display(path_length(lats, lons), pipeline.units)

    snapshot = pipeline.snapshot()
    print("=== Trip Summary ===")
    print(f"Fixes:     {len(fixes)}")
    print(f"Average:   {snapshot.average_speed:.1f} {snapshot.speed_label}")
    print(f"Max:       {snapshot.max_speed:.1f} {snapshot.speed_label}")
    print(f"Distance:  {snapshot.distance:.2f} {snapshot.distance_label} "
          f"(track {track_length:.2f} {snapshot.distance_label})")

    if args.plot:
        plot_trip(np.array(times_s), np.array(raw), np.array(filtered), snapshot.speed_label)

    return 0

if __name__ == "__main__":
    sys.exit(main())
