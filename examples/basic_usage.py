#!/usr/bin/env python3
"""
Basic usage example of the speedometer motion pipeline.

This example drives the pipeline with a simulated trip (accelerate, cruise,
brake) without any platform sensor dependencies.
"""

import sys
import os
import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from speedo.config import Config
from speedo.math.constants import EARTH_RADIUS_M
from speedo.sensors import Fix, AccelSample
from speedo.trip import MotionPipeline, DisplaySnapshot

def simulate_trip(duration=60, accel_rate_hz=20, seed=0):
    """
    Simulate a vehicle driving due east.
    
    Args:
        duration: Simulation duration in seconds
        accel_rate_hz: Accelerometer sample rate
        seed: Random seed for sensor noise
        
    Yields:
        ('fix', Fix) once per second and ('accel', AccelSample) at accel_rate_hz
    """
    rng = np.random.default_rng(seed)
    
    # Starting position (San Francisco)
    start_lat = 37.7749
    start_lon = -122.4194
    
    # Noise parameters
    speed_noise = 0.8    # m/s
    accel_noise = 0.2    # m/s²
    gps_noise = 0.00001  # degrees (~1m)
    
    dt = 1.0 / accel_rate_hz
    steps_per_fix = accel_rate_hz
    
    x = 0.0  # meters east of start
    
    for step in range(int(duration * accel_rate_hz)):
        t = step * dt
        
        # Accelerate for 15 s, cruise, brake over the last 10 s
        if t < 15:
            accel = 1.5
            speed = 1.5 * t
        elif t < duration - 10:
            accel = 0.0
            speed = 22.5
        else:
            accel = -2.0
            speed = max(0.0, 22.5 - 2.0 * (t - (duration - 10)))
        x += speed * dt
        
        yield 'accel', AccelSample(x=accel + rng.normal(0, accel_noise), y=0.0, z=9.81)
        
        if step % steps_per_fix == 0:
            lon_offset = x / (EARTH_RADIUS_M * np.cos(np.radians(start_lat))) * 180 / np.pi
            
            # Receivers drop the speed field now and then
            raw_speed = None if rng.random() < 0.05 else max(0.0, speed + rng.normal(0, speed_noise))
            
            yield 'fix', Fix.from_location(
                latitude=start_lat + rng.normal(0, gps_noise),
                longitude=start_lon + lon_offset + rng.normal(0, gps_noise),
                speed=raw_speed,
                timestamp_ms=int(t * 1000)
            )

def main():
    """Main example function."""
    print("Speedometer - Basic Usage Example")
    print("=" * 50)
    
    config = Config(config_file=None)
    
    snapshots = []
    pipeline = MotionPipeline.from_config(config, on_snapshot=snapshots.append)
    
    print("Initialized motion pipeline")
    print(f"Filter: R={pipeline.filter.R}, Q={pipeline.filter.Q}")
    print()
    
    print("Starting simulation (60 seconds)...")
    
    for kind, event in simulate_trip(duration=60):
        if kind == 'accel':
            pipeline.process_accel_sample(event)
            continue
        
        snapshot = pipeline.process_fix(event)
        if snapshot is not None and len(snapshots) % 10 == 0:
            print_status(snapshot, event.timestamp_ms)
        
        # Switch to imperial halfway through, as a user pressing the units button would
        if event.timestamp_ms == 30000:
            pipeline.toggle_units()
            print("Units switched to", pipeline.units.value)
    
    print("\nSimulation completed!")
    
    stats = pipeline.get_statistics()
    print("\n=== Final Statistics ===")
    print(f"Fixes: {stats['fixes']} ({stats['processed_fixes']} processed)")
    print(f"Accelerometer samples: {stats['accel_samples']}")
    print(f"Final: {pipeline.snapshot()}")
    
    pipeline.reset()
    print(f"After reset: {pipeline.snapshot()}")

def print_status(snapshot: DisplaySnapshot, timestamp_ms: int):
    """Print current trip status."""
    print(f"Time: {timestamp_ms / 1000:.0f}s")
    print(f"  Speed:    {snapshot.speed:5.1f} {snapshot.speed_label}")
    print(f"  Average:  {snapshot.average_speed:5.1f}  Max: {snapshot.max_speed:5.1f}")
    print(f"  Distance: {snapshot.distance:5.2f} {snapshot.distance_label}")
    print()

if __name__ == "__main__":
    main()
