#!/usr/bin/env python3
"""
Integration tests for the complete motion pipeline.
"""

import unittest
import math
import numpy as np
import sys
import os
from contextlib import redirect_stdout
from io import StringIO

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'tools'))

from speedo.filter import ScalarKalmanFilter
from speedo.math import Units, haversine_distance
from speedo.sensors import Coordinate, Fix, AccelSample, read_axis
from speedo.trip import MotionPipeline, PipelineState, DisplaySnapshot, TripState

K_FIRST = 3.0 / 3.01  # Gain of the first update with R=0.01, Q=3

def make_fix(lat, lon, speed, t_ms):
    return Fix.from_location(latitude=lat, longitude=lon, speed=speed, timestamp_ms=t_ms)

class TestSensorTypes(unittest.TestCase):
    """Test fix and accelerometer sample types."""
    
    def test_fix_from_location(self):
        fix = make_fix(1.5, 2.5, 3.0, 1234)
        
        self.assertEqual(fix.coordinate, Coordinate(1.5, 2.5))
        self.assertEqual(fix.raw_speed, 3.0)
        self.assertEqual(fix.timestamp_ms, 1234)
    
    def test_missing_speed_is_zero(self):
        fix = make_fix(0.0, 0.0, None, 0)
        self.assertEqual(fix.speed_or_zero, 0.0)
    
    def test_coordinate_validity(self):
        self.assertTrue(Coordinate(45.0, 90.0).is_valid)
        self.assertFalse(Coordinate(95.0, 0.0).is_valid)
        self.assertFalse(Coordinate(0.0, -181.0).is_valid)
    
    def test_read_axis(self):
        sample = AccelSample(x=0.5, y=None, z="bad")
        
        self.assertEqual(read_axis(sample, "x"), 0.5)
        self.assertIsNone(read_axis(sample, "y"))
        self.assertIsNone(read_axis(sample, "z"))
        with self.assertRaises(ValueError):
            read_axis(sample, "w")

class TestMotionPipeline(unittest.TestCase):
    """Test MotionPipeline class."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.emitted = []
        self.pipeline = MotionPipeline(on_snapshot=self.emitted.append)
    
    def test_initial_state(self):
        self.assertIs(self.pipeline.state, PipelineState.AWAITING_FIRST_FIX)
        self.assertIsNone(self.pipeline.last_fix)
        self.assertEqual(self.pipeline.snapshot(), DisplaySnapshot())
    
    def test_first_fix_emits_nothing(self):
        result = self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        
        self.assertIsNone(result)
        self.assertEqual(self.emitted, [])
        self.assertIs(self.pipeline.state, PipelineState.TRACKING)
        self.assertEqual(self.pipeline.snapshot().speed, 0.0)
        # The filter has not seen a measurement yet
        self.assertEqual(self.pipeline.filter.filter_count, 0)
    
    def test_end_to_end_metric(self):
        """Two fixes 0.001 degrees apart at the equator."""
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))
        
        self.assertIsNotNone(snapshot)
        self.assertIs(snapshot.units, Units.METRIC)
        self.assertAlmostEqual(snapshot.distance, 0.1112, places=4)
        
        expected_speed = K_FIRST * 12.0 * 3.6
        self.assertAlmostEqual(snapshot.speed, expected_speed, places=6)
        self.assertAlmostEqual(snapshot.average_speed, expected_speed, places=6)
        self.assertAlmostEqual(snapshot.max_speed, expected_speed, places=6)
        
        self.assertEqual(self.emitted, [snapshot])
        self.assertAlmostEqual(self.pipeline.last_elapsed_s, 1.0)
    
    def test_average_lies_between_filtered_speeds(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        first = self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))
        second = self.pipeline.process_fix(make_fix(0.0, 0.002, 8.0, 2000))
        
        low, high = sorted([first.speed, second.speed])
        self.assertGreater(second.average_speed, low)
        self.assertLess(second.average_speed, high)
        self.assertAlmostEqual(second.average_speed, (first.speed + second.speed) / 2)
        self.assertAlmostEqual(second.max_speed, high)
    
    def test_reset_keeps_last_fix(self):
        """After reset the next distance is measured from the previous fix."""
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))
        
        self.pipeline.reset()
        
        snapshot = self.pipeline.snapshot()
        self.assertEqual(snapshot.average_speed, 0.0)
        self.assertEqual(snapshot.max_speed, 0.0)
        self.assertEqual(snapshot.distance, 0.0)
        self.assertIs(self.pipeline.state, PipelineState.TRACKING)
        self.assertIs(self.pipeline.accumulator.state, TripState.IDLE)
        
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.002, 12.0, 2000))
        self.assertAlmostEqual(snapshot.distance, 0.1112, places=4)
        self.assertAlmostEqual(snapshot.average_speed, snapshot.speed)
    
    def test_reset_does_not_touch_filter(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))
        before = self.pipeline.filter.state
        
        self.pipeline.reset()
        self.pipeline.reset()
        
        self.assertEqual(self.pipeline.filter.state, before)
        self.assertEqual(self.pipeline.snapshot().distance, 0.0)
    
    def test_missing_speed_filters_zero(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, None, 0))
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.0, None, 1000))
        
        self.assertEqual(snapshot.speed, 0.0)
        self.assertEqual(snapshot.distance, 0.0)
    
    def test_identical_timestamps_tolerated(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 5000))
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.0001, 10.0, 5000))
        
        self.assertIsNotNone(snapshot)
        self.assertEqual(self.pipeline.last_elapsed_s, 0.0)
    
    def test_nan_speed_degrades_to_nan_output(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.001, float('nan'), 1000))
        
        self.assertTrue(math.isnan(snapshot.speed))
        self.assertTrue(math.isnan(snapshot.average_speed))
        # Distance is unaffected by a bad speed reading
        self.assertAlmostEqual(snapshot.distance, 0.1112, places=4)
    
    def test_acceleration_routed_to_predict(self):
        state = self.pipeline.process_acceleration(0.3)
        
        self.assertIsNotNone(state)
        self.assertAlmostEqual(state.P, 3.0)
        self.assertEqual(self.pipeline.filter.predict_count, 1)
        self.assertIs(self.pipeline.accumulator.state, TripState.IDLE)
    
    def test_non_numeric_acceleration_ignored(self):
        for value in [None, "0.5", True, [1.0]]:
            self.assertIsNone(self.pipeline.process_acceleration(value))
        
        self.assertEqual(self.pipeline.filter.predict_count, 0)
        self.assertEqual(self.pipeline.get_statistics()['ignored_accel_samples'], 4)
    
    def test_nan_acceleration_propagates(self):
        """Non-finite readings reach predict and poison the estimate."""
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))

        state = self.pipeline.process_acceleration(float('nan'))

        self.assertIsNotNone(state)
        stats = self.pipeline.get_statistics()
        self.assertEqual(stats['accel_samples'], 1)
        self.assertEqual(stats['ignored_accel_samples'], 0)

        # B * u is 0 * nan, covariance does not depend on the control input
        self.assertTrue(math.isnan(self.pipeline.filter.x))
        self.assertTrue(math.isfinite(self.pipeline.filter.P))

        # Stays poisoned for every later fix
        snapshot = self.pipeline.process_fix(make_fix(0.0, 0.002, 12.0, 2000))
        self.assertTrue(math.isnan(snapshot.speed))

    def test_infinite_acceleration_poisons_estimate(self):
        """With the default zero control gain, 0 * inf is NaN."""
        state = self.pipeline.process_acceleration(float('inf'))

        self.assertIsNotNone(state)
        self.assertTrue(math.isnan(state.x))
        self.assertTrue(math.isnan(self.pipeline.filter.x))
        self.assertEqual(self.pipeline.get_statistics()['accel_samples'], 1)

    def test_numpy_acceleration_accepted(self):
        self.assertIsNotNone(self.pipeline.process_acceleration(np.float64(0.2)))
        self.assertIsNotNone(self.pipeline.process_acceleration(np.float32(0.2)))
    
    def test_accel_sample_uses_configured_axis(self):
        pipeline = MotionPipeline(
            speed_filter=ScalarKalmanFilter(control_gain=1.0),
            accelerometer_axis="y"
        )
        state = pipeline.process_accel_sample(AccelSample(x=5.0, y=0.25, z=9.81))
        
        self.assertAlmostEqual(state.x, 0.25)
        self.assertIsNone(pipeline.process_accel_sample(AccelSample(x=1.0)))
    
    def test_acceleration_between_fixes_changes_covariance_only(self):
        """With zero control gain predict only inflates covariance."""
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        self.pipeline.process_fix(make_fix(0.0, 0.001, 12.0, 1000))
        x_before = self.pipeline.filter.x
        P_before = self.pipeline.filter.P
        
        for a in [0.1, -0.2, 0.05]:
            self.pipeline.process_acceleration(a)
        
        self.assertEqual(self.pipeline.filter.x, x_before)
        self.assertAlmostEqual(self.pipeline.filter.P, P_before + 9.0)
    
    def test_units_keep_policy(self):
        """Switching units leaves accumulated values as they were."""
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        metric = self.pipeline.process_fix(make_fix(0.0, 0.001, 10.0, 1000))
        
        self.pipeline.set_units(Units.IMPERIAL)
        # Snapshot is unchanged until the next fix
        self.assertIs(self.pipeline.snapshot().units, Units.METRIC)
        
        imperial = self.pipeline.process_fix(make_fix(0.0, 0.002, 10.0, 2000))
        
        self.assertIs(imperial.units, Units.IMPERIAL)
        self.assertEqual(imperial.speed_label, "MPH")
        self.assertEqual(imperial.distance_label, "mi")
        
        # Old metric value kept, new imperial value added on top
        step_miles = haversine_distance(0.0, 0.001, 0.0, 0.002) / 1609.34
        self.assertAlmostEqual(imperial.distance, metric.distance + step_miles)
        self.assertAlmostEqual(imperial.max_speed, max(metric.max_speed, imperial.speed))
        self.assertAlmostEqual(imperial.average_speed, (metric.speed + imperial.speed) / 2)
    
    def test_units_rescale_policy(self):
        pipeline = MotionPipeline(unit_switch_policy="rescale")
        pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        metric = pipeline.process_fix(make_fix(0.0, 0.001, 10.0, 1000))
        
        pipeline.toggle_units()
        imperial = pipeline.process_fix(make_fix(0.0, 0.002, 10.0, 2000))
        
        self.assertIs(pipeline.units, Units.IMPERIAL)
        self.assertAlmostEqual(imperial.distance, 2 * metric.distance * 1000.0 / 1609.34, places=6)
        self.assertAlmostEqual(imperial.average_speed,
                               (metric.speed / 1.609344 + imperial.speed) / 2)
    
    def test_toggle_units_round_trip(self):
        self.pipeline.toggle_units()
        self.assertIs(self.pipeline.units, Units.IMPERIAL)
        self.pipeline.toggle_units()
        self.assertIs(self.pipeline.units, Units.METRIC)
    
    def test_invalid_constructor_arguments(self):
        with self.assertRaises(ValueError):
            MotionPipeline(unit_switch_policy="sometimes")
        with self.assertRaises(ValueError):
            MotionPipeline(accelerometer_axis="q")
        with self.assertRaises(ValueError):
            MotionPipeline(units="knots")
    
    def test_verbose_prints_status(self):
        pipeline = MotionPipeline(verbose=True)
        out = StringIO()
        with redirect_stdout(out):
            pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
            pipeline.process_fix(make_fix(0.0, 0.001, 10.0, 1000))
        
        self.assertIn("km/h", out.getvalue())
    
    def test_idle_pipeline_never_errors(self):
        """A pipeline that never receives fixes stays at zero."""
        self.pipeline.reset()
        self.pipeline.set_units(Units.IMPERIAL)
        
        self.assertEqual(self.pipeline.snapshot().as_dict(), {
            'speed': 0.0,
            'average_speed': 0.0,
            'max_speed': 0.0,
            'distance': 0.0,
            'units': 'metric'
        })
    
    def test_get_statistics(self):
        self.pipeline.process_fix(make_fix(0.0, 0.0, 10.0, 0))
        self.pipeline.process_fix(make_fix(0.0, 0.001, 10.0, 1000))
        self.pipeline.process_acceleration(0.1)
        stats = self.pipeline.get_statistics()
        
        self.assertEqual(stats['state'], 'tracking')
        self.assertEqual(stats['trip_state'], 'accumulating')
        self.assertEqual(stats['fixes'], 2)
        self.assertEqual(stats['processed_fixes'], 1)
        self.assertEqual(stats['accel_samples'], 1)
        self.assertEqual(stats['filter']['measurements'], 1)

class TestSimulatedTrip(unittest.TestCase):
    """Run a longer noisy trip through the pipeline."""
    
    def test_noisy_cruise(self):
        rng = np.random.default_rng(42)
        pipeline = MotionPipeline()
        true_speed = 20.0  # m/s
        
        lon = 0.0
        step_deg = np.degrees(true_speed / 6371000.0)
        for i in range(120):
            for _ in range(10):
                pipeline.process_acceleration(rng.normal(0, 0.2))
            pipeline.process_fix(make_fix(0.0, lon, true_speed + rng.normal(0, 1.0), i * 1000))
            lon += step_deg
        
        snapshot = pipeline.snapshot()
        self.assertAlmostEqual(snapshot.average_speed, true_speed * 3.6, delta=2.0)
        self.assertGreater(snapshot.max_speed, snapshot.average_speed)
        # 119 steps of 20 m
        self.assertAlmostEqual(snapshot.distance, 119 * 20.0 / 1000.0, places=3)

class TestReplayTool(unittest.TestCase):
    """Test CSV loading in the replay tool."""
    
    def test_load_fixes(self):
        import tempfile
        from replay_trip import load_fixes
        
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "drive.csv")
            with open(path, "w") as f:
                f.write("timestamp_ms,latitude,longitude,speed\n")
                f.write("0,0.0,0.0,10.0\n")
                f.write("1000,0.0,0.001,\n")
                f.write("2000,bad,0.002,12.0\n")
            
            with redirect_stdout(StringIO()):
                fixes = load_fixes(path)
        
        self.assertEqual(len(fixes), 2)
        self.assertEqual(fixes[0].raw_speed, 10.0)
        self.assertIsNone(fixes[1].raw_speed)
        self.assertEqual(fixes[1].timestamp_ms, 1000)

if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
