"""
Core motion-estimation algorithms for the handheld speedometer.

This module provides platform-independent implementations of:
- Scalar Kalman filter for speed smoothing
- Great-circle distance and display unit conversion
- Trip statistics and the per-fix motion pipeline
"""

__version__ = "1.0.0"
__author__ = "Speedo Team"

from .filter import ScalarKalmanFilter
from .math import Units, distance_meters, speed_to_display, distance_to_display
from .sensors import Coordinate, Fix
from .trip import MotionPipeline, TripStatsAccumulator

__all__ = [
    "ScalarKalmanFilter",
    "Units",
    "distance_meters",
    "speed_to_display",
    "distance_to_display",
    "Coordinate",
    "Fix",
    "MotionPipeline",
    "TripStatsAccumulator"
]
