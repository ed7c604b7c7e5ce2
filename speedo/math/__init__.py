"""
Mathematical utilities for speed and distance calculations.
"""

from .utils import haversine_distance, distance_meters, path_distances, path_length
from .units import (Units, speed_to_display, distance_to_display, speed_label,
                    distance_label, toggle_units, parse_units, rescale_factors)
from .constants import *

__all__ = [
    "haversine_distance", "distance_meters", "path_distances", "path_length",
    "Units", "speed_to_display", "distance_to_display", "speed_label",
    "distance_label", "toggle_units", "parse_units", "rescale_factors"
]
