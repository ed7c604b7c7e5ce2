"""
Sensor data types delivered by the location and motion collaborators.
"""

from .location import Coordinate, Fix
from .motion import AccelSample, read_axis, is_numeric_reading

__all__ = ["Coordinate", "Fix", "AccelSample", "read_axis", "is_numeric_reading"]
