"""
Display unit systems and conversions from internal SI values.
"""

from enum import Enum
from typing import Tuple, Union
from .constants import *

class Units(Enum):
    """Selectable display unit system."""
    
    METRIC = "metric"
    IMPERIAL = "imperial"

# Accepted spellings for parse_units
_UNIT_ALIASES = {
    "metric": Units.METRIC,
    "km/h": Units.METRIC,
    "kmh": Units.METRIC,
    "imperial": Units.IMPERIAL,
    "mph": Units.IMPERIAL,
}

def speed_to_display(meters_per_second: float, units: Units) -> float:
    """
    Convert a speed in m/s to the display unit.
    
    Args:
        meters_per_second: Speed in m/s
        units: Target unit system
        
    Returns:
        float: Speed in km/h (metric) or MPH (imperial)
    """
    if units is Units.IMPERIAL:
        return meters_per_second * MPS_TO_KMH / KM_PER_MILE
    return meters_per_second * MPS_TO_KMH

def distance_to_display(meters: float, units: Units) -> float:
    """
    Convert a distance in meters to the display unit.
    
    Args:
        meters: Distance in meters
        units: Target unit system
        
    Returns:
        float: Distance in km (metric) or miles (imperial)
    """
    if units is Units.IMPERIAL:
        return meters / METERS_PER_MILE
    return meters / METERS_PER_KM

def speed_label(units: Units) -> str:
    """Label shown next to the speed readout."""
    return SPEED_LABEL_IMPERIAL if units is Units.IMPERIAL else SPEED_LABEL_METRIC

def distance_label(units: Units) -> str:
    """Label shown next to the distance readout."""
    return DISTANCE_LABEL_IMPERIAL if units is Units.IMPERIAL else DISTANCE_LABEL_METRIC

def toggle_units(units: Units) -> Units:
    """Return the other unit system."""
    return Units.METRIC if units is Units.IMPERIAL else Units.IMPERIAL

def parse_units(value: Union[str, Units]) -> Units:
    """
    Parse a unit system from config or user input.
    
    Args:
        value: Units member or one of 'metric', 'imperial', 'km/h', 'mph'
        
    Returns:
        Units member
    """
    if isinstance(value, Units):
        return value
    
    key = str(value).strip().lower()
    if key not in _UNIT_ALIASES:
        raise ValueError(f"Unknown unit system: {value}")
    
    return _UNIT_ALIASES[key]

def rescale_factors(old_units: Units, new_units: Units) -> Tuple[float, float]:
    """
    Factors that convert displayed values from one unit system to another.
    
    Args:
        old_units: Unit system the values are currently expressed in
        new_units: Unit system to convert to
        
    Returns:
        (speed_factor, distance_factor)
    """
    speed_factor = speed_to_display(1.0, new_units) / speed_to_display(1.0, old_units)
    distance_factor = distance_to_display(1.0, new_units) / distance_to_display(1.0, old_units)
    return (speed_factor, distance_factor)
