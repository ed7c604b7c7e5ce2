"""
Accelerometer samples from the motion-sensor collaborator.
"""

import numbers
from dataclasses import dataclass
from typing import Optional

AXES = ("x", "y", "z")

@dataclass
class AccelSample:
    """Accelerometer reading; any axis may be missing."""
    
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None

def is_numeric_reading(value) -> bool:
    """True for real numbers (NaN and infinities included), False for None, bools and anything else."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)

def read_axis(sample: AccelSample, axis: str = "x") -> Optional[float]:
    """
    Extract one axis from a sample.
    
    Args:
        sample: Accelerometer sample
        axis: 'x', 'y' or 'z'
        
    Returns:
        The reading, or None if it is missing or not numeric
    """
    if axis not in AXES:
        raise ValueError(f"Unknown accelerometer axis: {axis}")
    
    value = getattr(sample, axis)
    if not is_numeric_reading(value):
        return None
    return float(value)
