"""
Filter state representation for the scalar Kalman filter.
"""

from dataclasses import dataclass, asdict
from typing import Dict

@dataclass
class FilterState:
    """
    Represents the speed filter state.
    
    - x: Current speed estimate (m/s)
    - P: Estimate covariance
    - k: Kalman gain from the last measurement update, in [0, 1]
    """
    
    x: float = 0.0
    P: float = 0.0
    k: float = 0.0
    
    def copy(self) -> 'FilterState':
        """Create a copy of the state."""
        return FilterState(x=self.x, P=self.P, k=self.k)
    
    def as_dict(self) -> Dict[str, float]:
        return asdict(self)
    
    def __str__(self) -> str:
        return f"FilterState(x={self.x:.3f}, P={self.P:.4f}, k={self.k:.4f})"
