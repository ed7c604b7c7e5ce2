"""
Location fix data from the GPS collaborator.
"""

from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Coordinate:
    """Geographic position in decimal degrees."""
    
    latitude: float
    longitude: float
    
    @property
    def is_valid(self) -> bool:
        """Check if coordinate lies within latitude/longitude bounds."""
        return (-90 <= self.latitude <= 90 and 
                -180 <= self.longitude <= 180)

@dataclass(frozen=True)
class Fix:
    """One GPS-derived position/speed sample."""
    
    coordinate: Coordinate
    
    # Speed reported by the receiver (m/s), None when unavailable
    raw_speed: Optional[float] = None
    
    # Fix time in milliseconds
    timestamp_ms: int = 0
    
    @property
    def speed_or_zero(self) -> float:
        """Receiver speed, with a missing value treated as standstill."""
        return self.raw_speed if self.raw_speed is not None else 0.0
    
    @classmethod
    def from_location(cls, latitude: float, longitude: float,
                      speed: Optional[float] = None,
                      timestamp_ms: int = 0) -> 'Fix':
        """
        Build a fix from flat location values.
        
        Args:
            latitude: Latitude (degrees)
            longitude: Longitude (degrees)
            speed: Receiver speed (m/s) or None
            timestamp_ms: Fix time in milliseconds
            
        Returns:
            Fix
        """
        return cls(coordinate=Coordinate(latitude, longitude),
                   raw_speed=speed,
                   timestamp_ms=int(timestamp_ms))
