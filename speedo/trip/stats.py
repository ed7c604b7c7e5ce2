"""
Running trip statistics: average speed, maximum speed and distance.
"""

from dataclasses import dataclass
from enum import Enum
from ..math.units import Units, distance_to_display, rescale_factors

class TripState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"

@dataclass
class TripStats:
    """
    Trip statistics in display units.
    
    average_speed == total_speed / sample_count whenever sample_count > 0.
    """
    
    average_speed: float = 0.0
    max_speed: float = 0.0
    distance: float = 0.0
    
    # Internal accumulators
    sample_count: int = 0
    total_speed: float = 0.0
    
    def copy(self) -> 'TripStats':
        """Create a copy of the stats."""
        return TripStats(
            average_speed=self.average_speed,
            max_speed=self.max_speed,
            distance=self.distance,
            sample_count=self.sample_count,
            total_speed=self.total_speed
        )

class TripStatsAccumulator:
    """
    Accumulates display speeds and distance deltas for the current trip.
    
    Values are stored in whatever display units were active when they were
    added; switching units does not convert them unless rescale() is called.
    """
    
    def __init__(self):
        self._stats = TripStats()
    
    @property
    def stats(self) -> TripStats:
        """Current statistics (a copy)."""
        return self._stats.copy()
    
    @property
    def state(self) -> TripState:
        if self._stats.sample_count > 0:
            return TripState.ACCUMULATING
        return TripState.IDLE
    
    def update(self, display_speed: float, distance_delta_meters: float,
               units: Units) -> TripStats:
        """
        Add one processed fix to the trip.
        
        Args:
            display_speed: Filtered speed already converted to display units
            distance_delta_meters: Distance from the previous fix (meters)
            units: Unit system used to convert the distance delta
            
        Returns:
            Updated statistics
        """
        stats = self._stats
        
        stats.total_speed += display_speed
        stats.sample_count += 1
        stats.average_speed = stats.total_speed / stats.sample_count
        stats.max_speed = max(stats.max_speed, display_speed)
        stats.distance += distance_to_display(distance_delta_meters, units)
        
        return self.stats
    
    def reset(self):
        """Zero all statistics."""
        self._stats = TripStats()
    
    def rescale(self, old_units: Units, new_units: Units):
        """
        Convert accumulated values from one unit system to another.
        
        Args:
            old_units: Unit system the values were accumulated in
            new_units: Unit system to express them in
        """
        if old_units is new_units:
            return
        
        speed_factor, distance_factor = rescale_factors(old_units, new_units)
        stats = self._stats
        
        stats.total_speed *= speed_factor
        stats.max_speed *= speed_factor
        stats.distance *= distance_factor
        if stats.sample_count > 0:
            stats.average_speed = stats.total_speed / stats.sample_count
