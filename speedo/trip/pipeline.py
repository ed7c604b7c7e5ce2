"""
Motion pipeline: turns location fixes and accelerometer samples into
display-ready speed and trip statistics.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable, Dict, Any

from ..filter import ScalarKalmanFilter, FilterState
from ..math.units import (Units, parse_units, speed_to_display, toggle_units,
                          speed_label, distance_label)
from ..math.utils import distance_meters
from ..sensors.location import Fix
from ..sensors.motion import AccelSample, read_axis, is_numeric_reading
from .stats import TripStatsAccumulator

class PipelineState(Enum):
    AWAITING_FIRST_FIX = "awaiting_first_fix"
    TRACKING = "tracking"

@dataclass(frozen=True)
class DisplaySnapshot:
    """Unit-converted values ready to render."""

    speed: float = 0.0
    average_speed: float = 0.0
    max_speed: float = 0.0
    distance: float = 0.0
    units: Units = Units.METRIC

    @property
    def speed_label(self) -> str:
        return speed_label(self.units)

    @property
    def distance_label(self) -> str:
        return distance_label(self.units)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'speed': self.speed,
            'average_speed': self.average_speed,
            'max_speed': self.max_speed,
            'distance': self.distance,
            'units': self.units.value
        }

    def __str__(self) -> str:
        return (
            f"{self.speed:.1f} {self.speed_label} "
            f"(avg {self.average_speed:.1f}, max {self.max_speed:.1f}, "
            f"{self.distance:.2f} {self.distance_label})"
        )

class MotionPipeline:
    """
    Routes fixes through the speed filter and trip accumulator.

    The first fix of a session only establishes the reference for the next
    distance delta. Every later fix is filtered, converted and accumulated.
    Accelerometer readings only drive the filter predict step.
    """

    def __init__(self,
                 speed_filter: Optional[ScalarKalmanFilter] = None,
                 units: Units = Units.METRIC,
                 unit_switch_policy: str = "keep",
                 accelerometer_axis: str = "x",
                 on_snapshot: Optional[Callable[[DisplaySnapshot], None]] = None,
                 verbose: bool = False):
        """
        Initialize the pipeline.

        Args:
            speed_filter: Filter to use (default parameters if None)
            units: Initial display units
            unit_switch_policy: 'keep' leaves accumulated stats untouched on a
                unit change, 'rescale' converts them to the new units
            accelerometer_axis: Axis used by process_accel_sample
            on_snapshot: Called with every emitted snapshot
            verbose: Print a status line for every processed fix
        """
        if unit_switch_policy not in ("keep", "rescale"):
            raise ValueError(f"Unknown unit switch policy: {unit_switch_policy}")
        if accelerometer_axis not in ("x", "y", "z"):
            raise ValueError(f"Unknown accelerometer axis: {accelerometer_axis}")

        self.filter = speed_filter or ScalarKalmanFilter()
        self.accumulator = TripStatsAccumulator()

        self.units = parse_units(units)
        self.unit_switch_policy = unit_switch_policy
        self.accelerometer_axis = accelerometer_axis
        self.on_snapshot = on_snapshot
        self.verbose = verbose

        self.state = PipelineState.AWAITING_FIRST_FIX
        self.last_fix: Optional[Fix] = None

        # Elapsed time between the last two fixes; not used by the estimate
        self.last_elapsed_s: Optional[float] = None

        self.current_speed = 0.0
        self._snapshot = DisplaySnapshot(units=self.units)

        # Statistics
        self.fix_count = 0
        self.processed_fix_count = 0
        self.accel_count = 0
        self.ignored_accel_count = 0

    @classmethod
    def from_config(cls, config,
                    on_snapshot: Optional[Callable[[DisplaySnapshot], None]] = None) -> 'MotionPipeline':
        """
        Build a pipeline from a Config.

        Args:
            config: speedo.config.Config instance
            on_snapshot: Called with every emitted snapshot
        """
        speed_filter = ScalarKalmanFilter(
            measurement_noise=config.measurement_noise,
            process_noise=config.process_noise,
            state_transition=config.state_transition,
            control_gain=config.control_gain
        )

        return cls(
            speed_filter=speed_filter,
            units=config.units,
            unit_switch_policy=config.unit_switch_policy,
            accelerometer_axis=config.accelerometer_axis,
            on_snapshot=on_snapshot,
            verbose=config.verbose
        )

    def process_fix(self, fix: Fix) -> Optional[DisplaySnapshot]:
        """
        Process one location fix.

        Args:
            fix: Location fix

        Returns:
            Updated snapshot, or None for the first fix of a session
        """
        self.fix_count += 1

        if self.state is PipelineState.AWAITING_FIRST_FIX:
            self.last_fix = fix
            self.state = PipelineState.TRACKING
            return None

        distance_delta = distance_meters(self.last_fix.coordinate, fix.coordinate)
        self.last_elapsed_s = (fix.timestamp_ms - self.last_fix.timestamp_ms) / 1000.0

        filtered = self.filter.filter(fix.speed_or_zero)
        self.current_speed = speed_to_display(filtered.x, self.units)

        stats = self.accumulator.update(self.current_speed, distance_delta, self.units)
        self.last_fix = fix
        self.processed_fix_count += 1

        self._snapshot = DisplaySnapshot(
            speed=self.current_speed,
            average_speed=stats.average_speed,
            max_speed=stats.max_speed,
            distance=stats.distance,
            units=self.units
        )

        if self.verbose:
            print(f"Fix {self.fix_count}: {self._snapshot} "
                  f"[raw {fix.speed_or_zero:.2f} m/s, step {distance_delta:.1f} m]")

        if self.on_snapshot is not None:
            self.on_snapshot(self._snapshot)

        return self._snapshot

    def process_acceleration(self, value) -> Optional[FilterState]:
        """
        Feed one accelerometer-axis reading to the filter predict step.

        Args:
            value: Acceleration reading; None and non-numeric values are ignored

        Returns:
            Post-predict filter state, or None if the reading was ignored
        """
        if not is_numeric_reading(value):
            self.ignored_accel_count += 1
            return None

        self.accel_count += 1
        return self.filter.predict(value)

    def process_accel_sample(self, sample: AccelSample) -> Optional[FilterState]:
        """Feed the configured axis of an accelerometer sample to the filter."""
        return self.process_acceleration(read_axis(sample, self.accelerometer_axis))

    def set_units(self, units: Units):
        """
        Change display units; takes effect from the next fix.

        Args:
            units: New unit system
        """
        units = parse_units(units)
        if units is self.units:
            return

        if self.unit_switch_policy == "rescale":
            self.accumulator.rescale(self.units, units)

        self.units = units

    def toggle_units(self):
        """Switch between metric and imperial units."""
        self.set_units(toggle_units(self.units))

    def reset(self):
        """
        Reset trip statistics.

        The filter, pipeline state and last fix are kept, so the next
        distance delta is still measured from the last fix.
        """
        self.accumulator.reset()
        self._snapshot = DisplaySnapshot(speed=self.current_speed, units=self.units)

    def snapshot(self) -> DisplaySnapshot:
        """Most recent snapshot (all zero before the first processed fix)."""
        return self._snapshot

    def get_statistics(self) -> Dict[str, Any]:
        """Get pipeline statistics."""
        return {
            'state': self.state.value,
            'trip_state': self.accumulator.state.value,
            'fixes': self.fix_count,
            'processed_fixes': self.processed_fix_count,
            'accel_samples': self.accel_count,
            'ignored_accel_samples': self.ignored_accel_count,
            'units': self.units.value,
            'last_elapsed_s': self.last_elapsed_s,
            'filter': self.filter.get_statistics()
        }
