"""
Trip statistics and the per-fix motion pipeline.
"""

from .stats import TripStats, TripState, TripStatsAccumulator
from .pipeline import MotionPipeline, PipelineState, DisplaySnapshot

__all__ = ["TripStats", "TripState", "TripStatsAccumulator",
           "MotionPipeline", "PipelineState", "DisplaySnapshot"]
