"""
Scalar Kalman filter for speed smoothing.
"""

from .kalman import ScalarKalmanFilter
from .state import FilterState

__all__ = ["ScalarKalmanFilter", "FilterState"]
