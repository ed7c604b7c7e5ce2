"""
One-dimensional Kalman filter for smoothing a noisy speed signal.
"""

from typing import Dict, Any
from .state import FilterState
from ..math.constants import *

class ScalarKalmanFilter:
    """
    Recursive estimator for a single scalar (speed along the direction of travel).
    
    Model:
        x' = A * x + B * u        (predict)
        P' = A * P * A + Q
        k  = P' / (P' + R)        (update)
        x  = x' + k * (z - x')
        P  = (1 - k) * P'
    
    The estimate starts at x = 0, P = 0 rather than being seeded from the
    first measurement, so the first update returns about 0.997 * z with the
    default R and Q.

    Non-finite inputs are not rejected; they propagate into the estimate.
    """
    
    def __init__(self,
                 measurement_noise: float = R_SPEED_MEASUREMENT,
                 process_noise: float = Q_SPEED_PROCESS,
                 state_transition: float = SPEED_STATE_TRANSITION,
                 control_gain: float = SPEED_CONTROL_GAIN,
                 initial_estimate: float = INITIAL_SPEED_ESTIMATE,
                 initial_covariance: float = INITIAL_SPEED_COVARIANCE):
        """
        Initialize the filter.
        
        Args:
            measurement_noise: R, variance of the speed measurement error
            process_noise: Q, variance of the speed drift between steps
            state_transition: A, how the estimate carries over between steps
            control_gain: B, weight of the control input in the predict step
            initial_estimate: Starting speed estimate (m/s)
            initial_covariance: Starting estimate covariance
        """
        if not measurement_noise > 0:
            raise ValueError(f"Measurement noise must be positive, got {measurement_noise}")
        if not process_noise > 0:
            raise ValueError(f"Process noise must be positive, got {process_noise}")
        
        self.R = float(measurement_noise)
        self.Q = float(process_noise)
        self.A = float(state_transition)
        self.B = float(control_gain)
        
        self.initial_estimate = float(initial_estimate)
        self.initial_covariance = float(initial_covariance)
        
        self.x = self.initial_estimate
        self.P = self.initial_covariance
        self.k = 0.0
        
        # Statistics
        self.predict_count = 0
        self.filter_count = 0
    
    @property
    def state(self) -> FilterState:
        """Current state (a copy)."""
        return FilterState(x=self.x, P=self.P, k=self.k)
    
    def predict(self, control_input: float = 0.0) -> FilterState:
        """
        Prediction step without a measurement.
        
        Args:
            control_input: Control input u (e.g. accelerometer reading along one axis)
            
        Returns:
            Post-predict state
        """
        self._predict(control_input)
        self.predict_count += 1
        return self.state
    
    def filter(self, measurement: float) -> FilterState:
        """
        Predict then update with a speed measurement.
        
        Args:
            measurement: Measured speed (m/s)
            
        Returns:
            Updated state
        """
        self._predict(0.0)
        
        # Kalman gain
        self.k = self.P / (self.P + self.R)
        
        # Update estimate and covariance
        self.x = self.x + self.k * (measurement - self.x)
        self.P = (1 - self.k) * self.P
        
        self.filter_count += 1
        
        return self.state
    
    def _predict(self, control_input: float):
        self.x = self.A * self.x + self.B * control_input
        self.P = self.A * self.P * self.A + self.Q
    
    def reset(self):
        """Reset the estimate to its initial values."""
        self.x = self.initial_estimate
        self.P = self.initial_covariance
        self.k = 0.0
        
        # Reset counters
        self.predict_count = 0
        self.filter_count = 0
    
    def get_statistics(self) -> Dict[str, Any]:
        """Get filter statistics."""
        return {
            'predictions': self.predict_count,
            'measurements': self.filter_count,
            'estimate': self.x,
            'covariance': self.P,
            'gain': self.k
        }
