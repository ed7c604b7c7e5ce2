"""
Physical constants and conversion factors for speed measurement.
"""

# Earth parameters
EARTH_RADIUS_M = 6371000.0  # Mean spherical Earth radius in meters

# Speed conversion
MPS_TO_KMH = 3.6            # 1 m/s in km/h
KM_PER_MILE = 1.609344      # Used for speed (km/h -> MPH)

# Distance conversion
METERS_PER_KM = 1000.0
METERS_PER_MILE = 1609.34   # Used for distance (m -> mi)

# Display labels
SPEED_LABEL_METRIC = "km/h"
SPEED_LABEL_IMPERIAL = "MPH"
DISTANCE_LABEL_METRIC = "km"
DISTANCE_LABEL_IMPERIAL = "mi"

# Default noise parameters for the speed filter
R_SPEED_MEASUREMENT = 0.01  # Measurement noise
Q_SPEED_PROCESS = 3.0       # Process noise

# Filter model parameters
SPEED_STATE_TRANSITION = 1.0  # Speed carries over unchanged between steps
SPEED_CONTROL_GAIN = 0.0      # Accelerometer input does not move the estimate
INITIAL_SPEED_ESTIMATE = 0.0
INITIAL_SPEED_COVARIANCE = 0.0
