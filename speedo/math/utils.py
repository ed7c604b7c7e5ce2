"""
Great-circle distance functions for GPS fixes.
"""

import numpy as np
import math
from .constants import EARTH_RADIUS_M

def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate the great circle distance between two points on Earth.
    
    Args:
        lat1, lon1: Latitude and longitude of first point (degrees)
        lat2, lon2: Latitude and longitude of second point (degrees)
        
    Returns:
        float: Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    
    # Haversine formula
    h = math.sin(dphi/2)**2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda/2)**2
    if h > 1.0:
        h = 1.0  # Rounding near antipodal points
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    
    return EARTH_RADIUS_M * c

def distance_meters(a, b):
    """
    Distance in meters between two coordinates.
    
    Args:
        a, b: Objects with latitude and longitude attributes (degrees)
        
    Returns:
        float: Distance in meters
    """
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)

def path_distances(latitudes, longitudes) -> np.ndarray:
    """
    Distances between consecutive points of a track.
    
    Args:
        latitudes: Sequence of latitudes (degrees)
        longitudes: Sequence of longitudes (degrees)
        
    Returns:
        np.ndarray: N-1 segment distances in meters
    """
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))
    
    if lat.shape != lon.shape:
        raise ValueError("Latitude and longitude arrays must have the same shape")
    
    if lat.size < 2:
        return np.zeros(0)
    
    dphi = np.diff(lat)
    dlambda = np.diff(lon)
    
    h = np.sin(dphi/2)**2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlambda/2)**2
    # Rounding can push h marginally past 1 for antipodal points
    h = np.clip(h, 0.0, 1.0)
    
    return 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

def path_length(latitudes, longitudes) -> float:
    """Total length of a track in meters."""
    return float(np.sum(path_distances(latitudes, longitudes)))
