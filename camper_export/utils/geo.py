"""Geospatial utility functions."""

from math import radians, sin, cos, sqrt, atan2
from typing import Sequence


EARTH_RADIUS_KM = 6371


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float,
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.
    
    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees
    
    Returns:
        Distance in kilometers
    """
    lat1_rad, lon1_rad = radians(lat1), radians(lon1)
    lat2_rad, lon2_rad = radians(lat2), radians(lon2)
    
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad
    
    a = sin(dlat/2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))
    
    return EARTH_RADIUS_KM * c


def cumulative_distances(points: Sequence[tuple[float, float]]) -> list[float]:
    """
    Running distance along a polyline.
    
    Args:
        points: Sequence of (lat, lon) tuples
    
    Returns:
        Distance from the first point to each point, in meters
    """
    distances = []
    total = 0.0
    for i, (lat, lon) in enumerate(points):
        if i > 0:
            prev_lat, prev_lon = points[i - 1]
            total += haversine_distance(prev_lat, prev_lon, lat, lon) * 1000
        distances.append(total)
    return distances


def thin_points(points: Sequence, stride: int) -> list:
    """
    Keep every `stride`-th point of a polyline.
    
    The first and last points are always kept so the line keeps its endpoints.
    """
    if stride <= 1 or len(points) <= 2:
        return list(points)
    
    thinned = list(points[::stride])
    if (len(points) - 1) % stride:
        thinned.append(points[-1])
    return thinned
