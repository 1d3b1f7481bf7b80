"""Utility functions for trip export."""

from .geo import haversine_distance, cumulative_distances, thin_points

__all__ = [
    "haversine_distance",
    "cumulative_distances",
    "thin_points",
]
