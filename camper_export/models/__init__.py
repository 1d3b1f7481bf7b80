"""Data models for trip export and import."""

from .trip import (
    TripModel,
    Waypoint,
    WaypointRole,
    RoutePoint,
    Campsite,
    VehicleProfile,
    VehicleType,
    CostBreakdown,
    TripPlan,
    TripMetadata,
)
from .options import ExportFormat, DeviceProfile, ExportOptions
from .results import ExportInfo, ExportResult, ImportResult

__all__ = [
    "TripModel",
    "Waypoint",
    "WaypointRole",
    "RoutePoint",
    "Campsite",
    "VehicleProfile",
    "VehicleType",
    "CostBreakdown",
    "TripPlan",
    "TripMetadata",
    "ExportFormat",
    "DeviceProfile",
    "ExportOptions",
    "ExportInfo",
    "ExportResult",
    "ImportResult",
]
