"""Multi-format route export/import engine for camper trips."""

from .models import (
    TripModel,
    Waypoint,
    WaypointRole,
    RoutePoint,
    Campsite,
    VehicleProfile,
    CostBreakdown,
    TripPlan,
    TripMetadata,
    ExportFormat,
    DeviceProfile,
    ExportOptions,
    ExportResult,
    ImportResult,
)
from .service import export_trip, export_trip_to_file, import_route, detect_format

__all__ = [
    "TripModel",
    "Waypoint",
    "WaypointRole",
    "RoutePoint",
    "Campsite",
    "VehicleProfile",
    "CostBreakdown",
    "TripPlan",
    "TripMetadata",
    "ExportFormat",
    "DeviceProfile",
    "ExportOptions",
    "ExportResult",
    "ImportResult",
    "export_trip",
    "export_trip_to_file",
    "import_route",
    "detect_format",
]
