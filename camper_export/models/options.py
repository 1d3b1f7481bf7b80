"""Export configuration models."""

from enum import Enum
from pydantic import BaseModel, Field


class ExportFormat(str, Enum):
    """Document formats the engine can produce."""
    GPX = "gpx"
    KML = "kml"
    GEOJSON = "geojson"
    CSV = "csv"

    @property
    def extension(self) -> str:
        return "json" if self is ExportFormat.GEOJSON else self.value


class DeviceProfile(str, Enum):
    """Classes of GPS hardware/software the output is tailored to."""
    UNIVERSAL = "universal"
    GARMIN = "garmin"
    TOMTOM = "tomtom"
    SMARTPHONE = "smartphone"


class ExportOptions(BaseModel):
    """Options for a single export call."""
    
    format: ExportFormat = ExportFormat.GPX
    include_waypoints: bool = True
    include_campsites: bool = False
    include_route: bool = False
    include_vehicle_info: bool = False
    include_cost_data: bool = False
    include_planning_data: bool = False
    include_metadata: bool = True
    device_profile: DeviceProfile = DeviceProfile.UNIVERSAL
    custom_name: str | None = Field(
        default=None,
        description="Name for the exported document, replaces the trip title"
    )
    description: str | None = None
    author: str | None = None
    
    class Config:
        frozen = True
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "format": "gpx",
                "include_waypoints": True,
                "include_campsites": True,
                "include_route": True,
                "include_vehicle_info": True,
                "include_cost_data": False,
                "include_planning_data": False,
                "include_metadata": True,
                "device_profile": "garmin",
                "custom_name": "Berlin to Rome",
                "author": "Anna",
            }
        }
    
    @classmethod
    def nothing(cls, **overrides) -> "ExportOptions":
        """Options with every inclusion flag switched off."""
        flags = {
            "include_waypoints": False,
            "include_campsites": False,
            "include_route": False,
            "include_vehicle_info": False,
            "include_cost_data": False,
            "include_planning_data": False,
            "include_metadata": False,
        }
        flags.update(overrides)
        return cls(**flags)
