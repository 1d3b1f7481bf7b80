"""Trip domain models handed to the export engine."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from camper_export.utils.geo import cumulative_distances


class WaypointRole(str, Enum):
    """Position of a waypoint within the trip."""
    START = "start"
    WAYPOINT = "waypoint"
    END = "end"


class VehicleType(str, Enum):
    """Types of camper vehicles."""
    MOTORHOME = "motorhome"
    CARAVAN = "caravan"
    CAMPERVAN = "campervan"


class Waypoint(BaseModel):
    """A user-placed stop on the trip."""

    id: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str = ""
    role: WaypointRole = WaypointRole.WAYPOINT
    description: str | None = None
    elevation: float | None = Field(default=None, description="Elevation in meters")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "wp-berlin",
                "lat": 52.52,
                "lng": 13.405,
                "name": "Berlin",
                "role": "start",
                "description": "Pick up the motorhome",
            }
        }


class RoutePoint(BaseModel):
    """A sample of the computed route geometry."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    distance: float = Field(
        default=0,
        ge=0,
        description="Cumulative distance from the route start in meters"
    )
    elevation: float | None = None

    class Config:
        frozen = True


class Campsite(BaseModel):
    """A campsite selected for the trip."""

    id: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str
    amenities: list[str] = Field(default_factory=list)
    price: float | None = Field(default=None, ge=0, description="Price per night")
    currency: str = "EUR"
    campsite_type: str = "campsite"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "cs-1",
                "lat": 48.7758,
                "lng": 9.1829,
                "name": "Camping Cannstatter Wasen",
                "amenities": ["showers", "electricity", "wifi"],
                "price": 32.5,
                "currency": "EUR",
                "campsite_type": "campsite",
            }
        }


class VehicleProfile(BaseModel):
    """Physical dimensions of the camper, used for route restrictions."""

    height: float = Field(..., gt=0, le=4.5, description="Height in meters")
    width: float = Field(..., gt=0, le=3.0, description="Width in meters")
    weight: float = Field(..., gt=0, le=40, description="Weight in tonnes")
    length: float = Field(..., gt=0, le=20, description="Length in meters")
    vehicle_type: VehicleType | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "height": 3.2,
                "width": 2.3,
                "weight": 3.5,
                "length": 7.4,
                "vehicle_type": "motorhome",
            }
        }


class CostBreakdown(BaseModel):
    """Estimated trip costs."""
    fuel_cost: float = Field(default=0, ge=0)
    tolls: float = Field(default=0, ge=0)
    accommodation: float = Field(default=0, ge=0)
    total: float = Field(default=0, ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)

    class Config:
        frozen = True


class TripPlan(BaseModel):
    """Day planning for the trip."""
    days: int = Field(..., ge=1)
    stops_per_day: int = Field(default=0, ge=0)
    accommodation_nights: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class TripMetadata(BaseModel):
    """Descriptive information about the trip."""
    title: str | None = None
    author: str | None = None
    created: datetime | None = None
    description: str | None = None

    class Config:
        frozen = True


class TripModel(BaseModel):
    """A fully computed trip, ready for export."""

    waypoints: list[Waypoint] = Field(default_factory=list)
    route_points: list[RoutePoint] = Field(default_factory=list)
    campsites: list[Campsite] = Field(default_factory=list)
    vehicle: VehicleProfile | None = None
    costs: CostBreakdown | None = None
    planning: TripPlan | None = None
    metadata: TripMetadata | None = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_waypoint_sequence(self) -> "TripModel":
        ids = [wp.id for wp in self.waypoints]
        if len(ids) != len(set(ids)):
            raise ValueError("Waypoint ids must be unique")

        roles = [wp.role for wp in self.waypoints]
        if roles.count(WaypointRole.START) > 1:
            raise ValueError("At most one waypoint may have role 'start'")
        if roles.count(WaypointRole.END) > 1:
            raise ValueError("At most one waypoint may have role 'end'")
        if WaypointRole.START in roles and WaypointRole.END in roles:
            if roles.index(WaypointRole.START) > roles.index(WaypointRole.END):
                raise ValueError("The start waypoint must come before the end waypoint")
        return self

    def route_geometry(self) -> list[RoutePoint]:
        """
        Return the points describing the route line.

        Uses the computed route points when present, otherwise the waypoint
        sequence itself (as long as it forms a line).
        """
        if self.route_points:
            return list(self.route_points)
        if len(self.waypoints) < 2:
            return []

        distances = cumulative_distances([(wp.lat, wp.lng) for wp in self.waypoints])
        return [
            RoutePoint(lat=wp.lat, lng=wp.lng, distance=dist, elevation=wp.elevation)
            for wp, dist in zip(self.waypoints, distances)
        ]
