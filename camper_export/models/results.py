"""Result models returned by the export/import facade."""

from datetime import datetime
from pydantic import BaseModel, Field

from .trip import Campsite, RoutePoint, Waypoint


class ExportInfo(BaseModel):
    """Summary of what ended up in an exported document."""
    format: str
    waypoints: int = 0
    campsites: int = 0
    route_points: int = 0
    navigation_points: int = Field(default=0, description="Points of the GPX <rte> navigation route")
    exported_at: datetime
    compatibility: list[str] = Field(default_factory=list)
    filepath: str | None = None


class ExportResult(BaseModel):
    """Outcome of an export call."""
    
    success: bool
    content: str = ""
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    filename: str = ""
    file_size: int = Field(default=0, description="Size of content in bytes (UTF-8)")
    info: ExportInfo | None = None
    
    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ExportResult":
        return cls(success=False, errors=errors, warnings=warnings or [])


class ImportResult(BaseModel):
    """Outcome of an import call."""
    
    success: bool
    format: str | None = None
    waypoints: list[Waypoint] = Field(default_factory=list)
    campsites: list[Campsite] = Field(default_factory=list)
    route_points: list[RoutePoint] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    
    @classmethod
    def failure(cls, errors: list[str], format: str | None = None) -> "ImportResult":
        return cls(success=False, errors=errors, format=format)
