"""Shared codec interface and helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from camper_export.errors import UnsupportedFormatError
from camper_export.models import (
    Campsite,
    ExportFormat,
    ExportOptions,
    RoutePoint,
    TripModel,
    Waypoint,
    WaypointRole,
)

COORDINATE_PRECISION = 6


@dataclass
class EncodedDocument:
    """A document produced by a codec, with what went into it."""
    content: str
    warnings: list[str] = field(default_factory=list)
    waypoints: int = 0
    campsites: int = 0
    route_points: int = 0
    navigation_points: int = 0


@dataclass
class DecodedDocument:
    """Domain values recovered from a document."""
    waypoints: list[Waypoint] = field(default_factory=list)
    campsites: list[Campsite] = field(default_factory=list)
    route_points: list[RoutePoint] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class TripCodec(ABC):
    """Encoder/decoder pair for one document format."""

    format: ExportFormat
    supports_import: bool = True

    @abstractmethod
    def encode(self, trip: TripModel, options: ExportOptions) -> EncodedDocument:
        """Serialize the parts of a trip selected by the options."""

    def decode(self, content: str) -> DecodedDocument:
        """
        Parse a document back into domain values.

        Raises:
            DocumentParseError: if the document is not a valid document of this format
            UnsupportedFormatError: if the format cannot be imported
        """
        raise UnsupportedFormatError(
            f"{self.format.value.upper()} format not supported for import"
        )


def round_coordinate(value: float) -> float:
    return round(value, COORDINATE_PRECISION)


def parse_coordinate(raw, low: float, high: float, label: str) -> float:
    """
    Parse one coordinate value and check its range.

    Raises:
        ValueError: if the value is missing, not numeric or out of range
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValueError(f"missing {label}")
    if isinstance(raw, bool):
        raise ValueError(f"invalid {label} {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"invalid {label} {raw!r}") from None
    if value != value or not low <= value <= high:
        raise ValueError(f"{label} {raw!r} out of range")
    return value


def parse_role(raw) -> WaypointRole | None:
    """Role named by a hint string, or None if the hint is not a role."""
    if not isinstance(raw, str):
        return None
    try:
        return WaypointRole(raw.strip().lower())
    except ValueError:
        return None


def assign_roles(hints: list[WaypointRole | None]) -> list[WaypointRole]:
    """
    Resolve the role of each imported waypoint.

    Embedded hints win; points without a hint get their role from their
    position (first start, last end, the rest waypoints). Only the first
    start and the last end survive when a document claims several.
    """
    count = len(hints)
    roles = []
    for index, hint in enumerate(hints):
        if hint is not None:
            roles.append(hint)
        elif index == 0:
            roles.append(WaypointRole.START)
        elif index == count - 1:
            roles.append(WaypointRole.END)
        else:
            roles.append(WaypointRole.WAYPOINT)

    starts = [i for i, role in enumerate(roles) if role is WaypointRole.START]
    ends = [i for i, role in enumerate(roles) if role is WaypointRole.END]
    for i in starts[1:]:
        roles[i] = WaypointRole.WAYPOINT
    for i in ends[:-1]:
        roles[i] = WaypointRole.WAYPOINT
    if starts and ends and starts[0] > ends[-1]:
        roles[ends[-1]] = WaypointRole.WAYPOINT
    return roles


def document_name(trip: TripModel, options: ExportOptions, default: str) -> str:
    if options.custom_name:
        return options.custom_name
    if trip.metadata and trip.metadata.title:
        return trip.metadata.title
    return default


def document_description(trip: TripModel, options: ExportOptions, creator: str) -> str:
    if options.description:
        return options.description
    if trip.metadata and trip.metadata.description:
        return trip.metadata.description
    return f"Route exported from {creator}"


def document_author(trip: TripModel, options: ExportOptions, creator: str) -> str:
    if options.author:
        return options.author
    if trip.metadata and trip.metadata.author:
        return trip.metadata.author
    return creator


def document_time(trip: TripModel) -> datetime:
    """Creation timestamp in UTC; naive timestamps are taken as UTC."""
    created = trip.metadata.created if trip.metadata else None
    if created is None:
        return datetime.now(timezone.utc).replace(microsecond=0)
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created.astimezone(timezone.utc)


def waypoint_label(waypoint: Waypoint, index: int) -> str:
    """Display name, with a default for unnamed waypoints."""
    return waypoint.name.strip() or f"Waypoint {index + 1}"


def campsite_description(campsite: Campsite) -> str:
    """Amenities and price folded into one line of text."""
    parts = []
    if campsite.amenities:
        parts.append(f"Amenities: {', '.join(campsite.amenities)}")
    if campsite.price is not None:
        parts.append(f"Price: {campsite.price:.2f} {campsite.currency}")
    return "; ".join(parts) or campsite.campsite_type.capitalize()
