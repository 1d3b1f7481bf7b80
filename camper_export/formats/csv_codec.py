"""CSV export for spreadsheets, with best-effort import."""

import csv
import io
import logging

from camper_export.errors import DocumentParseError
from camper_export.models import ExportFormat, ExportOptions, TripModel, Waypoint
from camper_export.utils.geo import haversine_distance

from .base import (
    DecodedDocument,
    EncodedDocument,
    TripCodec,
    assign_roles,
    parse_coordinate,
    parse_role,
    waypoint_label,
)

logger = logging.getLogger(__name__)

WAYPOINT_COLUMNS = ["id", "name", "lat", "lng", "role"]
METADATA_COLUMNS = ["description", "index", "distance_from_previous_km"]
CAMPSITE_COLUMNS = ["id", "name", "lat", "lng", "amenities", "price", "currency"]

# Accepted header names per field, matched case-insensitively
HEADER_ALIASES = {
    "id": ("id",),
    "name": ("name",),
    "lat": ("lat", "latitude"),
    "lng": ("lng", "lon", "long", "longitude"),
    "role": ("role", "type"),
    "description": ("description", "desc"),
}


def _find_columns(header: list[str]) -> dict[str, int]:
    normalized = [column.strip().lower() for column in header]
    columns = {}
    for field, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[field] = normalized.index(alias)
                break
    return columns


def _cell(row: list[str], columns: dict[str, int], field: str) -> str | None:
    index = columns.get(field)
    if index is None or index >= len(row):
        return None
    return row[index].strip()


class CSVCodec(TripCodec):
    """One row per waypoint, with an optional campsite section."""

    format = ExportFormat.CSV

    def encode(self, trip: TripModel, options: ExportOptions) -> EncodedDocument:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        header = list(WAYPOINT_COLUMNS)
        if options.include_metadata:
            header += METADATA_COLUMNS
        writer.writerow(header)

        waypoints = trip.waypoints if options.include_waypoints else []
        for index, waypoint in enumerate(waypoints):
            row = [
                waypoint.id,
                waypoint_label(waypoint, index),
                f"{waypoint.lat:.6f}",
                f"{waypoint.lng:.6f}",
                waypoint.role.value,
            ]
            if options.include_metadata:
                distance = 0.0
                if index > 0:
                    previous = waypoints[index - 1]
                    distance = haversine_distance(previous.lat, previous.lng, waypoint.lat, waypoint.lng)
                row += [waypoint.description or "", index + 1, f"{distance:.2f}"]
            writer.writerow(row)

        campsites = trip.campsites if options.include_campsites else []
        if campsites:
            buffer.write("\n")
            writer.writerow(CAMPSITE_COLUMNS)
            for campsite in campsites:
                writer.writerow([
                    campsite.id,
                    campsite.name,
                    f"{campsite.lat:.6f}",
                    f"{campsite.lng:.6f}",
                    "; ".join(campsite.amenities),
                    "" if campsite.price is None else f"{campsite.price:.2f}",
                    campsite.currency,
                ])

        return EncodedDocument(
            content=buffer.getvalue(),
            waypoints=len(waypoints),
            campsites=len(campsites),
        )

    def decode(self, content: str) -> DecodedDocument:
        reader = csv.reader(io.StringIO(content.lstrip("\ufeff").lstrip()))
        header = next(reader, None)
        if not header:
            raise DocumentParseError("CSV must contain a header row")
        columns = _find_columns(header)
        if "lat" not in columns or "lng" not in columns:
            raise DocumentParseError("CSV must contain latitude and longitude columns")

        decoded = DecodedDocument()
        rows = []
        for number, row in enumerate(reader, start=1):
            # The waypoint section ends at the first blank line
            if not any(cell.strip() for cell in row):
                break
            try:
                lat = parse_coordinate(_cell(row, columns, "lat"), -90, 90, "latitude")
                lng = parse_coordinate(_cell(row, columns, "lng"), -180, 180, "longitude")
            except ValueError as e:
                decoded.errors.append(f"Row {number}: {e}")
                continue
            rows.append({
                "id": _cell(row, columns, "id"),
                "name": _cell(row, columns, "name") or "",
                "lat": lat,
                "lng": lng,
                "description": _cell(row, columns, "description") or None,
                "hint": parse_role(_cell(row, columns, "role")),
            })

        roles = assign_roles([row.pop("hint") for row in rows])
        used_ids = set()
        for number, (row, role) in enumerate(zip(rows, roles), start=1):
            waypoint_id = row.pop("id") or f"csv-wpt-{number}"
            if waypoint_id in used_ids:
                waypoint_id = f"{waypoint_id}-{number}"
            used_ids.add(waypoint_id)
            decoded.waypoints.append(Waypoint(id=waypoint_id, role=role, **row))

        if decoded.errors:
            logger.warning(f"CSV import skipped {len(decoded.errors)} rows")
        return decoded
