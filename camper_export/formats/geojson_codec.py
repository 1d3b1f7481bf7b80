"""GeoJSON (RFC 7946) export and import."""

import json
import logging

from camper_export.config import settings
from camper_export.errors import DocumentParseError
from camper_export.models import (
    Campsite,
    ExportFormat,
    ExportOptions,
    RoutePoint,
    TripModel,
    Waypoint,
)
from camper_export.utils.geo import cumulative_distances

from .base import (
    DecodedDocument,
    EncodedDocument,
    TripCodec,
    assign_roles,
    document_author,
    document_description,
    document_name,
    document_time,
    parse_coordinate,
    parse_role,
    round_coordinate,
    waypoint_label,
)

logger = logging.getLogger(__name__)


def _position(lng: float, lat: float, elevation: float | None = None) -> list[float]:
    position = [round_coordinate(lng), round_coordinate(lat)]
    if elevation is not None:
        position.append(elevation)
    return position


def _read_position(coordinates) -> tuple[float, float, float | None]:
    """
    Read one [lng, lat(, elevation)] position.

    Raises:
        ValueError: if the position is malformed or out of range
    """
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        raise ValueError(f"invalid position {coordinates!r}")
    lng = parse_coordinate(coordinates[0], -180, 180, "longitude")
    lat = parse_coordinate(coordinates[1], -90, 90, "latitude")
    elevation = None
    if len(coordinates) > 2 and isinstance(coordinates[2], (int, float)):
        elevation = float(coordinates[2])
    return lat, lng, elevation


class GeoJSONCodec(TripCodec):
    """GeoJSON FeatureCollections with waypoint, campsite and route features."""

    format = ExportFormat.GEOJSON

    def encode(self, trip: TripModel, options: ExportOptions) -> EncodedDocument:
        features = []
        properties = {}

        if options.include_metadata:
            properties.update({
                "name": document_name(trip, options, settings.default_name),
                "description": document_description(trip, options, settings.creator),
                "author": document_author(trip, options, settings.creator),
                "created": document_time(trip).isoformat().replace("+00:00", "Z"),
                "creator": settings.creator,
            })
        if options.include_vehicle_info and trip.vehicle:
            properties["vehicle"] = trip.vehicle.model_dump(mode="json", exclude_none=True)
        if options.include_cost_data and trip.costs:
            properties["costs"] = trip.costs.model_dump(mode="json")
        if options.include_planning_data and trip.planning:
            properties["planning"] = trip.planning.model_dump(mode="json")

        if options.include_waypoints:
            for index, waypoint in enumerate(trip.waypoints):
                feature_properties = {
                    "kind": "waypoint",
                    "id": waypoint.id,
                    "name": waypoint_label(waypoint, index),
                    "role": waypoint.role.value,
                    "order": index + 1,
                }
                if waypoint.description:
                    feature_properties["description"] = waypoint.description
                features.append({
                    "type": "Feature",
                    "id": waypoint.id,
                    "properties": feature_properties,
                    "geometry": {
                        "type": "Point",
                        "coordinates": _position(waypoint.lng, waypoint.lat, waypoint.elevation),
                    },
                })

        if options.include_campsites:
            for campsite in trip.campsites:
                features.append({
                    "type": "Feature",
                    "id": campsite.id,
                    "properties": {
                        "kind": "campsite",
                        "id": campsite.id,
                        "name": campsite.name,
                        "amenities": list(campsite.amenities),
                        "price": campsite.price,
                        "currency": campsite.currency,
                        "campsite_type": campsite.campsite_type,
                    },
                    "geometry": {
                        "type": "Point",
                        "coordinates": _position(campsite.lng, campsite.lat),
                    },
                })

        route = trip.route_geometry() if options.include_route else []
        if route:
            features.append({
                "type": "Feature",
                "properties": {
                    "kind": "route",
                    "name": document_name(trip, options, settings.default_name),
                    "distance": round(route[-1].distance, 1),
                },
                "geometry": {
                    "type": "LineString",
                    "coordinates": [_position(p.lng, p.lat, p.elevation) for p in route],
                },
            })

        collection = {"type": "FeatureCollection", "features": features}
        if properties:
            collection["properties"] = properties

        return EncodedDocument(
            content=json.dumps(collection, indent=2, ensure_ascii=False),
            waypoints=len(trip.waypoints) if options.include_waypoints else 0,
            campsites=len(trip.campsites) if options.include_campsites else 0,
            route_points=len(route),
        )

    def decode(self, content: str) -> DecodedDocument:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise DocumentParseError(f"Invalid GeoJSON: {e}") from e

        if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
            raise DocumentParseError("GeoJSON root must be a FeatureCollection")
        features = data.get("features")
        if not isinstance(features, list):
            raise DocumentParseError("GeoJSON FeatureCollection has no features array")

        decoded = DecodedDocument()
        waypoint_rows = []
        for index, feature in enumerate(features, start=1):
            if not isinstance(feature, dict) or not isinstance(feature.get("geometry"), dict):
                decoded.warnings.append(f"Skipped feature {index}: missing geometry")
                continue
            geometry = feature["geometry"]
            properties = feature.get("properties")
            if not isinstance(properties, dict):
                properties = {}
            geometry_type = geometry.get("type")

            try:
                if geometry_type == "Point":
                    lat, lng, elevation = _read_position(geometry.get("coordinates"))
                    kind = properties.get("kind", "waypoint")
                    if kind == "campsite":
                        decoded.campsites.append(
                            self._campsite_from(properties, len(decoded.campsites), lat, lng)
                        )
                    elif kind == "waypoint":
                        waypoint_rows.append((properties, lat, lng, elevation))
                    else:
                        decoded.warnings.append(f"Skipped feature {index}: unknown point kind {kind!r}")
                elif geometry_type == "LineString" and not decoded.route_points:
                    decoded.route_points = self._route_from(geometry.get("coordinates"))
                else:
                    decoded.warnings.append(
                        f"Skipped feature {index}: unsupported geometry type {geometry_type!r}"
                    )
            except ValueError as e:
                decoded.warnings.append(f"Skipped feature {index}: {e}")

        roles = assign_roles([parse_role(row[0].get("role")) for row in waypoint_rows])
        used_ids = set()
        for number, ((properties, lat, lng, elevation), role) in enumerate(
            zip(waypoint_rows, roles), start=1
        ):
            waypoint_id = str(properties.get("id") or f"geojson-wpt-{number}")
            if waypoint_id in used_ids:
                waypoint_id = f"{waypoint_id}-{number}"
            used_ids.add(waypoint_id)
            description = properties.get("description")
            decoded.waypoints.append(Waypoint(
                id=waypoint_id,
                lat=lat,
                lng=lng,
                name=str(properties.get("name") or ""),
                role=role,
                description=description if isinstance(description, str) else None,
                elevation=elevation,
            ))

        logger.debug(
            f"Decoded GeoJSON: {len(decoded.waypoints)} waypoints, "
            f"{len(decoded.campsites)} campsites, {len(decoded.route_points)} route points"
        )
        return decoded

    def _campsite_from(self, properties: dict, index: int, lat: float, lng: float) -> Campsite:
        price = properties.get("price")
        amenities = properties.get("amenities") or []
        return Campsite(
            id=str(properties.get("id") or f"geojson-campsite-{index + 1}"),
            lat=lat,
            lng=lng,
            name=str(properties.get("name") or f"Campsite {index + 1}"),
            amenities=[str(item) for item in amenities] if isinstance(amenities, list) else [],
            price=float(price) if isinstance(price, (int, float)) and price >= 0 else None,
            currency=str(properties.get("currency") or "EUR"),
            campsite_type=str(properties.get("campsite_type") or "campsite"),
        )

    def _route_from(self, coordinates) -> list[RoutePoint]:
        if not isinstance(coordinates, list):
            raise ValueError("LineString has no coordinates")
        samples = [_read_position(position) for position in coordinates]
        distances = cumulative_distances([(lat, lng) for lat, lng, _ in samples])
        return [
            RoutePoint(lat=lat, lng=lng, distance=distance, elevation=elevation)
            for (lat, lng, elevation), distance in zip(samples, distances)
        ]
