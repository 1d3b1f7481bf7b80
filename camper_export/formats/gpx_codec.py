"""GPX 1.1 export and import."""

import logging
import re
from xml.etree import ElementTree as ET

import gpxpy
import gpxpy.gpx

from camper_export.config import settings
from camper_export.devices import DevicePolicy, get_device_policy
from camper_export.errors import DocumentParseError
from camper_export.models import (
    Campsite,
    ExportFormat,
    ExportOptions,
    RoutePoint,
    TripModel,
    Waypoint,
)
from camper_export.utils.geo import cumulative_distances, thin_points

from .base import (
    DecodedDocument,
    EncodedDocument,
    TripCodec,
    assign_roles,
    campsite_description,
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

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"

# Custom extension namespaces, declared on <gpx> only when used
VEHICLE_NAMESPACE = "https://camper-planner.eu/xmlschemas/VehicleProfile/v1"
COST_NAMESPACE = "https://camper-planner.eu/xmlschemas/TripCost/v1"
PLAN_NAMESPACE = "https://camper-planner.eu/xmlschemas/TripPlan/v1"

CAMPSITE_TYPE = "campsite"

_AMENITIES_PATTERN = re.compile(r"Amenities: ([^;]+)")
_PRICE_PATTERN = re.compile(r"Price: ([0-9.]+) ([A-Z]{3})")


def _tag(name: str) -> str:
    return f"{{{GPX_NAMESPACE}}}{name}"


def _byte_size(content: str) -> int:
    return len(content.encode("utf-8"))


def _extension(namespace: str, name: str, values: dict) -> ET.Element:
    """Build a flat extension element with one child per non-empty value."""
    element = ET.Element(f"{{{namespace}}}{name}")
    for key, value in values.items():
        if value is None:
            continue
        child = ET.SubElement(element, f"{{{namespace}}}{key}")
        child.text = str(value.value if hasattr(value, "value") else value)
    return element


class GPXCodec(TripCodec):
    """GPX documents tailored to a device profile."""

    format = ExportFormat.GPX

    def encode(self, trip: TripModel, options: ExportOptions) -> EncodedDocument:
        policy = get_device_policy(options.device_profile)
        route = trip.route_geometry() if options.include_route else []
        warnings = []

        content = self._build_gpx(trip, options, policy, route).to_xml()

        if policy.max_file_size is not None and _byte_size(content) > policy.max_file_size:
            original_size = _byte_size(content)
            message = (
                f"GPX file size {original_size / 1024:.1f} KB exceeds the TomTom practical "
                f"limit of {policy.max_file_size / 1024:.0f} KB"
            )
            if len(route) > 2:
                original_count = len(route)
                route, content = self._fit_to_size(trip, options, policy, route)
                message += f"; route thinned from {original_count} to {len(route)} points"
            warnings.append(message)
            logger.warning(message)

        return EncodedDocument(
            content=content,
            warnings=warnings,
            waypoints=len(trip.waypoints) if options.include_waypoints else 0,
            campsites=len(trip.campsites) if options.include_campsites else 0,
            route_points=len(route),
            navigation_points=len(self._navigation_stops(trip, options)),
        )

    def _fit_to_size(
        self,
        trip: TripModel,
        options: ExportOptions,
        policy: DevicePolicy,
        route: list[RoutePoint],
    ) -> tuple[list[RoutePoint], str]:
        """Thin the route until the document fits the device ceiling or only the endpoints remain."""
        stride = 2
        while True:
            thinned = thin_points(route, stride)
            content = self._build_gpx(trip, options, policy, thinned).to_xml()
            if _byte_size(content) <= policy.max_file_size or len(thinned) <= 2:
                return thinned, content
            stride *= 2

    def _build_gpx(
        self,
        trip: TripModel,
        options: ExportOptions,
        policy: DevicePolicy,
        route: list[RoutePoint],
    ) -> gpxpy.gpx.GPX:
        gpx = gpxpy.gpx.GPX()
        gpx.creator = settings.creator
        name = document_name(trip, options, settings.default_name)

        if options.include_metadata or policy.forces_metadata:
            gpx.name = name
            gpx.description = document_description(trip, options, settings.creator)
            gpx.author_name = document_author(trip, options, settings.creator)
            gpx.time = document_time(trip)

        if options.include_waypoints:
            for index, waypoint in enumerate(trip.waypoints):
                gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
                    latitude=round_coordinate(waypoint.lat),
                    longitude=round_coordinate(waypoint.lng),
                    elevation=waypoint.elevation,
                    name=waypoint_label(waypoint, index),
                    description=waypoint.description,
                    symbol=policy.role_symbol(waypoint.role),
                    type=waypoint.role.value,
                ))

        if options.include_campsites:
            for campsite in trip.campsites:
                gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
                    latitude=round_coordinate(campsite.lat),
                    longitude=round_coordinate(campsite.lng),
                    name=campsite.name,
                    description=campsite_description(campsite),
                    symbol=policy.symbol_for(campsite.campsite_type, fallback=CAMPSITE_TYPE),
                    type=CAMPSITE_TYPE,
                ))

        stops = self._navigation_stops(trip, options)
        if stops:
            navigation = gpxpy.gpx.GPXRoute(name=f"{name} Route")
            for index, waypoint in enumerate(stops):
                navigation.points.append(gpxpy.gpx.GPXRoutePoint(
                    latitude=round_coordinate(waypoint.lat),
                    longitude=round_coordinate(waypoint.lng),
                    elevation=waypoint.elevation,
                    name=waypoint_label(waypoint, index),
                    symbol=policy.role_symbol(waypoint.role),
                    type=waypoint.role.value,
                ))
            gpx.routes.append(navigation)

        if route:
            track = gpxpy.gpx.GPXTrack(name=f"{name} Track")
            segment = gpxpy.gpx.GPXTrackSegment()
            for point in route:
                segment.points.append(gpxpy.gpx.GPXTrackPoint(
                    latitude=round_coordinate(point.lat),
                    longitude=round_coordinate(point.lng),
                    elevation=point.elevation,
                ))
            track.segments.append(segment)
            gpx.tracks.append(track)

        if options.include_vehicle_info and trip.vehicle:
            gpx.nsmap["vehicle"] = VEHICLE_NAMESPACE
            gpx.extensions.append(_extension(VEHICLE_NAMESPACE, "profile", {
                "type": trip.vehicle.vehicle_type,
                "height": trip.vehicle.height,
                "width": trip.vehicle.width,
                "weight": trip.vehicle.weight,
                "length": trip.vehicle.length,
            }))

        if options.include_cost_data and trip.costs:
            gpx.nsmap["cost"] = COST_NAMESPACE
            gpx.extensions.append(_extension(COST_NAMESPACE, "breakdown", {
                "fuel": trip.costs.fuel_cost,
                "tolls": trip.costs.tolls,
                "accommodation": trip.costs.accommodation,
                "total": trip.costs.total,
                "currency": trip.costs.currency,
            }))

        if options.include_planning_data and trip.planning:
            gpx.nsmap["plan"] = PLAN_NAMESPACE
            gpx.extensions.append(_extension(PLAN_NAMESPACE, "plan", {
                "days": trip.planning.days,
                "stops_per_day": trip.planning.stops_per_day,
                "accommodation_nights": trip.planning.accommodation_nights,
            }))

        return gpx

    def _navigation_stops(self, trip: TripModel, options: ExportOptions) -> list[Waypoint]:
        """Waypoints written as the <rte> navigation route, for devices that route between stops."""
        if not options.include_route or len(trip.waypoints) < 2:
            return []
        return list(trip.waypoints)

    def decode(self, content: str) -> DecodedDocument:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise DocumentParseError(f"Invalid GPX format: {e}") from e

        if root.tag != _tag("gpx"):
            namespace, _, local_name = root.tag.rpartition("}")
            if local_name != "gpx":
                raise DocumentParseError(f"Unrecognized root element <{local_name}>, expected <gpx>")
            raise DocumentParseError(
                f"Unsupported GPX namespace '{namespace.lstrip('{') or 'none'}', "
                f"expected '{GPX_NAMESPACE}'"
            )

        decoded = DecodedDocument()
        points = root.findall(_tag("wpt"))
        label = "waypoint"
        if not points:
            # Route points stand in for waypoints in route-only files
            route_element = root.find(_tag("rte"))
            if route_element is not None:
                points = route_element.findall(_tag("rtept"))
                label = "route point"

        waypoint_rows = []
        for index, element in enumerate(points):
            try:
                lat = parse_coordinate(element.get("lat"), -90, 90, "latitude")
                lng = parse_coordinate(element.get("lon"), -180, 180, "longitude")
            except ValueError as e:
                decoded.warnings.append(f"Skipped {label} {index + 1}: {e}")
                continue

            name = _text(element, "name")
            description = _text(element, "desc")
            point_type = _text(element, "type")

            if point_type and point_type.lower() == CAMPSITE_TYPE:
                decoded.campsites.append(_campsite_from(element, len(decoded.campsites), lat, lng))
                continue

            waypoint_rows.append({
                "lat": lat,
                "lng": lng,
                "name": name or "",
                "description": description,
                "elevation": _float_text(element, "ele"),
                "hint": parse_role(point_type),
            })

        roles = assign_roles([row.pop("hint") for row in waypoint_rows])
        for number, (row, role) in enumerate(zip(waypoint_rows, roles), start=1):
            decoded.waypoints.append(Waypoint(id=f"gpx-wpt-{number}", role=role, **row))

        track = root.find(_tag("trk"))
        if track is not None:
            decoded.route_points = self._decode_track(track, decoded.warnings)

        logger.debug(
            f"Decoded GPX: {len(decoded.waypoints)} waypoints, "
            f"{len(decoded.campsites)} campsites, {len(decoded.route_points)} route points"
        )
        return decoded

    def _decode_track(self, track: ET.Element, warnings: list[str]) -> list[RoutePoint]:
        samples = []
        for index, element in enumerate(track.iter(_tag("trkpt"))):
            try:
                lat = parse_coordinate(element.get("lat"), -90, 90, "latitude")
                lng = parse_coordinate(element.get("lon"), -180, 180, "longitude")
            except ValueError as e:
                warnings.append(f"Skipped track point {index + 1}: {e}")
                continue
            samples.append((lat, lng, _float_text(element, "ele")))

        distances = cumulative_distances([(lat, lng) for lat, lng, _ in samples])
        return [
            RoutePoint(lat=lat, lng=lng, distance=distance, elevation=elevation)
            for (lat, lng, elevation), distance in zip(samples, distances)
        ]


def _text(element: ET.Element, name: str) -> str | None:
    child = element.find(_tag(name))
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _float_text(element: ET.Element, name: str) -> float | None:
    text = _text(element, name)
    try:
        return float(text) if text else None
    except ValueError:
        return None


def _campsite_from(element: ET.Element, index: int, lat: float, lng: float) -> Campsite:
    """Rebuild a campsite, reading amenities and price back out of its description."""
    description = _text(element, "desc") or ""
    amenities = []
    price = None
    currency = "EUR"

    match = _AMENITIES_PATTERN.search(description)
    if match:
        amenities = [item.strip() for item in match.group(1).split(",") if item.strip()]
    match = _PRICE_PATTERN.search(description)
    if match:
        price = float(match.group(1))
        currency = match.group(2)

    return Campsite(
        id=f"gpx-campsite-{index + 1}",
        lat=lat,
        lng=lng,
        name=_text(element, "name") or f"Campsite {index + 1}",
        amenities=amenities,
        price=price,
        currency=currency,
    )
