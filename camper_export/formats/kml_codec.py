"""KML 2.2 export (Google Earth, Google My Maps and most mapping apps)."""

import logging
from xml.etree import ElementTree as ET

from camper_export.config import settings
from camper_export.models import (
    ExportFormat,
    ExportOptions,
    TripModel,
    WaypointRole,
)

from .base import (
    EncodedDocument,
    TripCodec,
    campsite_description,
    document_author,
    document_description,
    document_name,
    waypoint_label,
)

logger = logging.getLogger(__name__)

# KML namespace
KML_NS = "http://www.opengis.net/kml/2.2"
ET.register_namespace('', KML_NS)
ATOM_NS = "http://www.w3.org/2005/Atom"
ET.register_namespace("atom", ATOM_NS)

ICON_BASE = "http://maps.google.com/mapfiles/kml/paddle"

STYLE_ICONS = {
    "start-point": f"{ICON_BASE}/grn-circle.png",
    "end-point": f"{ICON_BASE}/red-circle.png",
    "waypoint": f"{ICON_BASE}/blu-circle.png",
    "campsite": f"{ICON_BASE}/ylw-stars.png",
}

ROLE_STYLES = {
    WaypointRole.START: "start-point",
    WaypointRole.WAYPOINT: "waypoint",
    WaypointRole.END: "end-point",
}


def _el(parent: ET.Element, name: str, text=None) -> ET.Element:
    element = ET.SubElement(parent, f"{{{KML_NS}}}{name}")
    if text is not None:
        element.text = str(text)
    return element


def _coordinates(lng: float, lat: float, elevation: float | None = None) -> str:
    return f"{lng:.6f},{lat:.6f},{elevation or 0:g}"


class KMLCodec(TripCodec):
    """KML documents. Export only; placemark round-trips are not guaranteed."""

    format = ExportFormat.KML
    supports_import = False

    def encode(self, trip: TripModel, options: ExportOptions) -> EncodedDocument:
        kml_root = ET.Element(f"{{{KML_NS}}}kml")
        document = _el(kml_root, "Document")
        name = document_name(trip, options, settings.default_name)
        _el(document, "name", name)

        if options.include_metadata:
            author = ET.SubElement(document, f"{{{ATOM_NS}}}author")
            ET.SubElement(author, f"{{{ATOM_NS}}}name").text = document_author(trip, options, settings.creator)
            _el(document, "description", document_description(trip, options, settings.creator))

        self._add_styles(document)
        self._add_extended_data(document, trip, options)

        waypoints = campsites = 0
        if options.include_waypoints and trip.waypoints:
            folder = _el(document, "Folder")
            _el(folder, "name", "Waypoints")
            total = len(trip.waypoints)
            for index, waypoint in enumerate(trip.waypoints):
                placemark = _el(folder, "Placemark")
                placemark.set("id", waypoint.id)
                _el(placemark, "name", waypoint_label(waypoint, index))
                lines = [
                    f"Type: {waypoint.role.value}",
                    f"Position: {index + 1} of {total}",
                ]
                if waypoint.description:
                    lines.append(f"Description: {waypoint.description}")
                _el(placemark, "description", "\n".join(lines))
                _el(placemark, "styleUrl", f"#{ROLE_STYLES[waypoint.role]}")
                point = _el(placemark, "Point")
                _el(point, "coordinates", _coordinates(waypoint.lng, waypoint.lat, waypoint.elevation))
                waypoints += 1

        if options.include_campsites and trip.campsites:
            folder = _el(document, "Folder")
            _el(folder, "name", "Campsites")
            for campsite in trip.campsites:
                placemark = _el(folder, "Placemark")
                placemark.set("id", campsite.id)
                _el(placemark, "name", campsite.name)
                _el(placemark, "description", campsite_description(campsite))
                _el(placemark, "styleUrl", "#campsite")
                point = _el(placemark, "Point")
                _el(point, "coordinates", _coordinates(campsite.lng, campsite.lat))
                campsites += 1

        route = trip.route_geometry() if options.include_route else []
        if route:
            placemark = _el(document, "Placemark")
            _el(placemark, "name", f"{name} Track")
            distance_km = route[-1].distance / 1000
            _el(placemark, "description", f"Distance: {distance_km:.1f} km")
            _el(placemark, "styleUrl", "#route-line")
            line = _el(placemark, "LineString")
            _el(line, "tessellate", 1)
            _el(line, "coordinates", " ".join(
                _coordinates(point.lng, point.lat, point.elevation) for point in route
            ))

        tree = ET.ElementTree(kml_root)
        ET.indent(tree, space="  ")
        content = ET.tostring(kml_root, encoding="unicode")

        logger.debug(f"Encoded KML with {waypoints} waypoints, {campsites} campsites")
        return EncodedDocument(
            content=f'<?xml version="1.0" encoding="UTF-8"?>\n{content}\n',
            waypoints=waypoints,
            campsites=campsites,
            route_points=len(route),
        )

    def _add_styles(self, document: ET.Element) -> None:
        for style_id, href in STYLE_ICONS.items():
            style = _el(document, "Style")
            style.set("id", style_id)
            icon_style = _el(style, "IconStyle")
            icon = _el(icon_style, "Icon")
            _el(icon, "href", href)

        style = _el(document, "Style")
        style.set("id", "route-line")
        line_style = _el(style, "LineStyle")
        _el(line_style, "color", "ff0000ff")
        _el(line_style, "width", 4)

    def _add_extended_data(self, document: ET.Element, trip: TripModel, options: ExportOptions) -> None:
        values = {}
        if options.include_vehicle_info and trip.vehicle:
            values.update({
                f"vehicle_{key}": value
                for key, value in trip.vehicle.model_dump(mode="json").items()
                if value is not None
            })
        if options.include_cost_data and trip.costs:
            values.update({
                f"cost_{key}": value for key, value in trip.costs.model_dump(mode="json").items()
            })
        if options.include_planning_data and trip.planning:
            values.update({
                f"plan_{key}": value for key, value in trip.planning.model_dump(mode="json").items()
            })
        if not values:
            return

        extended = _el(document, "ExtendedData")
        for key, value in values.items():
            data = _el(extended, "Data")
            data.set("name", key)
            _el(data, "value", value)
