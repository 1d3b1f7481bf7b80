"""Tests for GPX export and import."""

from xml.etree import ElementTree as ET

import pytest

from camper_export import ExportOptions, RoutePoint, TripModel, WaypointRole, export_trip, import_route
from camper_export.config import settings
from camper_export.formats import GPXCodec

GPX_NS = "http://www.topografix.com/GPX/1/1"
NS = {"gpx": GPX_NS}


def gpx_document(body: str, namespace: str = GPX_NS) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="test" xmlns="{namespace}">{body}</gpx>'
    )


class TestGPXExport:
    """Test GPX generation."""

    def test_berlin_paris_rome(self, bare_trip):
        """Three waypoints export as three wpt elements in trip order."""
        result = export_trip(bare_trip, {"format": "gpx"})

        assert result.success
        assert result.errors == []
        assert result.content.startswith("<?xml")
        root = ET.fromstring(result.content)
        names = [wpt.find("gpx:name", NS).text for wpt in root.findall("gpx:wpt", NS)]
        assert names == ["Berlin", "Paris", "Rome"]
        types = [wpt.find("gpx:type", NS).text for wpt in root.findall("gpx:wpt", NS)]
        assert types == ["start", "waypoint", "end"]

    def test_namespace_declared_once(self, trip):
        result = export_trip(trip, ExportOptions(include_campsites=True, include_route=True))

        assert result.content.count(f'xmlns="{GPX_NS}"') == 1

    def test_metadata(self, trip):
        """Document metadata comes from the trip unless overridden."""
        result = export_trip(trip, ExportOptions(author="Ben"))
        root = ET.fromstring(result.content)
        metadata = root.find("gpx:metadata", NS)

        assert metadata.find("gpx:name", NS).text == "Berlin to Rome"
        assert metadata.find("gpx:author/gpx:name", NS).text == "Ben"
        assert root.get("creator") == settings.creator

    def test_default_description(self, bare_trip):
        result = export_trip(bare_trip, ExportOptions())
        root = ET.fromstring(result.content)

        assert root.find("gpx:metadata/gpx:desc", NS).text == f"Route exported from {settings.creator}"

    def test_garmin_symbols(self, trip):
        """Garmin output marks start and end with flag symbols."""
        result = export_trip(trip, ExportOptions(device_profile="garmin", include_campsites=True))

        assert "<sym>Flag, Green</sym>" in result.content
        assert "<sym>Flag, Red</sym>" in result.content
        assert "<sym>Campground</sym>" in result.content
        assert not any("symbol" in w for w in result.warnings)
        assert result.info.compatibility == ["Generic GPS Devices", "Garmin Devices"]

    def test_empty_options(self, trip):
        """With every flag off the document is a bare, valid <gpx>."""
        result = export_trip(trip, ExportOptions.nothing())

        assert result.success
        assert "<wpt" not in result.content
        assert "<trk>" not in result.content
        assert "<metadata>" not in result.content
        assert "camper-planner.eu" not in result.content
        assert result.warnings == ["Universal format should include either waypoints or track data"]
        assert result.info.waypoints == 0
        ET.fromstring(result.content)

    def test_smartphone_forces_metadata(self, bare_trip):
        """Smartphone apps always get metadata."""
        result = export_trip(bare_trip, ExportOptions(include_metadata=False, device_profile="smartphone"))

        assert "<metadata>" in result.content
        assert result.warnings == []

    def test_route_track(self, trip):
        """Without route points the track follows the waypoints."""
        result = export_trip(trip, ExportOptions(include_route=True))
        root = ET.fromstring(result.content)
        track = root.find("gpx:trk", NS)

        assert track.find("gpx:name", NS).text == "Berlin to Rome Track"
        assert len(track.findall("gpx:trkseg/gpx:trkpt", NS)) == 3
        assert result.info.route_points == 3

    def test_navigation_route(self, trip):
        """The waypoint sequence is also written as an <rte> ahead of the track."""
        result = export_trip(trip, ExportOptions(include_route=True, device_profile="garmin"))
        root = ET.fromstring(result.content)
        route = root.find("gpx:rte", NS)
        points = route.findall("gpx:rtept", NS)

        assert route.find("gpx:name", NS).text == "Berlin to Rome Route"
        assert [p.find("gpx:name", NS).text for p in points] == ["Berlin", "Paris", "Rome"]
        assert [p.find("gpx:type", NS).text for p in points] == ["start", "waypoint", "end"]
        assert points[0].find("gpx:sym", NS).text == "Flag, Green"
        tags = [child.tag for child in root]
        assert tags.index(f"{{{GPX_NS}}}rte") < tags.index(f"{{{GPX_NS}}}trk")
        assert result.info.navigation_points == 3

    def test_no_navigation_route_without_flag(self, trip):
        result = export_trip(trip, ExportOptions())

        assert "<rte>" not in result.content
        assert result.info.navigation_points == 0

    def test_navigation_route_imports_back(self, trip):
        """A route-only document comes back through its route points."""
        exported = export_trip(trip, ExportOptions(include_waypoints=False, include_route=True))

        result = import_route(exported.content)

        assert [w.name for w in result.waypoints] == ["Berlin", "Paris", "Rome"]
        assert [w.role for w in result.waypoints] == [WaypointRole.START, WaypointRole.WAYPOINT, WaypointRole.END]
        assert len(result.route_points) == 3

    def test_campsite_symbol_by_type(self, waypoints):
        """Campsite symbols follow the campsite type when the device knows it."""
        trip = TripModel(waypoints=waypoints, campsites=[
            {"id": "aire", "lat": 45.0, "lng": 6.0, "name": "Aire de repos", "campsite_type": "rest"},
            {"id": "farm", "lat": 45.1, "lng": 6.1, "name": "Farm stay", "campsite_type": "farm"},
        ])

        result = export_trip(trip, ExportOptions(include_campsites=True, device_profile="garmin"))

        assert "<sym>Rest Area</sym>" in result.content
        assert "<sym>Campground</sym>" in result.content

    def test_extensions_declared_only_when_used(self, trip):
        result = export_trip(trip, ExportOptions(include_vehicle_info=True))

        assert 'xmlns:vehicle="https://camper-planner.eu/xmlschemas/VehicleProfile/v1"' in result.content
        assert "TripCost" not in result.content
        assert "TripPlan" not in result.content
        root = ET.fromstring(result.content)
        height = root.find(
            "gpx:extensions/{https://camper-planner.eu/xmlschemas/VehicleProfile/v1}profile"
            "/{https://camper-planner.eu/xmlschemas/VehicleProfile/v1}height",
            NS,
        )
        assert height.text == "3.2"

    def test_all_extensions(self, trip):
        result = export_trip(trip, ExportOptions(
            include_vehicle_info=True,
            include_cost_data=True,
            include_planning_data=True,
        ))

        assert result.success
        assert "https://camper-planner.eu/xmlschemas/TripCost/v1" in result.content
        assert "https://camper-planner.eu/xmlschemas/TripPlan/v1" in result.content

    def test_missing_sections_skip_extensions(self, bare_trip):
        """Flags for sections the trip lacks add nothing."""
        result = export_trip(bare_trip, ExportOptions(include_vehicle_info=True, include_cost_data=True))

        assert "camper-planner.eu" not in result.content

    def test_tomtom_size_limit(self, waypoints, monkeypatch):
        """Oversized TomTom documents are thinned and reported."""
        monkeypatch.setattr(settings, "tomtom_max_file_size_kb", 4)
        route = [
            RoutePoint(lat=52.52 - i * 0.01, lng=13.405 - i * 0.01, distance=i * 1000)
            for i in range(500)
        ]
        trip = TripModel(waypoints=waypoints, route_points=route)

        result = export_trip(trip, ExportOptions(include_route=True, device_profile="tomtom"))

        assert result.success
        assert any("exceeds the TomTom practical limit" in w for w in result.warnings)
        assert 2 <= result.info.route_points < 500
        root = ET.fromstring(result.content)
        points = root.findall("gpx:trk/gpx:trkseg/gpx:trkpt", NS)
        assert float(points[0].get("lat")) == pytest.approx(52.52)
        assert float(points[-1].get("lat")) == pytest.approx(52.52 - 499 * 0.01)

    def test_tomtom_oversized_without_route(self, monkeypatch):
        """Waypoint-only documents over the ceiling are reported, not thinned."""
        monkeypatch.setattr(settings, "tomtom_max_file_size_kb", 1)
        trip = TripModel(waypoints=[
            {"id": f"wp-{i}", "lat": 45 + i * 0.01, "lng": 6 + i * 0.01, "name": f"Stop {i}"}
            for i in range(40)
        ])

        result = export_trip(trip, ExportOptions(device_profile="tomtom"))

        assert result.success
        assert result.info.route_points == 0
        codec_warnings = [w for w in result.warnings if "TomTom practical limit" in w]
        assert len(codec_warnings) == 1
        assert "thinned" not in codec_warnings[0]
        assert result.content.count("<wpt") == 40

    def test_tomtom_small_document_untouched(self, trip):
        result = export_trip(trip, ExportOptions(include_route=True, device_profile="tomtom"))

        assert result.warnings == []
        assert result.info.route_points == 3

    def test_unnamed_waypoint(self):
        """Unnamed waypoints get a positional default name and a warning."""
        trip = TripModel(waypoints=[
            {"id": "a", "lat": 52.52, "lng": 13.405, "role": "start"},
            {"id": "b", "lat": 48.8566, "lng": 2.3522, "name": " "},
        ])

        result = export_trip(trip, ExportOptions())

        assert "Waypoint 1 has no name - will use default name" in result.warnings
        assert "<name>Waypoint 2</name>" in result.content

    def test_coordinates_rounded(self):
        trip = TripModel(waypoints=[{"id": "a", "lat": 52.123456789, "lng": 13.987654321}])
        root = ET.fromstring(export_trip(trip, ExportOptions()).content)
        wpt = root.find("gpx:wpt", NS)

        assert float(wpt.get("lat")) == 52.123457
        assert float(wpt.get("lon")) == 13.987654


class TestGPXImport:
    """Test GPX parsing."""

    def test_round_trip(self, trip):
        """Exported waypoints come back in order with their roles."""
        exported = export_trip(trip, ExportOptions(include_campsites=True, include_route=True))

        result = import_route(exported.content)

        assert result.success
        assert result.format == "gpx"
        assert [w.name for w in result.waypoints] == ["Berlin", "Paris", "Rome"]
        assert [w.role for w in result.waypoints] == [WaypointRole.START, WaypointRole.WAYPOINT, WaypointRole.END]
        for original, imported in zip(trip.waypoints, result.waypoints):
            assert imported.lat == pytest.approx(original.lat, abs=1e-6)
            assert imported.lng == pytest.approx(original.lng, abs=1e-6)
        assert result.waypoints[1].description == "Two nights near the Seine"
        assert len(result.route_points) == 3

    def test_campsites_recovered(self, trip):
        exported = export_trip(trip, ExportOptions(include_campsites=True))

        result = import_route(exported.content, "gpx")

        assert len(result.waypoints) == 3
        assert len(result.campsites) == 1
        campsite = result.campsites[0]
        assert campsite.name == "Camping de Paris"
        assert campsite.amenities == ["showers", "electricity"]
        assert campsite.price == 25.0
        assert campsite.currency == "EUR"

    def test_generated_ids(self):
        content = gpx_document('<wpt lat="1" lon="2"/><wpt lat="3" lon="4"/>')

        result = import_route(content)

        assert [w.id for w in result.waypoints] == ["gpx-wpt-1", "gpx-wpt-2"]
        assert [w.role for w in result.waypoints] == [WaypointRole.START, WaypointRole.END]

    def test_malformed_coordinates_skipped(self):
        """A bad waypoint is reported without failing the import."""
        content = gpx_document(
            '<wpt lat="52.52" lon="13.405"><name>Berlin</name></wpt>'
            '<wpt lat="abc" lon="2.35"><name>Broken</name></wpt>'
            '<wpt lat="41.9" lon="12.49"><name>Rome</name></wpt>'
            '<wpt lat="95" lon="12.49"><name>Nowhere</name></wpt>'
        )

        result = import_route(content)

        assert result.success
        assert [w.name for w in result.waypoints] == ["Berlin", "Rome"]
        assert any(w.startswith("Skipped waypoint 2") for w in result.warnings)
        assert any(w.startswith("Skipped waypoint 4") for w in result.warnings)

    def test_route_points_when_no_waypoints(self):
        content = gpx_document(
            '<rte><rtept lat="52.52" lon="13.405"><name>A</name></rtept>'
            '<rtept lat="48.85" lon="2.35"><name>B</name></rtept></rte>'
        )

        result = import_route(content)

        assert [w.name for w in result.waypoints] == ["A", "B"]

    def test_wrong_root_element(self):
        result = import_route('<?xml version="1.0"?><gpsdata/>', "gpx")

        assert not result.success
        assert result.errors[0].startswith("GPX import failed: Unrecognized root element <gpsdata>")

    def test_wrong_namespace(self):
        """GPX 1.0 documents are rejected."""
        content = gpx_document('<wpt lat="1" lon="2"/>', namespace="http://www.topografix.com/GPX/1/0")

        result = import_route(content)

        assert not result.success
        assert "Unsupported GPX namespace" in result.errors[0]

    def test_invalid_xml(self):
        result = import_route(gpx_document("<wpt lat='1' lon='2'>"), "gpx")

        assert not result.success
        assert result.errors[0].startswith("GPX import failed: Invalid GPX format")

    def test_empty_document(self):
        result = import_route(gpx_document(""))

        assert result.success
        assert result.waypoints == []
        assert result.warnings == ["No waypoints found in GPX document"]

    def test_codec_decode_directly(self):
        """Track points get cumulative distances."""
        content = gpx_document(
            '<trk><trkseg><trkpt lat="52.52" lon="13.405"/><trkpt lat="48.8566" lon="2.3522"/>'
            '<trkpt lat="bad" lon="1"/></trkseg></trk>'
        )

        decoded = GPXCodec().decode(content)

        assert len(decoded.route_points) == 2
        assert decoded.route_points[0].distance == 0
        assert 850_000 < decoded.route_points[1].distance < 900_000
        assert decoded.warnings == ["Skipped track point 3: invalid latitude 'bad'"]
