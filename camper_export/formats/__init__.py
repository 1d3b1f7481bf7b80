"""Format codecs for trip export and import."""

from camper_export.models import ExportFormat

from .base import TripCodec, EncodedDocument, DecodedDocument
from .gpx_codec import GPXCodec
from .kml_codec import KMLCodec
from .geojson_codec import GeoJSONCodec
from .csv_codec import CSVCodec

CODECS: dict[ExportFormat, TripCodec] = {
    ExportFormat.GPX: GPXCodec(),
    ExportFormat.KML: KMLCodec(),
    ExportFormat.GEOJSON: GeoJSONCodec(),
    ExportFormat.CSV: CSVCodec(),
}

__all__ = [
    "CODECS",
    "TripCodec",
    "EncodedDocument",
    "DecodedDocument",
    "GPXCodec",
    "KMLCodec",
    "GeoJSONCodec",
    "CSVCodec",
]
