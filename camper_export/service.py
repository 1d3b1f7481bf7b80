"""Export/import facade.

Selects the codec for the requested format, runs it, and folds every
failure into the returned result. Nothing here raises to the caller.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from camper_export.config import settings
from camper_export.devices import get_device_policy
from camper_export.errors import DocumentParseError, ExportError, UnsupportedFormatError
from camper_export.formats import CODECS
from camper_export.models import (
    ExportFormat,
    ExportInfo,
    ExportOptions,
    ExportResult,
    ImportResult,
    TripModel,
)
from camper_export.validation import validate_gpx_structure

logger = logging.getLogger(__name__)

FORMAT_ALIASES = {
    "json": ExportFormat.GEOJSON,
}

_ROOT_ELEMENT = re.compile(r"<(?:[\w.-]+:)?(gpx|kml)[\s>/]")


def export_trip(trip: TripModel | dict, options: ExportOptions | dict) -> ExportResult:
    """
    Export a trip in the format and device profile selected by the options.

    Args:
        trip: The trip to export (a TripModel or its dict form)
        options: Export options (an ExportOptions or its dict form)

    Returns:
        ExportResult; on failure ``success`` is False, ``content`` is empty
        and ``errors`` says why
    """
    try:
        options = _resolve_options(options)
    except UnsupportedFormatError as e:
        logger.warning(f"Export rejected: {e}")
        return ExportResult.failure([str(e)])

    try:
        trip = trip if isinstance(trip, TripModel) else TripModel.model_validate(trip)
    except ValidationError as e:
        return ExportResult.failure([f"Invalid trip data: {_summarize(e)}"])

    codec = CODECS.get(options.format)
    if codec is None:
        return ExportResult.failure([f"Unsupported export format: {options.format.value}"])

    warnings = _check_trip(trip, options)
    logger.debug(f"Exporting trip as {options.format.value} for {options.device_profile.value}")

    try:
        encoded = codec.encode(trip, options)
    except ExportError as e:
        return ExportResult.failure([f"Export failed: {e}"], warnings)
    except Exception as e:
        logger.error(f"{options.format.value.upper()} export error: {e}", exc_info=True)
        return ExportResult.failure([f"Export failed: {e}"], warnings)

    warnings.extend(encoded.warnings)

    if options.format is ExportFormat.GPX:
        report = validate_gpx_structure(encoded.content, options.device_profile)
        warnings.extend(report.warnings)
        if not report.well_formed:
            return ExportResult.failure(["Generated GPX document is not well-formed"], warnings)

    if options.format is ExportFormat.GPX:
        compatibility = list(get_device_policy(options.device_profile).compatibility)
    else:
        compatibility = _consumers(options.format)

    info = ExportInfo(
        format=options.format.value,
        waypoints=encoded.waypoints,
        campsites=encoded.campsites,
        route_points=encoded.route_points,
        navigation_points=encoded.navigation_points,
        exported_at=datetime.now(timezone.utc),
        compatibility=compatibility,
    )

    logger.info(
        f"Exported {options.format.value}: {info.waypoints} waypoints, "
        f"{info.campsites} campsites, {info.route_points} route points, {len(warnings)} warnings"
    )
    return ExportResult(
        success=True,
        content=encoded.content,
        warnings=warnings,
        filename=generate_filename(options.custom_name or trip_title(trip), options.format),
        file_size=len(encoded.content.encode("utf-8")),
        info=info,
    )


def export_trip_to_file(
    trip: TripModel | dict,
    options: ExportOptions | dict,
    output_dir: str | Path | None = None,
) -> ExportResult:
    """
    Export a trip and save the document.

    The file is written to ``output_dir`` (default: the configured output
    directory) under the generated filename; its path is recorded in
    ``result.info.filepath``.
    """
    result = export_trip(trip, options)
    if not result.success:
        return result

    directory = Path(output_dir) if output_dir is not None else settings.output_dir
    filepath = directory / result.filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        filepath.write_text(result.content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Could not write {filepath}: {e}")
        return ExportResult.failure([f"Could not write export file: {e}"], result.warnings)

    result.info.filepath = str(filepath)
    return result


def import_route(content: str | bytes, format_hint: ExportFormat | str | None = None) -> ImportResult:
    """
    Parse a previously exported document back into waypoints.

    Args:
        content: Document text (bytes are decoded as UTF-8)
        format_hint: Format name, ExportFormat, or a file name/extension;
            detected from the content when omitted

    Returns:
        ImportResult with waypoints in document order. Skipped items are
        reported without failing the import.
    """
    if not isinstance(content, (str, bytes)):
        return ImportResult.failure([
            f"Import failed: expected text or bytes content, got {type(content).__name__}"
        ])
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            return ImportResult.failure([f"Import failed: content is not UTF-8 text ({e})"])

    try:
        fmt = resolve_format(format_hint) if format_hint is not None else detect_format(content)
    except UnsupportedFormatError as e:
        return ImportResult.failure([str(e)])

    codec = CODECS.get(fmt)
    if codec is None:
        return ImportResult.failure([f"Unsupported import format: {fmt.value}"], fmt.value)
    if not codec.supports_import:
        return ImportResult.failure([f"{fmt.value.upper()} format not supported for import"], fmt.value)

    try:
        decoded = codec.decode(content)
    except DocumentParseError as e:
        logger.warning(f"{fmt.value.upper()} import rejected: {e}")
        return ImportResult.failure([f"{fmt.value.upper()} import failed: {e}"], fmt.value)
    except Exception as e:
        logger.error(f"{fmt.value.upper()} import error: {e}", exc_info=True)
        return ImportResult.failure([f"{fmt.value.upper()} import failed: {e}"], fmt.value)

    warnings = list(decoded.warnings)
    if not decoded.waypoints:
        warnings.append(f"No waypoints found in {fmt.value.upper()} document")

    logger.info(
        f"Imported {fmt.value}: {len(decoded.waypoints)} waypoints, "
        f"{len(decoded.campsites)} campsites, {len(decoded.route_points)} route points"
    )
    return ImportResult(
        success=True,
        format=fmt.value,
        waypoints=decoded.waypoints,
        campsites=decoded.campsites,
        route_points=decoded.route_points,
        warnings=warnings,
        errors=decoded.errors,
    )


def resolve_format(hint: ExportFormat | str) -> ExportFormat:
    """
    Turn a format hint into an ExportFormat.

    Accepts enum members, format names in any case, and file names or
    extensions such as ``trip.gpx`` or ``.geojson``.

    Raises:
        UnsupportedFormatError: if the hint names no supported format
    """
    if isinstance(hint, ExportFormat):
        return hint

    value = str(hint).strip().lower()
    if value in FORMAT_ALIASES:
        return FORMAT_ALIASES[value]
    try:
        return ExportFormat(value)
    except ValueError:
        pass

    suffix = value.rsplit(".", 1)[-1]
    if suffix in FORMAT_ALIASES:
        return FORMAT_ALIASES[suffix]
    try:
        return ExportFormat(suffix)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported import format: {hint}") from None


def detect_format(content: str) -> ExportFormat:
    """Guess the format of a document from its first significant characters."""
    text = content.lstrip("\ufeff").lstrip()
    if text.startswith(("{", "[")):
        return ExportFormat.GEOJSON
    if text.startswith("<"):
        match = _ROOT_ELEMENT.search(text)
        if match:
            return ExportFormat(match.group(1))
        raise UnsupportedFormatError("Unsupported import format: unrecognized XML document")
    return ExportFormat.CSV


def generate_filename(name: str, fmt: ExportFormat, when: datetime | None = None) -> str:
    """File name of the form ``<safe-name>_<YYYYMMDD>.<ext>``."""
    when = when or datetime.now(timezone.utc)
    safe_name = "".join(c if c.isalnum() or c in "-_" else "_" for c in name.strip())
    safe_name = re.sub(r"_+", "_", safe_name).strip("_").lower() or "camper-route"
    return f"{safe_name}_{when.strftime('%Y%m%d')}.{fmt.extension}"


def trip_title(trip: TripModel) -> str:
    if trip.metadata and trip.metadata.title:
        return trip.metadata.title
    return "camper-route"


def _resolve_options(options: ExportOptions | dict) -> ExportOptions:
    """
    Validate raw options.

    Raises:
        UnsupportedFormatError: for unknown formats/profiles or otherwise invalid options
    """
    if isinstance(options, ExportOptions):
        return options
    try:
        return ExportOptions.model_validate(options)
    except ValidationError as e:
        for error in e.errors():
            field = error["loc"][0] if error["loc"] else None
            raw = options.get(field) if isinstance(options, dict) else None
            if field == "format":
                raise UnsupportedFormatError(f"Unsupported export format: {raw}") from None
            if field == "device_profile":
                raise UnsupportedFormatError(f"Unsupported device profile: {raw}") from None
        raise UnsupportedFormatError(f"Invalid export options: {_summarize(e)}") from None


def _check_trip(trip: TripModel, options: ExportOptions) -> list[str]:
    """Non-blocking warnings about the trip content."""
    warnings = []
    if not options.include_waypoints:
        return warnings

    if len(trip.waypoints) > settings.max_waypoints_warning:
        warnings.append(
            f"Large number of waypoints ({len(trip.waypoints)}) may cause performance "
            "issues on some GPS devices"
        )
    for index, waypoint in enumerate(trip.waypoints):
        if not waypoint.name.strip():
            warnings.append(f"Waypoint {index + 1} has no name - will use default name")
    return warnings


def _consumers(fmt: ExportFormat) -> list[str]:
    return {
        ExportFormat.KML: ["Google Earth", "Google Maps", "Many GPS Applications"],
        ExportFormat.GEOJSON: ["Web Maps", "GIS Applications"],
        ExportFormat.CSV: ["Excel", "Google Sheets", "Numbers", "Any Spreadsheet Application"],
    }.get(fmt, [])


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)
