"""Exceptions raised inside the export engine.

The facade catches these and reports them through result ``errors``;
they never reach callers of ``export_trip``/``import_route``.
"""


class ExportError(Exception):
    """Base class for engine failures."""


class UnsupportedFormatError(ExportError):
    """Requested format (or operation on a format) is not available."""


class DocumentParseError(ExportError):
    """An imported document is not a structurally valid document of its format."""
