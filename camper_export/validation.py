"""Post-encode structural checks for GPX documents."""

import logging
import re
from dataclasses import dataclass, field
from xml.etree import ElementTree as ET

from camper_export.devices import get_device_policy
from camper_export.models import DeviceProfile

logger = logging.getLogger(__name__)

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"

_WPT_PATTERN = re.compile(r"<wpt\b.*?</wpt>|<wpt\b[^>]*/>", re.DOTALL)


@dataclass
class ValidationReport:
    """Advisory findings for one document."""
    warnings: list[str] = field(default_factory=list)
    well_formed: bool = True


def validate_gpx_structure(content: str, profile: DeviceProfile | str) -> ValidationReport:
    """
    Check a generated GPX document for required markers and device constraints.

    Every check contributes at most one warning. The report never blocks an
    export; only ``well_formed`` signals a hard structural problem.

    Args:
        content: The encoded GPX document
        profile: Device profile the document was generated for

    Returns:
        ValidationReport with warnings in check order
    """
    policy = get_device_policy(profile)
    report = ValidationReport()

    if not content.startswith("<?xml"):
        report.warnings.append("Missing XML declaration")

    if content.count("<gpx") != 1 or content.count("</gpx>") != 1:
        report.warnings.append("GPX root element is missing or unbalanced")

    if f'xmlns="{GPX_NAMESPACE}"' not in content:
        report.warnings.append("Missing or incorrect GPX namespace")

    if policy.requires_symbols:
        waypoints = _WPT_PATTERN.findall(content)
        if any("<sym>" not in wpt for wpt in waypoints):
            report.warnings.append("Garmin devices prefer waypoints with symbol information")
    if policy.profile is DeviceProfile.GARMIN:
        if "garmin:" in content and "xmlns:garmin=" not in content:
            report.warnings.append("Garmin extensions used without proper namespace")

    if policy.max_file_size is not None:
        size = len(content.encode("utf-8"))
        if size > policy.max_file_size:
            report.warnings.append(
                f"File size {size / 1024:.1f} KB may exceed TomTom device limits "
                f"({policy.max_file_size / 1024:.0f} KB)"
            )

    if policy.forces_metadata and "<metadata>" not in content:
        report.warnings.append("Smartphone apps often require metadata for better display")

    if policy.profile is DeviceProfile.UNIVERSAL and "<wpt" not in content and "<trk>" not in content:
        report.warnings.append("Universal format should include either waypoints or track data")

    try:
        ET.fromstring(content.encode("utf-8"))
    except ET.ParseError as e:
        logger.warning(f"Generated GPX is not well-formed: {e}")
        report.well_formed = False
        report.warnings.append(f"Document is not well-formed XML: {e}")

    return report
