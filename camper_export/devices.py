"""GPS device compatibility policies."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from camper_export.config import settings
from camper_export.models import DeviceProfile, WaypointRole


# Symbol names per device family
GARMIN_SYMBOLS = MappingProxyType({
    "waypoint": "Waypoint",
    "campsite": "Campground",
    "poi": "Tourist Attraction",
    "fuel": "Gas Station",
    "rest": "Rest Area",
    "accommodation": "Lodging",
    "restaurant": "Restaurant",
})

TOMTOM_SYMBOLS = MappingProxyType({
    "waypoint": "Destination",
    "campsite": "Camping",
    "poi": "Attraction",
    "fuel": "Petrol Station",
    "rest": "Rest Area",
    "accommodation": "Hotel",
    "restaurant": "Restaurant",
})

SMARTPHONE_SYMBOLS = MappingProxyType({
    "waypoint": "flag",
    "campsite": "campground",
    "poi": "star",
    "fuel": "gas-station",
    "rest": "rest-area",
    "accommodation": "lodging",
    "restaurant": "restaurant",
})

UNIVERSAL_SYMBOLS = MappingProxyType({
    "waypoint": "waypoint",
    "campsite": "campsite",
    "poi": "poi",
    "fuel": "fuel",
    "rest": "rest",
    "accommodation": "accommodation",
    "restaurant": "restaurant",
})

# Garmin symbol per waypoint role
GARMIN_ROLE_SYMBOLS = MappingProxyType({
    WaypointRole.START: "Flag, Green",
    WaypointRole.WAYPOINT: "Waypoint",
    WaypointRole.END: "Flag, Red",
})


@dataclass(frozen=True)
class DevicePolicy:
    """Encode and validation rules for one device profile."""
    profile: DeviceProfile
    symbols: Mapping[str, str]
    role_symbols: Mapping[WaypointRole, str] = field(default_factory=dict)
    requires_symbols: bool = False
    forces_metadata: bool = False
    max_file_size: int | None = None
    compatibility: tuple[str, ...] = ()

    def symbol_for(self, kind: str, fallback: str = "waypoint") -> str:
        """Symbol name for a point kind, falling back to the symbol of `fallback`."""
        return self.symbols.get(kind) or self.symbols.get(fallback, fallback)

    def role_symbol(self, role: WaypointRole) -> str | None:
        """Symbol for a waypoint role, or None when the device does not use role symbols."""
        return self.role_symbols.get(role)


def get_device_policy(profile: DeviceProfile | str) -> DevicePolicy:
    """
    Look up the policy for a device profile.

    Raises:
        ValueError: if the profile is not one of the known profiles
    """
    profile = DeviceProfile(profile)

    if profile is DeviceProfile.GARMIN:
        return DevicePolicy(
            profile=profile,
            symbols=GARMIN_SYMBOLS,
            role_symbols=GARMIN_ROLE_SYMBOLS,
            requires_symbols=True,
            compatibility=("Generic GPS Devices", "Garmin Devices"),
        )
    if profile is DeviceProfile.TOMTOM:
        return DevicePolicy(
            profile=profile,
            symbols=TOMTOM_SYMBOLS,
            max_file_size=settings.tomtom_max_file_size,
            compatibility=("Generic GPS Devices", "TomTom Devices"),
        )
    if profile is DeviceProfile.SMARTPHONE:
        return DevicePolicy(
            profile=profile,
            symbols=SMARTPHONE_SYMBOLS,
            forces_metadata=True,
            compatibility=("Generic GPS Devices", "Smartphone Apps"),
        )
    return DevicePolicy(
        profile=profile,
        symbols=UNIVERSAL_SYMBOLS,
        compatibility=(
            "Generic GPS Devices",
            "Garmin Devices",
            "TomTom Devices",
            "Smartphone Apps",
        ),
    )
