"""Shared fixtures for export engine tests."""

from datetime import datetime, timezone

import pytest

from camper_export.models import (
    Campsite,
    CostBreakdown,
    TripMetadata,
    TripModel,
    TripPlan,
    VehicleProfile,
    Waypoint,
    WaypointRole,
)


@pytest.fixture
def waypoints():
    """Berlin -> Paris -> Rome."""
    return [
        Waypoint(id="wp-berlin", lat=52.52, lng=13.405, name="Berlin", role=WaypointRole.START),
        Waypoint(
            id="wp-paris",
            lat=48.8566,
            lng=2.3522,
            name="Paris",
            role=WaypointRole.WAYPOINT,
            description="Two nights near the Seine",
        ),
        Waypoint(id="wp-rome", lat=41.9028, lng=12.4964, name="Rome", role=WaypointRole.END),
    ]


@pytest.fixture
def campsite():
    return Campsite(
        id="cs-paris",
        lat=48.8683,
        lng=2.2300,
        name="Camping de Paris",
        amenities=["showers", "electricity"],
        price=25.0,
        currency="EUR",
    )


@pytest.fixture
def trip(waypoints, campsite):
    """A complete trip with every optional section filled in."""
    return TripModel(
        waypoints=waypoints,
        campsites=[campsite],
        vehicle=VehicleProfile(height=3.2, width=2.3, weight=3.5, length=7.4, vehicle_type="motorhome"),
        costs=CostBreakdown(fuel_cost=420.0, tolls=85.5, accommodation=150.0, total=655.5),
        planning=TripPlan(days=7, stops_per_day=1, accommodation_nights=6),
        metadata=TripMetadata(
            title="Berlin to Rome",
            author="Anna",
            created=datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def bare_trip(waypoints):
    """Only waypoints, no metadata or extras."""
    return TripModel(waypoints=waypoints)
