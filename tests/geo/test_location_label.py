from src.shift_attendance.shift_attendance.core.enums import LocationSource
from src.shift_attendance.shift_attendance.geo.location import (
    build_geofence_snapshot,
    build_location_label,
    clamp_radius,
)
from src.shift_attendance.shift_attendance.geo.model import GeofenceSnapshot, LocationDetails


def test_clamp_radius_defaults_and_bounds():
    assert clamp_radius(None) == 150
    assert clamp_radius(float("nan")) == 150
    assert clamp_radius("abc") == 150
    assert clamp_radius(5) == 10
    assert clamp_radius(10_000) == 5000
    assert clamp_radius(75) == 75


def test_label_prefers_formatted_address():
    details = LocationDetails(formatted_address="  1 MG Road, Bengaluru  ", label="HQ", city="Bengaluru")
    assert build_location_label(details) == "1 MG Road, Bengaluru"


def test_label_joins_parts_and_skips_blanks():
    details = LocationDetails(label="HQ", address="1 MG Road", city=" ", state="KA", postal_code="560001")
    assert build_location_label(details) == "HQ, 1 MG Road, KA, 560001"
    assert build_location_label(LocationDetails()) is None
    assert build_location_label(None) is None


def test_snapshot_requires_coordinates():
    assert build_geofence_snapshot(LocationDetails(latitude=12.97), LocationSource.JOB) is None
    assert build_geofence_snapshot(LocationDetails(latitude=12.97, longitude=float("inf")), LocationSource.JOB) is None


def test_snapshot_clamps_radius_and_keeps_source():
    snapshot = build_geofence_snapshot(
        LocationDetails(latitude=12.9716, longitude=77.5946, allowed_radius=2, is_active=False, label="Store"),
        LocationSource.BUSINESS,
    )

    assert snapshot.allowed_radius == 10
    assert snapshot.is_active is False
    assert snapshot.source == LocationSource.BUSINESS
    assert snapshot.address == "Store"


def test_snapshot_dict_keeps_source_value():
    snapshot = GeofenceSnapshot(latitude=1.0, longitude=2.0, allowed_radius=150, source=LocationSource.EMPLOYMENT)

    data = snapshot.to_dict()

    assert data["source"] == "employment"
    assert GeofenceSnapshot.from_dict(data) == snapshot
