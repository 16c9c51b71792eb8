from src.hr_attendance.hr_attendance.core.enums import DistanceMethod
from src.hr_attendance.hr_attendance.geo.geofence import (
    Coordinates,
    GeofencePolicy,
    haversine_meters,
    is_within_fence,
    planar_meters,
)

CENTER = Coordinates(lng=10.0, lat=36.8)


def _east_of_center(meters: float) -> Coordinates:
    return Coordinates(lng=CENTER.lng + meters / 111_000, lat=CENTER.lat)


def test_center_is_inside_any_fence():
    for radius in (0.0, 1.0, 100.0, 5_000.0):
        assert is_within_fence(CENTER, CENTER, radius)
        assert is_within_fence(CENTER, CENTER, radius, method=DistanceMethod.HAVERSINE)


def test_boundary_is_inclusive():
    point = _east_of_center(100)
    exact = planar_meters(point, CENTER)

    assert is_within_fence(point, CENTER, exact)


def test_just_inside_and_just_outside_radius():
    assert is_within_fence(_east_of_center(99), CENTER, 100)
    assert not is_within_fence(_east_of_center(101), CENTER, 100)


def test_planar_distance_is_degrees_times_fixed_factor():
    point = Coordinates(lng=CENTER.lng + 0.003, lat=CENTER.lat + 0.004)

    assert abs(planar_meters(point, CENTER) - 555.0) < 1e-6


def test_haversine_shrinks_longitude_away_from_equator():
    point = _east_of_center(100)

    # at 36.8 degrees a degree of longitude is roughly cos(lat) * 111 km
    assert 75 < haversine_meters(point, CENTER) < 85
    assert not GeofencePolicy(center=CENTER, radius_meters=90).contains(point)
    assert GeofencePolicy(center=CENTER, radius_meters=90, distance_method=DistanceMethod.HAVERSINE).contains(point)


def test_geojson_order_is_lng_lat():
    c = Coordinates.from_geojson([10.5, 36.9])

    assert c.lng == 10.5
    assert c.lat == 36.9
    assert c.to_geojson() == [10.5, 36.9]
