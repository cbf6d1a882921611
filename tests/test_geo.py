import pytest

from stepwalker import (
    Location,
    bearing_between,
    bearing_to,
    destination_point,
    distance_between,
    haversine_distance,
)


def test_one_degree_of_latitude():
    assert haversine_distance(0, 0, 1, 0) == pytest.approx(111195, rel=1e-3)


def test_distance_to_self_is_zero():
    assert haversine_distance(51.5, -0.12, 51.5, -0.12) == 0


@pytest.mark.parametrize("lat2, lon2, expected", [
    (1, 0, 0),
    (0, 1, 90),
    (-1, 0, 180),
    (0, -1, 270),
])
def test_cardinal_bearings(lat2, lon2, expected):
    assert bearing_between(0, 0, lat2, lon2) == pytest.approx(expected)


@pytest.mark.parametrize("distance, bearing", [(1.5, 0), (25, 47), (400, 213.5)])
def test_destination_point_matches_distance_and_bearing(distance, bearing):
    origin = Location(48.8584, 2.2945)

    dest = destination_point(origin, distance, bearing)

    assert distance_between(origin, dest) == pytest.approx(distance, rel=1e-6)
    # compare on the circle, 359.9999 is next to 0
    diff = (bearing_to(origin, dest) - bearing + 180) % 360 - 180
    assert diff == pytest.approx(0, abs=1e-3)


def test_destination_point_keeps_altitude():
    origin = Location(10.0, 20.0, 35.5)
    assert destination_point(origin, 10, 90).alt == 35.5


def test_destination_point_wraps_longitude():
    dest = destination_point(Location(0, 179.99999), 100, 90)
    assert -180 <= dest.lon < -179.99


def test_destination_point_due_north_keeps_longitude():
    origin = Location(51.5007, -0.1246)
    assert destination_point(origin, 5, 0).lon == pytest.approx(origin.lon, abs=1e-12)
