import math
import random
import pytest

from models.geo import GeoPoint, Compass
from services.proximity import (
    compute_distance_km,
    compute_bearing_degrees,
    compute_bearing_compass,
    format_distance,
    format_coordinates,
    directions_url,
    map_url,
)

KATHMANDU = GeoPoint(latitude=27.7058, longitude=85.3292)
BIRATNAGAR = GeoPoint(latitude=26.4672, longitude=87.2744)
POKHARA = GeoPoint(latitude=28.2418, longitude=83.9718)
LALITPUR = GeoPoint(latitude=27.6672, longitude=85.3240)
ORIGIN = GeoPoint(latitude=0, longitude=0)


@pytest.mark.parametrize("point", [KATHMANDU, ORIGIN, GeoPoint(latitude=-89.9, longitude=179.9)])
def test_distance_to_self_is_zero(point):
    assert compute_distance_km(point, point) == 0


def test_distance_is_symmetric():
    assert compute_distance_km(KATHMANDU, POKHARA) == pytest.approx(compute_distance_km(POKHARA, KATHMANDU))
    assert compute_distance_km(BIRATNAGAR, LALITPUR) == pytest.approx(compute_distance_km(LALITPUR, BIRATNAGAR))


def test_kathmandu_to_biratnagar_great_circle_distance():
    # Straight-line distance; the road distance is much longer
    assert compute_distance_km(KATHMANDU, BIRATNAGAR) == pytest.approx(237, abs=5)


def test_one_degree_of_latitude_is_about_111_km():
    north = GeoPoint(latitude=1, longitude=0)
    assert compute_distance_km(ORIGIN, north) == pytest.approx(2 * math.pi * 6371 / 360)


def test_triangle_inequality_holds():
    direct = compute_distance_km(KATHMANDU, POKHARA)
    via_lalitpur = compute_distance_km(KATHMANDU, LALITPUR) + compute_distance_km(LALITPUR, POKHARA)
    assert direct <= via_lalitpur + 1e-9


HALF_CIRCUMFERENCE_KM = math.pi * 6371


@pytest.mark.parametrize("lat, lon", [(-43.5577, -28.3277), (30.3333, -162.5887), (0, 0), (89.9, -90)])
def test_antipodal_points_are_half_the_circumference_apart(lat, lon):
    a = GeoPoint(latitude=lat, longitude=lon)
    b = GeoPoint(latitude=-lat, longitude=lon + 180)
    assert compute_distance_km(a, b) == pytest.approx(HALF_CIRCUMFERENCE_KM)


def test_near_antipodal_pairs_never_raise():
    rng = random.Random(7)
    for _ in range(5000):
        lat = round(rng.uniform(-90, 90), 4)
        lon = round(rng.uniform(-180, 0), 4)
        a = GeoPoint(latitude=lat, longitude=lon)
        b = GeoPoint(latitude=-lat, longitude=lon + 180)
        assert 0 <= compute_distance_km(a, b) <= HALF_CIRCUMFERENCE_KM + 1e-6


def test_due_north_and_due_east():
    assert compute_bearing_compass(ORIGIN, GeoPoint(latitude=1, longitude=0)) == Compass.N
    assert compute_bearing_compass(ORIGIN, GeoPoint(latitude=0, longitude=1)) == Compass.E


@pytest.mark.parametrize("target, expected", [
    (GeoPoint(latitude=-1, longitude=0), Compass.S),
    (GeoPoint(latitude=0, longitude=-1), Compass.W),
    (GeoPoint(latitude=1, longitude=1), Compass.NE),
    (GeoPoint(latitude=-1, longitude=1), Compass.SE),
    (GeoPoint(latitude=-1, longitude=-1), Compass.SW),
    (GeoPoint(latitude=1, longitude=-1), Compass.NW),
])
def test_intercardinal_bearings(target, expected):
    assert compute_bearing_compass(ORIGIN, target) == expected


def test_bearing_degrees_are_normalised():
    west = compute_bearing_degrees(ORIGIN, GeoPoint(latitude=0, longitude=-1))
    assert 0 <= west < 360
    assert west == pytest.approx(270)


def test_westerly_bearings_do_not_go_negative():
    # Slightly west of north still buckets to N rather than falling off the list
    assert compute_bearing_compass(ORIGIN, GeoPoint(latitude=1, longitude=-0.1)) == Compass.N


def test_kathmandu_to_lalitpur_is_south():
    assert compute_bearing_compass(KATHMANDU, LALITPUR) == Compass.S


def test_format_distance():
    assert format_distance(0.35) == "350m"
    assert format_distance(4.2) == "4.2km"
    assert format_distance(1.0) == "1.0km"
    assert format_distance(0) == "0m"
    assert format_distance(283.4567) == "283.5km"
    # Just under a kilometer rounds up to 1000m; the unit switch happens before rounding
    assert format_distance(0.9996) == "1000m"


def test_url_and_coordinate_helpers():
    assert directions_url(LALITPUR) == "https://www.google.com/maps/dir/?api=1&destination=27.6672,85.324"
    assert map_url(LALITPUR) == "https://www.google.com/maps?q=27.6672,85.324"
    assert format_coordinates(KATHMANDU) == "Latitude: 27.705800, Longitude: 85.329200"
