#!/usr/bin/env python3
"""
Distance evaluator: haversine distance and inclusive radius containment.
"""

from math import isnan, pi

import pytest

from conftest import offset_north
from core.errors import InvalidCoordinates, ValidationError
from utils.geofence import EARTH_RADIUS_M, haversine_distance, is_within_radius

CENTER = (0.0, 0.0)


def test_same_point_is_zero_distance():
    assert haversine_distance((12.5, 41.9), (12.5, 41.9)) == 0.0
    assert is_within_radius((12.5, 41.9), (12.5, 41.9), 1)


def test_distance_along_meridian():
    point = (0.0, offset_north(50))
    assert haversine_distance(point, CENTER) == pytest.approx(50, abs=1e-6)


def test_known_city_distance():
    # London -> Paris is roughly 344 km on a spherical earth
    london = (-0.1278, 51.5074)
    paris = (2.3522, 48.8566)
    assert haversine_distance(london, paris) == pytest.approx(343_500, rel=0.01)


def test_antipodal_points_do_not_produce_nan():
    distance = haversine_distance((0.0, 0.0), (180.0, 0.0))
    assert not isnan(distance)
    assert distance == pytest.approx(pi * EARTH_RADIUS_M)

    pole_to_pole = haversine_distance((0.0, 90.0), (0.0, -90.0))
    assert pole_to_pole == pytest.approx(pi * EARTH_RADIUS_M)


def test_boundary_is_inclusive():
    point = (0.0, offset_north(100))
    radius = haversine_distance(point, CENTER)
    assert is_within_radius(point, CENTER, radius)


def test_just_past_boundary_is_outside():
    radius = 100.0
    assert is_within_radius((0.0, offset_north(99.99)), CENTER, radius)
    assert not is_within_radius((0.0, offset_north(100.01)), CENTER, radius)


@pytest.mark.parametrize(
    "point",
    [
        (181.0, 0.0),
        (-180.5, 0.0),
        (0.0, 90.1),
        (0.0, -91.0),
        (float("nan"), 0.0),
        (0.0, float("inf")),
    ],
)
def test_out_of_range_coordinates_raise(point):
    with pytest.raises(InvalidCoordinates):
        is_within_radius(point, CENTER, 100)
    with pytest.raises(InvalidCoordinates):
        is_within_radius(CENTER, point, 100)


def test_extreme_but_valid_coordinates_are_accepted():
    assert haversine_distance((-180.0, -90.0), (180.0, 90.0)) >= 0


@pytest.mark.parametrize("radius", [0, -5])
def test_non_positive_radius_is_rejected(radius):
    with pytest.raises(ValidationError):
        is_within_radius(CENTER, CENTER, radius)
