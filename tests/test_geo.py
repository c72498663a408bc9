import math

import pytest

from routing.geo import distance_km


def test_distance_km_known_city_pair():
    """
    Pune -> Mumbai is ~120km as the crow flies.
    """
    distance = distance_km(18.5204, 73.8567, 19.0760, 72.8777)
    assert 115 < distance < 125


def test_distance_km_same_point_is_zero():
    assert distance_km(18.5204, 73.8567, 18.5204, 73.8567) == pytest.approx(0.0)


def test_distance_km_is_symmetric():
    there = distance_km(12.9716, 77.5946, 18.5204, 73.8567)
    back = distance_km(18.5204, 73.8567, 12.9716, 77.5946)
    assert there == pytest.approx(back)


@pytest.mark.parametrize(
    "coordinates",
    [
        (None, 73.8567, 19.0760, 72.8777),
        (18.5204, None, 19.0760, 72.8777),
        (18.5204, 73.8567, None, 72.8777),
        (18.5204, 73.8567, 19.0760, None),
        (float("nan"), 73.8567, 19.0760, 72.8777),
        (18.5204, 73.8567, "not-a-number", 72.8777),
        (float("inf"), 73.8567, 19.0760, 72.8777),
        (18.5204, float("-inf"), 19.0760, 72.8777),
        (18.5204, 73.8567, "Infinity", 72.8777),
    ],
)
def test_distance_km_unknown_location_is_infinite(coordinates):
    # never raises, unknown sorts last
    assert distance_km(*coordinates) == math.inf


def test_distance_km_accepts_numeric_strings():
    assert distance_km("18.5204", "73.8567", 18.5204, 73.8567) == pytest.approx(0.0)
