"""
Unit tests for haversine distance and the "near me" predicate.

Edge cases tested include:
  - Identical points
  - Argument order (symmetry)
  - Points near the poles and the antimeridian
  - NaN propagation
"""

import math

import pytest

from src.models.pet import GeoPoint
from src.utils.geo import NEAR_ME_RADIUS_KM, distance_km, haversine_km, is_near

NYC = GeoPoint(latitude=40.7128, longitude=-74.0060)
BOSTON = GeoPoint(latitude=42.3601, longitude=-71.0589)
NORTH = GeoPoint(latitude=41.0, longitude=-74.0)


class TestDistance:
    """Test great-circle distance."""

    def test_identical_points_zero(self):
        assert distance_km(NYC, NYC) == 0

    @pytest.mark.parametrize("a,b", [(NYC, BOSTON), (NYC, NORTH), (BOSTON, NORTH)])
    def test_symmetric(self, a, b):
        assert distance_km(a, b) == pytest.approx(distance_km(b, a))

    def test_nyc_to_boston(self):
        """NYC to Boston is roughly 306 km."""
        assert distance_km(NYC, BOSTON) == pytest.approx(306, abs=3)

    def test_one_degree_latitude_at_equator(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.1)

    def test_across_antimeridian(self):
        """Points on either side of 180 degrees are close, not half a world apart."""
        assert haversine_km(0.0, 179.5, 0.0, -179.5) == pytest.approx(111.19, abs=0.1)

    def test_near_pole(self):
        distance = haversine_km(89.9, 0.0, 89.9, 180.0)
        assert distance == pytest.approx(22.24, abs=0.1)

    def test_nan_propagates(self):
        assert math.isnan(haversine_km(float("nan"), 0.0, 0.0, 0.0))


class TestIsNear:
    """Test the threshold predicate."""

    def test_default_threshold_is_fifty_km(self):
        assert NEAR_ME_RADIUS_KM == 50
        assert is_near(NYC, NORTH)  # ~32 km
        assert not is_near(NYC, BOSTON)

    def test_custom_threshold(self):
        assert not is_near(NYC, NORTH, threshold_km=5)
        assert is_near(NYC, NORTH, threshold_km=35)

    def test_boundary_inclusive(self):
        exact = distance_km(NYC, NORTH)
        assert is_near(NYC, NORTH, threshold_km=exact)
