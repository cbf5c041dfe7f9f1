"""
Unit tests for lunar module: Moon position and mean lunar nodes.
"""

from datetime import timedelta

import pytest
import swisseph as swe

from libjyotish.constants import AU_KM, MOON_MEAN_DISTANCE_AU
from libjyotish.coordinates import to_ecliptic
from libjyotish.lunar import (
    fundamental_arguments,
    lunar_ecliptic,
    lunar_geocentric_position,
    lunar_nodes,
    mean_node_longitude,
)


@pytest.mark.unit
class TestMoonPosition:
    """Tests for the truncated lunar series."""

    def test_fundamental_arguments_j2000(self):
        args = fundamental_arguments(0.0)
        assert args.L == pytest.approx(218.3164477)
        assert args.D == pytest.approx(297.8501921)
        assert args.F == pytest.approx(93.2720950)

    def test_moon_vs_swisseph(self, test_dates, swisseph_longitude, angle_diff):
        for instant, label in test_dates:
            lon = lunar_ecliptic(instant).longitude
            diff = angle_diff(lon, swisseph_longitude(instant, swe.MOON))
            assert diff < 1.0, f"{label}: Moon diff {diff}°"

    def test_distance_range(self, test_dates):
        for instant, _ in test_dates:
            distance = lunar_ecliptic(instant).distance
            assert 355000 < distance < 410000

    def test_latitude_range(self, test_dates):
        for instant, _ in test_dates:
            assert abs(lunar_ecliptic(instant).latitude) < 5.5

    def test_vector_matches_ecliptic(self, standard_instant):
        coords = lunar_ecliptic(standard_instant)
        back = to_ecliptic(lunar_geocentric_position(standard_instant))
        assert back.longitude == pytest.approx(coords.longitude, abs=1e-9)
        assert back.latitude == pytest.approx(coords.latitude, abs=1e-9)
        assert back.distance == pytest.approx(coords.distance, rel=1e-12)

    def test_daily_motion(self, standard_instant):
        # Moon moves ~11.8°-15.4° per day
        today = lunar_ecliptic(standard_instant).longitude
        tomorrow = lunar_ecliptic(standard_instant + timedelta(days=1)).longitude
        motion = (tomorrow - today) % 360
        assert 11.0 < motion < 16.0


@pytest.mark.unit
class TestLunarNodes:
    """Tests for Mean Lunar Nodes (Rahu/Ketu)."""

    def test_mean_node_j2000(self, standard_instant):
        assert mean_node_longitude(standard_instant) == pytest.approx(125.0445479)

    def test_mean_node_vs_swisseph(self, test_dates, swisseph_longitude, angle_diff):
        for instant, label in test_dates:
            node = mean_node_longitude(instant)
            diff = angle_diff(node, swisseph_longitude(instant, swe.MEAN_NODE))
            assert diff < 0.5, f"{label}: Mean Node diff {diff}°"

    def test_node_regresses(self, standard_instant):
        later = standard_instant + timedelta(days=10)
        motion = (mean_node_longitude(later) - mean_node_longitude(standard_instant)) % 360
        assert motion == pytest.approx(360 - 0.529539, abs=1e-6)

    def test_ketu_opposite_rahu(self, test_dates, angle_diff):
        for instant, _ in test_dates:
            nodes = lunar_nodes(instant)
            assert nodes.descending.x == -nodes.ascending.x
            assert nodes.descending.y == -nodes.ascending.y
            assert nodes.ascending.z == 0.0
            assert nodes.descending.z == 0.0
            rahu = to_ecliptic(nodes.ascending).longitude
            ketu = to_ecliptic(nodes.descending).longitude
            assert angle_diff(rahu, ketu) == pytest.approx(180.0, abs=1e-9)

    def test_node_distance(self, standard_instant):
        nodes = lunar_nodes(standard_instant)
        assert nodes.ascending.magnitude == pytest.approx(MOON_MEAN_DISTANCE_AU * AU_KM)
        assert nodes.descending_longitude == pytest.approx((nodes.longitude + 180) % 360)
