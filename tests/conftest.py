"""
pytest configuration and shared fixtures for libjyotish tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
import swisseph as swe

from libjyotish import state
from libjyotish.time_utils import datetime_to_jd


# ============================================================================
# TEST DATA FIXTURES
# ============================================================================


@pytest.fixture
def standard_instant():
    """J2000.0 as an aware UTC datetime."""
    return datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def standard_jd():
    """Standard Julian Day for testing (J2000.0)."""
    return 2451545.0


@pytest.fixture
def test_dates():
    """Collection of test instants spanning different eras."""
    return [
        (datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc), "J2000"),
        (datetime(1990, 5, 20, 0, 0, tzinfo=timezone.utc), "Past"),
        (datetime(2024, 11, 5, 18, 0, tzinfo=timezone.utc), "Recent"),
        (datetime(2015, 8, 15, 6, 30, tzinfo=timezone.utc), "Mid"),
    ]


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================================
# COMPARISON FIXTURES
# ============================================================================


@pytest.fixture
def swisseph_longitude():
    """Tropical longitude of a body from the Swiss Ephemeris (Moshier)."""

    def _calc(instant, body_id):
        res, _ = swe.calc_ut(datetime_to_jd(instant), body_id, swe.FLG_MOSEPH)
        return res[0]

    return _calc


@pytest.fixture
def angle_diff():
    """Absolute angular difference with wrap-around."""

    def _diff(a, b):
        diff = abs(a - b) % 360.0
        if diff > 180:
            diff = 360 - diff
        return diff

    return _diff


# ============================================================================
# SETUP/TEARDOWN
# ============================================================================


@pytest.fixture(autouse=True)
def reset_library_state():
    """Reset configuration and disable remote services before each test."""
    state.reset_state()
    state.set_service_url(None)
    state.set_secondary_url(None)

    yield

    state.reset_state()


# ============================================================================
# MARKERS
# ============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
