"""
Tests for local planetary computation and snapshot assembly.
"""

from datetime import datetime, timedelta, timezone

import pytest
import swisseph as swe

from libjyotish.constants import (
    GRAHAS,
    JUPITER,
    KETU,
    MARS,
    MERCURY,
    MOON,
    RAHU,
    SATURN,
    SOURCE_CALCULATED,
    SUN,
    VENUS,
)
from libjyotish.models import CalendarEvent, normalize_events
from libjyotish.planets import (
    calculate_snapshot,
    geocentric_position,
    longitude_speed,
    moon_phase,
    snapshot_from_longitudes,
)
from libjyotish.coordinates import to_ecliptic

SWISS_IDS = {
    SUN: swe.SUN,
    MERCURY: swe.MERCURY,
    VENUS: swe.VENUS,
    MARS: swe.MARS,
    JUPITER: swe.JUPITER,
    SATURN: swe.SATURN,
}


@pytest.mark.unit
class TestGeocentricPositions:
    def test_sun_vs_swisseph(self, test_dates, swisseph_longitude, angle_diff):
        for instant, label in test_dates:
            lon = to_ecliptic(geocentric_position(SUN, instant)).longitude
            diff = angle_diff(lon, swisseph_longitude(instant, swe.SUN))
            assert diff < 1.0, f"{label}: Sun diff {diff}°"

    @pytest.mark.parametrize("body", [MERCURY, VENUS, MARS, JUPITER, SATURN])
    def test_planets_vs_swisseph(self, body, test_dates, swisseph_longitude, angle_diff):
        for instant, label in test_dates:
            lon = to_ecliptic(geocentric_position(body, instant)).longitude
            diff = angle_diff(lon, swisseph_longitude(instant, SWISS_IDS[body]))
            assert diff < 3.0, f"{label}: {body} diff {diff}°"

    def test_sun_distance(self, standard_instant):
        distance = geocentric_position(SUN, standard_instant).magnitude
        assert 1.47e8 < distance < 1.53e8

    def test_unknown_body(self, standard_instant):
        with pytest.raises(ValueError):
            geocentric_position("pluto", standard_instant)

    def test_speeds(self, standard_instant):
        assert 0.95 < longitude_speed(SUN, standard_instant) < 1.03
        assert 11.0 < longitude_speed(MOON, standard_instant) < 16.0
        assert longitude_speed(RAHU, standard_instant) == pytest.approx(-0.0529539, abs=1e-6)


@pytest.mark.unit
class TestMoonPhase:
    def test_new(self):
        phase = moon_phase(100.0, 100.0)
        assert phase.name == "New Moon"
        assert phase.illumination == pytest.approx(0.0)
        assert phase.tithi == 1

    def test_full(self):
        phase = moon_phase(10.0, 190.0)
        assert phase.name == "Full Moon"
        assert phase.illumination == pytest.approx(1.0)
        assert not phase.is_waxing

    def test_quarters(self):
        assert moon_phase(0.0, 90.0).name == "First Quarter"
        assert moon_phase(0.0, 90.0).illumination == pytest.approx(0.5)
        assert moon_phase(0.0, 270.0).name == "Last Quarter"

    def test_wraparound(self):
        phase = moon_phase(350.0, 40.0)
        assert phase.elongation == pytest.approx(50.0)
        assert phase.name == "Waxing Crescent"
        assert phase.is_waxing


@pytest.mark.unit
class TestSnapshot:
    def test_complete(self, standard_instant):
        snapshot = calculate_snapshot(standard_instant)
        assert snapshot.source == SOURCE_CALCULATED
        assert snapshot.is_fallback
        assert [p.body for p in snapshot] == list(GRAHAS)
        assert snapshot.ayanamsa == pytest.approx(23.85)
        assert snapshot.ayanamsa_name == "Lahiri"
        assert snapshot.moon_phase is not None
        for pos in snapshot:
            assert 0.0 <= pos.sidereal_longitude < 360.0
            assert 1 <= pos.nakshatra.index <= 27
            assert 1 <= pos.nakshatra.pada <= 4
            assert pos.velocity is not None
            assert pos.radius > 0

    def test_sidereal_is_tropical_minus_ayanamsa(self, standard_instant, angle_diff):
        snapshot = calculate_snapshot(standard_instant)
        for pos in snapshot:
            expected = (pos.longitude - snapshot.ayanamsa) % 360
            assert angle_diff(pos.sidereal_longitude, expected) < 1e-9

    def test_nodes(self, standard_instant, angle_diff):
        snapshot = calculate_snapshot(standard_instant)
        rahu = snapshot.position(RAHU)
        ketu = snapshot.position(KETU)
        assert angle_diff(rahu.longitude, ketu.longitude) == pytest.approx(180.0, abs=1e-9)
        assert rahu.is_retrograde
        assert ketu.is_retrograde

    def test_sun_never_retrograde(self, test_dates):
        for instant, _ in test_dates:
            assert not calculate_snapshot(instant).position(SUN).is_retrograde

    def test_keplerian_metadata(self, standard_instant):
        snapshot = calculate_snapshot(standard_instant)
        mars = snapshot.position(MARS)
        assert mars.elements is not None
        assert 0.0 <= mars.mean_anomaly < 360.0
        assert mars.orbit_speed == pytest.approx(24.1, abs=0.3)
        assert snapshot.position(SUN).elements is None
        assert snapshot.position(MOON).orbit_speed == pytest.approx(1.03, abs=0.05)

    def test_position_lookup(self, standard_instant):
        snapshot = calculate_snapshot(standard_instant)
        assert snapshot.position(MOON).name == "Chandra"
        with pytest.raises(KeyError):
            snapshot.position("pluto")

    def test_events_filtered(self, standard_instant):
        events = [
            {"id": "past", "date": standard_instant - timedelta(days=1)},
            {"id": "now", "date": standard_instant},
            {"id": "soon", "date": standard_instant + timedelta(days=3), "title": "Ekadashi"},
            {"id": "edge", "date": standard_instant + timedelta(days=30)},
            {"id": "late", "date": standard_instant + timedelta(days=31)},
            CalendarEvent("obj", standard_instant + timedelta(days=1)),
            {"id": "iso", "date": "2000-01-05T00:00:00Z", "category": "blog"},
        ]
        snapshot = calculate_snapshot(standard_instant, events)
        assert [e.id for e in snapshot.events] == ["obj", "soon", "iso", "edge"]
        iso = [e for e in snapshot.events if e.id == "iso"][0]
        assert iso.details == {"category": "blog"}
        assert iso.date.tzinfo is not None

    def test_unparseable_events_dropped(self, standard_instant):
        events = [
            {"id": "bad-date", "date": "next tuesday"},
            {"id": "no-date"},
            {"date": standard_instant + timedelta(days=2)},
            {"id": "numeric", "date": 1710484200},
            "not an event",
            {"id": "good", "date": standard_instant + timedelta(days=2)},
        ]
        assert [e.id for e in normalize_events(events)] == ["good"]
        snapshot = calculate_snapshot(standard_instant, events)
        assert [e.id for e in snapshot.events] == ["good"]

    def test_naive_instant(self):
        snapshot = calculate_snapshot(datetime(2024, 5, 1, 12, 0))
        assert snapshot.instant == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestSnapshotFromLongitudes:
    LONGITUDES = {
        SUN: 10.0,
        MOON: 45.0,
        MARS: 100.0,
        MERCURY: 20.0,
        JUPITER: 200.0,
        VENUS: 350.0,
        SATURN: 300.0,
        RAHU: 0.5,
    }

    def test_rebuild(self, standard_instant):
        snapshot = snapshot_from_longitudes(standard_instant, self.LONGITUDES, 24.0, "Remote")
        assert snapshot.source == "Remote"
        assert not snapshot.is_fallback
        for body, lon in self.LONGITUDES.items():
            assert snapshot.position(body).sidereal_longitude == pytest.approx(lon, abs=1e-9)
        assert snapshot.position(KETU).sidereal_longitude == pytest.approx(180.5, abs=1e-9)
        assert snapshot.position(MOON).sign.name == "Taurus"
        assert snapshot.position(SUN).longitude == pytest.approx(34.0)

    def test_speeds_filled(self, standard_instant):
        speeds = {MARS: -0.3}
        snapshot = snapshot_from_longitudes(
            standard_instant, self.LONGITUDES, 24.0, "Remote", speeds=speeds
        )
        assert snapshot.position(MARS).is_retrograde
        assert snapshot.position(MOON).speed > 10.0

    def test_missing_body(self, standard_instant):
        longitudes = dict(self.LONGITUDES)
        del longitudes[SATURN]
        with pytest.raises(ValueError):
            snapshot_from_longitudes(standard_instant, longitudes, 24.0, "Remote")
