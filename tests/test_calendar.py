"""
Tests for rashi, nakshatra and pada derivation.
"""

import pytest

from libjyotish.calendar import (
    NAKSHATRAS,
    RASHIS,
    InvalidLongitudeError,
    SiderealLongitude,
    nakshatra_and_pada,
    nakshatra_details,
    sign_and_degree,
)
from libjyotish.constants import NAKSHATRA_SPAN, PADA_SPAN


@pytest.mark.unit
class TestSiderealLongitude:
    @pytest.mark.parametrize(
        "value", [float("nan"), float("inf"), float("-inf"), -0.1, 360.0, 400.0, "45", None, True]
    )
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidLongitudeError):
            SiderealLongitude(value)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            SiderealLongitude(-1)

    def test_accepts_range(self):
        assert SiderealLongitude(0) == 0.0
        assert SiderealLongitude(359.999) == 359.999

    def test_normalized(self):
        assert SiderealLongitude.normalized(-10.0) == pytest.approx(350.0)
        assert SiderealLongitude.normalized(720.5) == pytest.approx(0.5)
        assert SiderealLongitude.normalized(360.0) == 0.0

    def test_normalized_rejects_non_finite(self):
        with pytest.raises(InvalidLongitudeError):
            SiderealLongitude.normalized(float("nan"))


@pytest.mark.unit
class TestSign:
    def test_tables(self):
        assert len(RASHIS) == 12
        assert RASHIS[0].sanskrit == "Mesha"
        assert RASHIS[11].name == "Pisces"

    def test_sign_and_degree(self):
        placement = sign_and_degree(45.0)
        assert placement.index == 1
        assert placement.name == "Taurus"
        assert placement.rashi.sanskrit == "Vrishabha"
        assert placement.degree == pytest.approx(15.0)

    def test_boundaries(self):
        assert sign_and_degree(0.0).index == 0
        assert sign_and_degree(30.0).index == 1
        assert sign_and_degree(359.999).index == 11

    def test_degree_formatted(self):
        assert sign_and_degree(45.5).degree_formatted == "15°30'0.0\""

    def test_invalid(self):
        with pytest.raises(InvalidLongitudeError):
            sign_and_degree(float("nan"))


@pytest.mark.unit
class TestNakshatra:
    def test_table(self):
        assert len(NAKSHATRAS) == 27
        assert NAKSHATRAS[3].name == "Rohini"
        assert NAKSHATRAS[3].lord == "Moon"

    def test_start_of_zodiac(self):
        info = nakshatra_and_pada(0.0)
        assert info.name == "Ashwini"
        assert info.index == 1
        assert info.pada == 1

    def test_second_mansion_boundary(self):
        info = nakshatra_and_pada(360.0 / 27)
        assert info.index == 2
        assert info.name == "Bharani"
        assert info.pada == 1

    def test_end_of_zodiac(self):
        info = nakshatra_and_pada(359.999)
        assert info.index == 27
        assert info.name == "Revati"
        assert info.pada == 4

    def test_padas(self):
        base = 3 * NAKSHATRA_SPAN  # Rohini
        for pada in range(1, 5):
            info = nakshatra_and_pada(base + (pada - 0.5) * PADA_SPAN)
            assert info.name == "Rohini"
            assert info.pada == pada

    def test_every_longitude_in_range(self):
        for i in range(3600):
            info = nakshatra_and_pada(i / 10.0)
            assert 1 <= info.index <= 27
            assert 1 <= info.pada <= 4

    def test_display(self):
        info = nakshatra_and_pada(3 * NAKSHATRA_SPAN + PADA_SPAN * 1.5)
        assert info.display == "Rohini 2"
        assert "Brahma" in info.full_info
        assert info.sanskrit == "रोहिणी"

    def test_details(self):
        display, full = nakshatra_details(0.0)
        assert display == "Ashwini 1"
        assert full.startswith("Ashwini")

    def test_invalid(self):
        with pytest.raises(InvalidLongitudeError):
            nakshatra_and_pada(360.0)
