"""
Vedic calendar derivation for libjyotish.

Maps a sidereal ecliptic longitude to:
- Rashi (sidereal zodiac sign, 12 × 30°) and degree within the sign
- Nakshatra (lunar mansion, 27 × 13°20') and pada (quarter, 4 × 3°20')

Every lookup goes through SiderealLongitude, which rejects NaN, infinities,
non-numbers and values outside [0, 360). Callers holding an arbitrary angle
must wrap it explicitly with SiderealLongitude.normalized().
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Tuple

from .constants import NAKSHATRA_COUNT, NAKSHATRA_SPAN, PADA_SPAN, SIGN_SPAN
from .utils import format_dms, normalize_degrees


class InvalidLongitudeError(ValueError):
    """Raised when a value is not a valid sidereal longitude."""


class SiderealLongitude(float):
    """
    A sidereal ecliptic longitude in degrees, guaranteed finite and in [0, 360).

    Example:
        >>> SiderealLongitude(45.0)
        45.0
        >>> SiderealLongitude.normalized(-10.0)
        350.0
    """

    def __new__(cls, value):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidLongitudeError(f"Longitude must be a number, got {value!r}")
        value = float(value)
        if not math.isfinite(value):
            raise InvalidLongitudeError(f"Longitude must be finite, got {value}")
        if not 0.0 <= value < 360.0:
            raise InvalidLongitudeError(f"Longitude must be in [0, 360), got {value}")
        return super().__new__(cls, value)

    @classmethod
    def normalized(cls, value) -> "SiderealLongitude":
        """Wrap any finite angle into [0, 360)."""
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidLongitudeError(f"Longitude must be a number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidLongitudeError(f"Longitude must be finite, got {value}")
        return cls(normalize_degrees(float(value)))


# =============================================================================
# RASHIS
# =============================================================================


@dataclass(frozen=True)
class Rashi:
    name: str
    sanskrit: str
    ruler: str
    element: str
    quality: str
    nature: str


RASHIS: Tuple[Rashi, ...] = (
    Rashi("Aries", "Mesha", "Mars", "Fire", "Cardinal", "Movable"),
    Rashi("Taurus", "Vrishabha", "Venus", "Earth", "Fixed", "Fixed"),
    Rashi("Gemini", "Mithuna", "Mercury", "Air", "Mutable", "Dual"),
    Rashi("Cancer", "Karka", "Moon", "Water", "Cardinal", "Movable"),
    Rashi("Leo", "Simha", "Sun", "Fire", "Fixed", "Fixed"),
    Rashi("Virgo", "Kanya", "Mercury", "Earth", "Mutable", "Dual"),
    Rashi("Libra", "Tula", "Venus", "Air", "Cardinal", "Movable"),
    Rashi("Scorpio", "Vrishchika", "Mars", "Water", "Fixed", "Fixed"),
    Rashi("Sagittarius", "Dhanu", "Jupiter", "Fire", "Mutable", "Dual"),
    Rashi("Capricorn", "Makara", "Saturn", "Earth", "Cardinal", "Movable"),
    Rashi("Aquarius", "Kumbha", "Saturn", "Air", "Fixed", "Fixed"),
    Rashi("Pisces", "Meena", "Jupiter", "Water", "Mutable", "Dual"),
)


@dataclass(frozen=True)
class SignPlacement:
    """
    Position of a longitude within the sidereal zodiac.

    Attributes:
        index: Sign index 0-11 (0 = Aries / Mesha)
        rashi: Sign record
        degree: Degrees within the sign [0, 30)
    """

    index: int
    rashi: Rashi
    degree: float

    @property
    def name(self) -> str:
        return self.rashi.name

    @property
    def degree_formatted(self) -> str:
        return format_dms(self.degree)


def sign_and_degree(longitude) -> SignPlacement:
    """
    Find the sidereal sign and the degree within it.

    Args:
        longitude: Sidereal longitude in [0, 360)

    Raises:
        InvalidLongitudeError: If the longitude is invalid

    Example:
        >>> placement = sign_and_degree(45.0)
        >>> placement.name, placement.degree
        ('Taurus', 15.0)
    """
    lon = SiderealLongitude(longitude)
    index = min(int(lon // SIGN_SPAN), 11)
    return SignPlacement(index, RASHIS[index], lon - index * SIGN_SPAN)


# =============================================================================
# NAKSHATRAS
# =============================================================================


@dataclass(frozen=True)
class Nakshatra:
    name: str
    sanskrit: str
    deity: str
    lord: str
    nature: str


NAKSHATRAS: Tuple[Nakshatra, ...] = (
    Nakshatra("Ashwini", "अश्विनी", "Ashwini Kumaras", "Ketu", "Swift"),
    Nakshatra("Bharani", "भरणी", "Yama", "Venus", "Fierce"),
    Nakshatra("Krittika", "कृत्तिका", "Agni", "Sun", "Mixed"),
    Nakshatra("Rohini", "रोहिणी", "Brahma", "Moon", "Fixed"),
    Nakshatra("Mrigashira", "मृगशिरा", "Soma", "Mars", "Tender"),
    Nakshatra("Ardra", "आर्द्रा", "Rudra", "Rahu", "Sharp"),
    Nakshatra("Punarvasu", "पुनर्वसु", "Aditi", "Jupiter", "Movable"),
    Nakshatra("Pushya", "पुष्य", "Brihaspati", "Saturn", "Swift"),
    Nakshatra("Ashlesha", "आश्लेषा", "Nagas", "Mercury", "Sharp"),
    Nakshatra("Magha", "मघा", "Pitrs", "Ketu", "Fierce"),
    Nakshatra("Purva Phalguni", "पूर्व फाल्गुनी", "Bhaga", "Venus", "Fierce"),
    Nakshatra("Uttara Phalguni", "उत्तर फाल्गुनी", "Aryaman", "Sun", "Fixed"),
    Nakshatra("Hasta", "हस्त", "Savitar", "Moon", "Swift"),
    Nakshatra("Chitra", "चित्रा", "Vishvakarma", "Mars", "Tender"),
    Nakshatra("Swati", "स्वाति", "Vayu", "Rahu", "Movable"),
    Nakshatra("Vishakha", "विशाखा", "Indra-Agni", "Jupiter", "Mixed"),
    Nakshatra("Anuradha", "अनुराधा", "Mitra", "Saturn", "Tender"),
    Nakshatra("Jyeshtha", "ज्येष्ठा", "Indra", "Mercury", "Sharp"),
    Nakshatra("Mula", "मूल", "Nirriti", "Ketu", "Sharp"),
    Nakshatra("Purva Ashadha", "पूर्व आषाढ़ा", "Apas", "Venus", "Fierce"),
    Nakshatra("Uttara Ashadha", "उत्तर आषाढ़ा", "Vishve Devas", "Sun", "Fixed"),
    Nakshatra("Shravana", "श्रवण", "Vishnu", "Moon", "Movable"),
    Nakshatra("Dhanishtha", "धनिष्ठा", "Vasus", "Mars", "Movable"),
    Nakshatra("Shatabhisha", "शतभिषा", "Varuna", "Rahu", "Movable"),
    Nakshatra("Purva Bhadrapada", "पूर्व भाद्रपदा", "Aja Ekapada", "Jupiter", "Fierce"),
    Nakshatra("Uttara Bhadrapada", "उत्तर भाद्रपदा", "Ahir Budhnya", "Saturn", "Fixed"),
    Nakshatra("Revati", "रेवती", "Pushan", "Mercury", "Tender"),
)


@dataclass(frozen=True)
class NakshatraInfo:
    """
    Lunar mansion placement of a sidereal longitude.

    Attributes:
        name: Mansion name
        sanskrit: Devanagari name
        index: Mansion number 1-27
        lord: Ruling graha
        deity: Presiding deity
        nature: Temperament class
        pada: Quarter 1-4
        degree: Degrees within the mansion [0, 13°20')
    """

    name: str
    sanskrit: str
    index: int
    lord: str
    deity: str
    nature: str
    pada: int
    degree: float

    @property
    def display(self) -> str:
        return f"{self.name} {self.pada}"

    @property
    def full_info(self) -> str:
        return (
            f"{self.name} ({self.sanskrit}) - Pada {self.pada}\n"
            f"Lord: {self.lord}\n"
            f"Deity: {self.deity}\n"
            f"Nature: {self.nature}"
        )


def nakshatra_and_pada(longitude) -> NakshatraInfo:
    """
    Find the nakshatra and pada of a sidereal longitude.

    Args:
        longitude: Sidereal longitude in [0, 360)

    Returns:
        NakshatraInfo with index in 1-27 and pada in 1-4

    Raises:
        InvalidLongitudeError: If the longitude is invalid

    Note:
        Index and pada are clamped so float rounding just below 360° or at the
        end of a mansion can never produce mansion 28 or pada 5.
    """
    lon = SiderealLongitude(longitude)
    position = min(int(lon // NAKSHATRA_SPAN), NAKSHATRA_COUNT - 1)
    degree = lon - position * NAKSHATRA_SPAN
    pada = max(1, min(4, int(degree // PADA_SPAN) + 1))
    nakshatra = NAKSHATRAS[position]
    return NakshatraInfo(
        name=nakshatra.name,
        sanskrit=nakshatra.sanskrit,
        index=position + 1,
        lord=nakshatra.lord,
        deity=nakshatra.deity,
        nature=nakshatra.nature,
        pada=pada,
        degree=degree,
    )


def nakshatra_details(longitude) -> Tuple[str, str]:
    """Return (display, full_info) for a sidereal longitude."""
    info = nakshatra_and_pada(longitude)
    return info.display, info.full_info
