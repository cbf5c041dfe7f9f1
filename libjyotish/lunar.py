"""
Lunar position and lunar node calculations for libjyotish.

This module computes:
- Moon: geocentric ecliptic position from a truncated ELP-2000 style series
- Mean Lunar Nodes: Rahu (ascending) and Ketu (descending)

Formulas are based on:
- Jean Meeus "Astronomical Algorithms" (2nd ed., 1998), Chapter 47
  (fundamental arguments and the largest periodic terms of tables 47.A/47.B)

IMPORTANT PRECISION LIMITATIONS:
- Only the 13 largest longitude terms, 8 latitude terms and 8 distance terms
  are kept; the eccentricity factor E on terms containing M is ignored
- Typical longitude error: ~0.1-0.3°, occasionally approaching 0.5°
- Node longitude uses a linear mean motion; no oscillation of the true node
- Ample for nakshatra derivation except within a few arcminutes of a boundary
"""

import math
from dataclasses import dataclass
from datetime import datetime

from .constants import MOON_MEAN_DISTANCE_AU, MOON_MEAN_DISTANCE_KM, AU_KM
from .coordinates import EclipticCoordinates, Vector3D, from_ecliptic
from .time_utils import centuries_since_j2000, days_since_j2000

# Node mean motion (degrees/day) and longitude at J2000.0
NODE_LONGITUDE_J2000 = 125.0445479
NODE_RATE_PER_DAY = -0.0529539

# (coefficient in degrees, D, M, M', F) multipliers for sin()
_LONGITUDE_TERMS = (
    (6.289, 0, 0, 1, 0),
    (1.274, 2, 0, -1, 0),
    (0.658, 2, 0, 0, 0),
    (-0.186, 0, 1, 0, 0),
    (-0.059, -2, 0, 2, 0),
    (-0.057, -2, 1, 1, 0),
    (0.053, 2, 0, 1, 0),
    (0.046, 2, -1, 0, 0),
    (0.041, 0, -1, 1, 0),
    (-0.035, 1, 0, 0, 0),
    (-0.031, 0, 1, 1, 0),
    (-0.015, -2, 0, 0, 2),
    (0.011, -4, 0, 1, 0),
)

# (coefficient in degrees, D, M, M', F) multipliers for sin()
_LATITUDE_TERMS = (
    (5.128, 0, 0, 0, 1),
    (0.281, 0, 0, 1, 1),
    (0.278, 0, 0, 1, -1),
    (0.173, 2, 0, 0, -1),
    (0.055, 2, 0, -1, 1),
    (0.046, 2, 0, -1, -1),
    (0.033, 2, 0, 1, 1),
    (0.017, 0, 0, 2, 1),
)

# (coefficient in km, D, M, M', F) multipliers for cos()
_DISTANCE_TERMS = (
    (-20905.0, 0, 0, 1, 0),
    (-3699.0, 2, 0, -1, 0),
    (-2956.0, 2, 0, 0, 0),
    (-570.0, 0, 0, 2, 0),
    (246.0, -2, 0, 2, 0),
    (-205.0, -2, 0, 1, 0),
    (-171.0, 2, 0, 1, 0),
    (-152.0, 2, -1, 1, 0),
)


@dataclass(frozen=True)
class FundamentalArguments:
    """Delaunay-style arguments in degrees (not normalized)."""

    L: float  # Moon's mean longitude
    D: float  # Mean elongation of the Moon
    M: float  # Sun's mean anomaly
    Mp: float  # Moon's mean anomaly
    F: float  # Moon's argument of latitude


def fundamental_arguments(T: float) -> FundamentalArguments:
    """
    Evaluate the fundamental arguments at T Julian centuries since J2000.0.

    Meeus eqs. 47.1-47.5, truncated after the cubic term.
    """
    T2 = T * T
    T3 = T2 * T
    return FundamentalArguments(
        L=218.3164477 + 481267.88123421 * T - 0.0015786 * T2 + T3 / 538841.0,
        D=297.8501921 + 445267.1114034 * T - 0.0018819 * T2 + T3 / 545868.0,
        M=357.5291092 + 35999.0502909 * T - 0.0001537 * T2 + T3 / 24490000.0,
        Mp=134.9633964 + 477198.8675055 * T + 0.0087414 * T2 + T3 / 69699.0,
        F=93.2720950 + 483202.0175233 * T - 0.0036539 * T2 - T3 / 3526000.0,
    )


def _series(terms, args: FundamentalArguments, func) -> float:
    total = 0.0
    for coeff, d, m, mp, f in terms:
        angle = d * args.D + m * args.M + mp * args.Mp + f * args.F
        total += coeff * func(math.radians(angle))
    return total


def lunar_ecliptic(instant: datetime) -> EclipticCoordinates:
    """
    Geocentric ecliptic coordinates of the Moon.

    Args:
        instant: Target instant (naive values are treated as UTC)

    Returns:
        EclipticCoordinates: longitude [0, 360), latitude (degrees) and
        distance in km

    Precision:
        Agreement with Swiss Ephemeris: typically < 0.3° in longitude
    """
    args = fundamental_arguments(centuries_since_j2000(instant))

    longitude = (args.L + _series(_LONGITUDE_TERMS, args, math.sin)) % 360.0
    latitude = _series(_LATITUDE_TERMS, args, math.sin)
    distance = MOON_MEAN_DISTANCE_KM + _series(_DISTANCE_TERMS, args, math.cos)

    return EclipticCoordinates(longitude, latitude, distance)


def lunar_geocentric_position(instant: datetime) -> Vector3D:
    """
    Geocentric Cartesian position of the Moon in km.

    The series is already geocentric, so the result must not be passed
    through to_geocentric().
    """
    coords = lunar_ecliptic(instant)
    return from_ecliptic(coords.longitude, coords.latitude, coords.distance)


@dataclass(frozen=True)
class LunarNodes:
    """
    Rahu and Ketu positions.

    Attributes:
        ascending: Rahu, in the ecliptic plane at the Moon's mean distance
        descending: Ketu, the antipode of Rahu
        longitude: Tropical longitude of Rahu in degrees [0, 360)
    """

    ascending: Vector3D
    descending: Vector3D
    longitude: float

    @property
    def descending_longitude(self) -> float:
        return (self.longitude + 180.0) % 360.0


def mean_node_longitude(instant: datetime) -> float:
    """
    Tropical longitude of the mean ascending lunar node.

    Formula: Ω = 125.0445479° - 0.0529539°·d, d = days since J2000.0

    Returns:
        float: Longitude in degrees (0-360)

    Note:
        This is the linear term of Meeus eq. 47.7 (-1934.1362891°/century).
        The higher-order terms stay below 0.001° within a century of J2000.
    """
    # FIXME: Precision - linear model, use the full polynomial far from J2000
    return (NODE_LONGITUDE_J2000 + NODE_RATE_PER_DAY * days_since_j2000(instant)) % 360.0


def lunar_nodes(instant: datetime) -> LunarNodes:
    """
    Calculate Rahu and Ketu as geocentric vectors (km).

    Both lie on the ecliptic (z = 0) at the Moon's mean distance; Ketu is
    exactly opposite Rahu.
    """
    longitude = mean_node_longitude(instant)
    radius = MOON_MEAN_DISTANCE_AU * AU_KM
    lon = math.radians(longitude)
    ascending = Vector3D(radius * math.cos(lon), radius * math.sin(lon), 0.0)
    descending = Vector3D(-ascending.x, -ascending.y, 0.0)
    return LunarNodes(ascending, descending, longitude)
