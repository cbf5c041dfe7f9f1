"""
Coordinate transformations for libjyotish.

Pure functions that move a position through the reference frames used by the
engine:

    heliocentric (km) --to_geocentric--> geocentric (km)
    geocentric (km)   --to_ecliptic-->   (longitude, latitude, distance)
    tropical lon      --tropical_to_sidereal--> sidereal lon

All frames are ecliptic and equinox J2000.0. Every function is stateless and
can be exercised with literal vectors.
"""

import math
from dataclasses import dataclass

from .utils import is_finite, normalize_degrees


@dataclass(frozen=True)
class Vector3D:
    """
    Cartesian vector.

    Components are kilometres at the engine boundary. Values never mix units:
    the orbit solver works in AU internally and scales once on return.
    """

    x: float
    y: float
    z: float

    def __add__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3D":
        return Vector3D(-self.x, -self.y, -self.z)

    def __mul__(self, factor: float) -> "Vector3D":
        return Vector3D(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def dot(self, other: "Vector3D") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def is_finite(self) -> bool:
        return is_finite(self.x, self.y, self.z)

    @classmethod
    def zero(cls) -> "Vector3D":
        return cls(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class EclipticCoordinates:
    """
    Spherical ecliptic coordinates.

    Attributes:
        longitude: Ecliptic longitude in degrees [0, 360)
        latitude: Ecliptic latitude in degrees [-90, 90]
        distance: Distance in the unit of the source vector
    """

    longitude: float
    latitude: float
    distance: float


def to_geocentric(heliocentric: Vector3D, earth_heliocentric: Vector3D) -> Vector3D:
    """
    Convert a heliocentric position to geocentric by subtracting Earth's
    heliocentric position.
    """
    return heliocentric - earth_heliocentric


def to_ecliptic(position: Vector3D) -> EclipticCoordinates:
    """
    Convert a Cartesian ecliptic vector to spherical coordinates.

    Args:
        position: Cartesian vector (any unit)

    Returns:
        EclipticCoordinates with longitude = atan2(y, x) in [0, 360),
        latitude = asin(z / r) and distance = |position|

    Raises:
        ValueError: If the vector is zero-length or not finite
    """
    if not position.is_finite():
        raise ValueError(f"Cannot convert non-finite vector: {position}")
    distance = position.magnitude
    if distance == 0.0:
        raise ValueError("Cannot convert a zero-length vector to ecliptic coordinates")

    longitude = normalize_degrees(math.degrees(math.atan2(position.y, position.x)))
    # Clamp guards |z| / r overshooting 1 by rounding
    latitude = math.degrees(math.asin(max(-1.0, min(1.0, position.z / distance))))
    return EclipticCoordinates(longitude, latitude, distance)


def from_ecliptic(longitude: float, latitude: float, distance: float) -> Vector3D:
    """Convert spherical ecliptic coordinates (degrees) back to Cartesian."""
    lon = math.radians(longitude)
    lat = math.radians(latitude)
    return Vector3D(
        distance * math.cos(lat) * math.cos(lon),
        distance * math.cos(lat) * math.sin(lon),
        distance * math.sin(lat),
    )


def tropical_to_sidereal(longitude: float, ayanamsa: float) -> float:
    """Subtract the ayanamsa from a tropical longitude, normalized to [0, 360)."""
    return normalize_degrees(longitude - ayanamsa)


def sidereal_to_tropical(longitude: float, ayanamsa: float) -> float:
    """Inverse of tropical_to_sidereal()."""
    return normalize_degrees(longitude + ayanamsa)


def angular_separation(a: Vector3D, b: Vector3D) -> float:
    """
    Angle in degrees between two position vectors as seen from the origin.

    Uses the dot-product/arccos form. The cosine is clamped to [-1, 1] so that
    rounding overshoot on (anti)parallel vectors cannot produce NaN.

    Raises:
        ValueError: If either vector is zero-length
    """
    mag = a.magnitude * b.magnitude
    if mag == 0.0:
        raise ValueError("Angular separation is undefined for a zero-length vector")
    cos_angle = a.dot(b) / mag
    return math.degrees(math.acos(max(-1.0, min(1.0, cos_angle))))
