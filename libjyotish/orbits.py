"""
Keplerian orbit solver for the classical planets.

This module computes heliocentric positions for:
- Mercury, Venus, Earth(-Moon barycentre), Mars, Jupiter, Saturn

Method: Keplerian orbital elements with 2-body dynamics (Sun-body only).

IMPORTANT PRECISION LIMITATIONS:
- Uses fixed J2000 mean elements (no secular element rates, no perturbations)
- Mean motion is derived from Kepler's third law, not the observed rate
- Accuracies: a few arcminutes heliocentric near J2000, degrading slowly;
  geocentric errors grow when a planet is close to Earth
- Acceptable for sign / nakshatra derivation, not for precise timing
- FIXME: Frame mismatch. Positions here are in the fixed J2000 ecliptic,
  while lunar.py (Moon, mean node) refers longitudes to the mean equinox of
  date. Both get the same ayanamsa of date subtracted, so the planets lag
  the Moon and nodes by the accumulated precession since J2000 (about 0.35°
  in 2025). Precessing these vectors to the equinox of date in
  planets.geocentric_position would remove it.

The Sun is defined to sit at the heliocentric origin and never reaches the
solver.

Orbital elements source: JPL "Keplerian Elements for Approximate Positions of
the Major Planets" (Standish), Table 1, epoch J2000.0.
Algorithm: Standard Keplerian orbital mechanics (Curtis, Vallado)
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from .constants import (
    AU_KM,
    DAYS_PER_JULIAN_YEAR,
    EARTH,
    J2000,
    JUPITER,
    MARS,
    MERCURY,
    SATURN,
    SUN,
    VENUS,
)
from .coordinates import Vector3D
from .time_utils import datetime_to_jd

logger = logging.getLogger(__name__)

KEPLER_MAX_ITERATIONS = 10
KEPLER_TOLERANCE = 1e-8  # radians


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical Keplerian orbital elements for a planet.

    Attributes:
        name: Body name
        a: Semi-major axis in AU
        e: Eccentricity (0-1, dimensionless)
        i: Inclination to ecliptic in degrees
        Omega: Longitude of ascending node (Ω) in degrees
        omega: Argument of perihelion (ω) in degrees
        M0: Mean anomaly at epoch in degrees
        epoch: Reference epoch (Julian Day)

    Raises:
        ValueError: If any element is not finite, e is outside [0, 1) or a <= 0
    """

    name: str
    a: float
    e: float
    i: float
    Omega: float
    omega: float
    M0: float
    epoch: float = J2000

    def __post_init__(self):
        values = (self.a, self.e, self.i, self.Omega, self.omega, self.M0, self.epoch)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"{self.name}: orbital elements must be finite, got {values}")
        if not 0.0 <= self.e < 1.0:
            raise ValueError(f"{self.name}: eccentricity must be in [0, 1), got {self.e}")
        if self.a <= 0.0:
            raise ValueError(f"{self.name}: semi-major axis must be positive, got {self.a}")

    @property
    def mean_motion(self) -> float:
        """Mean motion in degrees/day."""
        return mean_motion(self.a)

    @property
    def perihelion(self) -> float:
        """Perihelion distance in AU."""
        return self.a * (1.0 - self.e)

    @property
    def aphelion(self) -> float:
        """Aphelion distance in AU."""
        return self.a * (1.0 + self.e)

    @property
    def orbit_radius_km(self) -> float:
        return self.a * AU_KM

    @property
    def orbit_speed_km_s(self) -> float:
        """Mean orbital speed in km/s (circular approximation)."""
        period_s = DAYS_PER_JULIAN_YEAR * self.a**1.5 * 86400.0
        return 2.0 * math.pi * self.orbit_radius_km / period_s


# =============================================================================
# ORBITAL ELEMENTS DATABASE (Epoch J2000.0 = JD 2451545.0)
# =============================================================================
# JPL tabulates mean longitude L and longitude of perihelion ϖ; the values below
# are converted with ω = ϖ - Ω and M0 = L - ϖ.

PLANET_ELEMENTS: Dict[str, Optional[OrbitalElements]] = {
    SUN: None,  # Heliocentric origin
    MERCURY: OrbitalElements(
        name="Mercury",
        a=0.38709927,
        e=0.20563593,
        i=7.00497902,
        Omega=48.33076593,
        omega=29.12703035,
        M0=174.79252722,
    ),
    VENUS: OrbitalElements(
        name="Venus",
        a=0.72333566,
        e=0.00677672,
        i=3.39467605,
        Omega=76.67984255,
        omega=54.92262463,
        M0=50.37663232,
    ),
    EARTH: OrbitalElements(
        name="Earth",
        a=1.00000261,
        e=0.01671123,
        i=-0.00001531,
        Omega=0.0,
        omega=102.93768193,
        M0=357.52688973,
    ),
    MARS: OrbitalElements(
        name="Mars",
        a=1.52371034,
        e=0.09339410,
        i=1.84969142,
        Omega=49.55953891,
        omega=286.49683150,
        M0=19.39019754,
    ),
    JUPITER: OrbitalElements(
        name="Jupiter",
        a=5.20288700,
        e=0.04838624,
        i=1.30439695,
        Omega=100.47390909,
        omega=274.25457074,
        M0=19.66796068,
    ),
    SATURN: OrbitalElements(
        name="Saturn",
        a=9.53667594,
        e=0.05386179,
        i=2.48599187,
        Omega=113.66242448,
        omega=338.93645383,
        M0=317.35536592,
    ),
}


def mean_motion(a: float) -> float:
    """
    Mean motion from Kepler's third law.

    Args:
        a: Semi-major axis in AU

    Returns:
        float: Degrees per day, 360 / (365.25 · a^1.5)
    """
    return 360.0 / (DAYS_PER_JULIAN_YEAR * a**1.5)


def mean_anomaly(elements: OrbitalElements, jd: float) -> float:
    """Mean anomaly in degrees [0, 360) at Julian Day ``jd``."""
    dt = jd - elements.epoch
    return (elements.M0 + elements.mean_motion * dt) % 360.0


def solve_kepler_equation(
    M: float,
    e: float,
    tol: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation M = E - e·sin(E) for eccentric anomaly E.

    Uses Newton-Raphson iteration.

    Args:
        M: Mean anomaly in radians
        e: Eccentricity (0 ≤ e < 1)
        tol: Convergence tolerance (default 1e-8 ~ 0.002 arcsec)
        max_iterations: Iteration budget (default 10)

    Returns:
        float: Eccentric anomaly E in radians

    Algorithm:
        Newton-Raphson: E_{n+1} = E_n - f(E_n)/f'(E_n)
        where f(E) = E - e·sin(E) - M
        and f'(E) = 1 - e·cos(E)

    Note:
        Converges in ~3-6 iterations for planetary eccentricities. If the
        budget is exhausted the last estimate is returned instead of failing.

    References:
        Curtis "Orbital Mechanics for Engineering Students" §3.1
        Vallado "Fundamentals of Astrodynamics" Algorithm 2
    """
    E = M if e < 0.8 else math.pi

    for _ in range(max_iterations):
        f = E - e * math.sin(E) - M
        fp = 1 - e * math.cos(E)
        E_new = E - f / fp

        if abs(E_new - E) < tol:
            return E_new
        E = E_new

    logger.debug(
        "Kepler solver did not converge in %d iterations (M=%.6f, e=%.6f)",
        max_iterations,
        M,
        e,
    )
    return E


def true_anomaly(E: float, e: float) -> float:
    """
    True anomaly from eccentric anomaly via the half-angle identity.

    ν = 2·atan2(√(1+e)·sin(E/2), √(1-e)·cos(E/2)), normalized to [0, 2π).
    Unlike the arccos form this keeps the correct quadrant.
    """
    nu = 2.0 * math.atan2(
        math.sqrt(1 + e) * math.sin(E / 2),
        math.sqrt(1 - e) * math.cos(E / 2),
    )
    return nu % (2.0 * math.pi)


def heliocentric_position_au(elements: OrbitalElements, jd: float) -> Vector3D:
    """
    Calculate heliocentric position in AU using Keplerian orbital elements.

    Algorithm:
        1. Propagate mean anomaly: M(t) = M0 + n·Δt
        2. Solve Kepler's equation for eccentric anomaly E
        3. Calculate true anomaly ν from E
        4. Compute position in orbital plane
        5. Rotate to ecliptic frame using ω, i, Ω

    References:
        Curtis §3 (orbital elements)
        Vallado §2.3 (coordinate transformations)
    """
    M = math.radians(mean_anomaly(elements, jd))
    E = solve_kepler_equation(M, elements.e)
    nu = true_anomaly(E, elements.e)

    # Heliocentric distance
    r = elements.a * (1 - elements.e * math.cos(E))

    # Position in orbital plane (perifocal frame)
    x_orb = r * math.cos(nu)
    y_orb = r * math.sin(nu)

    omega_rad = math.radians(elements.omega)
    Omega_rad = math.radians(elements.Omega)
    i_rad = math.radians(elements.i)

    cos_omega = math.cos(omega_rad)
    sin_omega = math.sin(omega_rad)
    cos_Omega = math.cos(Omega_rad)
    sin_Omega = math.sin(Omega_rad)
    cos_i = math.cos(i_rad)
    sin_i = math.sin(i_rad)

    # R_z(Ω) · R_x(i) · R_z(ω), perifocal to ecliptic
    P11 = cos_omega * cos_Omega - sin_omega * sin_Omega * cos_i
    P12 = -sin_omega * cos_Omega - cos_omega * sin_Omega * cos_i
    P21 = cos_omega * sin_Omega + sin_omega * cos_Omega * cos_i
    P22 = -sin_omega * sin_Omega + cos_omega * cos_Omega * cos_i
    P31 = sin_omega * sin_i
    P32 = cos_omega * sin_i

    return Vector3D(
        P11 * x_orb + P12 * y_orb,
        P21 * x_orb + P22 * y_orb,
        P31 * x_orb + P32 * y_orb,
    )


def heliocentric_position(elements: OrbitalElements, instant: datetime) -> Vector3D:
    """
    Heliocentric ecliptic J2000 position of a planet at ``instant``.

    Args:
        elements: Orbital elements at epoch
        instant: Target instant (naive values are treated as UTC)

    Returns:
        Vector3D: Position in kilometres
    """
    return heliocentric_position_au(elements, datetime_to_jd(instant)) * AU_KM


def body_heliocentric_position(body: str, instant: datetime) -> Vector3D:
    """
    Heliocentric position of a body from the element table.

    Raises:
        ValueError: If the body has no entry in PLANET_ELEMENTS
    """
    if body not in PLANET_ELEMENTS:
        raise ValueError(f"No orbital elements for body: {body}")
    elements = PLANET_ELEMENTS[body]
    if elements is None:
        return Vector3D.zero()
    return heliocentric_position(elements, instant)
