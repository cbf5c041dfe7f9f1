"""
Local planetary position calculations for libjyotish.

This is the core module that turns the analytical models into
PlanetaryPosition records and an AstronomicalSnapshot.

Supported Bodies:
- Sun (from Earth's Keplerian orbit)
- Moon (truncated lunar series, lunar.py)
- Mercury, Venus, Mars, Jupiter, Saturn (Keplerian elements, orbits.py)
- Rahu / Ketu (mean lunar nodes, lunar.py)

Pipeline per body:
    heliocentric -> geocentric -> ecliptic (tropical) -> sidereal
    -> sign / nakshatra

Speeds are obtained by numerical differentiation over one day, centred on
the instant, the same way for every body.

Main Functions:
- geocentric_position(): Geocentric vector of one body
- compute_positions(): All grahas at an instant
- calculate_snapshot(): Full snapshot with transits, phase and events
- snapshot_from_longitudes(): Snapshot rebuilt from remotely reported longitudes
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from .ayanamsa import ayanamsa, ayanamsa_name
from .calendar import SiderealLongitude, nakshatra_and_pada, sign_and_degree
from .constants import (
    AU_KM,
    EARTH,
    GRAHAS,
    JUPITER,
    JYOTISH_NAMES,
    KETU,
    MARS,
    MERCURY,
    MOON,
    MOON_MEAN_DISTANCE_AU,
    RAHU,
    SATURN,
    SIDEREAL_MONTH_DAYS,
    SOURCE_CALCULATED,
    SUN,
    VENUS,
)
from .coordinates import (
    Vector3D,
    from_ecliptic,
    sidereal_to_tropical,
    to_ecliptic,
    to_geocentric,
    tropical_to_sidereal,
)
from .lunar import lunar_geocentric_position, lunar_nodes
from .models import (
    AstronomicalSnapshot,
    EventLike,
    MoonPhase,
    PlanetaryPosition,
    filter_upcoming_events,
)
from .orbits import PLANET_ELEMENTS, body_heliocentric_position, mean_anomaly
from .time_utils import datetime_to_jd, to_utc
from .transits import detect_transits
from .utils import difdeg2n

logger = logging.getLogger(__name__)

SPEED_STEP = timedelta(days=1)


class BodyProperties(NamedTuple):
    radius: float  # km
    color: str


BODY_PROPERTIES: Dict[str, BodyProperties] = {
    SUN: BodyProperties(696340.0, "#FDB813"),
    MERCURY: BodyProperties(2439.7, "#8C7853"),
    VENUS: BodyProperties(6051.8, "#FFC649"),
    EARTH: BodyProperties(6371.0, "#6B93D6"),
    MARS: BodyProperties(3389.5, "#CD5C5C"),
    JUPITER: BodyProperties(69911.0, "#D8CA9D"),
    SATURN: BodyProperties(58232.0, "#FAD5A5"),
    MOON: BodyProperties(1737.4, "#C0C0C0"),
    # Nodes are points; the radius is a marker size
    RAHU: BodyProperties(100.0, "#800080"),
    KETU: BodyProperties(100.0, "#8B4513"),
}

MOON_ORBIT_RADIUS_KM = MOON_MEAN_DISTANCE_AU * AU_KM


def nominal_distance(body: str) -> float:
    """
    Representative geocentric distance in km, used when only a longitude is
    known (remote sources).
    """
    if body in (MOON, RAHU, KETU):
        return MOON_ORBIT_RADIUS_KM
    elements = PLANET_ELEMENTS.get(body)
    if elements is None:
        return AU_KM
    return elements.orbit_radius_km


def geocentric_position(body: str, instant: datetime) -> Vector3D:
    """
    Geocentric ecliptic J2000 vector of a body in km.

    Raises:
        ValueError: If the body is unknown
    """
    if body == MOON:
        return lunar_geocentric_position(instant)
    if body == RAHU:
        return lunar_nodes(instant).ascending
    if body == KETU:
        return lunar_nodes(instant).descending
    if body == EARTH:
        raise ValueError("Earth has no geocentric position")
    earth = body_heliocentric_position(EARTH, instant)
    return to_geocentric(body_heliocentric_position(body, instant), earth)


def longitude_speed(body: str, instant: datetime) -> float:
    """
    Tropical longitude speed in degrees/day by central difference.

    Negative values mean apparent retrograde motion.
    """
    half = SPEED_STEP / 2
    before = to_ecliptic(geocentric_position(body, instant - half)).longitude
    after = to_ecliptic(geocentric_position(body, instant + half)).longitude
    return difdeg2n(after, before) / (SPEED_STEP.total_seconds() / 86400.0)


def _velocity(body: str, instant: datetime) -> Vector3D:
    half = SPEED_STEP / 2
    delta = geocentric_position(body, instant + half) - geocentric_position(body, instant - half)
    return delta * (86400.0 / SPEED_STEP.total_seconds())


def _orbit_properties(body: str):
    if body == MOON:
        period_s = SIDEREAL_MONTH_DAYS * 86400.0
        return MOON_ORBIT_RADIUS_KM, 2.0 * math.pi * MOON_ORBIT_RADIUS_KM / period_s
    elements = PLANET_ELEMENTS.get(body)
    if elements is None:
        return 0.0, 0.0
    return elements.orbit_radius_km, elements.orbit_speed_km_s


def build_position(
    body: str,
    vector: Vector3D,
    ayanamsa_value: float,
    instant: Optional[datetime] = None,
    speed: Optional[float] = None,
    velocity: Optional[Vector3D] = None,
) -> PlanetaryPosition:
    """
    Derive every field of a PlanetaryPosition from a geocentric vector.

    Args:
        body: Body identifier
        vector: Geocentric ecliptic vector in km
        ayanamsa_value: Ayanamsa in degrees
        instant: When given, Keplerian bodies also report their mean anomaly
        speed: Longitude speed in degrees/day
        velocity: Geocentric velocity in km/day
    """
    ecliptic = to_ecliptic(vector)
    sidereal = SiderealLongitude.normalized(tropical_to_sidereal(ecliptic.longitude, ayanamsa_value))
    props = BODY_PROPERTIES[body]
    orbit_radius, orbit_speed = _orbit_properties(body)

    elements = PLANET_ELEMENTS.get(body)
    current_anomaly = None
    if elements is not None and instant is not None:
        current_anomaly = mean_anomaly(elements, datetime_to_jd(instant))

    return PlanetaryPosition(
        body=body,
        name=JYOTISH_NAMES[body],
        position=vector,
        ecliptic=ecliptic,
        sidereal_longitude=float(sidereal),
        sign=sign_and_degree(sidereal),
        nakshatra=nakshatra_and_pada(sidereal),
        speed=speed,
        velocity=velocity,
        radius=props.radius,
        color=props.color,
        orbit_radius=orbit_radius,
        orbit_speed=orbit_speed,
        elements=elements,
        mean_anomaly=current_anomaly,
    )


def compute_positions(instant: datetime, ayanamsa_value: float) -> List[PlanetaryPosition]:
    """Compute every graha locally, in GRAHAS order."""
    positions = []
    for body in GRAHAS:
        vector = geocentric_position(body, instant)
        positions.append(
            build_position(
                body,
                vector,
                ayanamsa_value,
                instant=instant,
                speed=longitude_speed(body, instant),
                velocity=_velocity(body, instant),
            )
        )
    return positions


_PHASE_NAMES = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)


def moon_phase(sun_longitude: float, moon_longitude: float) -> MoonPhase:
    """
    Phase from the Sun-Moon elongation.

    Illumination uses the elongation as phase angle: (1 - cos ψ) / 2.
    """
    elongation = (moon_longitude - sun_longitude) % 360.0
    illumination = (1.0 - math.cos(math.radians(elongation))) / 2.0
    index = int(((elongation + 22.5) % 360.0) // 45.0)
    return MoonPhase(elongation, illumination, _PHASE_NAMES[index])


def assemble_snapshot(
    instant: datetime,
    positions: Iterable[PlanetaryPosition],
    ayanamsa_value: float,
    standard_name: str,
    source: str,
    events: Optional[Iterable[EventLike]] = None,
) -> AstronomicalSnapshot:
    """Attach transits, moon phase and upcoming events to a set of positions."""
    instant = to_utc(instant)
    positions = tuple(positions)
    by_body = {p.body: p for p in positions}

    phase = None
    if SUN in by_body and MOON in by_body:
        phase = moon_phase(by_body[SUN].longitude, by_body[MOON].longitude)

    return AstronomicalSnapshot(
        instant=instant,
        source=source,
        ayanamsa=ayanamsa_value,
        ayanamsa_name=standard_name,
        positions=positions,
        transits=tuple(detect_transits(positions, instant)),
        events=filter_upcoming_events(events, instant),
        moon_phase=phase,
    )


def calculate_snapshot(
    instant: Optional[datetime] = None,
    events: Optional[Iterable[EventLike]] = None,
    system: Optional[str] = None,
    source: str = SOURCE_CALCULATED,
) -> AstronomicalSnapshot:
    """
    Compute a complete snapshot with the local analytical models.

    Args:
        instant: Target instant, defaults to now (naive values are UTC)
        events: Optional calendar events
        system: Ayanamsa standard, defaults to state.get_sid_mode()
        source: Label recorded in the snapshot
    """
    instant = to_utc(instant)
    ayanamsa_value = ayanamsa(instant, system)
    positions = compute_positions(instant, ayanamsa_value)
    logger.debug("Computed %d positions locally for %s", len(positions), instant.isoformat())
    return assemble_snapshot(
        instant, positions, ayanamsa_value, ayanamsa_name(system), source, events
    )


def snapshot_from_longitudes(
    instant: datetime,
    sidereal_longitudes: Mapping[str, float],
    ayanamsa_value: float,
    source: str,
    events: Optional[Iterable[EventLike]] = None,
    speeds: Optional[Mapping[str, Optional[float]]] = None,
    latitudes: Optional[Mapping[str, float]] = None,
    standard_name: Optional[str] = None,
) -> AstronomicalSnapshot:
    """
    Rebuild a snapshot from sidereal longitudes reported by a remote source.

    Vectors are placed at each body's nominal distance with the tropical
    longitude (sidereal + ayanamsa). Missing speeds are filled from the local
    model. Ketu is derived from Rahu when absent.

    Raises:
        ValueError: If a graha other than Ketu is missing, or a longitude is
            not finite
    """
    instant = to_utc(instant)
    longitudes = dict(sidereal_longitudes)
    if KETU not in longitudes and RAHU in longitudes:
        longitudes[KETU] = (longitudes[RAHU] + 180.0) % 360.0
    missing = [body for body in GRAHAS if body not in longitudes]
    if missing:
        raise ValueError(f"Missing bodies in payload: {', '.join(missing)}")

    speeds = speeds or {}
    latitudes = latitudes or {}
    positions = []
    for body in GRAHAS:
        sidereal = SiderealLongitude.normalized(longitudes[body])
        tropical = sidereal_to_tropical(sidereal, ayanamsa_value)
        vector = from_ecliptic(tropical, latitudes.get(body, 0.0), nominal_distance(body))
        speed = speeds.get(body)
        if speed is None:
            speed = longitude_speed(body, instant)
        positions.append(build_position(body, vector, ayanamsa_value, instant=instant, speed=speed))

    return assemble_snapshot(
        instant,
        positions,
        ayanamsa_value,
        standard_name or ayanamsa_name(),
        source,
        events,
    )
