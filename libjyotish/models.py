"""
Boundary data model for libjyotish.

Immutable records handed to consumers: planetary positions, conjunction
events, calendar events, moon phase and the snapshot that bundles them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .calendar import NakshatraInfo, SignPlacement
from .constants import EVENT_HORIZON_DAYS, SOURCE_CALCULATED
from .coordinates import EclipticCoordinates, Vector3D
from .orbits import OrbitalElements
from .time_utils import to_utc

logger = logging.getLogger(__name__)


class TransitIntensity(str, Enum):
    MAJOR = "major"
    MINOR = "minor"
    BACKGROUND = "background"


@dataclass(frozen=True)
class TransitEvent:
    """
    A close approach between two bodies as seen from Earth.

    Attributes:
        bodies: Pair of body identifiers, in snapshot order
        separation: Angular separation in degrees
        intensity: MAJOR (< 2°), MINOR (< 3°) or BACKGROUND
        timestamp: Instant of the snapshot
    """

    bodies: Tuple[str, str]
    separation: float
    intensity: TransitIntensity
    timestamp: datetime


@dataclass(frozen=True)
class CalendarEvent:
    """
    An externally supplied dated event (blog post, festival, ...).

    Only the date is interpreted; everything else is carried through.
    """

    id: str
    date: datetime
    title: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CalendarEvent":
        """
        Build an event from a mapping with at least ``id`` and ``date``.

        ``date`` may be a datetime or an ISO 8601 string; naive values are UTC.

        Raises:
            KeyError: If ``id`` or ``date`` is missing
            ValueError: If ``date`` is not a datetime or a valid ISO 8601 string
        """
        raw_date = data["date"]
        if isinstance(raw_date, str):
            raw_date = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
        if not isinstance(raw_date, datetime):
            raise ValueError(f"Event date must be a datetime or ISO 8601 string, got {raw_date!r}")
        details = {k: v for k, v in data.items() if k not in ("id", "date", "title")}
        return cls(
            id=str(data["id"]),
            date=to_utc(raw_date),
            title=data.get("title"),
            details=details,
        )


EventLike = Union[CalendarEvent, Mapping[str, Any]]


def normalize_events(events: Optional[Iterable[EventLike]]) -> Tuple[CalendarEvent, ...]:
    """
    Convert caller events to CalendarEvent records.

    Entries that cannot be parsed (missing ``id`` or ``date``, unreadable
    date, not a mapping) are logged and dropped.
    """
    if not events:
        return ()
    parsed: List[CalendarEvent] = []
    for event in events:
        if isinstance(event, CalendarEvent):
            parsed.append(event)
            continue
        try:
            parsed.append(CalendarEvent.from_mapping(event))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropping unparseable event %r: %s", event, exc)
    return tuple(parsed)


def filter_upcoming_events(
    events: Optional[Iterable[EventLike]],
    instant: datetime,
    horizon_days: int = EVENT_HORIZON_DAYS,
) -> Tuple[CalendarEvent, ...]:
    """
    Keep events strictly after ``instant`` and at most ``horizon_days`` later.

    Unparseable entries are dropped as in normalize_events.

    Returns:
        Events sorted by date
    """
    if not events:
        return ()
    start = to_utc(instant)
    end = start + timedelta(days=horizon_days)
    upcoming: List[CalendarEvent] = []
    for event in normalize_events(events):
        event_date = to_utc(event.date)
        if start < event_date <= end:
            upcoming.append(event)
    upcoming.sort(key=lambda e: to_utc(e.date))
    return tuple(upcoming)


@dataclass(frozen=True)
class MoonPhase:
    """
    Attributes:
        elongation: Moon minus Sun ecliptic longitude in degrees [0, 360)
        illumination: Illuminated fraction of the disc (0-1)
        name: Conventional phase name
    """

    elongation: float
    illumination: float
    name: str

    @property
    def tithi(self) -> int:
        """Lunar day 1-30 (12° of elongation each)."""
        return min(int(self.elongation // 12.0), 29) + 1

    @property
    def is_waxing(self) -> bool:
        return self.elongation < 180.0


@dataclass(frozen=True)
class PlanetaryPosition:
    """
    Geocentric position of one graha at an instant.

    Attributes:
        body: Body identifier (see constants)
        name: Jyotish name
        position: Geocentric ecliptic J2000 vector in km
        ecliptic: Tropical ecliptic coordinates (distance in km)
        sidereal_longitude: Sidereal longitude in degrees [0, 360)
        sign: Rashi placement of the sidereal longitude
        nakshatra: Nakshatra placement of the sidereal longitude
        speed: Longitude speed in degrees/day, if known
        velocity: Geocentric velocity in km/day, if known
        radius: Physical radius in km
        color: Display colour (hex)
        orbit_radius: Orbit radius for rendering, km
        orbit_speed: Mean orbital speed for rendering, km/s
        elements: Orbital elements used, for Keplerian bodies
        mean_anomaly: Current mean anomaly in degrees, for Keplerian bodies
    """

    body: str
    name: str
    position: Vector3D
    ecliptic: EclipticCoordinates
    sidereal_longitude: float
    sign: SignPlacement
    nakshatra: NakshatraInfo
    speed: Optional[float] = None
    velocity: Optional[Vector3D] = None
    radius: float = 0.0
    color: str = "#FFFFFF"
    orbit_radius: float = 0.0
    orbit_speed: float = 0.0
    elements: Optional[OrbitalElements] = None
    mean_anomaly: Optional[float] = None

    @property
    def longitude(self) -> float:
        return self.ecliptic.longitude

    @property
    def latitude(self) -> float:
        return self.ecliptic.latitude

    @property
    def is_retrograde(self) -> bool:
        return self.speed is not None and self.speed < 0


@dataclass(frozen=True)
class AstronomicalSnapshot:
    """
    Everything computed for one instant.

    Attributes:
        instant: UTC instant of the computation
        source: Label of the source that produced it
        ayanamsa: Ayanamsa in degrees
        ayanamsa_name: Ayanamsa standard name
        positions: One PlanetaryPosition per graha
        transits: Close approaches between non-Sun bodies
        events: Calendar events within the next 30 days
        moon_phase: Sun-Moon phase, when both are present
    """

    instant: datetime
    source: str
    ayanamsa: float
    ayanamsa_name: str
    positions: Tuple[PlanetaryPosition, ...]
    transits: Tuple[TransitEvent, ...] = ()
    events: Tuple[CalendarEvent, ...] = ()
    moon_phase: Optional[MoonPhase] = None

    def __iter__(self) -> Iterator[PlanetaryPosition]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def position(self, body: str) -> PlanetaryPosition:
        """
        Raises:
            KeyError: If the body is not part of the snapshot
        """
        for pos in self.positions:
            if pos.body == body:
                return pos
        raise KeyError(body)

    @property
    def is_fallback(self) -> bool:
        """True when produced by local computation rather than a remote source."""
        return self.source == SOURCE_CALCULATED
