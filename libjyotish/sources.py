"""
Position sources for live retrieval.

Each source turns an instant into an AstronomicalSnapshot or raises
SourceError. PositionService walks them in order:

1. SwissEphemerisServiceSource: remote Swiss Ephemeris position service
2. FreeAstrologySource: FreeAstrologyAPI planetary positions
3. JplEphemerisSource: Skyfield with a JPL kernel already on disk
4. LocalComputationSource: analytical models, always succeeds

Remote payloads are normalised by one typed adapter (RemotePayload) before
any astronomy runs on them.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator
from skyfield.framelib import ecliptic_frame

from . import state
from .ayanamsa import ayanamsa, ayanamsa_name
from .constants import (
    GRAHAS,
    JUPITER,
    JYOTISH_NAMES,
    MARS,
    MERCURY,
    MOON,
    RAHU,
    SATURN,
    SIDM_LAHIRI,
    SOURCE_CALCULATED,
    SOURCE_FREE_ASTROLOGY,
    SOURCE_JPL,
    SOURCE_SWISS_EPHEMERIS,
    SUN,
    VENUS,
)
from .coordinates import Vector3D
from .models import AstronomicalSnapshot, EventLike
from .planets import (
    assemble_snapshot,
    build_position,
    calculate_snapshot,
    geocentric_position,
    longitude_speed,
    snapshot_from_longitudes,
)
from .time_utils import to_utc
from .utils import difdeg2n

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """A position source could not produce a snapshot."""


# =============================================================================
# PAYLOAD ADAPTER
# =============================================================================

# Aliases seen in remote payloads, lower-cased
_BODY_ALIASES: Dict[str, str] = {
    "mean node": RAHU,
    "true node": RAHU,
    "north node": RAHU,
    "south node": "ketu",
}
for _body, _name in JYOTISH_NAMES.items():
    _BODY_ALIASES[_body] = _body
    _BODY_ALIASES[_name.lower()] = _body


def canonical_body(name: str) -> Optional[str]:
    """Map a remote body name to a body identifier, or None if not a graha."""
    return _BODY_ALIASES.get(name.strip().lower())


class BodyReading(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    longitude: float = Field(allow_inf_nan=False)
    latitude: Optional[float] = Field(default=None, allow_inf_nan=False)
    speed: Optional[float] = Field(default=None, allow_inf_nan=False)


class RemotePayload(BaseModel):
    """
    Normalised remote response.

    ``positions`` accepts either a list of objects carrying a ``name``
    (or ``planet`` / ``body``) key, or a mapping of body name to an object
    or a bare longitude. Non-graha entries are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    positions: Dict[str, BodyReading]
    ayanamsa: Optional[float] = Field(default=None, allow_inf_nan=False)
    timestamp: Optional[str] = None

    @field_validator("positions", mode="before")
    @classmethod
    def _normalise_positions(cls, value: Any) -> Dict[str, Any]:
        if isinstance(value, list):
            entries = {}
            for item in value:
                if not isinstance(item, dict):
                    raise ValueError(f"Position entry must be an object, got {item!r}")
                name = item.get("name") or item.get("planet") or item.get("body")
                if not isinstance(name, str):
                    raise ValueError(f"Position entry without a name: {item!r}")
                entries[name] = item
            value = entries
        if not isinstance(value, dict):
            raise ValueError(f"Unsupported positions shape: {type(value).__name__}")

        positions = {}
        for name, reading in value.items():
            body = canonical_body(str(name))
            if body is None:
                continue
            if isinstance(reading, (int, float)) and not isinstance(reading, bool):
                reading = {"longitude": reading}
            positions[body] = reading
        if not positions:
            raise ValueError("Payload contains no known bodies")
        return positions

    @classmethod
    def from_free_astrology(cls, body: Any) -> "RemotePayload":
        """
        Adapt a FreeAstrologyAPI response.

        Both ``{"data": {<body>: {...}, "ayanamsa": x}}`` and the same mapping
        at the top level are accepted.
        """
        if not isinstance(body, dict):
            raise ValueError(f"Response must be an object, got {type(body).__name__}")
        data = body["data"] if isinstance(body.get("data"), dict) else body
        data = dict(data)
        ayanamsa_value = data.pop("ayanamsa", None)
        return cls.model_validate({"positions": data, "ayanamsa": ayanamsa_value})

    def to_snapshot(
        self,
        instant: datetime,
        source: str,
        events: Optional[Iterable[EventLike]] = None,
    ) -> AstronomicalSnapshot:
        """
        Rebuild a snapshot from the reported sidereal longitudes.

        Raises:
            ValueError: If a graha is missing
        """
        ayanamsa_value = self.ayanamsa
        if ayanamsa_value is None:
            ayanamsa_value = ayanamsa(instant, SIDM_LAHIRI)
        return snapshot_from_longitudes(
            instant,
            {body: r.longitude for body, r in self.positions.items()},
            ayanamsa_value,
            source,
            events,
            speeds={body: r.speed for body, r in self.positions.items()},
            latitudes={
                body: r.latitude for body, r in self.positions.items() if r.latitude is not None
            },
            standard_name=ayanamsa_name(SIDM_LAHIRI),
        )


# =============================================================================
# SOURCES
# =============================================================================


class PositionSource:
    """Base class for position sources."""

    name = "base"

    def is_available(self) -> bool:
        """False when the source is not configured and should be skipped."""
        return True

    def fetch(
        self,
        instant: datetime,
        events: Optional[Iterable[EventLike]] = None,
    ) -> AstronomicalSnapshot:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class _HttpSource(PositionSource):
    def __init__(
        self,
        url: Optional[str],
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url
        self.client = client
        self.timeout = timeout if timeout is not None else state.get_timeout()

    def is_available(self) -> bool:
        return bool(self.url)

    def _send(self, method: str, url: str, **kwargs) -> Any:
        if self.client is not None:
            resp = self.client.request(method, url, timeout=self.timeout, **kwargs)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp.json()

    def _payload(self, instant: datetime) -> RemotePayload:
        raise NotImplementedError

    def fetch(self, instant, events=None):
        instant = to_utc(instant)
        logger.debug("Requesting positions for %s from %s", instant.isoformat(), self.url)
        try:
            return self._payload(instant).to_snapshot(instant, self.name, events)
        except httpx.HTTPError as exc:
            raise SourceError(f"{self.name} request failed: {exc}") from exc
        except ValueError as exc:
            # JSON decoding, pydantic ValidationError and missing bodies
            raise SourceError(f"{self.name} returned an unusable payload: {exc}") from exc


class SwissEphemerisServiceSource(_HttpSource):
    """
    Remote Swiss Ephemeris service.

    Request: ``GET {url}?date=<ISO 8601>&ayanamsa=lahiri``
    Response: ``{"timestamp": ..., "positions": [...] | {...}, "ayanamsa": x}``
    """

    name = SOURCE_SWISS_EPHEMERIS

    def __init__(self, url=None, client=None, timeout=None):
        super().__init__(url if url is not None else state.get_service_url(), client, timeout)

    def _payload(self, instant):
        params = {
            "date": instant.isoformat().replace("+00:00", "Z"),
            "ayanamsa": SIDM_LAHIRI,
        }
        return RemotePayload.model_validate(self._send("GET", self.url, params=params))


class FreeAstrologySource(_HttpSource):
    """
    FreeAstrologyAPI.

    Request: ``POST {url}/planetary-positions`` with date, time and
    ``ayanamsa=lahiri, zodiac=sidereal``; ``x-api-key`` header when configured.
    """

    name = SOURCE_FREE_ASTROLOGY

    def __init__(self, url=None, api_key=None, client=None, timeout=None):
        super().__init__(url if url is not None else state.get_secondary_url(), client, timeout)
        self.api_key = api_key if api_key is not None else state.get_api_key()

    def _payload(self, instant):
        body = {
            "date": instant.strftime("%Y-%m-%d"),
            "time": instant.strftime("%H:%M:%S"),
            "ayanamsa": SIDM_LAHIRI,
            "zodiac": "sidereal",
            "format": "json",
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        url = self.url.rstrip("/") + "/planetary-positions"
        return RemotePayload.from_free_astrology(self._send("POST", url, json=body, headers=headers))


# Skyfield target names in the JPL kernel
_JPL_TARGETS = {
    SUN: "sun",
    MOON: "moon",
    MERCURY: "mercury",
    VENUS: "venus",
    MARS: "mars barycenter",
    JUPITER: "jupiter barycenter",
    SATURN: "saturn barycenter",
}


class JplEphemerisSource(PositionSource):
    """
    Skyfield positions from a JPL kernel (DE421 by default).

    Only used when the kernel is already on disk; it is never downloaded.
    Lunar nodes come from the analytical mean node model.
    """

    name = SOURCE_JPL

    def is_available(self) -> bool:
        return state.ephemeris_available()

    def _ecliptic(self, body: str, t):
        planets = state.get_planets()
        astrometric = planets["earth"].at(t).observe(planets[_JPL_TARGETS[body]]).apparent()
        lat, lon, _ = astrometric.frame_latlon(ecliptic_frame)
        x, y, z = astrometric.frame_xyz(ecliptic_frame).km
        return lon.degrees, lat.degrees, Vector3D(float(x), float(y), float(z))

    def fetch(self, instant, events=None):
        instant = to_utc(instant)
        try:
            ts = state.get_timescale()
            t = ts.from_datetime(instant)
            t_before = ts.tt_jd(t.tt - 0.5)
            t_after = ts.tt_jd(t.tt + 0.5)
            ayanamsa_value = ayanamsa(instant)

            positions = []
            for body in GRAHAS:
                if body in _JPL_TARGETS:
                    _, _, vector = self._ecliptic(body, t)
                    before = self._ecliptic(body, t_before)[0]
                    after = self._ecliptic(body, t_after)[0]
                    speed = difdeg2n(after, before)
                    positions.append(
                        build_position(body, vector, ayanamsa_value, instant=instant, speed=speed)
                    )
                else:
                    # Mean nodes: same model as local computation
                    positions.append(
                        build_position(
                            body,
                            geocentric_position(body, instant),
                            ayanamsa_value,
                            instant=instant,
                            speed=longitude_speed(body, instant),
                        )
                    )
        except (OSError, KeyError, ValueError) as exc:
            raise SourceError(f"{self.name} ephemeris failed: {exc}") from exc

        return assemble_snapshot(
            instant, positions, ayanamsa_value, ayanamsa_name(), self.name, events
        )


class LocalComputationSource(PositionSource):
    """
    Terminal source: the analytical models of this package.

    Exceptions raised here are defects and propagate to the caller.
    """

    name = SOURCE_CALCULATED

    def fetch(self, instant, events=None):
        return calculate_snapshot(instant, events, source=self.name)


def default_sources(client: Optional[httpx.Client] = None) -> List[PositionSource]:
    """The standard chain, configured from state."""
    return [
        SwissEphemerisServiceSource(client=client),
        FreeAstrologySource(client=client),
        JplEphemerisSource(),
        LocalComputationSource(),
    ]
