from .constants import *
from .time_utils import julday, revjul, datetime_to_jd, to_utc
from .coordinates import (
    Vector3D,
    EclipticCoordinates,
    to_geocentric,
    to_ecliptic,
    from_ecliptic,
    tropical_to_sidereal,
    sidereal_to_tropical,
    angular_separation,
)
from .orbits import (
    OrbitalElements,
    PLANET_ELEMENTS,
    solve_kepler_equation,
    true_anomaly,
    heliocentric_position,
)
from .lunar import lunar_ecliptic, lunar_geocentric_position, lunar_nodes, LunarNodes
from .ayanamsa import ayanamsa, ayanamsa_name
from .calendar import (
    InvalidLongitudeError,
    SiderealLongitude,
    RASHIS,
    NAKSHATRAS,
    SignPlacement,
    NakshatraInfo,
    sign_and_degree,
    nakshatra_and_pada,
    nakshatra_details,
)
from .models import (
    AstronomicalSnapshot,
    CalendarEvent,
    MoonPhase,
    PlanetaryPosition,
    TransitEvent,
    TransitIntensity,
    filter_upcoming_events,
    normalize_events,
)
from .transits import detect_transits
from .planets import calculate_snapshot, compute_positions
from .sources import (
    SourceError,
    PositionSource,
    SwissEphemerisServiceSource,
    FreeAstrologySource,
    JplEphemerisSource,
    LocalComputationSource,
    default_sources,
)
from .cache import SnapshotCache
from .live import PositionService
from .state import (
    set_service_url,
    set_secondary_url,
    set_api_key,
    set_timeout,
    set_cache_ttl,
    set_sid_mode,
    set_ephe_path,
    set_ephemeris_file,
)

__version__ = "0.1.0"

__all__ = [
    # Time
    "julday",
    "revjul",
    "datetime_to_jd",
    "to_utc",
    # Coordinates
    "Vector3D",
    "EclipticCoordinates",
    "to_geocentric",
    "to_ecliptic",
    "from_ecliptic",
    "tropical_to_sidereal",
    "sidereal_to_tropical",
    "angular_separation",
    # Orbits and Moon
    "OrbitalElements",
    "PLANET_ELEMENTS",
    "solve_kepler_equation",
    "true_anomaly",
    "heliocentric_position",
    "lunar_ecliptic",
    "lunar_geocentric_position",
    "lunar_nodes",
    "LunarNodes",
    # Ayanamsa
    "ayanamsa",
    "ayanamsa_name",
    # Calendar
    "InvalidLongitudeError",
    "SiderealLongitude",
    "RASHIS",
    "NAKSHATRAS",
    "SignPlacement",
    "NakshatraInfo",
    "sign_and_degree",
    "nakshatra_and_pada",
    "nakshatra_details",
    # Snapshot model
    "AstronomicalSnapshot",
    "CalendarEvent",
    "MoonPhase",
    "PlanetaryPosition",
    "TransitEvent",
    "TransitIntensity",
    "filter_upcoming_events",
    "normalize_events",
    "detect_transits",
    "calculate_snapshot",
    "compute_positions",
    # Live retrieval
    "SourceError",
    "PositionSource",
    "SwissEphemerisServiceSource",
    "FreeAstrologySource",
    "JplEphemerisSource",
    "LocalComputationSource",
    "default_sources",
    "SnapshotCache",
    "PositionService",
    # Configuration
    "set_service_url",
    "set_secondary_url",
    "set_api_key",
    "set_timeout",
    "set_cache_ttl",
    "set_sid_mode",
    "set_ephe_path",
    "set_ephemeris_file",
]
