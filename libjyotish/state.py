"""
Global state management for libjyotish.

This module maintains the library's configuration including:
- Remote position service URLs, API key and request timeout
- Snapshot cache lifetime
- Ephemeris data loader (Skyfield Loader) and JPL kernel location
- Sidereal mode (default ayanamsa standard)

Settings are module-level globals with set_*/get_* accessors. Defaults are read
once from environment variables at import time; reset_state() re-reads them.
"""

import logging
import os
from typing import Optional

from skyfield.api import Loader
from skyfield.jpllib import SpiceKernel
from skyfield.timelib import Timescale

from .constants import SIDM_LAHIRI

logger = logging.getLogger(__name__)

DEFAULT_SECONDARY_URL = "https://api.freeastrologyapi.com"
DEFAULT_TIMEOUT = 5.0  # seconds
DEFAULT_CACHE_TTL = 300.0  # seconds
DEFAULT_EPHEMERIS_FILE = "de421.bsp"

# =============================================================================
# GLOBAL STATE VARIABLES
# =============================================================================

_SERVICE_URL: Optional[str] = None  # Swiss Ephemeris position service endpoint
_SECONDARY_URL: Optional[str] = None  # FreeAstrologyAPI base URL
_API_KEY: Optional[str] = None  # FreeAstrologyAPI key
_TIMEOUT: float = DEFAULT_TIMEOUT
_CACHE_TTL: float = DEFAULT_CACHE_TTL
_EPHEMERIS_PATH: Optional[str] = None  # Directory holding the JPL kernel
_EPHEMERIS_FILE: str = DEFAULT_EPHEMERIS_FILE
_SIDEREAL_MODE: str = SIDM_LAHIRI
_LOADER: Optional[Loader] = None  # Skyfield data loader
_PLANETS: Optional[SpiceKernel] = None  # Loaded planetary ephemeris
_TS: Optional[Timescale] = None  # Timescale object


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _load_environment() -> None:
    global _SERVICE_URL, _SECONDARY_URL, _API_KEY, _TIMEOUT, _EPHEMERIS_PATH
    _SERVICE_URL = os.environ.get("LIBJYOTISH_SERVICE_URL") or None
    _SECONDARY_URL = os.environ.get("LIBJYOTISH_SECONDARY_URL", DEFAULT_SECONDARY_URL) or None
    _API_KEY = os.environ.get("FREE_ASTROLOGY_API_KEY") or None
    _TIMEOUT = _env_float("LIBJYOTISH_TIMEOUT", DEFAULT_TIMEOUT)
    _EPHEMERIS_PATH = os.environ.get("LIBJYOTISH_EPHE_PATH") or None


_load_environment()


# =============================================================================
# REMOTE SERVICES
# =============================================================================


def set_service_url(url: Optional[str]) -> None:
    """
    Set the Swiss Ephemeris position service endpoint.

    Args:
        url: Full endpoint URL (e.g. ``https://host/api/planetary-positions``)
            or None to disable the source
    """
    global _SERVICE_URL
    _SERVICE_URL = url


def get_service_url() -> Optional[str]:
    return _SERVICE_URL


def set_secondary_url(url: Optional[str]) -> None:
    """Set the FreeAstrologyAPI base URL, or None to disable the source."""
    global _SECONDARY_URL
    _SECONDARY_URL = url


def get_secondary_url() -> Optional[str]:
    return _SECONDARY_URL


def set_api_key(key: Optional[str]) -> None:
    global _API_KEY
    _API_KEY = key


def get_api_key() -> Optional[str]:
    return _API_KEY


def set_timeout(seconds: float) -> None:
    """
    Set the per-request timeout for remote sources.

    Raises:
        ValueError: If seconds is not positive
    """
    global _TIMEOUT
    if seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {seconds}")
    _TIMEOUT = float(seconds)


def get_timeout() -> float:
    return _TIMEOUT


# =============================================================================
# CACHE
# =============================================================================


def set_cache_ttl(seconds: float) -> None:
    """
    Set the lifetime of cached snapshots.

    Raises:
        ValueError: If seconds is negative
    """
    global _CACHE_TTL
    if seconds < 0:
        raise ValueError(f"Cache TTL cannot be negative, got {seconds}")
    _CACHE_TTL = float(seconds)


def get_cache_ttl() -> float:
    return _CACHE_TTL


# =============================================================================
# SIDEREAL MODE
# =============================================================================


def set_sid_mode(mode: str) -> None:
    """
    Set the default ayanamsa standard.

    Args:
        mode: One of the SIDM_* identifiers (lahiri, raman, kp, fagan)

    Raises:
        ValueError: If the standard is unknown
    """
    from .ayanamsa import AYANAMSA_STANDARDS

    global _SIDEREAL_MODE
    key = mode.lower()
    if key not in AYANAMSA_STANDARDS:
        raise ValueError(f"Unknown ayanamsa standard: {mode}")
    _SIDEREAL_MODE = key


def get_sid_mode() -> str:
    return _SIDEREAL_MODE


# =============================================================================
# EPHEMERIS (SKYFIELD)
# =============================================================================


def get_loader() -> Loader:
    """
    Get or create the Skyfield data loader.

    Returns:
        Loader: Skyfield Loader rooted at the ephemeris path (or the
        repository root when unset)
    """
    global _LOADER
    if _LOADER is None:
        data_dir = _EPHEMERIS_PATH or os.path.join(os.path.dirname(__file__), "..")
        _LOADER = Loader(data_dir, verbose=False)
    return _LOADER


def get_timescale() -> Timescale:
    """
    Get or create the Skyfield timescale object.

    Note:
        Uses Skyfield's bundled leap-second and Delta T data, so no download
        is triggered.
    """
    global _TS
    if _TS is None:
        _TS = get_loader().timescale(builtin=True)
    return _TS


def ephemeris_file_path() -> str:
    """Absolute path where the JPL kernel is expected."""
    base_dir = _EPHEMERIS_PATH or os.path.join(os.path.dirname(__file__), "..")
    return os.path.abspath(os.path.join(base_dir, _EPHEMERIS_FILE))


def ephemeris_available() -> bool:
    """True when the JPL kernel is already on disk."""
    return os.path.exists(ephemeris_file_path())


def get_planets() -> SpiceKernel:
    """
    Get or load the planetary ephemeris (DE421 by default).

    Returns:
        SpiceKernel: Loaded JPL ephemeris kernel

    Raises:
        FileNotFoundError: If the kernel is not on disk. Kernels are never
            downloaded implicitly.
    """
    global _PLANETS
    if _PLANETS is None:
        path = ephemeris_file_path()
        if not os.path.exists(path):
            raise FileNotFoundError(f"Ephemeris file not found: {path}")
        _PLANETS = get_loader()(path)
    return _PLANETS


def set_ephe_path(path: Optional[str]) -> None:
    """
    Set the directory holding the JPL kernel.

    Resets the loader and any loaded kernel.
    """
    global _EPHEMERIS_PATH, _LOADER, _PLANETS
    _EPHEMERIS_PATH = path
    _LOADER = None
    _PLANETS = None


def set_ephemeris_file(filename: str) -> None:
    """Select a different JPL kernel file (e.g. de440s.bsp)."""
    global _EPHEMERIS_FILE, _PLANETS
    _EPHEMERIS_FILE = filename
    _PLANETS = None


def get_ephemeris_file() -> str:
    return _EPHEMERIS_FILE


def reset_state() -> None:
    """Restore every setting to its environment/default value."""
    global _CACHE_TTL, _EPHEMERIS_FILE, _SIDEREAL_MODE, _LOADER, _PLANETS, _TS
    _load_environment()
    _CACHE_TTL = DEFAULT_CACHE_TTL
    _EPHEMERIS_FILE = DEFAULT_EPHEMERIS_FILE
    _SIDEREAL_MODE = SIDM_LAHIRI
    _LOADER = None
    _PLANETS = None
    _TS = None
