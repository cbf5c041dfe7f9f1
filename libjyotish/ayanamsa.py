"""
Ayanamsa (precession offset) calculations for libjyotish.

The ayanamsa is the angle between the tropical zero point (vernal equinox) and
the sidereal zero point of the Vedic zodiac. It is modelled linearly:

    ayanamsa(t) = base_J2000 + rate * years_since_J2000

The linear model ignores the slow change in the precession rate, which stays
well below an arcminute over the modern era.
"""

from datetime import datetime
from typing import Dict, NamedTuple, Optional

from .constants import (
    SIDM_FAGAN_BRADLEY,
    SIDM_KRISHNAMURTI,
    SIDM_LAHIRI,
    SIDM_RAMAN,
)
from .time_utils import years_since_j2000


class AyanamsaStandard(NamedTuple):
    name: str
    base: float  # degrees at J2000.0
    rate: float  # degrees per Julian year


AYANAMSA_STANDARDS: Dict[str, AyanamsaStandard] = {
    SIDM_LAHIRI: AyanamsaStandard("Lahiri", 23.85, 50.29 / 3600.0),
    SIDM_RAMAN: AyanamsaStandard("Raman", 22.41, 50.2388475 / 3600.0),
    SIDM_KRISHNAMURTI: AyanamsaStandard("Krishnamurti", 23.76, 50.2388475 / 3600.0),
    SIDM_FAGAN_BRADLEY: AyanamsaStandard("Fagan/Bradley", 24.74, 50.2388475 / 3600.0),
}


def _standard(system: Optional[str]) -> AyanamsaStandard:
    if system is None:
        from .state import get_sid_mode

        system = get_sid_mode()
    try:
        return AYANAMSA_STANDARDS[system.lower()]
    except KeyError:
        raise ValueError(f"Unknown ayanamsa standard: {system}") from None


def ayanamsa(instant: datetime, system: Optional[str] = None) -> float:
    """
    Calculate the ayanamsa at an instant.

    Args:
        instant: Target instant (naive values are treated as UTC)
        system: Standard identifier (lahiri, raman, kp, fagan). Defaults to
            the mode set with state.set_sid_mode() (Lahiri)

    Returns:
        float: Ayanamsa in degrees

    Raises:
        ValueError: If the standard is unknown

    Example:
        >>> from datetime import datetime, timezone
        >>> round(ayanamsa(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)), 2)
        23.85
    """
    standard = _standard(system)
    return standard.base + standard.rate * years_since_j2000(instant)


def ayanamsa_name(system: Optional[str] = None) -> str:
    """Human-readable name of an ayanamsa standard."""
    return _standard(system).name
