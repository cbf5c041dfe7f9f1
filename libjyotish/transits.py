"""
Conjunction detection between grahas.

Every unordered pair of bodies other than the Sun is compared by the angle
between their geocentric vectors. One threshold applies to every pair.
"""

import logging
from datetime import datetime
from itertools import combinations
from typing import Iterable, List

from .constants import MAJOR_ORB, MINOR_ORB, SUN, TRANSIT_THRESHOLD
from .coordinates import angular_separation
from .models import PlanetaryPosition, TransitEvent, TransitIntensity
from .time_utils import to_utc

logger = logging.getLogger(__name__)


def classify_separation(separation: float) -> TransitIntensity:
    """MAJOR below 2°, MINOR below 3°, otherwise BACKGROUND."""
    if separation < MAJOR_ORB:
        return TransitIntensity.MAJOR
    if separation < MINOR_ORB:
        return TransitIntensity.MINOR
    return TransitIntensity.BACKGROUND


def detect_transits(
    positions: Iterable[PlanetaryPosition],
    instant: datetime,
    threshold: float = TRANSIT_THRESHOLD,
) -> List[TransitEvent]:
    """
    Find pairs of bodies closer than ``threshold`` degrees.

    Args:
        positions: Geocentric positions; the Sun is skipped
        instant: Timestamp attached to each event
        threshold: Maximum separation in degrees (exclusive)

    Returns:
        List of TransitEvent in pair order of the input

    Note:
        Rahu and Ketu are always 180° apart and never pair with each other.
        Bodies with a zero-length vector are skipped.
    """
    timestamp = to_utc(instant)
    bodies = [p for p in positions if p.body != SUN]
    events: List[TransitEvent] = []
    for a, b in combinations(bodies, 2):
        if a.position.magnitude == 0.0 or b.position.magnitude == 0.0:
            logger.debug("Skipping zero-length vector in pair %s/%s", a.body, b.body)
            continue
        separation = angular_separation(a.position, b.position)
        if separation < threshold:
            events.append(
                TransitEvent(
                    bodies=(a.body, b.body),
                    separation=separation,
                    intensity=classify_separation(separation),
                    timestamp=timestamp,
                )
            )
    return events
