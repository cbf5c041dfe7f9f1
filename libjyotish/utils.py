"""
Utility functions for libjyotish.

Angular helpers shared by the coordinate, calendar and transit modules.
"""

import math


def normalize_degrees(angle: float) -> float:
    """
    Normalize an angle to [0, 360).

    Guards the float edge case where a tiny negative angle maps to 360.0.

    Examples:
        >>> normalize_degrees(-10.0)
        350.0
        >>> normalize_degrees(720.5)
        0.5
    """
    result = angle % 360.0
    if result >= 360.0:
        result = 0.0
    return result


def difdeg2n(p1: float, p2: float) -> float:
    """
    Calculate distance in degrees p1 - p2 normalized to [-180;180].

    Computes the signed angular difference, handling 360° wrapping.

    Examples:
        >>> difdeg2n(10, 20)
        -10.0
        >>> difdeg2n(350, 10)
        -20.0
        >>> difdeg2n(10, 350)
        20.0
        >>> difdeg2n(180, 0)
        180.0
    """
    diff = (p1 - p2) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def format_dms(degrees: float) -> str:
    """
    Format decimal degrees as D°M'S".

    >>> format_dms(15.5)
    '15°30\\'0.0"'
    """
    sign = "-" if degrees < 0 else ""
    degrees = abs(degrees)
    d = int(degrees)
    mf = (degrees - d) * 60
    m = int(mf)
    s = (mf - m) * 60
    return f"{sign}{d}°{m}'{s:.1f}\""


def is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)
