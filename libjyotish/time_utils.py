"""
Time conversion utilities for libjyotish.

Implements the time functions every model depends on:
- Calendar dates and Julian Day numbers
- Python datetimes (normalized to UTC) and Julian Day numbers
- Elapsed days, Julian years and Julian centuries since J2000.0

All algorithms follow Meeus "Astronomical Algorithms" (1998), Ch. 7.
Universal Time is used throughout; the difference to Terrestrial Time
(~69 s today) is far below the precision of the models that consume it.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from .constants import DAYS_PER_JULIAN_CENTURY, DAYS_PER_JULIAN_YEAR, J2000


def julday(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """
    Convert a Gregorian calendar date to Julian Day number.

    Args:
        year: Calendar year (negative for BCE)
        month: Month (1-12)
        day: Day of month (1-31)
        hour: Decimal hour (0.0-23.999...)

    Returns:
        float: Julian Day number (days since JD 0.0 = noon Jan 1, 4713 BCE)

    Note:
        JD 2451545.0 = Jan 1, 2000 12:00 (J2000.0 epoch)
    """
    if month <= 2:
        year -= 1
        month += 12

    a = int(year / 100)
    b = 2 - a + int(a / 4)

    return (
        int(365.25 * (year + 4716))
        + int(30.6001 * (month + 1))
        + day
        + hour / 24.0
        + b
        - 1524.5
    )


def revjul(jd: float) -> Tuple[int, int, int, float]:
    """
    Convert Julian Day number to a Gregorian calendar date.

    Returns:
        tuple: (year, month, day, hour) with decimal hour
    """
    jd = jd + 0.5
    z = int(jd)
    f = jd - z

    if z < 2299161:
        a = z
    else:
        alpha = int((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - int(alpha / 4)

    b = a + 1524
    c = int((b - 122.1) / 365.25)
    d = int(365.25 * c)
    e = int((b - d) / 30.6001)

    day = b - d - int(30.6001 * e) + f
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    d_int = int(day)
    return year, month, d_int, (day - d_int) * 24.0


def to_utc(instant: Optional[datetime] = None) -> datetime:
    """
    Normalize an instant to an aware UTC datetime.

    Naive datetimes are interpreted as UTC; ``None`` means "now".
    """
    if instant is None:
        return datetime.now(timezone.utc)
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def datetime_to_jd(instant: datetime) -> float:
    """
    Convert a datetime to Julian Day (UT).

    Args:
        instant: Any datetime; normalized with to_utc() first

    Returns:
        float: Julian Day including the fraction of day
    """
    utc = to_utc(instant)
    hour = (
        utc.hour
        + utc.minute / 60.0
        + (utc.second + utc.microsecond / 1_000_000.0) / 3600.0
    )
    return julday(utc.year, utc.month, utc.day, hour)


def days_since_j2000(instant: datetime) -> float:
    """Days elapsed since J2000.0 (2000-01-01 12:00 UTC)."""
    return datetime_to_jd(instant) - J2000


def years_since_j2000(instant: datetime) -> float:
    """Julian years elapsed since J2000.0."""
    return days_since_j2000(instant) / DAYS_PER_JULIAN_YEAR


def centuries_since_j2000(instant: datetime) -> float:
    """Julian centuries elapsed since J2000.0 (the ``T`` of Meeus' polynomials)."""
    return days_since_j2000(instant) / DAYS_PER_JULIAN_CENTURY


def truncate_to_minute(instant: datetime) -> datetime:
    """Drop seconds and microseconds from a UTC-normalized instant."""
    return to_utc(instant).replace(second=0, microsecond=0)
