"""
Time scales for the ephemeris engine.

Instants are ``datetime`` objects; a naive datetime is taken to be UTC.
Internally every series is evaluated on the day count ``d`` since the J2000.0
epoch (JD 2451545.0), derived from the Unix timestamp. The difference between
UT and TT (about a minute) is ignored, which is well below the accuracy of
the low-order series.

References
----------
- Meeus, J. (1998). Astronomical Algorithms, 2nd ed., ch. 7.
"""

from datetime import datetime, timedelta, timezone
import math

from common.constants import PhysicalConstants
from common.exceptions import InvalidInputError

SECONDS_PER_DAY = PhysicalConstants.SECONDS_PER_DAY.value
J1970 = PhysicalConstants.JULIAN_DAY_UNIX_EPOCH.value
J2000 = PhysicalConstants.JULIAN_DAY_J2000.value


def as_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime (naive means UTC)."""
    if not isinstance(instant, datetime):
        raise InvalidInputError(f"Expected a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def julian_date(instant: datetime) -> float:
    """Julian Date of an instant.

    The Julian day number 2440588 is noon of 1970-01-01, so midnight
    (the Unix epoch) is 2440587.5.

    >>> julian_date(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
    2451545.0
    """
    return as_utc(instant).timestamp() / SECONDS_PER_DAY - 0.5 + J1970


def from_julian_date(jd: float) -> datetime:
    """Aware UTC datetime of a Julian Date."""
    if not math.isfinite(jd):
        raise InvalidInputError(f"Julian date must be finite, got {jd}")
    seconds = (jd + 0.5 - J1970) * SECONDS_PER_DAY
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)


def to_days(instant: datetime) -> float:
    """Days since J2000.0 (fractional)."""
    return julian_date(instant) - J2000


def local_midnight(instant: datetime) -> datetime:
    """Start of the civil day containing ``instant`` in its own timezone, as UTC."""
    if not isinstance(instant, datetime):
        raise InvalidInputError(f"Expected a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        instant = instant.replace(tzinfo=timezone.utc)
    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)
