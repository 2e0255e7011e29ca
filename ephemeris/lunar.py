"""
Lunar position, illumination and rise/set times.

Lunar Series
------------
The moon's geocentric ecliptic coordinates keep one dominant periodic term
each:

    l = L + 6.289 sin M        (longitude, deg)
    b = 5.128 sin F            (latitude, deg)
    r = 385001 - 20905 cos M   (distance, km)

with mean longitude L, mean anomaly M and argument of latitude F linear in
days since J2000. Accuracy is a few tenths of a degree, ample for rise/set
times to a few minutes and for the displayed phase.

Rise and Set
------------
The altitude above a horizon lowered by 0.133 deg (apparent radius and
parallax combined) is sampled hourly from local midnight. A parabola through
each triple of samples (hours i-1, i, i+1 for odd i) locates sub-hour zero
crossings. A crossing is a rise where the parabola is increasing and a set
where it is decreasing; the first of each is reported. A day without any
crossing is ``always_up`` or ``always_down`` by the sign of the last sample.

References
----------
- Meeus, J. (1998). Astronomical Algorithms, 2nd ed., ch. 47-48.
- Montenbruck, O., Pfleger, T. (2000). Astronomy on the Personal Computer,
  4th ed., ch. 3.8 (quadratic interpolation for rise/set).
"""

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple

import numpy as np

from common.config import CoreConfig, DEFAULT_CONFIG
from common.constants import PhysicalConstants
from common.exceptions import InvalidInputError
from common.logging_config import get_logger
from common.types import MoonIllumination, MoonPosition, MoonTimes, phase_name_for
from ephemeris.celestial_sphere import (
    altitude,
    astro_refraction,
    azimuth,
    declination,
    observer_angles,
    parallactic_angle,
    right_ascension,
    sidereal_time,
)
from ephemeris.solar import sun_coords
from ephemeris.time_scales import as_utc, local_midnight, to_days

logger = get_logger(__name__)

SUN_DISTANCE_KM = PhysicalConstants.SUN_DISTANCE.value


def moon_coords(d: float) -> Tuple[float, float, float]:
    """Geocentric ``(declination, right_ascension, distance_km)`` of the moon."""
    L = np.radians(218.316 + 13.176396 * d)  # mean longitude
    M = np.radians(134.963 + 13.064993 * d)  # mean anomaly
    F = np.radians(93.272 + 13.229350 * d)   # argument of latitude

    l = L + np.radians(6.289) * np.sin(M)
    b = np.radians(5.128) * np.sin(F)
    dist = 385001.0 - 20905.0 * np.cos(M)

    return declination(l, b), right_ascension(l, b), dist


def _moon_position(d: float, phi: float, lw: float, refraction: bool) -> MoonPosition:
    dec, ra, dist = moon_coords(d)
    H = sidereal_time(d, lw) - ra
    h = altitude(H, phi, dec)
    if refraction and h > 0:
        h = h + astro_refraction(h)
    return MoonPosition(azimuth=float(azimuth(H, phi, dec)),
                        altitude=float(h),
                        distance_km=float(dist),
                        parallactic_angle=float(parallactic_angle(H, phi, dec)))


def moon_position(instant: datetime,
                  latitude: float,
                  longitude: float,
                  config: CoreConfig = DEFAULT_CONFIG) -> MoonPosition:
    """Horizontal position of the moon.

    Refraction is added to the altitude only when the moon is above the
    horizon (and ``config.ephemeris.apply_moon_refraction`` is set).

    Parameters
    ----------
    instant : datetime
        Time of observation; naive values are UTC.
    latitude, longitude : float
        Observer position in degrees.
    config : CoreConfig
        Core configuration.

    Returns
    -------
    MoonPosition
        Azimuth (from south, westward), altitude and parallactic angle in
        radians, distance in km.
    """
    phi, lw = observer_angles(latitude, longitude)
    return _moon_position(to_days(instant), phi, lw, config.ephemeris.apply_moon_refraction)


def moon_illumination(instant: datetime) -> MoonIllumination:
    """Illuminated fraction, phase and bright limb angle of the moon.

    The phase angle follows from the geocentric elongation of the moon and
    the distances of both bodies.
    """
    d = to_days(instant)
    s_dec, s_ra = sun_coords(d)
    m_dec, m_ra, m_dist = moon_coords(d)

    cos_elong = (np.sin(s_dec) * np.sin(m_dec)
                 + np.cos(s_dec) * np.cos(m_dec) * np.cos(s_ra - m_ra))
    elongation = np.arccos(np.clip(cos_elong, -1.0, 1.0))
    inc = np.arctan2(SUN_DISTANCE_KM * np.sin(elongation),
                     m_dist - SUN_DISTANCE_KM * np.cos(elongation))
    angle = np.arctan2(np.cos(s_dec) * np.sin(s_ra - m_ra),
                       np.sin(s_dec) * np.cos(m_dec)
                       - np.cos(s_dec) * np.sin(m_dec) * np.cos(s_ra - m_ra))

    sign = -1.0 if angle < 0 else 1.0
    phase = 0.5 + 0.5 * inc * sign / np.pi
    return MoonIllumination(illuminated_fraction=float((1 + np.cos(inc)) / 2),
                            phase=float(phase % 1.0),
                            bright_limb_angle=float(angle))


def moon_phase_name(phase: float) -> str:
    """Name of the phase, e.g. ``"Waxing Gibbous"`` for 0.4."""
    if not np.isfinite(phase):
        raise InvalidInputError(f"Moon phase must be finite, got {phase}")
    return phase_name_for(phase % 1.0)


def _crossings(h0: float, h1: float, h2: float) -> List[Tuple[float, bool]]:
    """Zero crossings of the parabola through (-1, h0), (0, h1), (1, h2).

    Returns ``(x, rising)`` pairs with x in [-1, 1), in ascending order.
    """
    a = (h0 + h2) / 2 - h1
    b = (h2 - h0) / 2

    if a == 0:
        if b == 0:
            return []
        roots = [-h1 / b]
    else:
        disc = b * b - 4 * a * h1
        if disc < 0:
            return []
        root = np.sqrt(disc)
        roots = sorted({(-b - root) / (2 * a), (-b + root) / (2 * a)})

    return [(float(x), 2 * a * x + b > 0) for x in roots if -1.0 <= x < 1.0]


def moon_times(instant: datetime,
               latitude: float,
               longitude: float,
               config: CoreConfig = DEFAULT_CONFIG) -> MoonTimes:
    """Moonrise and moonset during the civil day of ``instant``.

    The day runs from midnight in the timezone of ``instant`` (UTC for naive
    values) over ``config.ephemeris.moon_search_hours`` hours.

    Returns
    -------
    MoonTimes
        First rise and first set as aware UTC datetimes. When the moon
        neither rises nor sets, exactly one of ``always_up`` and
        ``always_down`` is true.
    """
    phi, lw = observer_angles(latitude, longitude)
    start = local_midnight(instant)
    eph = config.ephemeris
    dip = np.radians(eph.moon_horizon_dip_deg)
    d0 = to_days(start)

    def altitude_at(hours: float) -> float:
        position = _moon_position(d0 + hours / 24.0, phi, lw, eph.apply_moon_refraction)
        return position.altitude - dip

    rise: Optional[float] = None
    set_: Optional[float] = None
    h0 = altitude_at(0)
    h2 = h0
    for i in range(1, eph.moon_search_hours, 2):
        h1 = altitude_at(i)
        h2 = altitude_at(i + 1)
        for x, rising in _crossings(h0, h1, h2):
            if rising and rise is None:
                rise = i + x
            elif not rising and set_ is None:
                set_ = i + x
        if rise is not None and set_ is not None:
            break
        h0 = h2

    if rise is None and set_ is None:
        logger.debug(f"Moon does not cross the horizon at ({latitude}, {longitude}) "
                     f"on {start.date()}: {'up' if h2 > 0 else 'down'}")
        return MoonTimes(always_up=h2 > 0, always_down=h2 <= 0)

    return MoonTimes(
        rise=start + timedelta(hours=rise) if rise is not None else None,
        set=start + timedelta(hours=set_) if set_ is not None else None,
    )


def moon_calendar(year: int, month: int,
                  tz: tzinfo = timezone.utc) -> List[Tuple[date, MoonIllumination]]:
    """Moon illumination at local noon for every day of a month.

    Parameters
    ----------
    year, month : int
        Calendar month.
    tz : tzinfo
        Timezone whose noon is used.

    Returns
    -------
    list of (date, MoonIllumination)
        One entry per day, in order.
    """
    if not 1 <= month <= 12:
        raise InvalidInputError(f"Month must be in 1..12, got {month}")
    try:
        days = monthrange(year, month)[1]
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid year {year!r}") from exc

    calendar = []
    for day in range(1, days + 1):
        noon = datetime(year, month, day, 12, tzinfo=tz)
        calendar.append((noon.date(), moon_illumination(as_utc(noon))))
    return calendar
