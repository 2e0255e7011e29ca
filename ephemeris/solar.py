"""
Solar position and event times.

Low-precision solar series: mean anomaly, equation of centre with three
harmonics, and perihelion longitude give the ecliptic longitude of the sun
(ecliptic latitude is taken as zero). From it the equatorial and then the
horizontal coordinates follow.

Scientific Context
------------------
Domain: Positional astronomy
Model: Keplerian sun with first-order equation of centre
Accuracy: better than 0.01 deg in position and about a minute in event
times for dates within a few centuries of J2000.

Event Times
-----------
For each altitude threshold h0 the hour-angle equation

    cos H = (sin h0 - sin phi sin dec) / (cos phi cos dec)

is solved around the solar transit of the day. The set time follows from
H, the rise time mirrors it about solar noon. When |cos H| > 1 the sun does
not reach h0 that day (polar day or night, unresolved twilight) and the
event is reported as ``None``.

References
----------
- Meeus, J. (1998). Astronomical Algorithms, 2nd ed., ch. 25.
- https://aa.quae.nl/en/reken/zonpositie.html
"""

from datetime import datetime
from typing import Dict, Optional, Tuple
import math

import numpy as np

from common.config import CoreConfig, DEFAULT_CONFIG
from common.constants import PhysicalConstants, SUN_ALTITUDE_THRESHOLDS
from common.exceptions import InvalidInputError
from common.logging_config import get_logger
from common.types import CelestialPosition, SunTimes
from ephemeris.celestial_sphere import (
    altitude,
    azimuth,
    declination,
    observer_angles,
    right_ascension,
    sidereal_time,
)
from ephemeris.time_scales import J2000, from_julian_date, to_days

logger = get_logger(__name__)

# Offset of the mean solar transit from the Julian day boundary [days]
J0 = 0.0009
PERIHELION_LONGITUDE = np.radians(102.9372)


def solar_mean_anomaly(d: float) -> float:
    return np.radians(357.5291 + 0.98560028 * d)


def ecliptic_longitude(M: float) -> float:
    """Ecliptic longitude of the sun for mean anomaly ``M``."""
    C = np.radians(1.9148 * np.sin(M) + 0.02 * np.sin(2 * M) + 0.0003 * np.sin(3 * M))
    return M + C + PERIHELION_LONGITUDE + np.pi


def sun_coords(d: float) -> Tuple[float, float]:
    """Geocentric ``(declination, right_ascension)`` of the sun in radians."""
    L = ecliptic_longitude(solar_mean_anomaly(d))
    return declination(L, 0.0), right_ascension(L, 0.0)


def sun_position(instant: datetime, latitude: float, longitude: float) -> CelestialPosition:
    """Horizontal position of the sun.

    No refraction correction is applied.

    Parameters
    ----------
    instant : datetime
        Time of observation; naive values are UTC.
    latitude, longitude : float
        Observer position in degrees.

    Returns
    -------
    CelestialPosition
        Azimuth (from south, westward) and altitude in radians.
    """
    phi, lw = observer_angles(latitude, longitude)
    d = to_days(instant)
    dec, ra = sun_coords(d)
    H = sidereal_time(d, lw) - ra
    return CelestialPosition(azimuth=float(azimuth(H, phi, dec)),
                             altitude=float(altitude(H, phi, dec)))


def _julian_cycle(d: float, lw: float) -> int:
    return int(np.floor(d - J0 - lw / (2 * np.pi) + 0.5))


def _approx_transit(Ht: float, lw: float, n: int) -> float:
    return J0 + (Ht + lw) / (2 * np.pi) + n


def _solar_transit_j(ds: float, M: float, L: float) -> float:
    return J2000 + ds + 0.0053 * np.sin(M) - 0.0069 * np.sin(2 * L)


def _hour_angle(h0: float, phi: float, dec: float) -> Optional[float]:
    denominator = np.cos(phi) * np.cos(dec)
    if abs(denominator) < 1e-12:
        return None
    cos_h = (np.sin(h0) - np.sin(phi) * np.sin(dec)) / denominator
    if abs(cos_h) > 1.0:
        return None
    return float(np.arccos(cos_h))


def sun_times(instant: datetime,
              latitude: float,
              longitude: float,
              observer_height_m: Optional[float] = None,
              config: CoreConfig = DEFAULT_CONFIG) -> SunTimes:
    """Sunrise, sunset and twilight times for the day around ``instant``.

    Parameters
    ----------
    instant : datetime
        Any time of the day of interest; naive values are UTC. The day is
        the one whose solar transit is nearest to ``instant`` at the
        observer's longitude.
    latitude, longitude : float
        Observer position in degrees.
    observer_height_m : float, optional
        Observer height above the horizon plane; lowers every threshold by
        the horizon dip. Defaults to ``config.ephemeris.observer_height_m``.
    config : CoreConfig
        Core configuration.

    Returns
    -------
    SunTimes
        Aware UTC datetimes. Solar noon and nadir are always present;
        other events are ``None`` when the threshold is not crossed.

    Raises
    ------
    InvalidInputError
        For a non-finite or out-of-range position or a negative height.
    """
    phi, lw = observer_angles(latitude, longitude)
    if observer_height_m is None:
        observer_height_m = config.ephemeris.observer_height_m
    if not math.isfinite(observer_height_m) or observer_height_m < 0:
        raise InvalidInputError(f"Observer height must be >= 0, got {observer_height_m}")
    dip = PhysicalConstants.observer_horizon_dip(observer_height_m)

    d = to_days(instant)
    n = _julian_cycle(d, lw)
    ds = _approx_transit(0.0, lw, n)
    M = solar_mean_anomaly(ds)
    L = ecliptic_longitude(M)
    dec = declination(L, 0.0)
    j_noon = _solar_transit_j(ds, M, L)

    events: Dict[str, Optional[datetime]] = {}
    for threshold_deg, rise_name, set_name in SUN_ALTITUDE_THRESHOLDS:
        w = _hour_angle(np.radians(threshold_deg + dip), phi, dec)
        if w is None:
            events[rise_name] = events[set_name] = None
            continue
        j_set = _solar_transit_j(_approx_transit(w, lw, n), M, L)
        j_rise = j_noon - (j_set - j_noon)
        events[rise_name] = from_julian_date(j_rise)
        events[set_name] = from_julian_date(j_set)

    missing = sorted(name for name, value in events.items() if value is None)
    if missing:
        logger.debug(f"No sun crossing at ({latitude}, {longitude}) on day {n}: {missing}")

    return SunTimes(solar_noon=from_julian_date(j_noon),
                    nadir=from_julian_date(j_noon - 0.5),
                    **events)
