"""
Astronomical Ephemeris Engine.

Sun and moon topocentric position, lunar illumination, and event times
(sunrise, sunset, twilight bands, moonrise, moonset) from low-order periodic
series referenced to J2000.0. Independent of the geospatial package: it
takes only an instant and the observer's latitude/longitude.

Angles are returned in radians; azimuths are measured from south towards
west (``CelestialPosition.bearing_degrees`` gives a compass bearing).
"""

from ephemeris.time_scales import julian_date, from_julian_date, to_days
from ephemeris.solar import sun_position, sun_times
from ephemeris.lunar import (
    moon_position,
    moon_illumination,
    moon_times,
    moon_phase_name,
    moon_calendar,
)

__all__ = [
    "julian_date",
    "from_julian_date",
    "to_days",
    "sun_position",
    "sun_times",
    "moon_position",
    "moon_illumination",
    "moon_times",
    "moon_phase_name",
    "moon_calendar",
]
