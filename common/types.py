"""
Type Definitions with Physical Units for the Navigation Core.

This module defines the value types exchanged between the three engines and
their callers. These types enforce semantic correctness and provide clear
interfaces between modules.

Design Rationale
----------------
Using typed dataclasses instead of raw tuples/dicts provides:
1. Self-documenting code - field names describe the data
2. Checking with mypy
3. Runtime validation of required fields
4. Clear unit expectations in docstrings

All types are frozen: they are produced by one computation and consumed by
the next, never mutated in between.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple
import math

import numpy as np

from common.exceptions import InvalidInputError


def _require_finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return value


def wrap_longitude(longitude_deg: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    return (longitude_deg + 180.0) % 360.0 - 180.0


@dataclass(frozen=True)
class GeographicPoint:
    """A WGS84 geographic coordinate on Earth's surface.

    This is the universal interchange type of the core. Every engine accepts
    and returns positions in this form.

    Attributes
    ----------
    latitude : float
        Geodetic latitude in DEGREES. Range: [-90, 90].
    longitude : float
        Geodetic longitude in DEGREES, normalised to [-180, 180).

    Notes
    -----
    - Latitude is positive north, negative south.
    - Longitude is positive east, negative west.
    - Non-finite values are rejected with ``InvalidInputError``.

    Examples
    --------
    >>> delhi = GeographicPoint(latitude=28.6139, longitude=77.2090)
    >>> lat_rad, lon_rad = delhi.to_radians()
    """
    latitude: float  # degrees
    longitude: float  # degrees

    def __post_init__(self):
        """Validate and normalise coordinate ranges."""
        latitude = _require_finite("latitude", self.latitude)
        longitude = _require_finite("longitude", self.longitude)
        if not -90.0 <= latitude <= 90.0:
            raise InvalidInputError(
                f"Latitude {latitude} deg out of range [-90, 90]. "
                f"Did you swap latitude and longitude?"
            )
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", wrap_longitude(longitude))

    def to_radians(self) -> Tuple[float, float]:
        """Return ``(latitude_rad, longitude_rad)``."""
        return float(np.radians(self.latitude)), float(np.radians(self.longitude))

    @classmethod
    def from_radians(cls, lat_rad: float, lon_rad: float) -> 'GeographicPoint':
        """Create a point from radians (convenience constructor)."""
        return cls(latitude=float(np.degrees(lat_rad)), longitude=float(np.degrees(lon_rad)))


class Hemisphere(str, Enum):
    """UTM hemisphere, derived from the sign of the latitude."""
    NORTH = "N"
    SOUTH = "S"

    @classmethod
    def for_latitude(cls, latitude_deg: float) -> 'Hemisphere':
        return cls.NORTH if latitude_deg >= 0 else cls.SOUTH


@dataclass(frozen=True)
class UTMCoordinate:
    """A position on the Universal Transverse Mercator grid (WGS84).

    Attributes
    ----------
    easting : float
        Easting in METERS (500 000 m false easting at the central meridian).
    northing : float
        Northing in METERS (10 000 000 m false northing in the south).
    zone : int
        UTM zone number, 1..60.
    hemisphere : Hemisphere
        North or south of the equator.
    """
    easting: float  # m
    northing: float  # m
    zone: int
    hemisphere: Hemisphere

    @property
    def zone_identifier(self) -> str:
        """Zone and hemisphere, e.g. ``"43N"``."""
        return f"{self.zone}{self.hemisphere.value}"


class IndianGridZone(str, Enum):
    """The nine zones of the Indian Grid.

    The zone is always chosen by the caller: the cadastral zones do not tile
    uniformly by longitude, so it is never inferred from a position.
    """
    ZONE_0 = "0"
    IA = "IA"
    IB = "IB"
    IIA = "IIA"
    IIB = "IIB"
    IIIA = "IIIA"
    IIIB = "IIIB"
    IVA = "IVA"
    IVB = "IVB"

    @classmethod
    def parse(cls, zone) -> 'IndianGridZone':
        """Accept a member or its name (case-insensitive), e.g. ``"iia"``."""
        if isinstance(zone, cls):
            return zone
        try:
            return cls(str(zone).strip().upper())
        except ValueError as exc:
            names = ", ".join(z.value for z in cls)
            raise InvalidInputError(
                f"Unknown Indian Grid zone {zone!r}; expected one of {names}"
            ) from exc


@dataclass(frozen=True)
class IndianGridCoordinate:
    """A position on one zone of the Indian Grid (Everest 1930, LCC).

    Attributes
    ----------
    easting : float
        Easting in METERS.
    northing : float
        Northing in METERS.
    zone : IndianGridZone
        The zone whose constants produced this coordinate.
    """
    easting: float  # m
    northing: float  # m
    zone: IndianGridZone

    @property
    def zone_identifier(self) -> str:
        """Zone name, e.g. ``"IIA"``."""
        return self.zone.value


@dataclass(frozen=True)
class CelestialPosition:
    """Topocentric horizontal position of a body at one instant.

    Attributes
    ----------
    azimuth : float
        Azimuth in RADIANS, measured from south towards west.
    altitude : float
        Altitude above the horizon in RADIANS.
    """
    azimuth: float  # radians, from south, westward
    altitude: float  # radians

    @property
    def bearing_degrees(self) -> float:
        """Compass bearing of the body in degrees (north = 0, clockwise)."""
        return float((np.degrees(self.azimuth) + 180.0) % 360.0)

    @property
    def altitude_degrees(self) -> float:
        return float(np.degrees(self.altitude))


@dataclass(frozen=True)
class MoonPosition(CelestialPosition):
    """Horizontal position of the moon with distance and parallactic angle.

    Attributes
    ----------
    distance_km : float
        Geocentric distance to the moon in KILOMETERS.
    parallactic_angle : float
        Parallactic angle in RADIANS.
    """
    distance_km: float = 0.0  # km
    parallactic_angle: float = 0.0  # radians


# Upper phase bound (exclusive) of each named phase; New Moon also covers > 0.97.
MOON_PHASE_NAMES: Tuple[Tuple[float, str], ...] = (
    (0.03, "New Moon"),
    (0.22, "Waxing Crescent"),
    (0.28, "First Quarter"),
    (0.47, "Waxing Gibbous"),
    (0.53, "Full Moon"),
    (0.72, "Waning Gibbous"),
    (0.78, "Last Quarter"),
    (0.97, "Waning Crescent"),
)


def phase_name_for(phase: float) -> str:
    """Name the moon phase for a continuous phase value in [0, 1)."""
    for upper, name in MOON_PHASE_NAMES:
        if phase < upper:
            return name
    return "New Moon"


@dataclass(frozen=True)
class MoonIllumination:
    """Illuminated fraction and phase of the moon.

    Attributes
    ----------
    illuminated_fraction : float
        Fraction of the disc that is lit, in [0, 1].
    phase : float
        Continuous phase in [0, 1): 0 new moon, 0.25 first quarter,
        0.5 full moon, 0.75 last quarter.
    bright_limb_angle : float
        Midpoint angle in RADIANS of the illuminated limb, measured
        eastward from the north point of the disc.
    """
    illuminated_fraction: float
    phase: float
    bright_limb_angle: float  # radians

    @property
    def phase_name(self) -> str:
        """Human-readable phase name."""
        return phase_name_for(self.phase)


@dataclass(frozen=True)
class SunTimes:
    """Solar event times for one day (timezone-aware UTC).

    Solar noon and nadir are always defined. Every other event is ``None``
    when the sun does not cross the corresponding altitude that day.
    """
    solar_noon: datetime
    nadir: datetime
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    sunrise_end: Optional[datetime] = None
    sunset_start: Optional[datetime] = None
    dawn: Optional[datetime] = None
    dusk: Optional[datetime] = None
    nautical_dawn: Optional[datetime] = None
    nautical_dusk: Optional[datetime] = None
    night_end: Optional[datetime] = None
    night: Optional[datetime] = None
    golden_hour_end: Optional[datetime] = None
    golden_hour: Optional[datetime] = None

    @property
    def daylight_duration(self) -> Optional[timedelta]:
        """Time between sunrise and sunset, or None if either is absent."""
        if self.sunrise is None or self.sunset is None:
            return None
        return self.sunset - self.sunrise


@dataclass(frozen=True)
class MoonTimes:
    """Moonrise and moonset for one civil day.

    ``always_up`` / ``always_down`` are only set when neither a rise nor a
    set was found during the day.
    """
    rise: Optional[datetime] = None
    set: Optional[datetime] = None
    always_up: bool = False
    always_down: bool = False

