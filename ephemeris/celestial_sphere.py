"""
Celestial Sphere Coordinate Transformations.

Conversions between ecliptic, equatorial and horizontal coordinates shared
by the solar and lunar series. All angles are in RADIANS.

Conventions
-----------
- Azimuth is measured from SOUTH, positive towards WEST (the convention of
  the hour angle). Add pi to get a compass bearing.
- ``lw`` is the observer's WEST longitude, ``-longitude`` in radians.

References
----------
- Meeus, J. (1998). Astronomical Algorithms, 2nd ed., ch. 12-13, 16.
- Bennett, G.G. (1982). The calculation of astronomical refraction in marine
  navigation. Journal of Navigation, 35(2), 255-259.
"""

from typing import Tuple

import numpy as np

from common.constants import PhysicalConstants
from common.types import GeographicPoint

OBLIQUITY = np.radians(PhysicalConstants.OBLIQUITY_OF_ECLIPTIC.value)


def observer_angles(latitude_deg: float, longitude_deg: float) -> Tuple[float, float]:
    """Validate an observer position and return ``(phi, lw)`` in radians.

    Raises
    ------
    InvalidInputError
        If either value is not finite or the latitude is outside [-90, 90].
    """
    point = GeographicPoint(latitude=latitude_deg, longitude=longitude_deg)
    return float(np.radians(point.latitude)), float(-np.radians(point.longitude))


def right_ascension(l: float, b: float) -> float:
    """Right ascension from ecliptic longitude ``l`` and latitude ``b``."""
    return np.arctan2(np.sin(l) * np.cos(OBLIQUITY) - np.tan(b) * np.sin(OBLIQUITY), np.cos(l))


def declination(l: float, b: float) -> float:
    """Declination from ecliptic longitude ``l`` and latitude ``b``."""
    return np.arcsin(np.sin(b) * np.cos(OBLIQUITY) + np.cos(b) * np.sin(OBLIQUITY) * np.sin(l))


def azimuth(H: float, phi: float, dec: float) -> float:
    """Azimuth (from south, westward) for hour angle ``H``."""
    return np.arctan2(np.sin(H), np.cos(H) * np.sin(phi) - np.tan(dec) * np.cos(phi))


def altitude(H: float, phi: float, dec: float) -> float:
    """Geometric altitude for hour angle ``H``."""
    return np.arcsin(np.sin(phi) * np.sin(dec) + np.cos(phi) * np.cos(dec) * np.cos(H))


def sidereal_time(d: float, lw: float) -> float:
    """Local sidereal time for ``d`` days since J2000 and west longitude ``lw``."""
    return np.radians(280.4606 + 360.98564737 * d) - lw


def astro_refraction(h: float) -> float:
    """Atmospheric refraction in radians for a geometric altitude ``h > 0``.

    Bennett's formula, in radians. Callers apply it above the horizon only;
    non-positive altitudes return 0.
    """
    if h <= 0:
        return 0.0
    return 0.0002967 / np.tan(h + 0.00312536 / (h + 0.0890117))


def parallactic_angle(H: float, phi: float, dec: float) -> float:
    """Angle between the direction to the zenith and to the celestial pole."""
    return np.arctan2(np.sin(H), np.tan(phi) * np.cos(dec) - np.sin(dec) * np.cos(H))
