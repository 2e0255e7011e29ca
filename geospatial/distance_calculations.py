"""
Spherical Navigation Math.

This module provides the distance, bearing and destination-point
calculations used for every on-screen measurement: route legs, the AR
crosshair range, and the navigation arrow. All of them run on a sphere of the
Earth's mean radius (6 371 000 m).

Scientific Context
------------------
Domain: Spherical trigonometry
Model: Great circles on a sphere

Accuracy
--------
The spherical model differs from the WGS84 geodesic by up to ~0.5 %. That is
acceptable for display purposes; projected grid readouts come from
``geospatial.projections`` and are never mixed with these values.

References
----------
- Sinnott, R.W. (1984). Virtues of the Haversine. Sky and Telescope, 68(2), 159.
- Veness, C. Calculate distance, bearing and more between Latitude/Longitude
  points. Movable Type Scripts.
"""

from typing import Sequence, Union
import math

import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants
from common.exceptions import InvalidInputError
from common.types import GeographicPoint
from common.units import Q_, Scalar, magnitude_in, validate_units

EARTH_RADIUS_M = PhysicalConstants.EARTH_MEAN_RADIUS.value

COMPASS_POINTS = (
    'N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE',
    'S', 'SSW', 'SW', 'WSW', 'W', 'WNW', 'NW', 'NNW',
)

BEARING_TOLERANCE_DEG = 5.0


def distance(p1: GeographicPoint, p2: GeographicPoint, radius_m: float = EARTH_RADIUS_M) -> float:
    """Great-circle distance between two points.

    Parameters
    ----------
    p1, p2 : GeographicPoint
        End points.
    radius_m : float
        Sphere radius in meters.

    Returns
    -------
    float
        Distance in meters. Exactly 0 for identical points and symmetric in
        its arguments.

    Examples
    --------
    >>> round(distance(GeographicPoint(0, 0), GeographicPoint(0, 1)))
    111195
    """
    lat1, lon1 = p1.to_radians()
    lat2, lon2 = p2.to_radians()

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    # rounding can push a past 1 for antipodal pairs
    a = np.sin(dlat / 2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2)**2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return float(radius_m * c)


def distance_batch(
    lat1_deg: NDArray[np.float64],
    lon1_deg: NDArray[np.float64],
    lat2_deg: NDArray[np.float64],
    lon2_deg: NDArray[np.float64],
    radius_m: float = EARTH_RADIUS_M
) -> NDArray[np.float64]:
    """Great-circle distances for arrays of point pairs (degrees in, meters out).

    Notes
    -----
    This function uses numpy broadcasting, so inputs can be:
    - Same shape: pairwise distances
    - Broadcastable shapes: distance from one point to many, etc.
    """
    lat1 = np.radians(lat1_deg)
    lat2 = np.radians(lat2_deg)
    dlat = lat2 - lat1
    dlon = np.radians(lon2_deg) - np.radians(lon1_deg)

    # rounding can push a past 1 for antipodal pairs
    a = np.sin(dlat / 2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2)**2
    a = np.clip(a, 0.0, 1.0)
    return radius_m * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def path_length(points: Sequence[GeographicPoint], radius_m: float = EARTH_RADIUS_M) -> float:
    """Total length of a polyline: the sum of its consecutive leg distances.

    Returns 0 for fewer than two points.
    """
    if len(points) < 2:
        return 0.0

    lats = np.array([p.latitude for p in points])
    lons = np.array([p.longitude for p in points])
    legs = distance_batch(lats[:-1], lons[:-1], lats[1:], lons[1:], radius_m)
    return float(np.sum(legs))


def initial_bearing(p1: GeographicPoint, p2: GeographicPoint) -> float:
    """Forward azimuth at ``p1`` towards ``p2``.

    Returns
    -------
    float
        Bearing in degrees in [0, 360), clockwise from north. Identical
        points have no defined bearing; 0.0 is returned.
    """
    if p1 == p2:
        return 0.0

    lat1, lon1 = p1.to_radians()
    lat2, lon2 = p2.to_radians()
    dlon = lon2 - lon1

    y = np.sin(dlon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)

    bearing = np.degrees(np.arctan2(y, x)) % 360.0
    # -0.0 % 360 and values within an ulp of 360 both round to 360.0
    return 0.0 if bearing >= 360.0 else float(bearing)


@validate_units({'distance_m': 'm'})
def destination_point(
    origin: GeographicPoint,
    bearing_deg: float,
    distance_m: Scalar,
    radius_m: float = EARTH_RADIUS_M
) -> GeographicPoint:
    """Point reached by travelling along a great circle.

    Parameters
    ----------
    origin : GeographicPoint
        Starting point.
    bearing_deg : float
        Initial bearing in degrees, clockwise from north.
    distance_m : float or pint.Quantity
        Distance to travel; bare numbers are meters.
    radius_m : float
        Sphere radius in meters.

    Returns
    -------
    GeographicPoint
        Destination, longitude normalised to [-180, 180).
    """
    d = magnitude_in(distance_m, 'm')
    if not (math.isfinite(d) and math.isfinite(bearing_deg)):
        raise InvalidInputError("bearing and distance must be finite")

    lat1, lon1 = origin.to_radians()
    brng = np.radians(bearing_deg)
    delta = d / radius_m

    lat2 = np.arcsin(np.clip(np.sin(lat1) * np.cos(delta) +
                             np.cos(lat1) * np.sin(delta) * np.cos(brng), -1.0, 1.0))
    lon2 = lon1 + np.arctan2(np.sin(brng) * np.sin(delta) * np.cos(lat1),
                             np.cos(delta) - np.sin(lat1) * np.sin(lat2))

    return GeographicPoint.from_radians(lat2, lon2)


def heading_change(heading_deg: float, bearing_deg: float) -> float:
    """Signed turn from the current heading to a target bearing.

    Returns
    -------
    float
        Degrees in [-180, 180). Positive = clockwise (rightward) turn.
    """
    return float((bearing_deg - heading_deg + 180.0) % 360.0 - 180.0)


def is_on_bearing(heading_deg: float, bearing_deg: float,
                  tolerance_deg: float = BEARING_TOLERANCE_DEG) -> bool:
    """Whether the heading points at the target within ``tolerance_deg``."""
    return abs(heading_change(heading_deg, bearing_deg)) <= tolerance_deg


def polygon_area(points: Sequence[GeographicPoint], radius_m: float = EARTH_RADIUS_M) -> float:
    """Approximate area enclosed by a polygon on the sphere.

    Uses the spherical-excess line integral
    ``|Σ Δλ (2 + sin φ1 + sin φ2)| R² / 2``; the polygon is closed
    implicitly. Less accurate for very large polygons.

    Returns
    -------
    float
        Area in square meters; 0 for fewer than three vertices.
    """
    if len(points) < 3:
        return 0.0

    lats = np.radians([p.latitude for p in points])
    lons = np.array([p.longitude for p in points])
    next_lats = np.roll(lats, -1)
    dlon = np.radians(np.roll(lons, -1) - lons)

    area = np.sum(dlon * (2 + np.sin(lats) + np.sin(next_lats)))
    return float(np.abs(area * radius_m * radius_m / 2.0))


def _finite(value: Union[float, int], what: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(f"{what} must be finite, got {value}")
    return value


def format_distance(distance_m: Scalar) -> str:
    """Readable distance: ``"532m"`` below 1 km, ``"1.50km"`` above.

    The unit follows the rounded metre value, so 999.6 m reads ``"1.00km"``.
    """
    meters = _finite(magnitude_in(distance_m, 'm'), "distance")
    if round(meters) < 1000:
        return f"{meters:.0f}m"
    return f"{Q_(meters, 'm').to('km').magnitude:.2f}km"


def format_area(area_m2: Scalar) -> str:
    """Readable area: ``"850 m²"`` below 1 ha, ``"1.235 km²"`` above."""
    square_meters = _finite(magnitude_in(area_m2, 'm**2'), "area")
    if square_meters < 10_000:
        return f"{square_meters:.0f} m²"
    return f"{Q_(square_meters, 'm**2').to('km**2').magnitude:.3f} km²"


def format_bearing(bearing_deg: float) -> str:
    """Bearing with its 16-point compass direction, e.g. ``"135.0° SE"``."""
    bearing = _finite(bearing_deg, "bearing")
    index = int(np.floor(bearing / 22.5 + 0.5)) % 16
    return f"{bearing:.1f}° {COMPASS_POINTS[index]}"
