"""
Geodetic Transform Engine: UTM and Indian Grid.

This module converts ``GeographicPoint``s (WGS84) to and from the two
projected grid systems shown by the map: the global UTM grid and the
multi-zone Indian Grid used for cadastral work.

Scientific Context
------------------
Domain: Cartography, mathematical geodesy
Model: Transverse Mercator on WGS84 (UTM); Lambert Conformal Conic with one
standard parallel on Everest 1930, reached from WGS84 through a geocentric
translation (Indian Grid).

Two Systems, Two Code Paths
---------------------------
The systems differ in ellipsoid *and* datum. They are kept as separate
projection classes and separate public functions so that the Everest datum
shift can only ever be applied on the Indian Grid path.

Implementation
--------------
Projection arithmetic is delegated to `pyproj` (PROJ). Transformers are
expensive to build, so one is created per zone and memoised. Any PROJ error
or non-finite output is raised as ``ProjectionError``.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
- Karney, C.F.F. (2011). Transverse Mercator with an accuracy of a few
  nanometers. Journal of Geodesy, 85(8), 475-485.
"""

from functools import lru_cache
from typing import Optional, Tuple, Union
import math

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError

from common.exceptions import InvalidInputError, ProjectionError
from common.logging_config import get_logger
from common.types import (
    GeographicPoint,
    Hemisphere,
    IndianGridCoordinate,
    IndianGridZone,
    UTMCoordinate,
)
from geospatial.zones import (
    IndianGridZoneParameters,
    UTMZone,
    indian_grid_zone_parameters,
    utm_zone_for_longitude,
)

logger = get_logger(__name__)


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not isinstance(value, (int, float, np.floating, np.integer)) or not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value!r}")


def _checked(system: str, x: float, y: float) -> Tuple[float, float]:
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ProjectionError(f"{system} transform produced a non-finite result ({x}, {y})")
    return float(x), float(y)


class TransverseMercator:
    """Transverse Mercator projection of one UTM zone (WGS84).

    A conformal (angle-preserving) projection suitable for regions that
    extend primarily north-south.

    Parameters
    ----------
    zone : UTMZone
        Zone number and hemisphere.

    Notes
    -----
    Distortion increases with distance from the central meridian. A zone
    override may legitimately place a point outside its nominal 6° strip.
    """

    def __init__(self, zone: UTMZone):
        self._zone = zone
        self._proj4 = zone.proj4_string

        self._crs_geo = CRS.from_epsg(4326)  # WGS84
        self._crs_proj = CRS.from_proj4(self._proj4)
        self._to_proj = Transformer.from_crs(self._crs_geo, self._crs_proj, always_xy=True)
        self._to_geo = Transformer.from_crs(self._crs_proj, self._crs_geo, always_xy=True)
        logger.debug(f"Built transformer for UTM zone {zone.number}{zone.hemisphere.value}")

    @property
    def name(self) -> str:
        return f"UTM zone {self._zone.number}{self._zone.hemisphere.value}"

    @property
    def proj4_string(self) -> str:
        return self._proj4

    def to_projected(self, lat_deg: float, lon_deg: float) -> Tuple[float, float]:
        """WGS84 latitude/longitude (degrees) to easting/northing (metres)."""
        x, y = self._to_proj.transform(lon_deg, lat_deg, errcheck=True)
        return _checked(self.name, x, y)

    def to_geodetic(self, x: float, y: float) -> Tuple[float, float]:
        """Easting/northing (metres) to WGS84 latitude/longitude (degrees)."""
        lon_deg, lat_deg = self._to_geo.transform(x, y, errcheck=True)
        lat_deg, lon_deg = _checked(self.name, lat_deg, lon_deg)
        return lat_deg, lon_deg


class LambertConformalConic:
    """Lambert Conformal Conic (1SP) projection of one Indian Grid zone.

    The projected CRS is Everest 1930 carrying a ``+towgs84`` geocentric
    translation, so PROJ applies the datum shift in both directions and
    ``proj4_string`` alone reproduces this transform.

    Parameters
    ----------
    zone : IndianGridZone
        The zone whose constants define the projection.
    """

    def __init__(self, zone: IndianGridZone):
        self._zone = zone
        self._params: IndianGridZoneParameters = indian_grid_zone_parameters(zone)
        self._proj4 = self._params.proj4_string

        self._crs_geo = CRS.from_epsg(4326)  # WGS84
        self._crs_proj = CRS.from_proj4(self._proj4)
        self._to_proj = Transformer.from_crs(self._crs_geo, self._crs_proj, always_xy=True)
        self._to_geo = Transformer.from_crs(self._crs_proj, self._crs_geo, always_xy=True)
        logger.debug(f"Built transformer for Indian Grid zone {zone.value}")

    @property
    def name(self) -> str:
        return f"Indian Grid zone {self._zone.value}"

    @property
    def proj4_string(self) -> str:
        return self._proj4

    @property
    def parameters(self) -> IndianGridZoneParameters:
        return self._params

    def to_projected(self, lat_deg: float, lon_deg: float) -> Tuple[float, float]:
        """WGS84 latitude/longitude (degrees) to easting/northing (metres)."""
        x, y = self._to_proj.transform(lon_deg, lat_deg, errcheck=True)
        return _checked(self.name, x, y)

    def to_geodetic(self, x: float, y: float) -> Tuple[float, float]:
        """Easting/northing (metres) to WGS84 latitude/longitude (degrees)."""
        lon_deg, lat_deg = self._to_geo.transform(x, y, errcheck=True)
        lat_deg, lon_deg = _checked(self.name, lat_deg, lon_deg)
        return lat_deg, lon_deg


@lru_cache(maxsize=None)
def _utm_projection(zone: UTMZone) -> TransverseMercator:
    return TransverseMercator(zone)


@lru_cache(maxsize=None)
def _indian_grid_projection(zone: IndianGridZone) -> LambertConformalConic:
    return LambertConformalConic(zone)


def to_utm(point: GeographicPoint, zone_override: Optional[int] = None) -> UTMCoordinate:
    """Project a point onto the UTM grid.

    Parameters
    ----------
    point : GeographicPoint
        WGS84 position.
    zone_override : int, optional
        Zone number to use instead of the longitude-derived one. Accepted
        verbatim (1..60) without checking it against the longitude, so that
        a caller can keep one grid across a zone boundary.

    Returns
    -------
    UTMCoordinate
        Easting/northing with the zone actually used. The hemisphere always
        follows the latitude sign.

    Raises
    ------
    InvalidInputError
        If ``zone_override`` is not an integer in 1..60.
    ProjectionError
        If PROJ cannot produce a finite coordinate.
    """
    number = zone_override if zone_override is not None else utm_zone_for_longitude(point.longitude)
    zone = UTMZone(number, Hemisphere.for_latitude(point.latitude))

    projection = _utm_projection(zone)
    try:
        easting, northing = projection.to_projected(point.latitude, point.longitude)
    except (ProjError, ProjectionError) as exc:
        logger.warning(f"Error converting {point} to {projection.name}: {exc}")
        raise ProjectionError(f"Cannot project {point} to {projection.name}") from exc

    return UTMCoordinate(easting=easting, northing=northing, zone=zone.number,
                         hemisphere=zone.hemisphere)


def from_utm(coord: UTMCoordinate) -> GeographicPoint:
    """Inverse UTM using the coordinate's own zone and hemisphere.

    Raises
    ------
    InvalidInputError
        If the easting/northing are not finite or the zone is invalid.
    ProjectionError
        If PROJ cannot produce a finite position.
    """
    _require_finite(easting=coord.easting, northing=coord.northing)
    try:
        hemisphere = Hemisphere(coord.hemisphere)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown hemisphere {coord.hemisphere!r}") from exc
    zone = UTMZone(coord.zone, hemisphere)

    projection = _utm_projection(zone)
    try:
        lat_deg, lon_deg = projection.to_geodetic(coord.easting, coord.northing)
        return GeographicPoint(latitude=lat_deg, longitude=lon_deg)
    except (ProjError, ProjectionError, InvalidInputError) as exc:
        logger.warning(f"Error converting {coord} from {projection.name}: {exc}")
        raise ProjectionError(f"Cannot unproject {coord} from {projection.name}") from exc


def to_indian_grid(point: GeographicPoint,
                   zone: Union[IndianGridZone, str]) -> IndianGridCoordinate:
    """Project a point onto the given Indian Grid zone.

    The zone is never inferred from the position.

    Raises
    ------
    InvalidInputError
        If ``zone`` does not name one of the nine zones.
    ProjectionError
        If the projection cannot produce a finite coordinate.
    """
    zone = IndianGridZone.parse(zone)

    projection = _indian_grid_projection(zone)
    try:
        easting, northing = projection.to_projected(point.latitude, point.longitude)
    except (ProjError, ProjectionError) as exc:
        logger.warning(f"Error converting {point} to {projection.name}: {exc}")
        raise ProjectionError(f"Cannot project {point} to {projection.name}") from exc

    return IndianGridCoordinate(easting=easting, northing=northing, zone=zone)


def from_indian_grid(coord: IndianGridCoordinate) -> GeographicPoint:
    """Inverse of ``to_indian_grid`` using ``coord.zone``'s constants.

    Raises
    ------
    InvalidInputError
        If the easting/northing are not finite or the zone is unknown.
    ProjectionError
        If the projection cannot produce a finite position.
    """
    _require_finite(easting=coord.easting, northing=coord.northing)
    zone = IndianGridZone.parse(coord.zone)

    projection = _indian_grid_projection(zone)
    try:
        lat_deg, lon_deg = projection.to_geodetic(coord.easting, coord.northing)
        return GeographicPoint(latitude=lat_deg, longitude=lon_deg)
    except (ProjError, ProjectionError, InvalidInputError) as exc:
        logger.warning(f"Error converting {coord} from {projection.name}: {exc}")
        raise ProjectionError(f"Cannot unproject {coord} from {projection.name}") from exc
