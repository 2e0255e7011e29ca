"""
Grid Line Generation for UTM and Indian Grid overlays.

Given a map viewport, this module computes the grid lines of constant
easting and northing in one projected system, and their labels, in
geographic coordinates ready to be drawn.

Labels use the military short form: the hundred-kilometre digit(s) followed
by the two principal (kilometre) digits, e.g. ``7 16`` for 716 000 m.

Step Selection
--------------
With automatic spacing the step follows the map zoom: no grid below zoom 8,
100 km up to zoom 11, 10 km up to zoom 14, then 1 km. A fixed spacing is
suppressed when it would be too dense for the zoom level.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
import math

import numpy as np

from common.exceptions import InvalidInputError, ProjectionError
from common.logging_config import get_logger
from common.types import (
    GeographicPoint,
    Hemisphere,
    IndianGridCoordinate,
    IndianGridZone,
    UTMCoordinate,
)
from geospatial.projections import from_indian_grid, from_utm, to_indian_grid, to_utm
from geospatial.zones import utm_zone_for_longitude

logger = get_logger(__name__)

VIEWPORT_EXTENSION = 0.1
MIN_LABELLED_STEP_M = 1000.0
MAX_LINES_PER_AXIS = 500
SOUTHERN_FALSE_NORTHING = 10_000_000.0

# fixed step (m) -> lowest zoom at which it is drawn
DENSITY_LIMITS = {1000: 12, 5000: 10, 10000: 8}

GridLine = Tuple[GeographicPoint, GeographicPoint]


@dataclass(frozen=True)
class GridLabel:
    """Label of one grid line.

    Attributes
    ----------
    position : GeographicPoint
        Anchor of the label, where the line crosses the viewport centre line.
    hundred_km : int
        ``floor(value / 100000)``.
    principal : int
        ``floor(value / 1000) % 100``.
    """
    position: GeographicPoint
    hundred_km: int
    principal: int

    @property
    def text(self) -> str:
        return f"{self.hundred_km} {self.principal:02d}"


@dataclass(frozen=True)
class GridOverlay:
    """Grid lines and labels for one viewport."""
    lines: Tuple[GridLine, ...] = ()
    labels: Tuple[GridLabel, ...] = ()
    step_m: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.lines


EMPTY_OVERLAY = GridOverlay()


def grid_step_for_zoom(zoom: float, spacing_m: Optional[float] = None) -> Optional[float]:
    """Grid step for a zoom level.

    Parameters
    ----------
    zoom : float
        Map zoom level.
    spacing_m : float, optional
        Fixed spacing chosen by the user; ``None`` selects automatically.

    Returns
    -------
    float or None
        Step in metres, or ``None`` when no grid should be drawn.
    """
    if spacing_m is None:
        if zoom < 8:
            return None
        if zoom > 14:
            return 1000.0
        if zoom > 11:
            return 10000.0
        return 100000.0

    if not math.isfinite(spacing_m) or spacing_m <= 0:
        raise InvalidInputError(f"Grid spacing must be positive, got {spacing_m}")
    min_zoom = DENSITY_LIMITS.get(int(spacing_m)) if float(spacing_m).is_integer() else None
    if min_zoom is not None and zoom < min_zoom:
        return None
    return float(spacing_m)


def label_for(value: float, position: GeographicPoint) -> GridLabel:
    """Build the label of a grid line at easting/northing ``value``."""
    return GridLabel(
        position=position,
        hundred_km=int(np.floor(value / 100000.0)),
        principal=int(np.floor(value / 1000.0)) % 100,
    )


def _extended_corners(sw: GeographicPoint,
                      ne: GeographicPoint) -> Tuple[GeographicPoint, GeographicPoint]:
    dlat = (ne.latitude - sw.latitude) * VIEWPORT_EXTENSION
    dlon = (ne.longitude - sw.longitude) * VIEWPORT_EXTENSION
    return (
        GeographicPoint(max(sw.latitude - dlat, -90.0), sw.longitude - dlon),
        GeographicPoint(min(ne.latitude + dlat, 90.0), ne.longitude + dlon),
    )


def _contains(sw: GeographicPoint, ne: GeographicPoint, point: GeographicPoint) -> bool:
    return (sw.latitude <= point.latitude <= ne.latitude
            and sw.longitude <= point.longitude <= ne.longitude)


def _grid_values(start: float, stop: float, step: float) -> np.ndarray:
    first = np.floor(start / step) * step
    count = int(np.floor((stop - first) / step)) + 1
    if count > MAX_LINES_PER_AXIS:
        raise InvalidInputError(
            f"Grid step {step} m gives {count} lines across the viewport"
        )
    return first + step * np.arange(max(count, 0))


def _validate_viewport(sw: GeographicPoint, ne: GeographicPoint, step_m: float) -> None:
    if not math.isfinite(step_m) or step_m <= 0:
        raise InvalidInputError(f"Grid step must be positive, got {step_m}")
    if sw.latitude > ne.latitude or sw.longitude > ne.longitude:
        raise InvalidInputError(f"Viewport corners out of order: sw={sw}, ne={ne}")


def _build(sw, ne, step_m, lo, hi, centre, unproject) -> GridOverlay:
    lines: List[GridLine] = []
    labels: List[GridLabel] = []
    labelled = step_m >= MIN_LABELLED_STEP_M

    def add(value, start, end, anchor):
        try:
            lines.append((unproject(*start), unproject(*end)))
        except ProjectionError:
            logger.debug(f"Skipping grid line at {value:.0f} m")
            return
        if not labelled:
            return
        try:
            position = unproject(*anchor)
        except ProjectionError:
            return
        if _contains(sw, ne, position):
            labels.append(label_for(value, position))

    for n in _grid_values(lo[1], hi[1], step_m):
        add(n, (lo[0], n), (hi[0], n), (centre[0], n))
    for e in _grid_values(lo[0], hi[0], step_m):
        add(e, (e, lo[1]), (e, hi[1]), (e, centre[1]))

    return GridOverlay(lines=tuple(lines), labels=tuple(labels), step_m=step_m)


def utm_grid_lines(sw: GeographicPoint,
                   ne: GeographicPoint,
                   step_m: float,
                   centre: Optional[GeographicPoint] = None,
                   forced_zone: Optional[int] = None) -> GridOverlay:
    """UTM grid lines covering a viewport.

    The whole grid is drawn in one zone and one hemisphere, taken from the
    viewport centre (or ``forced_zone``).

    Parameters
    ----------
    sw, ne : GeographicPoint
        South-west and north-east corners of the viewport.
    step_m : float
        Grid spacing in metres.
    centre : GeographicPoint, optional
        Map centre; defaults to the middle of the viewport.
    forced_zone : int, optional
        UTM zone to draw instead of the centre's zone.

    Returns
    -------
    GridOverlay
        Empty when the viewport cannot be projected.
    """
    _validate_viewport(sw, ne, step_m)
    if centre is None:
        centre = GeographicPoint((sw.latitude + ne.latitude) / 2,
                                 (sw.longitude + ne.longitude) / 2)
    zone = forced_zone if forced_zone is not None else utm_zone_for_longitude(centre.longitude)
    ext_sw, ext_ne = _extended_corners(sw, ne)

    try:
        centre_utm = to_utm(centre, zone)
        corners = [to_utm(p, zone) for p in (ext_sw, ext_ne)]
    except ProjectionError:
        logger.warning(f"Viewport {sw} - {ne} cannot be projected to UTM zone {zone}")
        return EMPTY_OVERLAY

    hemisphere = centre_utm.hemisphere

    def northing_in(coord: UTMCoordinate) -> float:
        if coord.hemisphere is hemisphere:
            return coord.northing
        if hemisphere is Hemisphere.SOUTH:
            return coord.northing + SOUTHERN_FALSE_NORTHING
        return coord.northing - SOUTHERN_FALSE_NORTHING

    lo = (corners[0].easting, northing_in(corners[0]))
    hi = (corners[1].easting, northing_in(corners[1]))

    def unproject(easting: float, northing: float) -> GeographicPoint:
        return from_utm(UTMCoordinate(float(easting), float(northing), zone, hemisphere))

    return _build(sw, ne, step_m, lo, hi, (centre_utm.easting, centre_utm.northing), unproject)


def indian_grid_lines(sw: GeographicPoint,
                      ne: GeographicPoint,
                      step_m: float,
                      zone: Union[IndianGridZone, str],
                      centre: Optional[GeographicPoint] = None) -> GridOverlay:
    """Indian Grid lines of ``zone`` covering a viewport.

    See ``utm_grid_lines`` for the parameters.
    """
    _validate_viewport(sw, ne, step_m)
    zone = IndianGridZone.parse(zone)
    if centre is None:
        centre = GeographicPoint((sw.latitude + ne.latitude) / 2,
                                 (sw.longitude + ne.longitude) / 2)
    ext_sw, ext_ne = _extended_corners(sw, ne)

    try:
        centre_grid, lo_grid, hi_grid = (to_indian_grid(p, zone) for p in (centre, ext_sw, ext_ne))
    except ProjectionError:
        logger.warning(f"Viewport {sw} - {ne} cannot be projected to Indian Grid zone {zone.value}")
        return EMPTY_OVERLAY

    def unproject(easting: float, northing: float) -> GeographicPoint:
        return from_indian_grid(IndianGridCoordinate(float(easting), float(northing), zone))

    return _build(sw, ne, step_m,
                  (lo_grid.easting, lo_grid.northing),
                  (hi_grid.easting, hi_grid.northing),
                  (centre_grid.easting, centre_grid.northing),
                  unproject)
