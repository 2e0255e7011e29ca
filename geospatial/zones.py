"""
Projection Zone Definitions.

Static parameter sets for the two supported grid systems. The Indian Grid
table is a closed mapping from zone name to constants; nothing here is ever
mutated.

References
----------
- Survey of India, Lambert Conformal Conic zones on Everest 1830 (1937 adj.)
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS PP 1395.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
import numpy as np

from common.constants import PhysicalConstants
from common.exceptions import InvalidInputError
from common.types import Hemisphere, IndianGridZone

UTM_ZONE_COUNT = 60
UTM_ZONE_WIDTH_DEG = 6.0


@dataclass(frozen=True)
class UTMZone:
    """A UTM zone/hemisphere pair on the WGS84 ellipsoid.

    Attributes
    ----------
    number : int
        Zone number, 1..60.
    hemisphere : Hemisphere
        Selects the 10 000 000 m false northing for the south.
    """
    number: int
    hemisphere: Hemisphere

    def __post_init__(self):
        if isinstance(self.number, bool) or not isinstance(self.number, (int, np.integer)):
            raise InvalidInputError(f"UTM zone must be an integer, got {self.number!r}")
        if not 1 <= self.number <= UTM_ZONE_COUNT:
            raise InvalidInputError(f"UTM zone {self.number} out of range 1..{UTM_ZONE_COUNT}")
        object.__setattr__(self, "number", int(self.number))

    @property
    def central_meridian_deg(self) -> float:
        return -183.0 + UTM_ZONE_WIDTH_DEG * self.number

    @property
    def proj4_string(self) -> str:
        south = " +south" if self.hemisphere is Hemisphere.SOUTH else ""
        return f"+proj=utm +zone={self.number}{south} +ellps=WGS84 +datum=WGS84 +units=m +no_defs"


def utm_zone_for_longitude(longitude_deg: float) -> int:
    """Longitude-derived UTM zone number: ``floor((lon + 180) / 6) + 1``.

    The eastern edge (longitude 180) belongs to zone 60.
    """
    zone = int(np.floor((longitude_deg + 180.0) / UTM_ZONE_WIDTH_DEG)) + 1
    return min(max(zone, 1), UTM_ZONE_COUNT)


@dataclass(frozen=True)
class IndianGridZoneParameters:
    """Constants of one Indian Grid zone (Lambert Conformal Conic, 1SP).

    Attributes
    ----------
    central_meridian : float
        Longitude of the central meridian in degrees.
    origin_latitude : float
        Latitude of origin and standard parallel in degrees.
    false_easting : float
        False easting in meters.
    false_northing : float
        False northing in meters.
    scale_factor : float
        Scale factor on the standard parallel.
    """
    central_meridian: float
    origin_latitude: float
    false_easting: float
    false_northing: float
    scale_factor: float

    @property
    def proj4_string(self) -> str:
        """Complete proj4 definition, Everest 1930 with its shift to WGS84."""
        dx, dy, dz = PhysicalConstants.EVEREST_TO_WGS84_TRANSLATION
        return (
            f"+proj=lcc +lat_1={self.origin_latitude} +lat_0={self.origin_latitude} "
            f"+lon_0={self.central_meridian} +k_0={self.scale_factor} "
            f"+x_0={self.false_easting} +y_0={self.false_northing} "
            f"+a={PhysicalConstants.EVEREST_1930_SEMI_MAJOR_AXIS.value} "
            f"+rf={PhysicalConstants.EVEREST_1930_INVERSE_FLATTENING.value} "
            f"+towgs84={dx:g},{dy:g},{dz:g},0,0,0,0 +units=m +no_defs"
        )


_ZONE_0_FALSE_ORIGIN = (2_153_866.4, 2_368_292.9)
_FALSE_ORIGIN = (2_743_196.4, 914_398.8)
_K0_ZONE_0 = 0.9984615
_K0 = 0.9987864

INDIAN_GRID_ZONES: Mapping[IndianGridZone, IndianGridZoneParameters] = MappingProxyType({
    IndianGridZone.ZONE_0: IndianGridZoneParameters(68.0, 39.5, *_ZONE_0_FALSE_ORIGIN, _K0_ZONE_0),
    IndianGridZone.IA: IndianGridZoneParameters(68.0, 32.5, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IB: IndianGridZoneParameters(90.0, 32.5, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IIA: IndianGridZoneParameters(74.0, 26.0, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IIB: IndianGridZoneParameters(90.0, 26.0, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IIIA: IndianGridZoneParameters(80.0, 19.0, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IIIB: IndianGridZoneParameters(100.0, 19.0, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IVA: IndianGridZoneParameters(80.0, 12.0, *_FALSE_ORIGIN, _K0),
    IndianGridZone.IVB: IndianGridZoneParameters(104.0, 12.0, *_FALSE_ORIGIN, _K0),
})


def indian_grid_zone_parameters(zone) -> IndianGridZoneParameters:
    """Look up the constants of a zone given as enum member or name."""
    return INDIAN_GRID_ZONES[IndianGridZone.parse(zone)]
