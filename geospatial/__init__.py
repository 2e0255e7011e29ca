"""
Geospatial Module of the navigation core.

All Earth-surface calculations of the core originate from this module:
- Zone tables for both grids (Indian Grid on Everest 1930 with its WGS84 shift)
- UTM and Indian Grid projections (``to_utm``, ``to_indian_grid`` and inverses)
- Spherical navigation math (distance, bearing, destination)
- Grid line generation for map overlays
"""

from geospatial.zones import (
    UTMZone,
    INDIAN_GRID_ZONES,
    utm_zone_for_longitude,
    indian_grid_zone_parameters,
)

from geospatial.projections import (
    TransverseMercator,
    LambertConformalConic,
    to_utm,
    from_utm,
    to_indian_grid,
    from_indian_grid,
)

from geospatial.distance_calculations import (
    EARTH_RADIUS_M,
    distance,
    distance_batch,
    path_length,
    initial_bearing,
    destination_point,
    heading_change,
    is_on_bearing,
    polygon_area,
    format_distance,
    format_area,
    format_bearing,
)

from geospatial.grid_lines import (
    GridLabel,
    GridOverlay,
    grid_step_for_zoom,
    utm_grid_lines,
    indian_grid_lines,
)

__all__ = [
    # Zones
    "UTMZone",
    "INDIAN_GRID_ZONES",
    "utm_zone_for_longitude",
    "indian_grid_zone_parameters",
    # Projections
    "TransverseMercator",
    "LambertConformalConic",
    "to_utm",
    "from_utm",
    "to_indian_grid",
    "from_indian_grid",
    # Navigation math
    "EARTH_RADIUS_M",
    "distance",
    "distance_batch",
    "path_length",
    "initial_bearing",
    "destination_point",
    "heading_change",
    "is_on_bearing",
    "polygon_area",
    "format_distance",
    "format_area",
    "format_bearing",
    # Grid overlays
    "GridLabel",
    "GridOverlay",
    "grid_step_for_zoom",
    "utm_grid_lines",
    "indian_grid_lines",
]
