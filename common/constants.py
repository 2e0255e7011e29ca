"""
Physical and Astronomical Constants for the Navigation Core.

This module provides the reference constants used by the geodetic transform
engine, the spherical navigation math and the ephemeris engine. Every constant
carries its unit and an authoritative source.

References
----------
- Everest 1930 ellipsoid and Indian datum shift: PROJ ``evrst30`` definition
- Low-precision solar/lunar series: V. Agafonkin, SunCalc (after
  Astronomy Answers, "Position of the Sun" and J. Meeus, Astronomical Algorithms)
"""

from dataclasses import dataclass
from typing import Final, Tuple
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A physical constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class PhysicalConstants:
    """Registry of constants used throughout the core.

    All constants are class attributes with full metadata including
    uncertainty bounds and authoritative sources.

    Earth Geometry
    --------------
    WGS84 is the interchange datum for every ``GeographicPoint``. The
    Everest 1930 ellipsoid is only used inside the Indian Grid transform.

    Astronomy
    ---------
    Epochs, day counts and mean distances for the low-order sun and moon
    series.
    """

    # =========================================================================
    # Spherical Earth
    # Reference: conventional navigation sphere
    # =========================================================================

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_000.0,
        uncertainty=10.0,
        unit="m",
        source="Conventional spherical-earth radius",
        description="Radius of the sphere used for all navigation measurements"
    )

    # =========================================================================
    # Everest 1930 Ellipsoid and Indian Datum
    # Reference: PROJ ellipsoid table (evrst30)
    # =========================================================================

    EVEREST_1930_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_377_276.345,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="PROJ evrst30",
        description="Semi-major axis of the Everest (1830, 1937 adjustment) ellipsoid"
    )

    EVEREST_1930_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=300.8017,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="PROJ evrst30",
        description="Inverse flattening of the Everest 1930 ellipsoid"
    )

    EVEREST_TO_WGS84_TRANSLATION: Final[Tuple[float, float, float]] = (295.0, 736.0, 254.0)
    """Geocentric translation (dX, dY, dZ) in metres from Everest 1930 to WGS84."""

    # =========================================================================
    # Time
    # =========================================================================

    SECONDS_PER_DAY: Final[Constant] = Constant(
        value=86_400.0,
        uncertainty=0.0,
        unit="s",
        source="SI",
        description="Length of the civil day"
    )

    JULIAN_DAY_UNIX_EPOCH: Final[Constant] = Constant(
        value=2_440_588.0,
        uncertainty=0.0,
        unit="d",
        source="Julian day of 1970-01-01T12:00Z",
        description="Julian day number at the Unix epoch (noon convention)"
    )

    JULIAN_DAY_J2000: Final[Constant] = Constant(
        value=2_451_545.0,
        uncertainty=0.0,
        unit="d",
        source="IAU",
        description="Julian day of the J2000.0 epoch"
    )

    # =========================================================================
    # Astronomy
    # =========================================================================

    OBLIQUITY_OF_ECLIPTIC: Final[Constant] = Constant(
        value=23.4397,
        uncertainty=0.0001,
        unit="deg",
        source="Mean obliquity at J2000",
        description="Obliquity of the Earth's axis used by the low-order series"
    )

    SUN_DISTANCE: Final[Constant] = Constant(
        value=149_598_000.0,
        uncertainty=2.5e6,  # orbital eccentricity
        unit="km",
        source="Mean Earth-Sun distance",
        description="Distance to the sun used for the moon phase angle"
    )

    MOON_HORIZON_DIP: Final[Constant] = Constant(
        value=0.133,
        uncertainty=0.01,
        unit="deg",
        source="SunCalc",
        description="Altitude correction applied when searching for moon rise/set"
    )

    @staticmethod
    def observer_horizon_dip(height_m: float) -> float:
        """Dip of the visible horizon for an elevated observer.

        Parameters
        ----------
        height_m : float
            Observer height above the surrounding terrain in metres.

        Returns
        -------
        float
            Horizon depression in degrees (negative for ``height_m > 0``).
        """
        return -2.076 * np.sqrt(height_m) / 60.0


SUN_ALTITUDE_THRESHOLDS: Final[Tuple[Tuple[float, str, str], ...]] = (
    (-0.833, "sunrise", "sunset"),
    (-0.3, "sunrise_end", "sunset_start"),
    (-6.0, "dawn", "dusk"),
    (-12.0, "nautical_dawn", "nautical_dusk"),
    (-18.0, "night_end", "night"),
    (6.0, "golden_hour_end", "golden_hour"),
)
"""Sun altitude (degrees) with the morning and evening event names it defines."""
