"""
Common utilities and infrastructure for the navigation core.

This package provides foundational components used across all engines:
- Physical and astronomical constants with provenance
- Unit registry (pint) for distances and areas
- Value types exchanged with callers
- Error taxonomy, configuration and logging
"""

from common.constants import PhysicalConstants
from common.units import ureg, Q_, validate_units, magnitude_in
from common.types import (
    GeographicPoint,
    Hemisphere,
    UTMCoordinate,
    IndianGridZone,
    IndianGridCoordinate,
    CelestialPosition,
    MoonPosition,
    MoonIllumination,
    SunTimes,
    MoonTimes,
)
from common.exceptions import (
    NavCoreError,
    InvalidInputError,
    ProjectionError,
    ValidationError,
)
from common.config import CoreConfig, DEFAULT_CONFIG
from common.logging_config import get_logger, configure_logging

__all__ = [
    "PhysicalConstants",
    "ureg",
    "Q_",
    "validate_units",
    "magnitude_in",
    "GeographicPoint",
    "Hemisphere",
    "UTMCoordinate",
    "IndianGridZone",
    "IndianGridCoordinate",
    "CelestialPosition",
    "MoonPosition",
    "MoonIllumination",
    "SunTimes",
    "MoonTimes",
    "NavCoreError",
    "InvalidInputError",
    "ProjectionError",
    "ValidationError",
    "CoreConfig",
    "DEFAULT_CONFIG",
    "get_logger",
    "configure_logging",
]
