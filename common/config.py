"""
Core configuration.

Central configuration object for the tunable parameters of the navigation
and ephemeris engines. Defaults reproduce the reference behaviour; a host
application may override them from its persisted settings.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping
import logging

from common.constants import PhysicalConstants
from common.exceptions import InvalidInputError
from common.logging_config import configure_logging


@dataclass(frozen=True)
class NavigationConfig:
    """Spherical-earth measurement configuration.

    Attributes:
        earth_radius_m: Radius of the navigation sphere [m].
    """
    earth_radius_m: float = PhysicalConstants.EARTH_MEAN_RADIUS.value


@dataclass(frozen=True)
class EphemerisConfig:
    """Sun and moon computation configuration.

    Attributes:
        moon_horizon_dip_deg: Altitude subtracted from the moon's apparent
            altitude when searching for rise and set [deg].
        moon_search_hours: Number of hourly samples after midnight scanned
            by the moon rise/set search. Must be even.
        apply_moon_refraction: Apply the refraction correction to the
            moon's altitude when it is above the horizon.
        observer_height_m: Default observer height for sun times [m].
    """
    moon_horizon_dip_deg: float = PhysicalConstants.MOON_HORIZON_DIP.value
    moon_search_hours: int = 24
    apply_moon_refraction: bool = True
    observer_height_m: float = 0.0


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: int = logging.WARNING


@dataclass(frozen=True)
class CoreConfig:
    """Top-level configuration."""
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    ephemeris: EphemerisConfig = field(default_factory=EphemerisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        if self.navigation.earth_radius_m <= 0:
            raise InvalidInputError("earth_radius_m must be positive")
        if self.ephemeris.moon_search_hours <= 0 or self.ephemeris.moon_search_hours % 2:
            raise InvalidInputError("moon_search_hours must be a positive even number")
        if self.ephemeris.observer_height_m < 0:
            raise InvalidInputError("observer_height_m must not be negative")

    def describe(self) -> str:
        """Human-readable description of the active configuration."""
        parts = [
            f"R={self.navigation.earth_radius_m:.0f} m",
            f"moon dip={self.ephemeris.moon_horizon_dip_deg}°",
            f"moon scan={self.ephemeris.moon_search_hours} h",
            "refraction on" if self.ephemeris.apply_moon_refraction else "refraction off",
            f"observer h={self.ephemeris.observer_height_m} m",
            f"log={logging.getLevelName(self.logging.level)}",
        ]
        return ", ".join(parts)

    def apply_logging(self) -> None:
        """Set the level of the core's loggers from ``self.logging``."""
        configure_logging(self.logging.level)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Mapping[str, Any]]) -> 'CoreConfig':
        """Build a configuration from nested plain settings.

        Unknown sections or keys are rejected so that typos do not silently
        fall back to defaults.

        Examples
        --------
        >>> CoreConfig.from_mapping({"ephemeris": {"observer_height_m": 30}})
        """
        sections = {"navigation": NavigationConfig, "ephemeris": EphemerisConfig,
                    "logging": LoggingConfig}
        kwargs = {}
        for section, values in settings.items():
            if section not in sections:
                raise InvalidInputError(f"Unknown configuration section {section!r}")
            section_cls = sections[section]
            known = {f.name for f in fields(section_cls)}
            unknown = set(values) - known
            if unknown:
                raise InvalidInputError(
                    f"Unknown keys in {section!r}: {', '.join(sorted(unknown))}"
                )
            kwargs[section] = section_cls(**values)
        return cls(**kwargs)


DEFAULT_CONFIG = CoreConfig()
