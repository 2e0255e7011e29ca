"""
Consistency Checks for the navigation core.

These checks verify that the engines' outputs obey the laws they are built
on: projections invert each other, great-circle measurements agree with one
another, and the ephemeris stays within physical bounds. They are used by the
test-suite and can be run by a host application as a self-test.

Check Categories
----------------
1. Round trips (forward then inverse projection returns the input)
2. Symmetry and consistency (distance, bearing, destination)
3. Physical bounds and trends (illumination, daylight length)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

import numpy as np

from common.config import CoreConfig, DEFAULT_CONFIG
from common.exceptions import InvalidInputError, ValidationError
from common.logging_config import get_logger
from common.types import GeographicPoint, IndianGridZone
from ephemeris import moon_illumination, sun_times
from geospatial.distance_calculations import destination_point, distance, initial_bearing
from geospatial.projections import from_indian_grid, from_utm, to_indian_grid, to_utm
from geospatial.zones import indian_grid_zone_parameters

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of the result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


def _angle_difference_deg(a, b):
    return np.abs((np.asarray(a) - np.asarray(b) + 180.0) % 360.0 - 180.0)


class _ConsistencyChecker:
    """Shared reporting for the checkers.

    Parameters
    ----------
    strict_mode : bool
        If True, raise ``ValidationError`` on a failed check.
    log_violations : bool
        Whether to log failed checks.
    seed : int
        Seed of the random sample generator.
    config : CoreConfig
        Configuration of the engines under test.
    """

    def __init__(self, strict_mode: bool = False, log_violations: bool = True, seed: int = 0,
                 config: CoreConfig = DEFAULT_CONFIG):
        self.config = config
        self.strict_mode = strict_mode
        self.log_violations = log_violations
        self._rng = np.random.default_rng(seed)
        self._logger = logger

    def _report(self, result: ValidationResult) -> ValidationResult:
        if result.passed:
            self._logger.info(f"{result.test_name}: {result.message}")
            return result
        if self.log_violations:
            self._logger.warning(f"{result.test_name} FAILED: {result.message}")
        if self.strict_mode:
            raise ValidationError(f"{result.test_name}: {result.message}")
        return result

    def _random_points(self, n: int, lat_range, lon_range) -> List[GeographicPoint]:
        lats = self._rng.uniform(*lat_range, size=n)
        lons = self._rng.uniform(*lon_range, size=n)
        return [GeographicPoint(float(lat), float(lon)) for lat, lon in zip(lats, lons)]


class TransformConsistencyChecker(_ConsistencyChecker):
    """Round-trip checks for the UTM and Indian Grid transforms."""

    def check_all(self, n_samples: int = 1000) -> List[ValidationResult]:
        results = [self.check_utm_round_trip(n_samples)]
        for zone in IndianGridZone:
            results.append(self.check_indian_grid_round_trip(zone, n_samples))
        return results

    def check_utm_round_trip(
        self,
        n_samples: int = 1000,
        tolerance_deg: float = 1e-7,
        tolerance_m: float = 1e-3
    ) -> ValidationResult:
        """``from_utm(to_utm(p))`` returns ``p`` over the UTM domain (80S..84N)."""
        points = self._random_points(n_samples, (-80.0, 84.0), (-180.0, 180.0))
        return self._report(self._round_trip("utm_round_trip", points, to_utm, from_utm,
                                             tolerance_deg, tolerance_m))

    def check_indian_grid_round_trip(
        self,
        zone: Union[IndianGridZone, str],
        n_samples: int = 1000,
        tolerance_deg: float = 1e-7,
        tolerance_m: float = 1e-3
    ) -> ValidationResult:
        """Indian Grid round trip over a 12 x 16 degree box around the zone origin."""
        zone = IndianGridZone.parse(zone)
        params = indian_grid_zone_parameters(zone)
        points = self._random_points(
            n_samples,
            (params.origin_latitude - 6.0, params.origin_latitude + 6.0),
            (params.central_meridian - 8.0, params.central_meridian + 8.0),
        )
        return self._report(self._round_trip(
            f"indian_grid_{zone.value}_round_trip", points,
            lambda p: to_indian_grid(p, zone), from_indian_grid,
            tolerance_deg, tolerance_m,
        ))

    @staticmethod
    def _round_trip(name, points, forward, inverse, tolerance_deg, tolerance_m) -> ValidationResult:
        angle_errors = []
        grid_errors = []
        for point in points:
            grid = forward(point)
            back = inverse(grid)
            regrid = forward(back)
            angle_errors.append(max(abs(back.latitude - point.latitude),
                                    float(_angle_difference_deg(back.longitude, point.longitude))))
            grid_errors.append(max(abs(regrid.easting - grid.easting),
                                   abs(regrid.northing - grid.northing)))

        max_angle = float(np.max(angle_errors)) if angle_errors else 0.0
        max_grid = float(np.max(grid_errors)) if grid_errors else 0.0
        passed = max_angle <= tolerance_deg and max_grid <= tolerance_m
        return ValidationResult(
            test_name=name,
            passed=passed,
            message=f"max error {max_angle:.2e} deg / {max_grid:.2e} m over {len(points)} points",
            details={
                'max_error_deg': max_angle,
                'max_error_m': max_grid,
                'num_points': len(points),
                'tolerance': (tolerance_deg, tolerance_m),
            }
        )


class NavigationConsistencyChecker(_ConsistencyChecker):
    """Checks of the spherical navigation functions against each other."""

    def check_all(self, n_samples: int = 1000) -> List[ValidationResult]:
        return [
            self.check_distance_symmetry(n_samples),
            self.check_bearing_destination(n_samples),
        ]

    def check_distance_symmetry(self, n_samples: int = 1000) -> ValidationResult:
        """``distance(a, b) == distance(b, a)`` and ``distance(a, a) == 0``."""
        a = self._random_points(n_samples, (-90.0, 90.0), (-180.0, 180.0))
        b = self._random_points(n_samples, (-90.0, 90.0), (-180.0, 180.0))

        radius = self.config.navigation.earth_radius_m
        asymmetry = [abs(distance(p, q, radius) - distance(q, p, radius)) for p, q in zip(a, b)]
        self_distance = [distance(p, p, radius) for p in a]
        max_asymmetry = float(np.max(asymmetry)) if asymmetry else 0.0
        max_self = float(np.max(self_distance)) if self_distance else 0.0

        return self._report(ValidationResult(
            test_name="distance_symmetry",
            passed=max_asymmetry == 0.0 and max_self == 0.0,
            message=f"max asymmetry {max_asymmetry:.2e} m, max self-distance {max_self:.2e} m",
            details={'max_asymmetry_m': max_asymmetry, 'max_self_distance_m': max_self},
        ))

    def check_bearing_destination(
        self,
        n_samples: int = 1000,
        bearing_tolerance_deg: float = 0.01,
        distance_rel_tolerance: float = 1e-3
    ) -> ValidationResult:
        """A destination point reproduces its bearing and distance."""
        origins = self._random_points(n_samples, (-85.0, 85.0), (-180.0, 180.0))
        bearings = self._rng.uniform(0.0, 360.0, size=n_samples)
        distances = self._rng.uniform(1.0, 1e6, size=n_samples)
        radius = self.config.navigation.earth_radius_m

        bearing_errors = []
        distance_errors = []
        for origin, bearing, dist in zip(origins, bearings, distances):
            target = destination_point(origin, float(bearing), float(dist), radius)
            bearing_errors.append(float(_angle_difference_deg(initial_bearing(origin, target), bearing)))
            distance_errors.append(abs(distance(origin, target, radius) - dist) / dist)

        max_bearing = float(np.max(bearing_errors)) if bearing_errors else 0.0
        max_distance = float(np.max(distance_errors)) if distance_errors else 0.0
        return self._report(ValidationResult(
            test_name="bearing_destination",
            passed=max_bearing <= bearing_tolerance_deg and max_distance <= distance_rel_tolerance,
            message=f"max bearing error {max_bearing:.2e} deg, max distance error {max_distance:.2e}",
            details={'max_bearing_error_deg': max_bearing, 'max_distance_rel_error': max_distance},
        ))


class EphemerisConsistencyChecker(_ConsistencyChecker):
    """Physical bounds and trends of the ephemeris."""

    def check_illumination_bounds(
        self,
        start: Optional[datetime] = None,
        days: int = 60,
        step_hours: float = 6.0
    ) -> ValidationResult:
        """Illuminated fraction in [0, 1] and phase in [0, 1) over a period."""
        start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        steps = int(days * 24 / step_hours)
        values = [moon_illumination(start + timedelta(hours=k * step_hours)) for k in range(steps)]
        fractions = np.array([v.illuminated_fraction for v in values])
        phases = np.array([v.phase for v in values])

        violations = int(np.sum((fractions < 0) | (fractions > 1) | (phases < 0) | (phases >= 1)))
        return self._report(ValidationResult(
            test_name="illumination_bounds",
            passed=violations == 0,
            message=f"Illumination bounds check: {violations} violations",
            details={
                'fraction_range': (float(fractions.min()), float(fractions.max())),
                'phase_range': (float(phases.min()), float(phases.max())),
                'num_samples': steps,
            }
        ))

    def check_daylight_monotonic(
        self,
        latitude: float,
        longitude: float,
        start: datetime,
        days: int = 30,
        increasing: bool = True
    ) -> ValidationResult:
        """Daylight length changes monotonically over consecutive days."""
        if days < 2:
            raise InvalidInputError(f"Need at least two days, got {days}")
        durations = []
        for k in range(days):
            times = sun_times(start + timedelta(days=k), latitude, longitude, config=self.config)
            duration = times.daylight_duration
            if duration is None:
                return self._report(ValidationResult(
                    test_name="daylight_monotonic",
                    passed=False,
                    message=f"No sunrise/sunset on day {k}",
                    details={'day': k},
                ))
            durations.append(duration.total_seconds())

        steps = np.diff(durations)
        ok = np.all(steps > 0) if increasing else np.all(steps < 0)
        return self._report(ValidationResult(
            test_name="daylight_monotonic",
            passed=bool(ok),
            message=f"Daylight from {durations[0] / 3600:.2f} h to {durations[-1] / 3600:.2f} h",
            details={'daily_change_s': (float(steps.min()), float(steps.max())) if len(steps) else ()},
        ))
