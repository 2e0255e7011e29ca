"""
Validation Framework for the navigation core.

Self-consistency checks of the projection, navigation and ephemeris engines.
"""

from validation.consistency_checks import (
    ValidationResult,
    TransformConsistencyChecker,
    NavigationConsistencyChecker,
    EphemerisConsistencyChecker,
)

__all__ = [
    "ValidationResult",
    "TransformConsistencyChecker",
    "NavigationConsistencyChecker",
    "EphemerisConsistencyChecker",
]
