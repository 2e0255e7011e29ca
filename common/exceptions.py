"""
Error Taxonomy for the Navigation Core.

Only genuinely invalid input and unrepresentable projection results are
errors. Astronomical non-events (a twilight band that is never reached, a
moon that stays above the horizon all day) are ordinary results and are
modelled as absent fields, never as exceptions.
"""


class NavCoreError(Exception):
    """Base class for every error raised by the core."""


class InvalidInputError(NavCoreError, ValueError):
    """Non-finite or out-of-range input, rejected before any computation."""


class ProjectionError(NavCoreError, ArithmeticError):
    """A geodetic transform could not produce a finite result.

    Callers must treat this as "coordinates unavailable", never as a
    coordinate of zero.
    """


class ValidationError(NavCoreError):
    """A consistency check failed while running in strict mode."""
