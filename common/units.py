"""
Unit Handling for Distances, Areas and Angles.

Navigation functions take plain numbers in their documented unit (metres,
square metres, degrees). They also accept `pint` quantities so that a
caller can pass ``Q_(3, 'km')`` or ``Q_(1, 'nautical_mile')`` directly; a
quantity of the wrong dimension is rejected instead of being read as
metres.

Example Usage
-------------
>>> from common.units import Q_, magnitude_in
>>> magnitude_in(Q_(1.5, 'km'), 'm')
1500.0
>>> magnitude_in(250.0, 'm')
250.0
"""

from functools import wraps
from typing import Callable, Dict, Union
import inspect

import pint

ureg = pint.UnitRegistry()
Q_ = ureg.Quantity

Scalar = Union[float, int, pint.Quantity]


def _check_dimension(label: str, value, unit: str) -> None:
    if isinstance(value, pint.Quantity) and not value.check(ureg.Unit(unit).dimensionality):
        raise ValueError(f"{label} must be convertible to {unit}, got {value.units}")


def validate_units(expected_units: Dict[str, str]):
    """Decorator rejecting quantity arguments of the wrong dimension.

    Bare numbers pass through untouched. The key ``'return'`` checks the
    return value the same way.

    Examples
    --------
    >>> @validate_units({'distance_m': 'm'})
    ... def halve(distance_m):
    ...     return distance_m / 2
    """
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            arguments = signature.bind(*args, **kwargs).arguments
            for name, unit in expected_units.items():
                if name != 'return':
                    _check_dimension(f"Parameter '{name}'", arguments.get(name), unit)

            result = func(*args, **kwargs)
            if 'return' in expected_units:
                _check_dimension("Return value", result, expected_units['return'])
            return result
        return wrapper
    return decorator


def magnitude_in(value: Scalar, unit: str) -> float:
    """Magnitude of ``value`` in ``unit``; bare numbers are already in ``unit``.

    Raises
    ------
    ValueError
        If ``value`` is a quantity of a different dimension.
    """
    if isinstance(value, pint.Quantity):
        _check_dimension("Value", value, unit)
        return float(value.to(unit).magnitude)
    return float(value)
