"""Shared fixtures for the navigation core tests."""

from datetime import datetime, timezone

import numpy as np
import pytest

from common.types import GeographicPoint


@pytest.fixture
def new_delhi():
    return GeographicPoint(latitude=28.6139, longitude=77.2090)


@pytest.fixture
def rng():
    return np.random.default_rng(20240321)


@pytest.fixture
def utc():
    def make(*args):
        return datetime(*args, tzinfo=timezone.utc)
    return make


@pytest.fixture
def angle_diff():
    """Smallest absolute difference between two angles in degrees."""
    def diff(a, b):
        return np.abs((np.asarray(a) - np.asarray(b) + 180.0) % 360.0 - 180.0)
    return diff
