"""Tests for Julian dates and day boundaries."""

from datetime import datetime, timedelta, timezone

import pytest

from common.exceptions import InvalidInputError
from ephemeris.time_scales import (
    as_utc,
    from_julian_date,
    julian_date,
    local_midnight,
    to_days,
)

IST = timezone(timedelta(hours=5, minutes=30))


def test_j2000_epoch(utc):
    assert julian_date(utc(2000, 1, 1, 12)) == 2451545.0
    assert to_days(utc(2000, 1, 1, 12)) == 0.0


def test_unix_epoch(utc):
    assert julian_date(utc(1970, 1, 1)) == 2440587.5


def test_naive_is_utc(utc):
    assert julian_date(datetime(2024, 3, 20, 3, 6)) == julian_date(utc(2024, 3, 20, 3, 6))


def test_aware_instants_are_absolute(utc):
    assert julian_date(datetime(2024, 3, 20, 8, 36, tzinfo=IST)) == julian_date(utc(2024, 3, 20, 3, 6))


def test_from_julian_date_round_trip(utc):
    instant = utc(2024, 6, 21, 6, 49, 30)
    back = from_julian_date(julian_date(instant))
    assert back.tzinfo is timezone.utc
    assert abs((back - instant).total_seconds()) < 1e-3


def test_from_julian_date_rejects_nan():
    with pytest.raises(InvalidInputError):
        from_julian_date(float("nan"))


@pytest.mark.parametrize("value", ["2024-01-01", 1704067200, None])
def test_non_datetime_rejected(value):
    with pytest.raises(InvalidInputError):
        julian_date(value)
    with pytest.raises(InvalidInputError):
        local_midnight(value)


def test_as_utc(utc):
    assert as_utc(datetime(2024, 1, 1, 5, 30, tzinfo=IST)) == utc(2024, 1, 1)


def test_local_midnight_uses_own_timezone(utc):
    assert local_midnight(datetime(2024, 6, 21, 10, 0, tzinfo=IST)) == utc(2024, 6, 20, 18, 30)
    assert local_midnight(datetime(2024, 6, 21, 23, 59)) == utc(2024, 6, 21)
