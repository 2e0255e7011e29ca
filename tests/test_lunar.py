"""Tests for the lunar position, illumination and rise/set times."""

from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from common.config import CoreConfig, EphemerisConfig
from common.exceptions import InvalidInputError
from ephemeris.lunar import (
    _crossings,
    moon_calendar,
    moon_illumination,
    moon_phase_name,
    moon_position,
    moon_times,
)

IST = timezone(timedelta(hours=5, minutes=30))


class TestIllumination:

    def test_new_moon(self, utc):
        illum = moon_illumination(utc(2024, 1, 11, 11, 57))
        assert illum.illuminated_fraction < 0.02
        assert min(illum.phase, 1 - illum.phase) < 0.02
        assert illum.phase_name == "New Moon"

    def test_full_moon(self, utc):
        illum = moon_illumination(utc(2024, 1, 25, 17, 54))
        assert illum.illuminated_fraction > 0.98
        assert illum.phase == pytest.approx(0.5, abs=0.02)
        assert illum.phase_name == "Full Moon"

    def test_first_quarter(self, utc):
        illum = moon_illumination(utc(2024, 1, 18, 3, 53))
        assert illum.illuminated_fraction == pytest.approx(0.5, abs=0.03)
        assert illum.phase == pytest.approx(0.25, abs=0.02)
        assert illum.phase_name == "First Quarter"

    def test_bounds_over_a_year(self, utc):
        start = utc(2024, 1, 1)
        for k in range(0, 366 * 4):
            illum = moon_illumination(start + timedelta(hours=6 * k))
            assert 0.0 <= illum.illuminated_fraction <= 1.0
            assert 0.0 <= illum.phase < 1.0

    def test_phase_increases_between_new_and_full(self, utc):
        phases = [moon_illumination(utc(2024, 1, 12) + timedelta(days=k)).phase for k in range(13)]
        assert np.all(np.diff(phases) > 0)


class TestPhaseNames:

    @pytest.mark.parametrize("phase, name", [
        (0.0, "New Moon"), (0.99, "New Moon"), (0.1, "Waxing Crescent"),
        (0.25, "First Quarter"), (0.4, "Waxing Gibbous"), (0.5, "Full Moon"),
        (0.6, "Waning Gibbous"), (0.75, "Last Quarter"), (0.9, "Waning Crescent"),
        (1.25, "First Quarter"),
    ])
    def test_names(self, phase, name):
        assert moon_phase_name(phase) == name

    def test_non_finite(self):
        with pytest.raises(InvalidInputError):
            moon_phase_name(float("nan"))


class TestMoonPosition:

    def test_distance_and_angles_in_range(self, utc):
        for k in range(60):
            position = moon_position(utc(2024, 3, 1) + timedelta(hours=13 * k), 28.6139, 77.2090)
            assert 356_000 < position.distance_km < 407_000
            assert -np.pi / 2 <= position.altitude <= np.pi / 2
            assert -np.pi <= position.parallactic_angle <= np.pi
            assert 0.0 <= position.bearing_degrees < 360.0

    def test_refraction_only_above_horizon(self, utc):
        raw = CoreConfig(ephemeris=EphemerisConfig(apply_moon_refraction=False))
        for hour in range(24):
            instant = utc(2024, 3, 1, hour)
            geometric = moon_position(instant, 45.0, 10.0, config=raw)
            apparent = moon_position(instant, 45.0, 10.0)
            if geometric.altitude > 0:
                assert apparent.altitude > geometric.altitude
            else:
                assert apparent.altitude == geometric.altitude
            assert apparent.azimuth == geometric.azimuth

    def test_invalid_latitude(self, utc):
        with pytest.raises(InvalidInputError):
            moon_position(utc(2024, 3, 1), 100.0, 0.0)


class TestCrossings:

    def test_linear_rise(self):
        assert _crossings(-1.0, 0.0, 1.0) == [(0.0, True)]

    def test_peak_gives_rise_then_set(self):
        (x1, rising1), (x2, rising2) = _crossings(-1.0, 1.0, -1.0)
        assert x1 == pytest.approx(-np.sqrt(0.5))
        assert x2 == pytest.approx(np.sqrt(0.5))
        assert rising1 and not rising2

    def test_no_crossing(self):
        assert _crossings(1.0, 2.0, 1.5) == []

    def test_crossing_outside_interval_is_ignored(self):
        # the parabola through these points crosses zero beyond x = 1
        assert _crossings(3.0, 2.0, 1.0) == []


class TestMoonTimes:

    def test_mid_latitude_month(self, utc):
        days_with_rise = 0
        for k in range(30):
            start = utc(2024, 1, 1) + timedelta(days=k)
            times = moon_times(start, 45.0, 10.0)
            assert not times.always_up and not times.always_down
            for event in (times.rise, times.set):
                if event is not None:
                    assert event.utcoffset() == timedelta(0)
                    assert start <= event < start + timedelta(hours=24)
            days_with_rise += times.rise is not None
        assert days_with_rise >= 25

    def test_moon_is_on_horizon_at_rise(self, utc):
        times = moon_times(utc(2024, 1, 20), 45.0, 10.0)
        assert times.rise is not None
        assert abs(moon_position(times.rise, 45.0, 10.0).altitude_degrees) < 1.0

    def test_arctic_summer_has_always_up_or_down_days(self, utc):
        flagged = 0
        for k in range(30):
            times = moon_times(utc(2024, 6, 1) + timedelta(days=k), 80.0, 0.0)
            if times.always_up or times.always_down:
                flagged += 1
                assert times.rise is None and times.set is None
                assert times.always_up != times.always_down
        assert flagged >= 1

    def test_day_starts_at_local_midnight(self):
        instant = datetime(2024, 6, 21, 10, 0, tzinfo=IST)
        start = datetime(2024, 6, 20, 18, 30, tzinfo=timezone.utc)
        times = moon_times(instant, 28.6139, 77.2090)
        for event in (times.rise, times.set):
            if event is not None:
                assert start <= event < start + timedelta(hours=24)
        assert times == moon_times(datetime(2024, 6, 21, 23, 0, tzinfo=IST), 28.6139, 77.2090)

    def test_naive_instant_is_utc(self, utc):
        assert moon_times(datetime(2024, 2, 3, 15), 45.0, 10.0) == moon_times(utc(2024, 2, 3), 45.0, 10.0)

    def test_invalid_input(self, utc):
        with pytest.raises(InvalidInputError):
            moon_times(utc(2024, 2, 3), float("nan"), 10.0)
        with pytest.raises(InvalidInputError):
            moon_times("2024-02-03", 45.0, 10.0)


class TestMoonCalendar:

    def test_february_2024(self):
        calendar = moon_calendar(2024, 2)
        assert len(calendar) == 29
        assert calendar[0][0] == date(2024, 2, 1)

        fractions = [illum.illuminated_fraction for _, illum in calendar]
        # new moon 2024-02-09 22:59 UTC, full moon 2024-02-24 12:30 UTC
        assert calendar[int(np.argmin(fractions))][0] in (date(2024, 2, 9), date(2024, 2, 10))
        assert calendar[int(np.argmax(fractions))][0] == date(2024, 2, 24)

    def test_local_noon(self, utc):
        calendar = moon_calendar(2024, 3, tz=IST)
        assert calendar[0][1] == moon_illumination(utc(2024, 3, 1, 6, 30))

    def test_invalid_month(self):
        with pytest.raises(InvalidInputError):
            moon_calendar(2024, 13)
