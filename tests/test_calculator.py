"""Tests for the solar color temperature curve."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from custom_components.solar_adaptive_lighting.calculator import (
    CurveEngine,
    sample_day,
    smooth_transition,
    target_temperature,
)

MIN_MIREDS = 153.0
MAX_MIREDS = 500.0

DAY = datetime(2024, 6, 21, tzinfo=timezone.utc)
SUNRISE = DAY.replace(hour=6)
SUNSET = DAY.replace(hour=18)
NOON = DAY.replace(hour=12)


def _at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


class TestSmoothTransition:
    """Test the sigmoid calibration."""

    def test_noon_maps_to_minimum(self):
        """Test the folded noon position lands on the minimum within 1e-5 of the range."""
        value = smooth_transition(0.5, 0.0, 1.0)
        assert value == pytest.approx(0.0, abs=1e-5)

    def test_edges_map_close_to_maximum(self):
        """Test both window edges land on the maximum within 1e-3 of the range."""
        assert smooth_transition(0.0, 0.0, 1.0) == pytest.approx(1.0, abs=1e-3)
        assert smooth_transition(1.0, 0.0, 1.0) == pytest.approx(1.0, abs=1e-3)

    def test_never_overshoots(self):
        """Test the curve stays inside the output range."""
        for step in range(101):
            value = smooth_transition(step / 100, 10.0, 20.0)
            assert 10.0 <= value <= 20.0


class TestTargetTemperature:
    """Test target_temperature."""

    def test_solar_noon(self):
        """Test the coolest color is used at solar noon."""
        assert target_temperature(NOON, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS) == 153.0

    def test_at_sunrise_and_sunset(self):
        """Test the edges of the window are within 0.1% of the warmest color."""
        tolerance = (MAX_MIREDS - MIN_MIREDS) * 0.001
        at_sunrise = target_temperature(SUNRISE, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
        at_sunset = target_temperature(SUNSET, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)

        assert at_sunrise == pytest.approx(MAX_MIREDS, abs=tolerance)
        assert at_sunset == pytest.approx(MAX_MIREDS, abs=tolerance)
        assert at_sunrise == 499.7

    @pytest.mark.parametrize("moment", [_at(0), _at(5, 59), _at(18, 1), _at(23)])
    def test_night_is_warmest_exactly(self, moment):
        """Test times outside of the window return the maximum unchanged."""
        assert target_temperature(moment, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS) == MAX_MIREDS

    def test_morning_value(self):
        """Test a point a quarter into the day."""
        value = target_temperature(_at(9), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
        assert value == pytest.approx(184.5, abs=0.05)

    def test_rounded_to_one_decimal(self):
        """Test results carry at most one decimal place."""
        for minute in range(0, 12 * 60, 17):
            value = target_temperature(
                SUNRISE + timedelta(minutes=minute), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS
            )
            assert round(value, 1) == value

    def test_within_bounds_during_the_day(self):
        """Test every value strictly inside the window is within the range."""
        for minute in range(1, 12 * 60):
            value = target_temperature(
                SUNRISE + timedelta(minutes=minute), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS
            )
            assert MIN_MIREDS <= value <= MAX_MIREDS

    def test_symmetric_around_noon(self):
        """Test equal distances before and after noon give equal values."""
        for minutes in (15, 90, 200, 359):
            offset = timedelta(minutes=minutes)
            before = target_temperature(NOON - offset, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
            after = target_temperature(NOON + offset, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
            assert before == after

    def test_monotonic_away_from_noon(self):
        """Test the value never decreases while moving from noon towards an edge."""
        previous = target_temperature(NOON, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
        for minute in range(1, 6 * 60 + 1):
            value = target_temperature(
                NOON + timedelta(minutes=minute), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS
            )
            assert value >= previous
            previous = value

        previous = target_temperature(NOON, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)
        for minute in range(1, 6 * 60 + 1):
            value = target_temperature(
                NOON - timedelta(minutes=minute), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS
            )
            assert value >= previous
            previous = value

    def test_speed_shapes_curve(self):
        """Test a higher speed reaches daylight colors sooner."""
        slow = target_temperature(_at(9), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS, speed=1.0)
        fast = target_temperature(_at(9), SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS, speed=2.0)

        assert fast < slow
        # Speed does not move the end points
        assert target_temperature(NOON, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS, speed=2.0) == 153.0

    def test_equal_bounds(self):
        """Test a degenerate range always yields that single value."""
        assert target_temperature(_at(10), SUNRISE, SUNSET, 300.0, 300.0) == 300.0


class TestSampleDay:
    """Test the hourly schedule."""

    def test_sample_day(self):
        """Test one entry per hour with night values outside the window."""
        table = sample_day(DAY, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS)

        assert [hour for hour, _ in table] == list(range(24))
        assert dict(table)[3] == MAX_MIREDS
        assert dict(table)[12] == 153.0
        assert dict(table)[23] == MAX_MIREDS

    @pytest.mark.parametrize("date", [(2024, 3, 31), (2024, 10, 27)])
    def test_sample_day_on_clock_change(self, date):
        """Test hours are wall-clock hours on days the clocks change."""
        london = ZoneInfo("Europe/London")
        day = datetime(*date, tzinfo=london)
        sunrise = day.replace(hour=6)
        sunset = day.replace(hour=18)

        table = dict(sample_day(day, sunrise, sunset, MIN_MIREDS, MAX_MIREDS))

        assert table[12] == 153.0
        assert table[9] == target_temperature(
            datetime(*date, 9, tzinfo=london), sunrise, sunset, MIN_MIREDS, MAX_MIREDS
        )
        assert table[5] == MAX_MIREDS
        assert table[19] == MAX_MIREDS


class TestCurveEngine:
    """Test the CurveEngine wrapper."""

    def test_uses_its_range(self):
        """Test the engine passes its range and speed to the curve."""
        engine = CurveEngine(MIN_MIREDS, MAX_MIREDS, speed=1.0)

        assert engine.target_temperature(NOON, SUNRISE, SUNSET) == 153.0
        assert engine.target_temperature(_at(23), SUNRISE, SUNSET) == MAX_MIREDS
        assert engine.sample_day(DAY, SUNRISE, SUNSET) == sample_day(
            DAY, SUNRISE, SUNSET, MIN_MIREDS, MAX_MIREDS
        )
