"""Solar color temperature curve for adaptive lighting."""
from __future__ import annotations

import math
from datetime import datetime

# Sigmoid output at the start and end of the folded day position. These shape
# the transition curve and its speed.
_Y1 = 0.00001
_Y2 = 0.999

_SIGMOID_A = math.atanh(2 * _Y2 - 1) - math.atanh(2 * _Y1 - 1)
_SIGMOID_B = -math.atanh(2 * _Y1 - 1) / _SIGMOID_A


def smooth_transition(x: float, y_min: float, y_max: float, speed: float = 1.0) -> float:
    """
    Map a day position onto the color temperature range.

    Args:
        x: Position between sunrise (0.0) and sunset (1.0)
        y_min: Value at solar noon
        y_max: Value approached at sunrise and sunset
        speed: Exponent applied to the folded position

    Returns:
        Unrounded value between y_min and y_max
    """
    x_adj = abs(1 - x * 2) ** speed
    return y_min + (y_max - y_min) * 0.5 * (math.tanh(_SIGMOID_A * (x_adj - _SIGMOID_B)) + 1)


def target_temperature(
    now: datetime,
    sunrise: datetime,
    sunset: datetime,
    min_temp: float,
    max_temp: float,
    speed: float = 1.0,
) -> float:
    """
    Get the target color temperature in mireds for a moment of the day.

    Outside of the sunrise to sunset window the warmest value is returned.
    Inside it the value follows a tanh curve that is coolest at solar noon,
    rounded to one decimal place.
    """
    if now < sunrise or now > sunset:
        return max_temp

    position = (now - sunrise).total_seconds() / (sunset - sunrise).total_seconds()
    mireds = smooth_transition(position, min_temp, max_temp, speed)
    return round(mireds, 1)


def sample_day(
    day_start: datetime,
    sunrise: datetime,
    sunset: datetime,
    min_temp: float,
    max_temp: float,
    speed: float = 1.0,
) -> list[tuple[int, float]]:
    """Get the target color temperature at every full hour of a day."""
    return [
        (
            hour,
            target_temperature(
                day_start.replace(hour=hour), sunrise, sunset, min_temp, max_temp, speed
            ),
        )
        for hour in range(24)
    ]


class CurveEngine:
    """Calculates color temperature for a fixed mireds range and curve speed."""

    def __init__(self, min_mireds: float, max_mireds: float, speed: float = 1.0) -> None:
        """Initialize the curve with its color temperature range."""
        self.min_mireds = min_mireds
        self.max_mireds = max_mireds
        self.speed = speed

    def target_temperature(self, now: datetime, sunrise: datetime, sunset: datetime) -> float:
        """Get the target color temperature in mireds."""
        return target_temperature(
            now, sunrise, sunset, self.min_mireds, self.max_mireds, self.speed
        )

    def sample_day(
        self, day_start: datetime, sunrise: datetime, sunset: datetime
    ) -> list[tuple[int, float]]:
        """Get the hourly color temperature table for a day."""
        return sample_day(
            day_start, sunrise, sunset, self.min_mireds, self.max_mireds, self.speed
        )
