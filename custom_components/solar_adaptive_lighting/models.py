"""Data models for the Solar Adaptive Lighting integration."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Protocol

from .const import (
    CONF_MAX_MIREDS,
    CONF_MIN_MIREDS,
    CONF_RESTORE_MODE,
    CONF_SPEED,
    CONF_SUNRISE_ELEVATION,
    CONF_SUNSET_ELEVATION,
    CONF_TRANSITION,
    DEFAULT_ELEVATION,
    DEFAULT_RESTORE_MODE,
    DEFAULT_SPEED,
    DEFAULT_TRANSITION,
)


class RestoreMode(str, Enum):
    """Initial state policy of the enable switch after a restart."""

    RESTORE_DEFAULT_OFF = "restore_default_off"
    RESTORE_DEFAULT_ON = "restore_default_on"
    ALWAYS_OFF = "always_off"
    ALWAYS_ON = "always_on"


class EventType(Enum):
    """Kinds of notifications the controller reacts to."""

    VALUES_CHANGED = "values_changed"
    TARGET_REACHED = "target_reached"
    TICK = "tick"
    ENABLE_CHANGED = "enable_changed"


@dataclass(frozen=True)
class ControllerEvent:
    """A notification delivered to the controller."""

    type: EventType
    enabled: bool | None = None  # Only meaningful for ENABLE_CHANGED

    @classmethod
    def enable_changed(cls, enabled: bool) -> ControllerEvent:
        """Build an ENABLE_CHANGED event."""
        return cls(EventType.ENABLE_CHANGED, enabled)


@dataclass(frozen=True)
class ControllerConfig:
    """Configuration for one adaptive light controller."""

    min_mireds: float | None = None  # Coolest color, filled from the light when unset
    max_mireds: float | None = None  # Warmest color, filled from the light when unset
    sunrise_elevation: float = DEFAULT_ELEVATION  # Degrees
    sunset_elevation: float = DEFAULT_ELEVATION  # Degrees
    transition: float = DEFAULT_TRANSITION  # Seconds, 0 means instant
    speed: float = DEFAULT_SPEED
    restore_mode: RestoreMode = RestoreMode(DEFAULT_RESTORE_MODE)

    def __post_init__(self) -> None:
        if (
            self.min_mireds is not None
            and self.max_mireds is not None
            and self.min_mireds > self.max_mireds
        ):
            raise ValueError(
                f"min_mireds ({self.min_mireds}) must not exceed max_mireds ({self.max_mireds})"
            )
        if self.speed <= 0:
            raise ValueError(f"speed must be positive, got {self.speed}")
        if self.transition < 0:
            raise ValueError(f"transition must not be negative, got {self.transition}")

    @property
    def has_bounds(self) -> bool:
        """Return whether both color temperature bounds are known."""
        return self.min_mireds is not None and self.max_mireds is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            CONF_MIN_MIREDS: self.min_mireds,
            CONF_MAX_MIREDS: self.max_mireds,
            CONF_SUNRISE_ELEVATION: self.sunrise_elevation,
            CONF_SUNSET_ELEVATION: self.sunset_elevation,
            CONF_TRANSITION: self.transition,
            CONF_SPEED: self.speed,
            CONF_RESTORE_MODE: self.restore_mode.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ControllerConfig:
        """Create from dictionary."""
        transition = data.get(CONF_TRANSITION, DEFAULT_TRANSITION)
        if hasattr(transition, "total_seconds"):
            transition = transition.total_seconds()
        return cls(
            min_mireds=data.get(CONF_MIN_MIREDS),
            max_mireds=data.get(CONF_MAX_MIREDS),
            sunrise_elevation=data.get(CONF_SUNRISE_ELEVATION, DEFAULT_ELEVATION),
            sunset_elevation=data.get(CONF_SUNSET_ELEVATION, DEFAULT_ELEVATION),
            transition=float(transition),
            speed=data.get(CONF_SPEED, DEFAULT_SPEED),
            restore_mode=RestoreMode(data.get(CONF_RESTORE_MODE, DEFAULT_RESTORE_MODE)),
        )


@dataclass
class ControllerState:
    """Mutable state owned by a single controller."""

    enabled: bool = False
    last_requested_temp: float | None = None
    previous_light_on: bool = False
    force_next_update: bool = field(default=False, repr=False)


class LightCommand(Protocol):
    """A batched command for a light, sent on commit."""

    def set_color_temperature(self, mireds: float) -> LightCommand: ...

    def set_brightness(self, brightness: float) -> LightCommand: ...

    def set_transition_length_if_supported(self, seconds: float) -> LightCommand: ...

    def commit(self) -> None: ...


class LightDevice(Protocol):
    """The light the controller drives."""

    def is_on(self) -> bool: ...

    def current_color_temperature(self) -> float | None: ...

    def current_brightness(self) -> float | None: ...

    def supported_color_temperature_range(self) -> tuple[float, float] | None: ...

    def make_call(self) -> LightCommand: ...

    def add_values_changed_callback(self, action: Callable[[], None]) -> None: ...

    def add_target_reached_callback(self, action: Callable[[], None]) -> None: ...


class SolarProvider(Protocol):
    """Source of the current time and of sunrise/sunset events."""

    def now(self) -> datetime: ...

    def sunrise_for_day(self, day_start: datetime, elevation: float) -> datetime | None: ...

    def sunset_for_day(self, day_start: datetime, elevation: float) -> datetime | None: ...

    def current_elevation(self) -> float: ...
