"""Closed-loop controller that keeps a light on the solar color curve."""
from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable

from .calculator import CurveEngine
from .const import DEAD_BAND, DEFAULT_MAX_MIREDS, DEFAULT_MIN_MIREDS
from .models import (
    ControllerConfig,
    ControllerEvent,
    ControllerState,
    EventType,
    LightDevice,
    RestoreMode,
    SolarProvider,
)

_LOGGER = logging.getLogger(__name__)


def start_of_day(moment: datetime) -> datetime:
    """Return local midnight of the day containing moment."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class AdaptiveController:
    """
    Drives a light's color temperature along the solar curve.

    All entry points run to completion on a single thread. A command sent to
    the light comes back as a values-changed notification; the dead-band
    against the last requested temperature keeps that echo from being taken
    for an external change.
    """

    def __init__(
        self,
        config: ControllerConfig,
        light: LightDevice | None = None,
        sun: SolarProvider | None = None,
        publish_state: Callable[[bool], None] | None = None,
        enabled: bool = False,
    ) -> None:
        """Initialize the controller."""
        self._config = config
        self._light = light
        self._sun = sun
        self._publish_state = publish_state
        self._state = ControllerState(enabled=enabled)
        self._warned_default_bounds = False

    @property
    def config(self) -> ControllerConfig:
        """Return the active configuration."""
        return self._config

    @property
    def state(self) -> ControllerState:
        """Return the controller state."""
        return self._state

    @property
    def enabled(self) -> bool:
        """Return whether automatic updates are enabled."""
        return self._state.enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable automatic updates."""
        self.on_enable_changed(enabled)

    def restore_state(self, enabled: bool, light_on: bool) -> None:
        """Load the state found at startup without acting on it."""
        self._state.enabled = enabled
        self._state.previous_light_on = light_on

    def handle(self, event: ControllerEvent) -> None:
        """Dispatch a notification to its handler."""
        if event.type is EventType.VALUES_CHANGED:
            self.on_light_values_changed()
        elif event.type is EventType.TARGET_REACHED:
            self.on_target_reached()
        elif event.type is EventType.TICK:
            self.on_periodic_tick()
        elif event.type is EventType.ENABLE_CHANGED:
            if event.enabled is None:
                raise ValueError("ENABLE_CHANGED event without enabled value")
            self.on_enable_changed(event.enabled)

    def on_setup(self) -> None:
        """Subscribe to the light and resolve the color temperature range."""
        if self._light is not None:
            self._light.add_values_changed_callback(
                lambda: self.handle(ControllerEvent(EventType.VALUES_CHANGED))
            )
            self._light.add_target_reached_callback(
                lambda: self.handle(ControllerEvent(EventType.TARGET_REACHED))
            )

            min_mireds, max_mireds = self._bounds()
            _LOGGER.debug("Color temperature range: %.3f - %.3f", min_mireds, max_mireds)

        if self._config.restore_mode is RestoreMode.ALWAYS_ON:
            self._state.enabled = True
            self._publish()

    def _bounds(self) -> tuple[float, float]:
        """
        Get the color temperature range, filling unset bounds from the light.

        A range reported by the light is stored in the configuration. Until the
        light reports one the defaults are used without being stored.
        """
        if self._config.has_bounds:
            return self._config.min_mireds, self._config.max_mireds

        supported = self._light.supported_color_temperature_range() if self._light else None
        if supported is None:
            if not self._warned_default_bounds:
                _LOGGER.warning(
                    "Light did not report a color temperature range, using %d - %d mireds",
                    DEFAULT_MIN_MIREDS,
                    DEFAULT_MAX_MIREDS,
                )
                self._warned_default_bounds = True
            supported = (DEFAULT_MIN_MIREDS, DEFAULT_MAX_MIREDS)
            persist = False
        else:
            persist = True

        min_mireds = self._config.min_mireds
        max_mireds = self._config.max_mireds
        if min_mireds is None:
            min_mireds = supported[0]
        if max_mireds is None:
            max_mireds = supported[1]
        if persist:
            self._config = dataclasses.replace(
                self._config, min_mireds=min_mireds, max_mireds=max_mireds
            )
        return min_mireds, max_mireds

    def _curve(self) -> CurveEngine:
        min_mireds, max_mireds = self._bounds()
        return CurveEngine(min_mireds, max_mireds, self._config.speed)

    def _day_window(self) -> tuple[datetime, datetime, datetime, datetime] | None:
        """Get now, start of today, sunrise and sunset, or None if undetermined."""
        now = self._sun.now()
        today = start_of_day(now)
        sunrise = self._sun.sunrise_for_day(today, self._config.sunrise_elevation)
        sunset = self._sun.sunset_for_day(today, self._config.sunset_elevation)
        if sunrise is None or sunset is None:
            _LOGGER.warning("Could not determine sunrise or sunset")
            return None
        return now, today, sunrise, sunset

    def on_periodic_tick(self) -> None:
        """Evaluate the curve and command the light if the target moved."""
        if self._light is None or self._sun is None:
            _LOGGER.warning("Light or sun provider not set")
            return

        if not self._state.enabled:
            _LOGGER.debug("Update skipped - automatic updates disabled")
            return

        if not self._light.is_on():
            _LOGGER.debug("Update skipped - light is off")
            return

        window = self._day_window()
        if window is None:
            return
        now, _today, sunrise, sunset = window

        mireds = self._curve().target_temperature(now, sunrise, sunset)

        last = self._state.last_requested_temp
        if (
            not self._state.force_next_update
            and last is not None
            and abs(mireds - last) < DEAD_BAND
        ):
            # Mandatory, the light echoes every command back as a state change
            _LOGGER.debug("Skipping update, color temperature is the same as last requested")
            return

        self._state.force_next_update = False
        self._state.last_requested_temp = mireds

        _LOGGER.debug("Setting color temperature %.3f", mireds)
        call = self._light.make_call()
        call.set_color_temperature(mireds)
        # Some drivers recalculate brightness from color temperature unless it is given
        brightness = self._light.current_brightness()
        if brightness is not None:
            call.set_brightness(brightness)
        if self._config.transition > 0:
            call.set_transition_length_if_supported(self._config.transition)
        call.commit()

    def force_update(self) -> None:
        """Re-evaluate now, sending the color even if it did not change."""
        self._state.force_next_update = True
        self.on_periodic_tick()

    def on_enable_changed(self, enabled: bool) -> None:
        """Switch automatic updates on or off."""
        if self._state.enabled == enabled:
            return

        if enabled:
            _LOGGER.debug("Adaptive lighting enabled")
        else:
            _LOGGER.debug("Adaptive lighting disabled")

        self._state.force_next_update = True
        self._state.enabled = enabled
        self._publish()
        self.on_periodic_tick()
        # Force again so the color is re-sent once a turn-on transition completes
        self._state.force_next_update = True

    def on_light_values_changed(self) -> None:
        """React to a change of the light's observed state."""
        if self._light is None:
            return

        light_on = self._light.is_on()

        if light_on:
            current = self._light.current_color_temperature()
            last = self._state.last_requested_temp
            if (
                self._state.enabled
                and last is not None
                and current is not None
                and abs(current - last) > DEAD_BAND
            ):
                _LOGGER.info(
                    "Color temperature changed externally (current: %.3f, last requested: %.3f), "
                    "disabling adaptive lighting",
                    current,
                    last,
                )
                self.on_enable_changed(False)
            elif (
                not self._state.previous_light_on
                and not self._state.enabled
                and self._config.restore_mode is RestoreMode.ALWAYS_ON
            ):
                self.on_enable_changed(True)

        self._state.previous_light_on = light_on

    def on_target_reached(self) -> None:
        """Re-apply the color once the light has finished a transition."""
        if self._light is None:
            return

        # previous_light_on was recorded by on_light_values_changed
        if self._state.previous_light_on and self._state.enabled:
            self.on_periodic_tick()

    def _publish(self) -> None:
        if self._publish_state is not None:
            self._publish_state(self._state.enabled)

    def dump_config(self) -> dict[str, Any]:
        """Log and return the controller's configuration and current state."""
        config = self._config
        info: dict[str, Any] = {
            "min_mireds": config.min_mireds,
            "max_mireds": config.max_mireds,
            "sunrise_elevation": config.sunrise_elevation,
            "sunset_elevation": config.sunset_elevation,
            "transition": config.transition,
            "speed": config.speed,
            "restore_mode": config.restore_mode.value,
            "last_requested_color_temp": self._state.last_requested_temp,
            "enabled": self._state.enabled,
            "previous_light_on": self._state.previous_light_on,
        }

        if self._light is None or self._sun is None:
            _LOGGER.warning("Light or sun provider not set")
            return info

        info["light_on"] = self._light.is_on()

        window = self._day_window()
        if window is None:
            return info
        _now, today, sunrise, sunset = window
        curve = self._curve()
        table = curve.sample_day(today, sunrise, sunset)
        info.update(
            {
                "min_mireds": curve.min_mireds,
                "max_mireds": curve.max_mireds,
                "today": today.isoformat(),
                "sunrise": sunrise.isoformat(),
                "sunset": sunset.isoformat(),
                "sun_elevation": self._sun.current_elevation(),
                "schedule": table,
            }
        )

        _LOGGER.info("Today: %s", today)
        _LOGGER.info("Sunrise: %s", sunrise)
        _LOGGER.info("Sunset: %s", sunset)
        _LOGGER.info("Sun elevation: %.3f", info["sun_elevation"])
        _LOGGER.info(
            "Sunrise elevation: %.3f, sunset elevation: %.3f",
            config.sunrise_elevation,
            config.sunset_elevation,
        )
        _LOGGER.info(
            "Color temperature range: %.3f - %.3f", curve.min_mireds, curve.max_mireds
        )
        _LOGGER.info("Transition length: %s", config.transition)
        for hour, mireds in table:
            _LOGGER.info("Time: %02d:00, Color temperature: %.3f", hour, mireds)
        _LOGGER.info("Last requested color temperature: %s", self._state.last_requested_temp)
        _LOGGER.info("State: %s", "enabled" if self._state.enabled else "disabled")
        _LOGGER.info("Previous light state: %s", "on" if self._state.previous_light_on else "off")
        _LOGGER.info("Current light state: %s", "on" if info["light_on"] else "off")

        return info
