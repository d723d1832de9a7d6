"""Home Assistant light entity as the light driven by the controller."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_COLOR_TEMP_KELVIN,
    ATTR_MAX_COLOR_TEMP_KELVIN,
    ATTR_MIN_COLOR_TEMP_KELVIN,
    ATTR_TRANSITION,
    DOMAIN as LIGHT_DOMAIN,
    LightEntityFeature,
)
from homeassistant.const import ATTR_ENTITY_ID, ATTR_SUPPORTED_FEATURES, SERVICE_TURN_ON, STATE_ON
from homeassistant.core import CALLBACK_TYPE, Event, HomeAssistant, State, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.event import async_call_later, async_track_state_change_event

from .const import ECHO_TOLERANCE, MIN_SETTLE_SECONDS

_LOGGER = logging.getLogger(__name__)


def kelvin_to_mireds(kelvin: float) -> float:
    """Convert a color temperature in Kelvin to mireds."""
    return 1_000_000 / kelvin


def mireds_to_kelvin(mireds: float) -> int:
    """Convert a color temperature in mireds to whole Kelvin."""
    return round(1_000_000 / mireds)


class LightCall:
    """Collects light settings and sends them as one light.turn_on call."""

    def __init__(self, device: HassLightDevice) -> None:
        """Initialize an empty call for a light."""
        self._device = device
        self._mireds: float | None = None
        self.service_data: dict[str, Any] = {ATTR_ENTITY_ID: device.entity_id}

    def set_color_temperature(self, mireds: float) -> LightCall:
        """Request a color temperature in mireds."""
        self._mireds = mireds
        self.service_data[ATTR_COLOR_TEMP_KELVIN] = mireds_to_kelvin(mireds)
        return self

    def set_brightness(self, brightness: float) -> LightCall:
        """Request a brightness (0-255)."""
        self.service_data[ATTR_BRIGHTNESS] = round(brightness)
        return self

    def set_transition_length_if_supported(self, seconds: float) -> LightCall:
        """Request a transition if the light supports transitions."""
        if self._device.supports_transition():
            self.service_data[ATTR_TRANSITION] = seconds
        return self

    def commit(self) -> None:
        """Send the collected settings to the light."""
        if self._mireds is not None:
            self._device.remember_request(self._mireds)
        self._device.send(dict(self.service_data))


class HassLightDevice:
    """Reads and commands a Home Assistant light entity."""

    def __init__(self, hass: HomeAssistant, entity_id: str, transition: float = 0) -> None:
        """Initialize the device for a light entity."""
        self.hass = hass
        self.entity_id = entity_id
        self._settle_seconds = max(transition, MIN_SETTLE_SECONDS)
        self._values_changed_callbacks: list[Callable[[], None]] = []
        self._target_reached_callbacks: list[Callable[[], None]] = []
        self._unsub_state: CALLBACK_TYPE | None = None
        self._unsub_settle: CALLBACK_TYPE | None = None
        self._last_sent: float | None = None

    def _state(self) -> State | None:
        return self.hass.states.get(self.entity_id)

    def _attribute(self, name: str) -> Any:
        state = self._state()
        if state is None:
            return None
        return state.attributes.get(name)

    def is_on(self) -> bool:
        """Return whether the light is on."""
        state = self._state()
        return state is not None and state.state == STATE_ON

    def current_color_temperature(self) -> float | None:
        """Return the light's color temperature in mireds."""
        kelvin = self._attribute(ATTR_COLOR_TEMP_KELVIN)
        if not kelvin:
            return None
        mireds = kelvin_to_mireds(kelvin)
        # Drivers round to whole Kelvin or whole mireds; report back exactly
        # what was asked for
        if self._last_sent is not None and abs(mireds - self._last_sent) < ECHO_TOLERANCE:
            return self._last_sent
        return mireds

    def current_brightness(self) -> float | None:
        """Return the light's brightness (0-255)."""
        return self._attribute(ATTR_BRIGHTNESS)

    def supported_color_temperature_range(self) -> tuple[float, float] | None:
        """Return the (min, max) mireds the light supports."""
        min_kelvin = self._attribute(ATTR_MIN_COLOR_TEMP_KELVIN)
        max_kelvin = self._attribute(ATTR_MAX_COLOR_TEMP_KELVIN)
        if not min_kelvin or not max_kelvin:
            return None
        # The warmest light has the lowest Kelvin and the highest mireds
        return kelvin_to_mireds(max_kelvin), kelvin_to_mireds(min_kelvin)

    def supports_transition(self) -> bool:
        """Return whether the light accepts a transition length."""
        features = self._attribute(ATTR_SUPPORTED_FEATURES) or 0
        return bool(features & LightEntityFeature.TRANSITION)

    def make_call(self) -> LightCall:
        """Start a new command for the light."""
        return LightCall(self)

    def remember_request(self, mireds: float) -> None:
        """Record the color sent last, to recognize it when it is reported back."""
        self._last_sent = mireds

    def send(self, service_data: dict[str, Any]) -> None:
        """Schedule a light.turn_on call without waiting for it."""
        _LOGGER.debug("Sending %s to %s", service_data, self.entity_id)
        self.hass.async_create_task(self._async_turn_on(service_data))

    async def _async_turn_on(self, service_data: dict[str, Any]) -> None:
        try:
            await self.hass.services.async_call(
                LIGHT_DOMAIN,
                SERVICE_TURN_ON,
                service_data,
                blocking=True,
            )
        except HomeAssistantError as err:
            _LOGGER.error("Failed to control light %s: %s", self.entity_id, err)

    def add_values_changed_callback(self, action: Callable[[], None]) -> None:
        """Call action whenever the light's state changes."""
        self._values_changed_callbacks.append(action)

    def add_target_reached_callback(self, action: Callable[[], None]) -> None:
        """Call action once the light has settled after a change."""
        self._target_reached_callbacks.append(action)

    @callback
    def async_start(self) -> None:
        """Start listening to the light entity."""
        if self._unsub_state is None:
            self._unsub_state = async_track_state_change_event(
                self.hass, [self.entity_id], self._async_state_changed
            )

    @callback
    def async_stop(self) -> None:
        """Stop listening to the light entity."""
        if self._unsub_state is not None:
            self._unsub_state()
            self._unsub_state = None
        if self._unsub_settle is not None:
            self._unsub_settle()
            self._unsub_settle = None

    @callback
    def _async_state_changed(self, event: Event) -> None:
        """Handle state changes of the light entity."""
        if event.data.get("new_state") is None:
            return

        for action in list(self._values_changed_callbacks):
            action()

        # Home Assistant has no transition-complete event; treat the light as
        # settled once it stopped changing for the transition length
        if self._unsub_settle is not None:
            self._unsub_settle()
        self._unsub_settle = async_call_later(
            self.hass, self._settle_seconds, self._async_target_reached
        )

    @callback
    def _async_target_reached(self, _now: datetime) -> None:
        self._unsub_settle = None
        for action in list(self._target_reached_callbacks):
            action()
