"""Switch platform for Solar Adaptive Lighting integration."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.const import CONF_NAME, STATE_ON
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers import entity_platform
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.helpers.restore_state import RestoreEntity
from homeassistant.helpers.typing import ConfigType, DiscoveryInfoType

from .const import (
    ATTR_LAST_REQUESTED,
    ATTR_LIGHT,
    ATTR_LIGHT_ON,
    ATTR_MAX_MIREDS,
    ATTR_MIN_MIREDS,
    ATTR_RESTORE_MODE,
    CONF_LIGHT,
    CONF_UPDATE_INTERVAL,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    SERVICE_APPLY_ADAPTIVE_SETTINGS,
    SERVICE_DUMP_CONFIG,
)
from .controller import AdaptiveController
from .light_adapter import HassLightDevice
from .models import ControllerConfig, ControllerEvent, EventType, RestoreMode
from .sun import AstralSolarProvider

_LOGGER = logging.getLogger(__name__)


async def async_setup_platform(
    hass: HomeAssistant,
    config: ConfigType,
    async_add_entities: AddEntitiesCallback,
    discovery_info: DiscoveryInfoType | None = None,
) -> None:
    """Set up the Solar Adaptive Lighting switches."""
    if discovery_info is None:
        return

    switches = [
        AdaptiveLightingSwitch(hass, switch_config)
        for switch_config in discovery_info.get("switches", [])
    ]
    _LOGGER.debug("Setting up %d adaptive lighting switches", len(switches))
    async_add_entities(switches)

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_APPLY_ADAPTIVE_SETTINGS, {}, "async_apply_adaptive_settings"
    )
    platform.async_register_entity_service(SERVICE_DUMP_CONFIG, {}, "async_dump_config")


class AdaptiveLightingSwitch(SwitchEntity, RestoreEntity):
    """Switch that enables adaptive color temperature for one light."""

    _attr_should_poll = False

    def __init__(self, hass: HomeAssistant, config: dict[str, Any]) -> None:
        """Initialize the adaptive lighting switch."""
        self.hass = hass
        self._light_entity_id: str = config[CONF_LIGHT]
        self._attr_name = config[CONF_NAME]
        self._attr_unique_id = f"{DOMAIN}_{self._light_entity_id.replace('.', '_')}"
        self._attr_icon = "mdi:theme-light-dark"

        interval = config.get(CONF_UPDATE_INTERVAL, timedelta(seconds=DEFAULT_UPDATE_INTERVAL))
        if not isinstance(interval, timedelta):
            interval = timedelta(seconds=interval)
        self._update_interval = interval
        self._unsub_interval: CALLBACK_TYPE | None = None

        controller_config = ControllerConfig.from_dict(config)
        self._light = HassLightDevice(
            hass, self._light_entity_id, transition=controller_config.transition
        )
        self._controller = AdaptiveController(
            controller_config,
            light=self._light,
            sun=AstralSolarProvider(hass),
            publish_state=self._publish_state,
        )

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, self._attr_unique_id)},
            name=f"Solar Adaptive Lighting ({self._attr_name})",
            manufacturer="Solar Adaptive Lighting",
            model="Adaptive Lighting Controller",
        )

    @property
    def controller(self) -> AdaptiveController:
        """Return the controller behind this switch."""
        return self._controller

    @property
    def is_on(self) -> bool:
        """Return true if adaptive lighting is enabled."""
        return self._controller.enabled

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return extra state attributes."""
        config = self._controller.config
        return {
            ATTR_LIGHT: self._light_entity_id,
            ATTR_MIN_MIREDS: config.min_mireds,
            ATTR_MAX_MIREDS: config.max_mireds,
            ATTR_LAST_REQUESTED: self._controller.state.last_requested_temp,
            ATTR_LIGHT_ON: self._controller.state.previous_light_on,
            ATTR_RESTORE_MODE: config.restore_mode.value,
        }

    async def async_added_to_hass(self) -> None:
        """Handle entity added to Home Assistant."""
        await super().async_added_to_hass()

        restore_mode = self._controller.config.restore_mode
        enabled = restore_mode is RestoreMode.RESTORE_DEFAULT_ON
        if restore_mode in (RestoreMode.RESTORE_DEFAULT_OFF, RestoreMode.RESTORE_DEFAULT_ON):
            if (last_state := await self.async_get_last_state()) is not None:
                enabled = last_state.state == STATE_ON
        # ALWAYS_ON is applied by the controller during setup
        self._controller.restore_state(enabled, self._light.is_on())
        _LOGGER.debug(
            "Restored adaptive lighting for %s: %s (%s)",
            self._light_entity_id,
            "enabled" if enabled else "disabled",
            restore_mode.value,
        )

        self._controller.on_setup()
        self._light.async_start()
        self._unsub_interval = async_track_time_interval(
            self.hass, self._async_tick, self._update_interval
        )

        self.async_write_ha_state()

    async def async_will_remove_from_hass(self) -> None:
        """Handle entity removal from Home Assistant."""
        if self._unsub_interval is not None:
            self._unsub_interval()
            self._unsub_interval = None
        self._light.async_stop()

    @callback
    def _async_tick(self, _now: datetime) -> None:
        self._controller.handle(ControllerEvent(EventType.TICK))

    @callback
    def _publish_state(self, enabled: bool) -> None:
        if self.entity_id is not None:
            self.async_write_ha_state()

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Enable adaptive lighting."""
        self._controller.handle(ControllerEvent.enable_changed(True))

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Disable adaptive lighting."""
        self._controller.handle(ControllerEvent.enable_changed(False))

    async def async_apply_adaptive_settings(self) -> None:
        """Apply the current color temperature now."""
        self._controller.force_update()
        self.async_write_ha_state()

    async def async_dump_config(self) -> None:
        """Log the controller configuration and today's schedule."""
        self._controller.dump_config()
