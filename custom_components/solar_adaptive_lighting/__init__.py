"""Solar Adaptive Lighting integration for Home Assistant."""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import voluptuous as vol
from homeassistant.const import CONF_NAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.discovery import async_load_platform
from homeassistant.helpers.typing import ConfigType

from .const import (
    CONF_LIGHT,
    CONF_MAX_MIREDS,
    CONF_MIN_MIREDS,
    CONF_RESTORE_MODE,
    CONF_SPEED,
    CONF_SUNRISE_ELEVATION,
    CONF_SUNSET_ELEVATION,
    CONF_TRANSITION,
    CONF_UPDATE_INTERVAL,
    DEFAULT_ELEVATION,
    DEFAULT_RESTORE_MODE,
    DEFAULT_SPEED,
    DEFAULT_TRANSITION,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
)
from .models import RestoreMode

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.SWITCH]

_MIREDS = vol.All(vol.Coerce(float), vol.Range(min=1))
_ELEVATION = vol.All(vol.Coerce(float), vol.Range(min=-90, max=90))


def _validate_mireds_range(config: dict[str, Any]) -> dict[str, Any]:
    """Check that the configured color temperature range is not inverted."""
    min_mireds = config.get(CONF_MIN_MIREDS)
    max_mireds = config.get(CONF_MAX_MIREDS)
    if min_mireds is not None and max_mireds is not None and min_mireds > max_mireds:
        raise vol.Invalid(
            f"{CONF_MIN_MIREDS} ({min_mireds}) must not exceed {CONF_MAX_MIREDS} ({max_mireds})"
        )
    return config


def _default_name(config: dict[str, Any]) -> dict[str, Any]:
    """Name the switch after its light when no name is given."""
    if CONF_NAME not in config:
        object_id = config[CONF_LIGHT].split(".", 1)[-1]
        config = {**config, CONF_NAME: f"Adaptive {object_id.replace('_', ' ')}"}
    return config


SWITCH_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(CONF_LIGHT): cv.entity_id,
            vol.Optional(CONF_NAME): cv.string,
            vol.Optional(CONF_MIN_MIREDS): _MIREDS,
            vol.Optional(CONF_MAX_MIREDS): _MIREDS,
            vol.Optional(CONF_SUNRISE_ELEVATION, default=DEFAULT_ELEVATION): _ELEVATION,
            vol.Optional(CONF_SUNSET_ELEVATION, default=DEFAULT_ELEVATION): _ELEVATION,
            vol.Optional(CONF_SPEED, default=DEFAULT_SPEED): vol.All(
                vol.Coerce(float), vol.Range(min=0, min_included=False)
            ),
            vol.Optional(
                CONF_TRANSITION, default=timedelta(seconds=DEFAULT_TRANSITION)
            ): cv.time_period,
            vol.Optional(
                CONF_UPDATE_INTERVAL, default=timedelta(seconds=DEFAULT_UPDATE_INTERVAL)
            ): cv.positive_time_period,
            vol.Optional(CONF_RESTORE_MODE, default=DEFAULT_RESTORE_MODE): vol.In(
                [mode.value for mode in RestoreMode]
            ),
        }
    ),
    _validate_mireds_range,
    _default_name,
)

CONFIG_SCHEMA = vol.Schema(
    {DOMAIN: vol.All(cv.ensure_list, [SWITCH_SCHEMA])},
    extra=vol.ALLOW_EXTRA,
)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Solar Adaptive Lighting integration."""
    if DOMAIN not in config:
        return True

    switches = config[DOMAIN]
    hass.data[DOMAIN] = {"switches": switches}
    _LOGGER.debug("Setting up Solar Adaptive Lighting for %d lights", len(switches))

    for platform in PLATFORMS:
        hass.async_create_task(
            async_load_platform(hass, platform, DOMAIN, {"switches": switches}, config)
        )

    return True
