"""Sunrise and sunset at custom elevations, backed by astral."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo

from astral import LocationInfo
from astral.sun import SunDirection, elevation, time_at_elevation
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util

_LOGGER = logging.getLogger(__name__)


class AstralSolarProvider:
    """Solar events for the Home Assistant home location."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the provider."""
        self.hass = hass
        self._location_info: LocationInfo | None = None

    def _get_location_info(self) -> LocationInfo:
        """Get location info from Home Assistant configuration."""
        if self._location_info is None:
            config = self.hass.config
            self._location_info = LocationInfo(
                name="Home Assistant",
                region="",
                timezone=str(config.time_zone),
                latitude=config.latitude,
                longitude=config.longitude,
            )
        return self._location_info

    def now(self) -> datetime:
        """Return the current local time."""
        return dt_util.now()

    def _astral_time(
        self, day: date, degrees: float, direction: SunDirection, tz: tzinfo | None
    ) -> datetime:
        return time_at_elevation(
            self._get_location_info().observer,
            degrees,
            date=day,
            direction=direction,
            tzinfo=tz,
        )

    def _time_at_elevation(
        self, day_start: datetime, degrees: float, direction: SunDirection
    ) -> datetime | None:
        """Get the local time the sun crosses an elevation on the day of day_start."""
        local_day = day_start.date()
        try:
            result = self._astral_time(local_day, degrees, direction, day_start.tzinfo)
            # astral works on the UTC day; far from UTC the event can land on
            # the local day before or after, so search the neighbouring day
            if result.date() != local_day:
                delta = 1 if result.date() < local_day else -1
                result = self._astral_time(
                    local_day + timedelta(days=delta), degrees, direction, day_start.tzinfo
                )
        except ValueError as err:
            # Polar day or night, the sun never crosses this elevation today
            _LOGGER.debug(
                "No %s at %.3f degrees on %s: %s",
                direction.name.lower(),
                degrees,
                local_day,
                err,
            )
            return None

        if result.date() != local_day:
            _LOGGER.debug(
                "No %s at %.3f degrees on %s", direction.name.lower(), degrees, local_day
            )
            return None
        return result

    def sunrise_for_day(self, day_start: datetime, degrees: float) -> datetime | None:
        """Return when the sun rises through the given elevation on this day."""
        return self._time_at_elevation(day_start, degrees, SunDirection.RISING)

    def sunset_for_day(self, day_start: datetime, degrees: float) -> datetime | None:
        """Return when the sun sets through the given elevation on this day."""
        return self._time_at_elevation(day_start, degrees, SunDirection.SETTING)

    def current_elevation(self) -> float:
        """Return the sun's current elevation in degrees."""
        return elevation(self._get_location_info().observer, self.now())
