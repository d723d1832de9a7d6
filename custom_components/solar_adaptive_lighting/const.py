"""Constants for the Solar Adaptive Lighting integration."""

DOMAIN = "solar_adaptive_lighting"

# Default configuration values
DEFAULT_MIN_MIREDS = 153
DEFAULT_MAX_MIREDS = 500
DEFAULT_ELEVATION = -0.833  # Geometric horizon corrected for refraction
DEFAULT_SPEED = 1.0
DEFAULT_TRANSITION = 0
DEFAULT_UPDATE_INTERVAL = 60  # Seconds between periodic evaluations
DEFAULT_RESTORE_MODE = "restore_default_off"

# Minimum time a light needs to settle before it counts as having reached
# its target state
MIN_SETTLE_SECONDS = 1.0

# Changes smaller than this (in mireds) are treated as no change
DEAD_BAND = 0.1

# Lights that store whole mireds report the color sent to them up to this
# far (in mireds) from the request
ECHO_TOLERANCE = 1.0

# Configuration keys
CONF_LIGHT = "light"
CONF_MIN_MIREDS = "min_mireds"
CONF_MAX_MIREDS = "max_mireds"
CONF_SUNRISE_ELEVATION = "sunrise_elevation"
CONF_SUNSET_ELEVATION = "sunset_elevation"
CONF_SPEED = "speed"
CONF_TRANSITION = "transition"
CONF_UPDATE_INTERVAL = "update_interval"
CONF_RESTORE_MODE = "restore_mode"

# Service names
SERVICE_APPLY_ADAPTIVE_SETTINGS = "apply_adaptive_settings"
SERVICE_DUMP_CONFIG = "dump_config"

# Attributes
ATTR_LIGHT = "light"
ATTR_MIN_MIREDS = "min_mireds"
ATTR_MAX_MIREDS = "max_mireds"
ATTR_LAST_REQUESTED = "last_requested_color_temp"
ATTR_LIGHT_ON = "light_on"
ATTR_RESTORE_MODE = "restore_mode"
