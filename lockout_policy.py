"""
Heat pump / furnace lockout decision.

Below the heat pump lockout the heat pump is no longer worth running, so a
thermostat in `heat` is moved to `auxHeatOnly`. Above the furnace lockout the
heat pump takes over again. Anything else is left alone.
"""
from enum import Enum

from errors import ConfigError


class HvacMode(str, Enum):
    HEAT = 'heat'
    COOL = 'cool'
    AUTO = 'auto'
    OFF = 'off'
    AUX_HEAT_ONLY = 'auxHeatOnly'

    def __str__(self):
        return self.value


VALID_MODES = tuple(mode.value for mode in HvacMode)


def parse_mode(value):
    """Validate a mode name given on the command line"""
    try:
        return HvacMode(value)
    except ValueError:
        raise ConfigError(
            f"Invalid HVAC mode {value!r}. Must be one of: {', '.join(VALID_MODES)}"
        ) from None


def outside_band(current_temp_c, thresholds):
    """True when the reading is past either lockout, i.e. a switch is possible"""
    return (current_temp_c < thresholds.heatpump_lockout_c
            or current_temp_c > thresholds.furnace_lockout_c)


def decide_mode(current_temp_c, current_mode, thresholds):
    """Return the mode to switch to, or None when nothing should change"""
    if current_temp_c < thresholds.heatpump_lockout_c and current_mode == HvacMode.HEAT:
        return HvacMode.AUX_HEAT_ONLY
    if current_temp_c > thresholds.furnace_lockout_c and current_mode == HvacMode.AUX_HEAT_ONLY:
        return HvacMode.HEAT
    return None
