"""
Runtime configuration for the ecobee HVAC mode agent.

Everything is read from the environment exactly once (after loading an
optional dotenv file) into a frozen Config that is handed to each component.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from errors import ConfigError

DEFAULT_ENV_FILE = '.env.dev'
DEFAULT_TOKEN_FILE = 'refreshtoken.txt'
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_LOG_FILE = 'thermostat_log.txt'
DEFAULT_LOG_TIMEZONE = 'US/Eastern'


@dataclass(frozen=True)
class LockoutThresholds:
    """Heat pump lockout floor and furnace lockout ceiling, in Celsius"""
    heatpump_lockout_c: float
    furnace_lockout_c: float


@dataclass(frozen=True)
class Config:
    client_id: str = ''
    refresh_token_fallback: str = ''
    refresh_token_file: str = DEFAULT_TOKEN_FILE
    owm_api_key: str = ''
    weather_location: str = ''
    heatpump_lockout_c: Optional[float] = None
    furnace_lockout_c: Optional[float] = None
    thermostat_id: str = ''
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_file: str = DEFAULT_LOG_FILE
    log_timezone: str = DEFAULT_LOG_TIMEZONE

    def require_client_id(self):
        if not self.client_id:
            raise ConfigError('API_KEY is not set; the ecobee client id is required')

    def require_weather(self):
        """Check everything weather-driven mode needs and return the thresholds"""
        if not self.owm_api_key:
            raise ConfigError('OWM_API_KEY is not set')
        if not self.weather_location:
            raise ConfigError('OWM_WEATHER_LOCATION is not set')
        if self.heatpump_lockout_c is None:
            raise ConfigError('HEATPUMP_LOCKOUT_TEMP is not set')
        if self.furnace_lockout_c is None:
            raise ConfigError('FURNACE_LOCKOUT_TEMP is not set')
        if self.heatpump_lockout_c > self.furnace_lockout_c:
            raise ConfigError(
                f"HEATPUMP_LOCKOUT_TEMP ({self.heatpump_lockout_c}) must not be above "
                f"FURNACE_LOCKOUT_TEMP ({self.furnace_lockout_c})"
            )
        return LockoutThresholds(self.heatpump_lockout_c, self.furnace_lockout_c)


def _parse_float(environ, key, default=None):
    raw = environ.get(key, '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None


def from_environ(environ):
    http_timeout = _parse_float(environ, 'HTTP_TIMEOUT', DEFAULT_HTTP_TIMEOUT)
    if http_timeout <= 0:
        raise ConfigError(f"HTTP_TIMEOUT must be positive, got {http_timeout}")

    return Config(
        client_id=environ.get('API_KEY', '').strip(),
        refresh_token_fallback=environ.get('REFRESHTOKEN', '').strip(),
        refresh_token_file=environ.get('REFRESHTOKENFILE') or DEFAULT_TOKEN_FILE,
        owm_api_key=environ.get('OWM_API_KEY', '').strip(),
        weather_location=environ.get('OWM_WEATHER_LOCATION', '').strip(),
        heatpump_lockout_c=_parse_float(environ, 'HEATPUMP_LOCKOUT_TEMP'),
        furnace_lockout_c=_parse_float(environ, 'FURNACE_LOCKOUT_TEMP'),
        thermostat_id=environ.get('ECOBEE_THERMOSTAT_ID', '').strip(),
        http_timeout=http_timeout,
        log_file=environ.get('LOG_FILE') or DEFAULT_LOG_FILE,
        log_timezone=environ.get('LOG_TIMEZONE') or DEFAULT_LOG_TIMEZONE,
    )


def load_config(env_file=DEFAULT_ENV_FILE):
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
    return from_environ(os.environ)
