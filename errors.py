class HvacModeError(Exception):
    """Base class for every failure the agent reports to the operator."""


class ConfigError(HvacModeError):
    pass


class TokenStoreError(HvacModeError):
    pass


class AuthError(HvacModeError):
    pass


class ThermostatError(HvacModeError):
    pass


class WeatherError(HvacModeError):
    pass
