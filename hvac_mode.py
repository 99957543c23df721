#!/usr/bin/env python3
"""
Switch an ecobee thermostat between heat pump and aux heat.

Usage:
    python hvac_mode.py -m heat|cool|auto|off|auxHeatOnly   set a mode directly
    python hvac_mode.py -r                                  refresh the token only
    python hvac_mode.py -r -w                               decide from outdoor temperature
    python hvac_mode.py -p                                  authorize the app with a PIN

Meant to be run from cron. Each run does one thing and exits.
"""
import argparse
import sys

import log_utils
from config import DEFAULT_ENV_FILE, load_config
from errors import HvacModeError
from lockout_policy import VALID_MODES, decide_mode, outside_band, parse_mode
from log_utils import log_entry
from refresh_token import AuthClient, authorize_interactive
from thermostat_control import ThermostatClient
from token_manager import TokenStore
from weather import WeatherClient


def build_parser():
    parser = argparse.ArgumentParser(description="Change the ecobee HVAC mode")
    parser.add_argument('-m', dest='mode', default='',
                        help=f"hvac mode: {', '.join(VALID_MODES)}")
    parser.add_argument('-r', dest='refresh', action='store_true',
                        help="Refresh token only")
    parser.add_argument('-w', dest='weather', action='store_true',
                        help="Check and change hvacMode based on OpenWeatherMap (with -r)")
    parser.add_argument('-p', '--authorize', action='store_true',
                        help="Authorize this app with an ecobee PIN and store the refresh token")
    parser.add_argument('--env-file', default=DEFAULT_ENV_FILE,
                        help=f"dotenv file to load (default: {DEFAULT_ENV_FILE})")
    return parser


class Dispatcher:
    def __init__(self, config, token_store=None, auth_client=None, thermostat=None,
                 weather_factory=None):
        self.config = config
        self.token_store = token_store or TokenStore(config.refresh_token_file,
                                                     config.refresh_token_fallback)
        self.auth_client = auth_client or AuthClient(config.client_id, self.token_store,
                                                     timeout=config.http_timeout)
        self.thermostat = thermostat or ThermostatClient(timeout=config.http_timeout)
        self.weather_factory = weather_factory or (
            lambda: WeatherClient(config.owm_api_key, timeout=config.http_timeout))

    def run(self, args):
        if args.authorize:
            self.config.require_client_id()
            authorize_interactive(self.auth_client)
        elif not args.refresh:
            self.set_mode(args.mode)
        elif args.weather:
            self.change_based_on_weather()
        else:
            self.refresh()

    def refresh(self):
        self.config.require_client_id()
        return self.auth_client.refresh(self.token_store.load())

    def set_mode(self, mode_name):
        mode = parse_mode(mode_name)
        tokens = self.refresh()
        self.thermostat.set_hvac_mode(tokens.access_token, mode)

    def change_based_on_weather(self):
        thresholds = self.config.require_weather()
        weather = self.weather_factory()
        tokens = self.refresh()

        current_temp = weather.get_current_temperature(self.config.weather_location)
        if not outside_band(current_temp, thresholds):
            log_entry(f"{current_temp}°C → OK (within "
                      f"{thresholds.heatpump_lockout_c}..{thresholds.furnace_lockout_c}°C)")
            return None

        thermostat_id = (self.config.thermostat_id
                         or self.thermostat.get_revision_id(tokens.access_token))
        current_mode = self.thermostat.get_hvac_mode(tokens.access_token, thermostat_id)
        new_mode = decide_mode(current_temp, current_mode, thresholds)

        if new_mode is None:
            log_entry(f"{current_temp}°C, {current_mode} → OK")
            return None

        log_entry(f"{current_temp}°C, {current_mode} → SET {new_mode}")
        self.thermostat.set_hvac_mode(tokens.access_token, new_mode)
        return new_mode


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.env_file)
    except HvacModeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    log_utils.configure(config.log_file, config.log_timezone)

    try:
        Dispatcher(config).run(args)
    except HvacModeError as e:
        log_entry(f"ERROR: {e}")
        return 1

    print("done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
