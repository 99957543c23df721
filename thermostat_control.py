import json
from dataclasses import dataclass, field

import requests

from errors import ThermostatError
from log_utils import log_entry

API_BASE = 'https://api.ecobee.com/1'
SUMMARY_URL = f'{API_BASE}/thermostatSummary'
THERMOSTAT_URL = f'{API_BASE}/thermostat'

SUMMARY_SELECTION = {
    'selection': {
        'selectionType': 'registered',
        'selectionMatch': '',
        'includeRuntime': True,
        'includeSensors': True,
        'includeSettings': True,
        'includeEquipmentStatus': True,
    }
}


@dataclass
class ThermostatSummary:
    thermostat_count: int
    revision_list: list = field(default_factory=list)
    status_list: list = field(default_factory=list)

    @property
    def thermostat_id(self):
        """Identifier of the first thermostat, from its colon separated revision record"""
        if not self.revision_list:
            raise ThermostatError("Thermostat summary has an empty revision list")
        first = self.revision_list[0]
        if not isinstance(first, str):
            raise ThermostatError(f"Unexpected revision record: {first!r}")
        return first.split(':')[0]


@dataclass
class ThermostatDetail:
    identifier: str
    name: str
    hvac_mode: str


def _headers(access_token):
    if not access_token:
        raise ThermostatError("No access token available")
    return {
        'Content-Type': 'application/json;charset=UTF-8',
        'Authorization': f'Bearer {access_token}',
    }


def _check_status(data):
    status = data.get('status')
    if not isinstance(status, dict):
        return
    code = status.get('code', 0)
    if code:
        raise ThermostatError(f"ecobee status {code}: {status.get('message', '')}")


class ThermostatClient:
    def __init__(self, timeout=10):
        self.timeout = timeout

    def _get(self, url, access_token, params):
        try:
            response = requests.get(url, params=params, headers=_headers(access_token),
                                    timeout=self.timeout)
        except requests.RequestException as e:
            raise ThermostatError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise ThermostatError(f"Request to {url} failed: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ThermostatError(f"Cannot parse response from {url}: {e}") from e
        if not isinstance(data, dict):
            raise ThermostatError(f"Unexpected response from {url}")
        _check_status(data)
        return data

    def get_summary(self, access_token):
        data = self._get(SUMMARY_URL, access_token, {
            'format': 'json',
            'body': json.dumps(SUMMARY_SELECTION),
        })
        return ThermostatSummary(
            thermostat_count=data.get('thermostatCount', 0),
            revision_list=data.get('revisionList') or [],
            status_list=data.get('statusList') or [],
        )

    def get_revision_id(self, access_token):
        return self.get_summary(access_token).thermostat_id

    def get_thermostat(self, access_token, thermostat_id):
        selection = {
            'selection': {
                'selectionType': 'thermostats',
                'selectionMatch': thermostat_id,
                'includeSettings': True,
            }
        }
        data = self._get(THERMOSTAT_URL, access_token, {'json': json.dumps(selection)})

        thermostats = data.get('thermostatList') or []
        if not thermostats:
            raise ThermostatError(f"No thermostat returned for {thermostat_id}")
        first = thermostats[0]
        try:
            hvac_mode = first['settings']['hvacMode']
        except (KeyError, TypeError) as e:
            raise ThermostatError(f"Thermostat response has no settings.hvacMode: {e}") from e
        return ThermostatDetail(
            identifier=first.get('identifier', thermostat_id),
            name=first.get('name', ''),
            hvac_mode=hvac_mode,
        )

    def get_hvac_mode(self, access_token, thermostat_id):
        return self.get_thermostat(access_token, thermostat_id).hvac_mode

    def set_hvac_mode(self, access_token, mode):
        """Change the HVAC mode on every registered thermostat"""
        payload = {
            'selection': {'selectionType': 'registered', 'selectionMatch': ''},
            'thermostat': {'settings': {'hvacMode': str(mode)}},
        }
        try:
            response = requests.post(THERMOSTAT_URL, params={'format': 'json'},
                                     headers=_headers(access_token), json=payload,
                                     timeout=self.timeout)
        except requests.RequestException as e:
            raise ThermostatError(f"Setting HVAC mode failed: {e}") from e

        log_entry(f"Set hvacMode {mode}: {response.status_code} {response.text}")

        if not response.ok:
            raise ThermostatError(f"Setting HVAC mode failed: {response.status_code}")
        try:
            data = response.json()
        except ValueError:
            return
        if isinstance(data, dict):
            _check_status(data)
