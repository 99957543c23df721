"""Pytest configuration and fixtures for the ecobee HVAC mode tests."""

from unittest.mock import Mock

import pytest

import log_utils
from config import Config
from token_manager import TokenStore

FALLBACK_TOKEN = "fallbackRefreshToken"


def make_response(status_code: int = 200, json_data=None, text: str | None = None) -> Mock:
    """Build a stand-in for a requests.Response.

    Args:
        status_code: HTTP status to report.
        json_data: Value returned by ``.json()``. If None, ``.json()`` raises
            ValueError like requests does for a non-JSON body.
        text: Body text. Defaults to a rendering of json_data.

    """
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text if text is not None else str(json_data)
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    """Keep every log_entry call inside the test's temp directory."""
    log_file = tmp_path / "thermostat_log.txt"
    monkeypatch.setitem(log_utils._settings, "file", str(log_file))
    monkeypatch.setitem(log_utils._settings, "timezone", "US/Eastern")
    return log_file


@pytest.fixture
def token_file(tmp_path):
    return tmp_path / "refreshtoken.txt"


@pytest.fixture
def config(token_file) -> Config:
    return Config(
        client_id="test-client-id",
        refresh_token_fallback=FALLBACK_TOKEN,
        refresh_token_file=str(token_file),
        owm_api_key="owm-key",
        weather_location="Ottawa,CA",
        heatpump_lockout_c=-10.0,
        furnace_lockout_c=2.0,
        thermostat_id="",
        http_timeout=10.0,
    )


@pytest.fixture
def token_store(config) -> TokenStore:
    return TokenStore(config.refresh_token_file, config.refresh_token_fallback)


@pytest.fixture
def token_response() -> dict:
    return {
        "access_token": "newAccess",
        "token_type": "Bearer",
        "refresh_token": "newRefresh",
        "expires_in": 3599,
        "scope": "smartWrite",
    }
