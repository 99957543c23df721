#!/usr/bin/env python3
"""
Token refresh for the ecobee API
Usage: python refresh_token.py [--authorize]

Access tokens are good for one hour. Every refresh hands back a new refresh
token and the old one stops working, so the new one is persisted before
anything else looks at the result.
"""
import sys
from dataclasses import dataclass

import requests

from errors import AuthError
from log_utils import log_entry

TOKEN_URL = 'https://api.ecobee.com/token'
AUTHORIZE_URL = 'https://api.ecobee.com/authorize'
SCOPE = 'smartWrite'


def _parse_expires_in(value):
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        raise AuthError(f"Token response has a bad expires_in: {value!r}") from None


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: str
    refresh_token: str
    expires_in: int
    scope: str

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, dict):
            raise AuthError("Token response is not a JSON object")
        access_token = data.get('access_token')
        refresh_token = data.get('refresh_token')
        if not access_token or not refresh_token:
            raise AuthError("Token response is missing access_token or refresh_token")
        return cls(
            access_token=access_token,
            token_type=data.get('token_type', 'Bearer'),
            refresh_token=refresh_token,
            expires_in=_parse_expires_in(data.get('expires_in')),
            scope=data.get('scope', ''),
        )


@dataclass(frozen=True)
class PinResponse:
    ecobee_pin: str
    code: str
    interval: int
    expires_in: int
    scope: str


class AuthClient:
    def __init__(self, client_id, token_store, timeout=10):
        self.client_id = client_id
        self.token_store = token_store
        self.timeout = timeout

    def _post_token(self, data):
        try:
            response = requests.post(TOKEN_URL, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(f"Token request failed: {e}") from e

        if not response.ok:
            raise AuthError(f"Token request failed: {response.status_code} - {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthError(f"Cannot parse token response: {e}") from e

        # the old refresh token may already be dead, so keep the new one first
        if isinstance(payload, dict) and isinstance(payload.get('refresh_token'), str):
            self.token_store.save(payload['refresh_token'])
            log_entry("Refresh token rotated")
        return TokenResponse.from_json(payload)

    def refresh(self, refresh_token):
        """Exchange the current refresh token for a fresh access token"""
        return self._post_token({
            'grant_type': 'refresh_token',
            'code': refresh_token,
            'client_id': self.client_id,
        })

    def request_pin(self):
        """Start the ecobee PIN authorization for this app"""
        try:
            response = requests.get(
                AUTHORIZE_URL,
                params={
                    'response_type': 'ecobeePin',
                    'client_id': self.client_id,
                    'scope': SCOPE,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"PIN request failed: {e}") from e

        if not response.ok:
            raise AuthError(f"PIN request failed: {response.status_code} - {response.text}")

        try:
            data = response.json()
            return PinResponse(
                ecobee_pin=data['ecobeePin'],
                code=data['code'],
                interval=int(data.get('interval') or 0),
                expires_in=int(data.get('expires_in') or 0),
                scope=data.get('scope', SCOPE),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(f"Cannot parse PIN response: {e}") from e

    def exchange_pin(self, pin):
        """Trade an authorized PIN code for the first token pair"""
        return self._post_token({
            'grant_type': 'ecobeePin',
            'code': pin.code,
            'client_id': self.client_id,
        })


def authorize_interactive(auth_client, prompt=input):
    print("🔐 ecobee App Authorization")
    print("=" * 40)
    pin = auth_client.request_pin()
    print(f"\n1️⃣  Sign in to ecobee.com and open My Apps")
    print(f"2️⃣  Add an application with PIN: {pin.ecobee_pin}")
    print(f"   (the PIN expires in {pin.expires_in} minutes)")
    prompt("\n📋 Press Enter once the app is authorized...")
    tokens = auth_client.exchange_pin(pin)
    print(f"✅ Refresh token saved to {auth_client.token_store.token_file}")
    return tokens


if __name__ == "__main__":
    from config import load_config
    from token_manager import TokenStore

    config = load_config()
    config.require_client_id()
    store = TokenStore(config.refresh_token_file, config.refresh_token_fallback)
    client = AuthClient(config.client_id, store, timeout=config.http_timeout)

    try:
        if len(sys.argv) > 1 and sys.argv[1] == '--authorize':
            authorize_interactive(client)
        else:
            client.refresh(store.load())
            print(f"✅ Refresh token saved to {store.token_file}")
    except AuthError as e:
        print(f"❌ Failed: {e}")
        sys.exit(1)
