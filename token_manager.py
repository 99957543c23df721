#!/usr/bin/env python3
"""
Refresh token persistence
Keeps the single current ecobee refresh token in a plain text file
"""
import os
import sys
import tempfile

from errors import TokenStoreError
from log_utils import log_entry


class TokenStore:
    def __init__(self, token_file, fallback_token=''):
        self.token_file = token_file
        self.fallback_token = fallback_token

    def load(self):
        """Return the persisted refresh token, or the built-in one if there is none"""
        try:
            with open(self.token_file, 'r') as f:
                token = f.read().strip()
        except FileNotFoundError:
            token = ''
        except OSError as e:
            raise TokenStoreError(f"Cannot read refresh token file {self.token_file}: {e}") from e

        if token:
            return token

        if not self.fallback_token:
            raise TokenStoreError(
                f"No refresh token in {self.token_file} and REFRESHTOKEN is not set"
            )
        log_entry("Refresh token file missing, using known refresh token")
        return self.fallback_token

    def save(self, token):
        """Replace the persisted refresh token with a new one"""
        token = (token or '').strip()
        if not token:
            raise TokenStoreError("Refusing to persist an empty refresh token")

        directory = os.path.dirname(os.path.abspath(self.token_file))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.refreshtoken.')
            try:
                with os.fdopen(fd, 'w') as f:
                    f.write(token)
                os.replace(tmp_path, self.token_file)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise TokenStoreError(f"Cannot write refresh token file {self.token_file}: {e}") from e


if __name__ == "__main__":
    from config import load_config

    config = load_config()
    store = TokenStore(config.refresh_token_file, config.refresh_token_fallback)

    if len(sys.argv) > 2 and sys.argv[1] == "set":
        store.save(sys.argv[2])
        print(f"✅ Saved refresh token to {store.token_file}")
    elif len(sys.argv) > 1 and sys.argv[1] == "show":
        try:
            print(store.load())
        except TokenStoreError as e:
            print(f"❌ {e}")
            sys.exit(1)
    else:
        print("Usage: python token_manager.py [set REFRESH_TOKEN | show]")
