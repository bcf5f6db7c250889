from __future__ import annotations

import os

import keyring

from unax_helper.core.config import Settings, get_settings
from unax_helper.core.logging import get_logger

KEYRING_SERVICE = "unax_helper"
KEYRING_USER = "cipher_passphrase_v1"
DEFAULT_PASSPHRASE = "passphrase"
logger = get_logger(__name__)


class KeystoreError(RuntimeError):
    pass


class PassphraseStore:
    def __init__(self, settings: Settings | None = None, passphrase: str | None = None) -> None:
        self.settings = settings or get_settings()
        self.passphrase = passphrase
        self.disable_keyring = os.getenv("UNAX_DISABLE_KEYRING", "0") == "1"

    def _get_keyring_value(self) -> str | None:
        if self.disable_keyring:
            return None
        try:
            stored = keyring.get_password(KEYRING_SERVICE, KEYRING_USER)
        except Exception:
            return None
        return stored or None

    def load(self) -> str:
        if self.passphrase:
            return self.passphrase

        stored = self._get_keyring_value()
        if stored:
            return stored

        from_env = os.getenv("UNAX_PASSPHRASE")
        if from_env:
            return from_env

        if self.settings.is_production:
            raise KeystoreError("Cipher passphrase is required; set UNAX_PASSPHRASE or store one in the keyring.")
        logger.warning("No cipher passphrase configured; falling back to the built-in default")
        return DEFAULT_PASSPHRASE

    def save(self, passphrase: str) -> None:
        self.passphrase = passphrase
        if self.disable_keyring:
            return
        try:
            keyring.set_password(KEYRING_SERVICE, KEYRING_USER, passphrase)
        except Exception as exc:
            logger.warning("Keyring storage unavailable; passphrase kept for this process only (%s)", type(exc).__name__)
