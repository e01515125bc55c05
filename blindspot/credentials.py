"""Optional LLM API key kept in the OS keychain via `keyring`.

The key is only ever read server-side. An environment value
(BLINDSPOT_LLM__API_KEY) always wins over the keychain entry.
"""

import logging

import keyring
import keyring.errors

from blindspot.config import settings
from blindspot.errors import KeychainUnavailable

log = logging.getLogger(__name__)

_KEYRING_SERVICE = "blindspot-spotter"
_KEYRING_USER = "llm_api_key"


def load_stored_api_key() -> str:
    try:
        return keyring.get_password(_KEYRING_SERVICE, _KEYRING_USER) or ""
    except keyring.errors.KeyringError as exc:
        log.warning("Keychain unavailable: %s", exc)
        return ""


def save_api_key(value: str) -> None:
    if not value:
        delete_api_key()
        return
    try:
        keyring.set_password(_KEYRING_SERVICE, _KEYRING_USER, value)
    except keyring.errors.KeyringError as exc:
        raise KeychainUnavailable(f"Could not store API key: {exc}") from exc
    log.info("Stored LLM API key in keychain")


def delete_api_key() -> None:
    try:
        keyring.delete_password(_KEYRING_SERVICE, _KEYRING_USER)
    except keyring.errors.PasswordDeleteError:
        pass
    except keyring.errors.KeyringError as exc:
        raise KeychainUnavailable(f"Could not remove API key: {exc}") from exc


def get_api_key() -> str:
    if settings.llm.api_key:
        return settings.llm.api_key
    return load_stored_api_key()
