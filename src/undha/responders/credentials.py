"""API key storage for the HTTP responder.

Lookup order:
1. UNDHA_API_KEY environment variable
2. OS keychain (keyring)
3. ~/.undha/.api_key with 0600 permissions
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import keyring
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

SERVICE_NAME = "io.undha.responder"
KEY_ACCOUNT = "api_key"
API_KEY_ENV = "UNDHA_API_KEY"
KEY_FILE_PATH = Path("~/.undha/.api_key").expanduser()

# Bearer-style secrets in messages (for scrubbing)
SECRET_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]{8,}")


class CredentialError(Exception):
    """Stored credential is unsafe or cannot be written."""


def _keychain():
    """The keyring module if an OS backend is usable, else None."""
    try:
        keyring.get_keyring()
    except NoKeyringError:
        return None
    return keyring


def _write_key_file(key: str) -> None:
    KEY_FILE_PATH.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    KEY_FILE_PATH.write_text(key)
    KEY_FILE_PATH.chmod(0o600)


def _read_key_file() -> str | None:
    if not KEY_FILE_PATH.exists():
        return None
    mode = KEY_FILE_PATH.stat().st_mode & 0o777
    if mode != 0o600:
        raise CredentialError(
            f"API key file has unsafe permissions {oct(mode)}, expected 0600: "
            f"chmod 600 {KEY_FILE_PATH}"
        )
    return KEY_FILE_PATH.read_text().strip() or None


def store_api_key(key: str) -> str:
    """Save the key in the keychain, or the key file when there is none.

    Returns:
        "keychain" or "file"
    """
    keychain = _keychain()
    if keychain is not None:
        try:
            keychain.set_password(SERVICE_NAME, KEY_ACCOUNT, key)
            return "keychain"
        except KeyringError as e:
            logger.warning(f"Keychain write failed ({e}); using {KEY_FILE_PATH}")
    _write_key_file(key)
    return "file"


def get_api_key() -> str | None:
    """Key for the HTTP responder, or None if none is configured.

    Raises:
        CredentialError: If the key file has unsafe permissions
    """
    key = os.environ.get(API_KEY_ENV)
    if key:
        return key
    keychain = _keychain()
    if keychain is not None:
        try:
            key = keychain.get_password(SERVICE_NAME, KEY_ACCOUNT)
        except KeyringError as e:
            logger.debug(f"Keychain read failed: {e}")
        if key:
            return key
    return _read_key_file()


def delete_api_key() -> bool:
    """Remove the key from every store. Returns True if one existed."""
    deleted = False
    keychain = _keychain()
    if keychain is not None:
        try:
            keychain.delete_password(SERVICE_NAME, KEY_ACCOUNT)
            deleted = True
        except PasswordDeleteError:
            pass
        except KeyringError as e:
            logger.debug(f"Keychain delete failed: {e}")
    if KEY_FILE_PATH.exists():
        KEY_FILE_PATH.unlink()
        deleted = True
    return deleted


def mask_key(key: str) -> str:
    """Mask a key for display (first 4 chars only)."""
    if len(key) <= 8:
        return "****"
    return key[:4] + "..." + "*" * 4


def scrub_secrets(text: str) -> str:
    """Replace bearer secrets in text with a masked placeholder."""
    return SECRET_PATTERN.sub(r"\1[REDACTED]", text)
