"""
API key storage for LLM providers using the system keyring.

Keys are stored under the ``emotion_backend`` service as ``<provider>_api_key``.
Backends supported by `keyring`: Windows Credential Manager, macOS Keychain,
Linux Secret Service (GNOME Keyring, KWallet).
"""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

SERVICE_NAME = "emotion_backend"


def _entry(provider: str) -> str:
    return f"{provider}_api_key"


def get_api_key(provider: str) -> Optional[str]:
    """
    Retrieve the API key of an LLM provider.

    Args:
        provider: Provider name (e.g. 'siliconflow', 'deepseek')

    Returns:
        API key string or None if not stored or the keyring is unusable
    """
    try:
        key = keyring.get_password(SERVICE_NAME, _entry(provider))
    except KeyringError as e:
        logger.error(f"Failed to retrieve API key for {provider}: {e}")
        return None
    if key:
        logger.debug(f"Retrieved API key for {provider} from keyring")
    return key


def set_api_key(provider: str, api_key: str) -> bool:
    """Store the API key of an LLM provider. Returns True on success."""
    try:
        keyring.set_password(SERVICE_NAME, _entry(provider), api_key)
    except KeyringError as e:
        logger.error(f"Failed to store API key for {provider}: {e}")
        return False
    logger.info(f"Stored API key for {provider} in keyring")
    return True


def delete_api_key(provider: str) -> bool:
    """Remove the API key of an LLM provider. Returns True if one was removed."""
    try:
        keyring.delete_password(SERVICE_NAME, _entry(provider))
    except PasswordDeleteError:
        logger.warning(f"No API key found for {provider} to delete")
        return False
    except KeyringError as e:
        logger.error(f"Failed to delete API key for {provider}: {e}")
        return False
    logger.info(f"Deleted API key for {provider} from keyring")
    return True
