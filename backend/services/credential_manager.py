"""Plaid API credentials stored in the OS keychain.

Values live under the ``finance-tagger`` keyring service, one entry per
setting name, so ``config.Settings`` can pick them up without a ``.env``
file holding secrets.
"""

import logging

import keyring

logger = logging.getLogger(__name__)

SERVICE_NAME = "finance-tagger"

# Settings that may be kept in the keychain
CREDENTIAL_KEYS: frozenset[str] = frozenset({"PLAID_CLIENT_ID", "PLAID_SECRET"})


def _is_credential_key(key: str, action: str) -> bool:
    if key in CREDENTIAL_KEYS:
        return True
    logger.warning("Refusing to %s %s: not a Plaid credential", action, key)
    return False


def get_credential(key: str) -> str | None:
    """Look up one credential; None when unset or no keyring backend works."""
    try:
        return keyring.get_password(SERVICE_NAME, key)
    except Exception:
        logger.debug("Keychain read of %s failed", key, exc_info=True)
        return None


def set_credential(key: str, value: str) -> bool:
    """Save ``value`` for ``key``. Blank values and unknown keys are rejected.

    Returns:
        Whether the keychain accepted the value.
    """
    if not _is_credential_key(key, "store"):
        return False
    if not (value and value.strip()):
        logger.warning("Refusing to store blank %s", key)
        return False

    try:
        keyring.set_password(SERVICE_NAME, key, value)
    except Exception:
        logger.warning("Keychain write of %s failed", key, exc_info=True)
        return False
    logger.info("Saved %s to the keychain", key)
    return True


def delete_credential(key: str) -> bool:
    """Forget ``key``. Returns False when it was not stored or cannot be removed."""
    if not _is_credential_key(key, "delete"):
        return False

    try:
        keyring.delete_password(SERVICE_NAME, key)
    except Exception:
        logger.debug("Keychain delete of %s failed", key, exc_info=True)
        return False
    logger.info("Removed %s from the keychain", key)
    return True


def list_credentials() -> dict[str, str]:
    """All stored credentials, keyed by setting name."""
    stored = {key: get_credential(key) for key in sorted(CREDENTIAL_KEYS)}
    return {key: value for key, value in stored.items() if value is not None}
