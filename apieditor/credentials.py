"""
Password storage for endpoints, keyed by endpoint id.

The keyring store is used by default; the memory store backs tests and
throwaway sessions. ``EnvCredentialStore`` lets headless runs supply a
password through ``APIEDITOR_PASSWORD``.
"""

import logging
import os
import threading
from typing import Dict, Optional

import keyring
from keyring.errors import PasswordDeleteError

from apieditor.models import CredentialStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "api-editor"


class KeyringCredentialStore:
    """Credential store backed by the system keyring."""

    def __init__(self, service: str = DEFAULT_SERVICE):
        self.service = service

    def _service_name(self, endpoint_id: str) -> str:
        return f"{self.service}:{endpoint_id}"

    def get_password(self, endpoint_id: str) -> Optional[str]:
        return keyring.get_password(self._service_name(endpoint_id), endpoint_id)

    def set_password(self, endpoint_id: str, password: str) -> None:
        keyring.set_password(self._service_name(endpoint_id), endpoint_id, password)

    def clear_password(self, endpoint_id: str) -> None:
        try:
            keyring.delete_password(self._service_name(endpoint_id), endpoint_id)
        except PasswordDeleteError:
            logger.debug("No stored password for endpoint %s", endpoint_id)


class MemoryCredentialStore:
    """Dict-backed credential store. Nothing is persisted."""

    def __init__(self, passwords: Optional[Dict[str, str]] = None):
        self._lock = threading.Lock()
        self._passwords: Dict[str, str] = dict(passwords or {})

    def get_password(self, endpoint_id: str) -> Optional[str]:
        with self._lock:
            return self._passwords.get(endpoint_id)

    def set_password(self, endpoint_id: str, password: str) -> None:
        with self._lock:
            self._passwords[endpoint_id] = password

    def clear_password(self, endpoint_id: str) -> None:
        with self._lock:
            self._passwords.pop(endpoint_id, None)


class EnvCredentialStore:
    """Wraps another store and falls back to an environment variable on lookup."""

    def __init__(self, inner: CredentialStoreProtocol, env_var: str = "APIEDITOR_PASSWORD"):
        self.inner = inner
        self.env_var = env_var

    def get_password(self, endpoint_id: str) -> Optional[str]:
        password = self.inner.get_password(endpoint_id)
        if password is None:
            password = os.environ.get(self.env_var)
        return password

    def set_password(self, endpoint_id: str, password: str) -> None:
        self.inner.set_password(endpoint_id, password)

    def clear_password(self, endpoint_id: str) -> None:
        self.inner.clear_password(endpoint_id)


def create_credential_store(kind: str = "keyring") -> CredentialStoreProtocol:
    """Build the configured store wrapped with the environment fallback."""
    if kind == "memory":
        inner: CredentialStoreProtocol = MemoryCredentialStore()
    elif kind == "keyring":
        inner = KeyringCredentialStore()
    else:
        raise ValueError(f"Unknown credential store: {kind!r} (expected 'keyring' or 'memory')")
    return EnvCredentialStore(inner)
