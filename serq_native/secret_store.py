"""Single-slot API key storage on top of a platform credential vault."""

import logging
from typing import Protocol

import keyring
from keyring.errors import KeyringError

from serq_native.config import KEYRING_KEY_NAME, KEYRING_SERVICE, Config
from serq_native.errors import BackendError, NoEntryError, SecretStoreError

logger = logging.getLogger(__name__)


class SecretBackend(Protocol):
    """Contract for a secure keyed store.

    ``get`` raises NoEntryError when nothing is stored for the pair and
    BackendError for any other failure; ``set`` raises BackendError.
    """

    def set(self, service: str, key: str, value: str) -> None: ...

    def get(self, service: str, key: str) -> str: ...


class KeyringBackend:
    """SecretBackend backed by the ``keyring`` library (Keychain, Secret Service, WinVault)."""

    def set(self, service: str, key: str, value: str) -> None:
        try:
            keyring.set_password(service, key, value)
        except (KeyringError, OSError) as e:
            raise BackendError(str(e) or type(e).__name__) from e

    def get(self, service: str, key: str) -> str:
        try:
            value = keyring.get_password(service, key)
        except (KeyringError, OSError) as e:
            raise BackendError(str(e) or type(e).__name__) from e
        if value is None:
            raise NoEntryError(f"No entry for {service}/{key}")
        return value


class SecretStore:
    """Reads and writes the application's one API key slot.

    An empty stored value reads back as absent, so "never set" and
    "set to empty" are indistinguishable to callers.
    """

    def __init__(self, backend: SecretBackend | None = None,
                 service: str = KEYRING_SERVICE, key_name: str = KEYRING_KEY_NAME):
        self._backend = backend if backend is not None else KeyringBackend()
        self._service = service
        self._key_name = key_name

    @classmethod
    def from_config(cls, config: Config, backend: SecretBackend | None = None) -> "SecretStore":
        return cls(backend, service=config.keyring_service, key_name=config.keyring_key_name)

    def set(self, value: str) -> None:
        try:
            self._backend.set(self._service, self._key_name, value)
        except BackendError as e:
            raise SecretStoreError("store", e) from e

    def _read(self, action: str) -> str | None:
        try:
            value = self._backend.get(self._service, self._key_name)
        except NoEntryError:
            logger.debug("No stored secret for %s/%s", self._service, self._key_name)
            return None
        except BackendError as e:
            raise SecretStoreError(action, e) from e
        return value or None

    def get(self) -> str | None:
        return self._read("retrieve")

    def has(self) -> bool:
        return self._read("check") is not None
