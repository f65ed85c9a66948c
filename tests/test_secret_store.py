"""Tests for the API key store."""

import keyring
import pytest
from keyring.errors import KeyringError, PasswordSetError

from serq_native.commands import has_api_key
from serq_native.config import Config
from serq_native.errors import BackendError, NoEntryError, SecretStoreError
from serq_native.secret_store import KeyringBackend, SecretStore

SERVICE = "com.serq.app"
KEY_NAME = "anthropic-api-key"


class TestSecretStore:
    def test_absent_before_set(self, backend):
        store = SecretStore(backend)
        assert store.get() is None
        assert store.has() is False

    def test_round_trip(self, backend):
        store = SecretStore(backend)
        store.set("abc123")
        assert store.get() == "abc123"
        assert store.has() is True

    def test_empty_value_reads_as_absent(self, backend):
        store = SecretStore(backend)
        store.set("")
        assert store.get() is None
        assert store.has() is False
        # The empty value is still handed to the backend.
        assert backend.entries[(SERVICE, KEY_NAME)] == ""

    def test_overwrite(self, backend):
        store = SecretStore(backend)
        store.set("first")
        store.set("second")
        assert store.get() == "second"

    def test_set_empty_after_value_clears(self, backend):
        store = SecretStore(backend)
        store.set("abc123")
        store.set("")
        assert store.has() is False

    def test_fixed_slot(self, backend):
        SecretStore(backend).set("abc123")
        assert list(backend.entries) == [(SERVICE, KEY_NAME)]

    def test_from_config(self, backend):
        store = SecretStore.from_config(
            Config(keyring_service="svc", keyring_key_name="name"), backend
        )
        store.set("v")
        assert backend.entries == {("svc", "name"): "v"}

    def test_set_failure(self, backend):
        backend.fail = "vault locked"
        with pytest.raises(SecretStoreError) as exc_info:
            SecretStore(backend).set("abc123")
        assert exc_info.value.kind == "store"
        assert str(exc_info.value) == "Failed to store API key: vault locked"

    def test_get_failure_is_not_absent(self, backend):
        backend.fail = "vault locked"
        with pytest.raises(SecretStoreError) as exc_info:
            SecretStore(backend).get()
        assert str(exc_info.value) == "Failed to retrieve API key: vault locked"

    def test_has_failure_is_not_false(self, backend):
        backend.fail = "vault locked"
        with pytest.raises(SecretStoreError) as exc_info:
            SecretStore(backend).has()
        assert str(exc_info.value) == "Failed to check API key: vault locked"


class TestKeyringBackend:
    def test_get_returns_stored_value(self, monkeypatch):
        calls = []

        def fake_get(service, key):
            calls.append((service, key))
            return "secret"

        monkeypatch.setattr(keyring, "get_password", fake_get)
        assert KeyringBackend().get(SERVICE, KEY_NAME) == "secret"
        assert calls == [(SERVICE, KEY_NAME)]

    def test_missing_entry_raises_no_entry(self, monkeypatch):
        monkeypatch.setattr(keyring, "get_password", lambda service, key: None)
        with pytest.raises(NoEntryError):
            KeyringBackend().get(SERVICE, KEY_NAME)

    def test_get_keyring_error(self, monkeypatch):
        def fail(service, key):
            raise KeyringError("no backend available")

        monkeypatch.setattr(keyring, "get_password", fail)
        with pytest.raises(BackendError, match="no backend available"):
            KeyringBackend().get(SERVICE, KEY_NAME)

    def test_set_delegates(self, monkeypatch):
        stored = {}
        monkeypatch.setattr(
            keyring, "set_password",
            lambda service, key, value: stored.__setitem__((service, key), value),
        )
        KeyringBackend().set(SERVICE, KEY_NAME, "abc123")
        assert stored == {(SERVICE, KEY_NAME): "abc123"}

    def test_set_keyring_error(self, monkeypatch):
        def fail(service, key, value):
            raise PasswordSetError("denied")

        monkeypatch.setattr(keyring, "set_password", fail)
        with pytest.raises(BackendError, match="denied"):
            KeyringBackend().set(SERVICE, KEY_NAME, "abc123")

    def test_get_os_error(self, monkeypatch):
        def fail(service, key):
            raise OSError("dbus connection refused")

        monkeypatch.setattr(keyring, "get_password", fail)
        with pytest.raises(BackendError, match="dbus connection refused"):
            KeyringBackend().get(SERVICE, KEY_NAME)

    def test_set_os_error(self, monkeypatch):
        def fail(service, key, value):
            raise PermissionError("keychain access denied")

        monkeypatch.setattr(keyring, "set_password", fail)
        with pytest.raises(BackendError, match="keychain access denied"):
            KeyringBackend().set(SERVICE, KEY_NAME, "abc123")

    def test_os_error_surfaces_as_failed_command(self, monkeypatch):
        def fail(service, key):
            raise OSError("dbus connection refused")

        monkeypatch.setattr(keyring, "get_password", fail)
        result = has_api_key(SecretStore(KeyringBackend()))
        assert result.ok is False
        assert result.kind == "store"
        assert result.error == "Failed to check API key: dbus connection refused"

    def test_store_over_keyring_missing_entry(self, monkeypatch):
        monkeypatch.setattr(keyring, "get_password", lambda service, key: None)
        store = SecretStore(KeyringBackend())
        assert store.get() is None
        assert store.has() is False

    def test_default_backend_is_keyring(self, monkeypatch):
        monkeypatch.setattr(keyring, "get_password", lambda service, key: "from-vault")
        assert SecretStore().get() == "from-vault"
