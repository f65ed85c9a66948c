import os

import pytest

from serq_native.errors import BackendError, NoEntryError


class MemoryBackend:
    """In-memory SecretBackend; set ``fail`` to make every call raise BackendError."""

    def __init__(self):
        self.entries = {}
        self.fail = None

    def set(self, service, key, value):
        if self.fail:
            raise BackendError(self.fail)
        self.entries[(service, key)] = value

    def get(self, service, key):
        if self.fail:
            raise BackendError(self.fail)
        try:
            return self.entries[(service, key)]
        except KeyError:
            raise NoEntryError(f"No entry for {service}/{key}") from None


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point HOME at a temp directory for the duration of a test."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("USERPROFILE", raising=False)
    return tmp_path


@pytest.fixture
def log_path(home):
    return os.path.join(str(home), ".serq-debug.log")


@pytest.fixture
def backend():
    return MemoryBackend()
