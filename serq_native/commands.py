"""Commands exposed to the host application.

Every command returns a CommandResult instead of raising, so a failure in the
bridge or the secret store never propagates into the host's event loop.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from serq_native.bridge import LogBridge
from serq_native.config import load_config
from serq_native.errors import SerqError
from serq_native.secret_store import SecretStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    value: Any = None
    error: str | None = None
    kind: str | None = None

    @classmethod
    def success(cls, value=None) -> "CommandResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str, kind: str) -> "CommandResult":
        return cls(ok=False, error=error, kind=kind)

    @classmethod
    def from_error(cls, exc: SerqError) -> "CommandResult":
        return cls.failure(str(exc), exc.kind)


def _run(name: str, func: Callable[[], Any]) -> CommandResult:
    try:
        return CommandResult.success(func())
    except SerqError as e:
        logger.debug("Command %s failed (%s): %s", name, e.kind, e)
        return CommandResult.from_error(e)


def debug_bridge_log(bridge: LogBridge, entry: str) -> CommandResult:
    """Append one serialized log event to the debug log."""
    def append():
        bridge.append(entry)

    return _run("debug_bridge_log", append)


def debug_bridge_clear(bridge: LogBridge) -> CommandResult:
    def clear():
        bridge.clear()

    return _run("debug_bridge_clear", clear)


def set_api_key(store: SecretStore, key: str) -> CommandResult:
    return _run("set_api_key", lambda: store.set(key))


def get_api_key(store: SecretStore) -> CommandResult:
    """Value is the stored key, or None when no usable key is stored."""
    return _run("get_api_key", store.get)


def has_api_key(store: SecretStore) -> CommandResult:
    return _run("has_api_key", store.has)


def greet(name: str) -> CommandResult:
    return CommandResult.success(f"Hello, {name}! Welcome to SERQ.")


class CommandRouter:
    """Maps host command names to handlers bound to one bridge and one store."""

    def __init__(self, bridge: LogBridge | None = None, store: SecretStore | None = None):
        self.bridge = bridge or LogBridge(load_config())
        self.store = store or SecretStore.from_config(self.bridge.config)
        self._handlers: dict[str, Callable[..., CommandResult]] = {
            "debug_bridge_log": lambda entry: debug_bridge_log(self.bridge, entry),
            "debug_bridge_clear": lambda: debug_bridge_clear(self.bridge),
            "set_api_key": lambda key: set_api_key(self.store, key),
            "get_api_key": lambda: get_api_key(self.store),
            "has_api_key": lambda: has_api_key(self.store),
            "greet": greet,
        }

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def invoke(self, name: str, **kwargs) -> CommandResult:
        handler = self._handlers.get(name)
        if handler is None:
            return CommandResult.failure(f"Unknown command: {name}", "command")
        try:
            inspect.signature(handler).bind(**kwargs)
        except TypeError as e:
            return CommandResult.failure(f"Invalid arguments for {name}: {e}", "command")
        return handler(**kwargs)
