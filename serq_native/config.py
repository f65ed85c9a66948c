"""Configuration module: frozen dataclass loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_LOG_FILENAME = ".serq-debug.log"
DEFAULT_MAX_LOG_BYTES = 5 * 1024 * 1024  # 5 MB
DEFAULT_KEEP_BYTES = 1024 * 1024  # 1 MB

KEYRING_SERVICE = "com.serq.app"
KEYRING_KEY_NAME = "anthropic-api-key"


@dataclass(frozen=True)
class Config:
    log_filename: str = DEFAULT_LOG_FILENAME
    max_log_bytes: int = DEFAULT_MAX_LOG_BYTES
    keep_bytes: int = DEFAULT_KEEP_BYTES
    keyring_service: str = KEYRING_SERVICE
    keyring_key_name: str = KEYRING_KEY_NAME


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults.

    Raises ValueError when a size is not an integer, or when keep_bytes is
    not smaller than max_log_bytes (rotation could not get under the ceiling).
    """
    max_log_bytes = int(
        os.environ.get("SERQ_DEBUG_LOG_MAX_BYTES", Config.max_log_bytes)
    )
    keep_bytes = int(
        os.environ.get("SERQ_DEBUG_LOG_KEEP_BYTES", Config.keep_bytes)
    )
    if keep_bytes >= max_log_bytes:
        raise ValueError(
            f"SERQ_DEBUG_LOG_KEEP_BYTES ({keep_bytes}) must be smaller than "
            f"SERQ_DEBUG_LOG_MAX_BYTES ({max_log_bytes})"
        )
    return Config(max_log_bytes=max_log_bytes, keep_bytes=keep_bytes)
