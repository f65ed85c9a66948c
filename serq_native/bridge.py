"""Debug bridge: appends rendered UI log events to a size-bounded file."""

import logging
import os
import shutil
import tempfile

from serq_native.config import Config
from serq_native.errors import HomeDirectoryError, LogFileError
from serq_native.events import parse_event, render_event

logger = logging.getLogger(__name__)

HOME_VARIABLES = ("HOME", "USERPROFILE")


def resolve_home(environ=None) -> str:
    """Return the user's home directory from the environment.

    Raises HomeDirectoryError when no home variable is set.
    """
    env = os.environ if environ is None else environ
    for name in HOME_VARIABLES:
        value = env.get(name)
        if value:
            return value
    raise HomeDirectoryError(HOME_VARIABLES[0])


def resolve_log_path(config: Config, environ=None) -> str:
    return os.path.join(resolve_home(environ), config.log_filename)


def line_aligned_offset(content: bytes, keep_bytes: int) -> int:
    """Byte offset where the retained tail of ``content`` starts.

    The cut point is ``len(content) - keep_bytes``; the tail starts just past
    the first newline at or after it. If no newline follows, the offset is the
    end of the content.
    """
    keep_from = max(0, len(content) - keep_bytes)
    if keep_from == 0:
        return 0
    newline = content.find(b"\n", keep_from)
    if newline == -1:
        return len(content)
    return newline + 1


class LogBridge:
    """Stateless writer for the debug log.

    The log path is resolved on every call, nothing is cached between calls.
    """

    def __init__(self, config: Config | None = None, environ=None):
        self._config = config or Config()
        self._environ = environ

    @property
    def config(self) -> Config:
        return self._config

    def log_path(self) -> str:
        return resolve_log_path(self._config, self._environ)

    def append(self, payload: str) -> str:
        """Parse, render and append one event. Returns the log file path."""
        event = parse_event(payload)
        path = self.log_path()
        data = render_event(event).encode("utf-8", errors="replace")

        try:
            f = open(path, "ab")
        except OSError as e:
            raise LogFileError("open", path, e) from e
        try:
            with f:
                f.write(data)
                f.flush()
        except OSError as e:
            raise LogFileError("write", path, e) from e

        self.rotate_if_oversized(path)
        return path

    def rotate_if_oversized(self, path: str) -> bool:
        """Shrink the file to its most recent line-aligned tail when over the ceiling.

        Returns True if the file was rewritten.
        """
        try:
            size = os.path.getsize(path)
            if size <= self._config.max_log_bytes:
                return False
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise LogFileError("rotate", path, e) from e

        start = line_aligned_offset(content, self._config.keep_bytes)
        self._replace_contents(path, content[start:], "rotate")
        logger.info("Rotated %s: %d -> %d bytes", path, len(content), len(content) - start)
        return True

    def clear(self) -> str:
        """Truncate the log file to zero bytes. Returns the log file path."""
        path = self.log_path()
        try:
            with open(path, "wb"):
                pass
        except OSError as e:
            raise LogFileError("clear", path, e) from e
        return path

    def _replace_contents(self, path: str, data: bytes, action: str):
        """Write data to a temp file beside path, then swap it in atomically."""
        directory = os.path.dirname(path) or "."
        try:
            tmp_fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        except OSError as e:
            raise LogFileError(action, path, e) from e
        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(data)
            shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise LogFileError(action, path, e) from e
