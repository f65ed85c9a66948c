"""Inspector logic: tail, read, filter, and follow the debug log."""

import logging
import os
import re
import threading
from collections import deque
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

ERROR_PATTERN = re.compile(r"ERROR|UNCAUGHT|UNHANDLED", re.IGNORECASE)


def tail_lines(path: str, count: int = 50) -> list[str]:
    """Return the last ``count`` lines of the file, newlines stripped."""
    if count <= 0:
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in deque(f, maxlen=count)]


def read_all(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def error_lines(path: str, count: int = 50) -> list[str]:
    """Return the last ``count`` lines mentioning an error, uncaught or unhandled failure."""
    if count <= 0:
        return []
    matches = deque(maxlen=count)
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            if ERROR_PATTERN.search(line):
                matches.append(line.rstrip("\n"))
    return list(matches)


class LogFollower(FileSystemEventHandler):
    """Follows one file like ``tail -f`` and hands each complete new line to ``emit``.

    Survives the file being truncated in place or swapped for a new file
    (a rotated debug log is a new inode).
    """

    def __init__(self, path: str, emit: Callable[[str], None], from_start: bool = False):
        super().__init__()
        self._path = os.path.abspath(path)
        self._emit = emit
        self._fh = None
        self._inode = None
        self._partial = b""
        self._lock = threading.Lock()
        self._open(from_start)

    @property
    def path(self) -> str:
        return self._path

    def _open(self, from_start: bool):
        """Open (or reopen) the file. Starts at EOF unless ``from_start``."""
        self._close()
        self._partial = b""
        try:
            fh = open(self._path, "rb")
        except FileNotFoundError:
            logger.debug("File not found: %s", self._path)
            return
        if not from_start:
            fh.seek(0, os.SEEK_END)
        self._fh = fh
        self._inode = os.fstat(fh.fileno()).st_ino

    def _close(self):
        if self._fh is not None:
            self._fh.close()
            self._fh = None
            self._inode = None

    def read_new_lines(self):
        """Read from the current position to EOF and emit complete lines."""
        with self._lock:
            try:
                stat = os.stat(self._path)
            except FileNotFoundError:
                return

            if self._fh is None:
                logger.info("File appeared: %s", self._path)
                self._open(from_start=True)
            elif stat.st_ino != self._inode:
                logger.info("File replaced: %s", self._path)
                self._open(from_start=True)
            elif stat.st_size < self._fh.tell():
                logger.info("File truncated: %s", self._path)
                self._fh.seek(0)
                self._partial = b""
            if self._fh is None:
                return

            data = self._fh.read()
            if not data:
                return
            data = self._partial + data
            lines = data.split(b"\n")
            self._partial = lines.pop()
            for line in lines:
                self._emit(line.decode("utf-8", errors="replace"))

    def _is_target(self, path) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return os.path.abspath(path) == self._path

    def on_modified(self, event):
        if not event.is_directory and self._is_target(event.src_path):
            self.read_new_lines()

    def on_created(self, event):
        if not event.is_directory and self._is_target(event.src_path):
            self.read_new_lines()

    def on_moved(self, event):
        if not event.is_directory and self._is_target(event.dest_path):
            self.read_new_lines()

    def close(self):
        with self._lock:
            self._close()


def follow(path: str, emit: Callable[[str], None], stop: threading.Event,
           poll_interval: float = 0.5):
    """Emit new lines of ``path`` until ``stop`` is set."""
    follower = LogFollower(path, emit)
    observer = Observer()
    observer.schedule(follower, os.path.dirname(follower.path) or ".", recursive=False)
    observer.start()
    logger.info("Watching %s", follower.path)
    try:
        while not stop.wait(poll_interval):
            pass
    finally:
        observer.stop()
        observer.join(timeout=5)
        follower.close()
