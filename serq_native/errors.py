"""Failure kinds surfaced by the log bridge and the secret store.

Each error carries a ``kind`` tag so the command layer can hand the host a
distinguishable failure without inspecting exception types:

  - ``parse``        the caller's log payload is malformed
  - ``environment``  the home directory can not be resolved
  - ``io``           the log file could not be opened, read or written
  - ``store``        the secure store failed for a reason other than "no entry"
"""


class SerqError(Exception):
    """Base class for failures reported back to the host application."""

    kind = "error"


class PayloadParseError(SerqError):
    kind = "parse"

    def __init__(self, details):
        self.details = details
        super().__init__(f"Invalid log entry: {details}")


class HomeDirectoryError(SerqError):
    kind = "environment"

    def __init__(self, variable="HOME"):
        self.variable = variable
        super().__init__(f"{variable} is not set")


class LogFileError(SerqError):
    """Raised when the debug log file can not be opened, read or written."""

    kind = "io"

    def __init__(self, action, path, cause):
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to {action} log file: {cause}")


class SecretStoreError(SerqError):
    """Raised when the secure store fails for a reason other than a missing entry."""

    kind = "store"

    def __init__(self, action, cause):
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action} API key: {cause}")


class NoEntryError(Exception):
    """Backend signal: no credential exists for the (service, key) pair."""


class BackendError(Exception):
    """Backend signal: the credential vault failed."""
