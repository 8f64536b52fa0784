"""Error taxonomy for share-access.

Both store-level failures carry the offending path so that an aborted
invocation can name it:

- :class:`PathResolutionError`: the descriptor for a path could not be read
- :class:`PersistenceError`: the updated descriptor could not be written

Neither is retried; the manager lets the first one propagate.
"""
from __future__ import annotations


class ShareAccessError(Exception):
    """Base class for all share-access errors."""


class _PathError(ShareAccessError):
    """Common shape for errors attached to a single filesystem path.

    Attributes
    ----------
    path:
        The path the failing operation targeted.
    reason:
        Human-readable description of the underlying failure.
    """

    _verb = "process"

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Could not {self._verb} access rules for '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PathResolutionError(_PathError):
    """Raised when a path's security descriptor cannot be read."""

    _verb = "read"


class PersistenceError(_PathError):
    """Raised when an updated security descriptor cannot be written back."""

    _verb = "write"


class ConfigError(ShareAccessError, ValueError):
    """Raised when a share-access configuration file is malformed.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")
