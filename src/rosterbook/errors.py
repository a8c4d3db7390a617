"""Error taxonomy shared by the storage layer and the session."""

from __future__ import annotations


class RosterError(Exception):
    """Base class for every error the roster core reports to the user."""


class ValidationError(RosterError):
    """User input was rejected before any durable write."""


class StorageError(RosterError):
    """The durable store failed or is not usable."""


class StorageUnsupported(StorageError):
    """The configured location cannot hold a durable database."""


class StorageBlocked(StorageError):
    """Another connection holds a lock that prevents opening or upgrading."""


class StorageBackendError(StorageError):
    """Any other failure reported by the SQLite backend."""


class StorageNotOpen(StorageError):
    """A storage operation was attempted before ``open()`` succeeded."""


class RecordNotFound(RosterError):
    """The record targeted by an edit is gone."""


class SessionBusy(RosterError):
    """A mutation was submitted while another one is still in flight."""


__all__ = [
    "RecordNotFound",
    "RosterError",
    "SessionBusy",
    "StorageBackendError",
    "StorageBlocked",
    "StorageError",
    "StorageNotOpen",
    "StorageUnsupported",
    "ValidationError",
]
