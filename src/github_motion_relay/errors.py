"""Exception hierarchy shared by the relay components."""

from __future__ import annotations


class RelayError(RuntimeError):
    """Base class for failures the webhook handler reports as a 500."""


class MotionApiError(RelayError):
    """Motion answered with an unexpected status, or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MappingStoreError(RelayError):
    """Reading or writing mapping state failed."""


class StatusResolutionError(RelayError):
    """A workspace has no status flagged as default or as resolved."""


class SyncError(RelayError):
    """Resolving a project or syncing an issue failed."""
