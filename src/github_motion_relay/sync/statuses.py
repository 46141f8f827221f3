"""Per-workspace status name resolution.

Motion statuses are workspace specific. The relay only needs two of them: the
status new tasks start in and the status that marks a task as done. Both are
fetched from Motion the first time a workspace is seen and cached in the
mapping store for good.
"""

from __future__ import annotations

import logging

from github_motion_relay.errors import StatusResolutionError
from github_motion_relay.motion.client import MotionClient, MotionStatus
from github_motion_relay.store.mappings import MappingStore, WorkspaceStatusConfig

logger = logging.getLogger(__name__)


def _first_flagged(statuses: list[MotionStatus], *, resolved: bool) -> str | None:
    flagged = [s.name for s in statuses if (s.is_resolved if resolved else s.is_default)]
    if len(flagged) > 1:
        logger.warning(
            "Multiple statuses share a flag; using the first",
            extra={"flag": "resolved" if resolved else "default", "statuses": flagged},
        )
    return flagged[0] if flagged else None


class StatusResolver:
    """Write-once, read-many cache of workspace status names."""

    def __init__(self, *, motion: MotionClient, store: MappingStore) -> None:
        self._motion = motion
        self._store = store

    def resolve(self, workspace_id: str) -> WorkspaceStatusConfig:
        cached = self._store.get_workspace_config(workspace_id)
        if cached is not None:
            return cached

        logger.info("Fetching statuses for workspace", extra={"workspace_id": workspace_id})
        statuses = self._motion.list_statuses(workspace_id)
        default_status = _first_flagged(statuses, resolved=False)
        resolved_status = _first_flagged(statuses, resolved=True)
        if not default_status or not resolved_status:
            raise StatusResolutionError(
                f"Unable to determine default or resolved status for workspace {workspace_id}"
            )

        stored = self._store.insert_workspace_config(
            WorkspaceStatusConfig(
                workspace_id=workspace_id,
                default_status=default_status,
                resolved_status=resolved_status,
            )
        )
        logger.info(
            "Cached workspace statuses",
            extra={
                "workspace_id": workspace_id,
                "default_status": stored.default_status,
                "resolved_status": stored.resolved_status,
            },
        )
        return stored
