"""Mapping and reconciliation between GitHub and Motion."""

from github_motion_relay.sync.reconciler import IssueSyncService, build_task_data
from github_motion_relay.sync.statuses import StatusResolver

__all__ = ["IssueSyncService", "StatusResolver", "build_task_data"]
