"""Persistent GitHub <-> Motion mapping state."""

from github_motion_relay.store.mappings import (
    IssueTaskMapping,
    MappingStore,
    RepoProjectMapping,
    WorkspaceStatusConfig,
)

__all__ = ["IssueTaskMapping", "MappingStore", "RepoProjectMapping", "WorkspaceStatusConfig"]
