"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from github_motion_relay.config import RelaySettings
from github_motion_relay.motion.client import MotionClient, MotionProject, MotionStatus
from github_motion_relay.store.mappings import MappingStore

WORKSPACE_ID = "ws-1"


@pytest.fixture
def settings(tmp_path: Path) -> RelaySettings:
    """Provide test settings that never read the developer's `.env`."""
    return RelaySettings(
        _env_file=None,
        motion_api_key="test-key",
        motion_workspace_id=WORKSPACE_ID,
        allowed_sender="octocat",
        relay_state_path=tmp_path / "relay_state",
    )


@pytest.fixture
def store(tmp_path: Path) -> MappingStore:
    return MappingStore(tmp_path / "mappings")


@pytest.fixture
def motion() -> Mock:
    """A Motion client whose projects always exist and whose statuses are Todo/Done."""
    client = Mock(spec=MotionClient)
    client.list_statuses.return_value = [
        MotionStatus(name="Backlog", is_default=False, is_resolved=False),
        MotionStatus(name="Todo", is_default=True, is_resolved=False),
        MotionStatus(name="Done", is_default=False, is_resolved=True),
    ]
    client.get_project.side_effect = lambda project_id: MotionProject(
        id=project_id, name="octo-repo", workspace_id=WORKSPACE_ID
    )
    client.create_project.return_value = "project-1"
    client.create_task.return_value = "task-1"
    client.update_task.return_value = True
    return client


def issues_payload(
    *,
    sender: str = "octocat",
    issue_id: int = 1001,
    state: str = "open",
    action: str = "opened",
    body: str | None = "Steps to reproduce",
) -> dict[str, Any]:
    return {
        "action": action,
        "sender": {"login": sender, "id": 1},
        "repository": {
            "id": 42,
            "name": "octo-repo",
            "full_name": "octo-org/octo-repo",
            "private": False,
        },
        "issue": {
            "id": issue_id,
            "number": 7,
            "title": "Crash on startup",
            "body": body,
            "state": state,
            "html_url": "https://github.com/octo-org/octo-repo/issues/7",
        },
    }


@pytest.fixture
def make_issues_payload() -> Callable[..., dict[str, Any]]:
    """Build a trimmed-down GitHub `issues` delivery."""
    return issues_payload
