"""JSON-file backed mapping state.

Three documents live under the state directory, each a JSON object keyed by the
record's unique id:
- repo_projects.json  GitHub repository -> Motion project
- issue_tasks.json    GitHub issue -> Motion task
- workspaces.json     Motion workspace -> default/resolved status names

Inserts are insert-if-absent: when the key already exists the stored record is
returned untouched, so two deliveries racing on a new repo or issue agree on a
single binding.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from github_motion_relay.errors import MappingStoreError

logger = logging.getLogger(__name__)

REPO_PROJECTS_FILE = "repo_projects.json"
ISSUE_TASKS_FILE = "issue_tasks.json"
WORKSPACES_FILE = "workspaces.json"


class RepoProjectMapping(BaseModel):
    """A GitHub repository bound to the Motion project that mirrors it."""

    repo_id: str
    repo_name: str
    repo_full_name: str
    project_id: str
    owner_user_id: str


class IssueTaskMapping(BaseModel):
    """A GitHub issue bound to the Motion task that mirrors it."""

    issue_id: str
    owner_user_id: str
    task_id: str
    repo_id: str


class WorkspaceStatusConfig(BaseModel):
    """Status names used for open and closed issues in one workspace."""

    workspace_id: str
    default_status: str
    resolved_status: str


RecordT = TypeVar("RecordT", bound=BaseModel)


@contextmanager
def _storage_errors(action: str, path: Path) -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError and pydantic's ValidationError.
        logger.error("Mapping store failure", extra={"action": action, "path": str(path)})
        raise MappingStoreError(f"Failed to {action}: {e}") from e


class MappingStore:
    """Durable correspondence records for repos, issues and workspaces."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def _load_unlocked(self, name: str, model: type[RecordT]) -> dict[str, RecordT]:
        path = self._root / name
        if not path.exists():
            return {}

        with _storage_errors(f"read {name}", path):
            raw = json.loads(path.read_text(encoding="utf-8"))
            if raw is None:
                return {}
            if not isinstance(raw, dict):
                raise ValueError(f"{name} must contain a JSON object")
            return {str(key): model.model_validate(item) for key, item in raw.items()}

    def _save_unlocked(self, name: str, records: dict[str, RecordT]) -> None:
        path = self._root / name
        with _storage_errors(f"write {name}", path):
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = {key: record.model_dump(mode="json") for key, record in records.items()}
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True) + "\n",
                encoding="utf-8",
            )
            os.replace(tmp, path)

    def _get(self, name: str, model: type[RecordT], key: str) -> RecordT | None:
        with self._lock:
            return self._load_unlocked(name, model).get(key)

    def _insert_if_absent(self, name: str, key: str, record: RecordT) -> RecordT:
        with self._lock:
            records = self._load_unlocked(name, type(record))
            existing = records.get(key)
            if existing is not None:
                logger.warning(
                    "Mapping already exists; keeping stored record",
                    extra={"document": name, "key": key},
                )
                return existing
            records[key] = record
            self._save_unlocked(name, records)
            return record

    # Repository -> project

    def get_project_mapping(self, repo_id: str) -> RepoProjectMapping | None:
        return self._get(REPO_PROJECTS_FILE, RepoProjectMapping, repo_id)

    def insert_project_mapping(self, record: RepoProjectMapping) -> RepoProjectMapping:
        return self._insert_if_absent(REPO_PROJECTS_FILE, record.repo_id, record)

    def update_project_mapping(self, repo_id: str, owner_user_id: str, project_id: str) -> bool:
        """Point an existing repository mapping at a new project.

        Only the row owned by `owner_user_id` is rewritten. Returns False when no
        such row exists.
        """

        with self._lock:
            records = self._load_unlocked(REPO_PROJECTS_FILE, RepoProjectMapping)
            existing = records.get(repo_id)
            if existing is None or existing.owner_user_id != owner_user_id:
                return False
            records[repo_id] = existing.model_copy(update={"project_id": project_id})
            self._save_unlocked(REPO_PROJECTS_FILE, records)
            return True

    # Issue -> task

    def get_task_mapping(self, issue_id: str) -> IssueTaskMapping | None:
        return self._get(ISSUE_TASKS_FILE, IssueTaskMapping, issue_id)

    def insert_task_mapping(self, record: IssueTaskMapping) -> IssueTaskMapping:
        return self._insert_if_absent(ISSUE_TASKS_FILE, record.issue_id, record)

    def update_task_mapping(self, issue_id: str, task_id: str) -> bool:
        with self._lock:
            records = self._load_unlocked(ISSUE_TASKS_FILE, IssueTaskMapping)
            existing = records.get(issue_id)
            if existing is None:
                return False
            records[issue_id] = existing.model_copy(update={"task_id": task_id})
            self._save_unlocked(ISSUE_TASKS_FILE, records)
            return True

    # Workspace -> status names

    def get_workspace_config(self, workspace_id: str) -> WorkspaceStatusConfig | None:
        return self._get(WORKSPACES_FILE, WorkspaceStatusConfig, workspace_id)

    def insert_workspace_config(self, config: WorkspaceStatusConfig) -> WorkspaceStatusConfig:
        return self._insert_if_absent(WORKSPACES_FILE, config.workspace_id, config)


__all__ = [
    "IssueTaskMapping",
    "MappingStore",
    "RepoProjectMapping",
    "WorkspaceStatusConfig",
]
