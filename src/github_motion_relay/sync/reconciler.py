"""Reconciliation of GitHub repositories/issues with Motion projects/tasks.

The mapping store is a cache of the last known binding, not a source of truth:
before a stored project or task id is reused it is checked against Motion, and
when Motion no longer knows it the object is recreated and the binding rewritten
in place.
"""

from __future__ import annotations

import logging

from github_motion_relay.errors import RelayError, SyncError
from github_motion_relay.github.events import GitHubIssue, IssuesEvent
from github_motion_relay.motion.client import MotionClient, TaskData
from github_motion_relay.store.mappings import (
    IssueTaskMapping,
    MappingStore,
    RepoProjectMapping,
    WorkspaceStatusConfig,
)
from github_motion_relay.sync.statuses import StatusResolver

logger = logging.getLogger(__name__)


def build_task_data(
    issue: GitHubIssue,
    *,
    project_id: str,
    workspace_id: str,
    statuses: WorkspaceStatusConfig,
) -> TaskData:
    """Translate an issue into the Motion task fields that mirror it."""

    return TaskData(
        name=issue.title,
        description=f"{issue.html_url}\n\n{issue.body or ''}",
        status=statuses.resolved_status if issue.is_closed else statuses.default_status,
        project_id=project_id,
        workspace_id=workspace_id,
    )


class IssueSyncService:
    """High-level, testable relay of GitHub issues into Motion."""

    def __init__(
        self,
        *,
        motion: MotionClient,
        store: MappingStore,
        statuses: StatusResolver | None = None,
    ) -> None:
        self._motion = motion
        self._store = store
        self._statuses = statuses or StatusResolver(motion=motion, store=store)

    def close(self) -> None:
        self._motion.close()

    def relay_issue_event(self, event: IssuesEvent, *, workspace_id: str) -> str:
        """Mirror one ``issues`` delivery into Motion and return the project id."""

        owner = event.sender.login
        logger.info(
            "Relaying issue event",
            extra={
                "action": event.action,
                "repo": event.repository.full_name,
                "issue_id": event.issue.id,
            },
        )
        project_id = self.resolve_project(
            repo_id=event.repository.id,
            repo_name=event.repository.name,
            repo_full_name=event.repository.full_name,
            workspace_id=workspace_id,
            owner_user_id=owner,
        )
        self.sync_issue(
            event.issue,
            repo_id=event.repository.id,
            project_id=project_id,
            workspace_id=workspace_id,
            owner_user_id=owner,
        )
        return project_id

    def resolve_project(
        self,
        *,
        repo_id: str,
        repo_name: str,
        repo_full_name: str,
        workspace_id: str,
        owner_user_id: str,
    ) -> str:
        """Return the Motion project for a repository, creating it when needed."""

        try:
            return self._resolve_project(
                repo_id=repo_id,
                repo_name=repo_name,
                repo_full_name=repo_full_name,
                workspace_id=workspace_id,
                owner_user_id=owner_user_id,
            )
        except RelayError as e:
            logger.error(
                "Project mapping failed",
                extra={"repo_id": repo_id, "workspace_id": workspace_id},
            )
            raise SyncError(f"Failed to get or create project mapping: {e}") from e

    def sync_issue(
        self,
        issue: GitHubIssue,
        *,
        repo_id: str,
        project_id: str,
        workspace_id: str,
        owner_user_id: str,
    ) -> None:
        """Create or update the Motion task mirroring `issue`."""

        try:
            self._sync_issue(
                issue,
                repo_id=repo_id,
                project_id=project_id,
                workspace_id=workspace_id,
                owner_user_id=owner_user_id,
            )
        except RelayError as e:
            logger.error(
                "Issue sync failed",
                extra={"issue_id": issue.id, "project_id": project_id},
            )
            raise SyncError(f"Failed to sync issue {issue.id} to Motion: {e}") from e

    def _create_project(self, *, repo_name: str, workspace_id: str) -> str:
        # Statuses are cached before the first task so a workspace without usable
        # statuses fails before anything is created in it.
        self._statuses.resolve(workspace_id)
        return self._motion.create_project(name=repo_name, workspace_id=workspace_id)

    def _resolve_project(
        self,
        *,
        repo_id: str,
        repo_name: str,
        repo_full_name: str,
        workspace_id: str,
        owner_user_id: str,
    ) -> str:
        mapping = self._store.get_project_mapping(repo_id)

        if mapping is not None:
            if self._motion.get_project(mapping.project_id) is not None:
                return mapping.project_id

            logger.warning(
                "Mapped Motion project is gone; creating a replacement",
                extra={"repo_id": repo_id, "stale_project_id": mapping.project_id},
            )
            project_id = self._create_project(repo_name=repo_name, workspace_id=workspace_id)
            if not self._store.update_project_mapping(repo_id, owner_user_id, project_id):
                # The stale row is never repaired, so every later delivery for this
                # repository creates another project.
                logger.error(
                    "Project mapping is owned by another user; left unchanged",
                    extra={
                        "repo_id": repo_id,
                        "owner": mapping.owner_user_id,
                        "sender": owner_user_id,
                        "unmapped_project_id": project_id,
                    },
                )
            return project_id

        logger.info(
            "No project mapping for repository; creating Motion project",
            extra={"repo_id": repo_id, "repo": repo_full_name},
        )
        project_id = self._create_project(repo_name=repo_name, workspace_id=workspace_id)
        stored = self._store.insert_project_mapping(
            RepoProjectMapping(
                repo_id=repo_id,
                repo_name=repo_name,
                repo_full_name=repo_full_name,
                project_id=project_id,
                owner_user_id=owner_user_id,
            )
        )
        if stored.project_id != project_id:
            logger.warning(
                "Another delivery mapped this repository first; using its project",
                extra={"repo_id": repo_id, "orphaned_project_id": project_id},
            )
        return stored.project_id

    def _sync_issue(
        self,
        issue: GitHubIssue,
        *,
        repo_id: str,
        project_id: str,
        workspace_id: str,
        owner_user_id: str,
    ) -> None:
        statuses = self._statuses.resolve(workspace_id)
        task = build_task_data(
            issue, project_id=project_id, workspace_id=workspace_id, statuses=statuses
        )

        mapping = self._store.get_task_mapping(issue.id)
        if mapping is None:
            task_id = self._motion.create_task(task)
            stored = self._store.insert_task_mapping(
                IssueTaskMapping(
                    issue_id=issue.id,
                    owner_user_id=owner_user_id,
                    task_id=task_id,
                    repo_id=repo_id,
                )
            )
            if stored.task_id != task_id:
                logger.warning(
                    "Another delivery mapped this issue first; using its task",
                    extra={"issue_id": issue.id, "orphaned_task_id": task_id},
                )
            return

        if self._motion.update_task(mapping.task_id, task):
            return

        logger.warning(
            "Mapped Motion task is gone; creating a replacement",
            extra={"issue_id": issue.id, "stale_task_id": mapping.task_id},
        )
        task_id = self._motion.create_task(task)
        self._store.update_task_mapping(issue.id, task_id)
