"""Motion REST API client.

Wraps the handful of Motion v1 endpoints the relay needs so the sync logic never
touches HTTP directly and tests can swap in a mock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from github_motion_relay.config import DEFAULT_MOTION_BASE_URL
from github_motion_relay.errors import MotionApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MotionProject:
    """Minimal project metadata returned from Motion."""

    id: str
    name: str
    workspace_id: str


@dataclass(frozen=True, slots=True)
class MotionStatus:
    """A task status defined for a workspace."""

    name: str
    is_default: bool
    is_resolved: bool


@dataclass(frozen=True, slots=True)
class MotionWorkspace:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class TaskData:
    """Task fields written to Motion on create and update."""

    name: str
    description: str
    status: str
    project_id: str
    workspace_id: str

    def to_create_json(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "projectId": self.project_id,
            "workspaceId": self.workspace_id,
        }

    def to_update_json(self) -> dict[str, str]:
        # PATCH /tasks rejects workspaceId; tasks cannot move between workspaces.
        payload = self.to_create_json()
        del payload["workspaceId"]
        return payload


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class MotionClient:
    """Small wrapper around the Motion REST API for the operations the relay needs."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_MOTION_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Motion API key is required")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "X-API-Key": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "github-motion-relay",
            }
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._session.close()

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise MotionApiError(f"Motion request {method} {url} failed: {e}") from e

    @staticmethod
    def _fail(response: requests.Response, action: str) -> MotionApiError:
        logger.error(
            "Motion API call failed",
            extra={
                "action": action,
                "status_code": response.status_code,
                "response": response.text[:500],
            },
        )
        return MotionApiError(
            f"Failed to {action} (HTTP {response.status_code})",
            status_code=response.status_code,
        )

    @staticmethod
    def _json(response: requests.Response, action: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MotionApiError(
                f"Failed to {action}: response is not JSON", status_code=response.status_code
            ) from e

    @classmethod
    def _json_object(cls, response: requests.Response, action: str) -> dict[str, Any]:
        data = cls._json(response, action)
        if not isinstance(data, dict):
            raise MotionApiError(
                f"Failed to {action}: expected a JSON object", status_code=response.status_code
            )
        return data

    def get_project(self, project_id: str) -> MotionProject | None:
        """Fetch a project, returning None when Motion no longer knows it."""

        resp = self._request("GET", f"projects/{project_id}")
        if resp.status_code == 404:
            logger.warning("Motion project not found", extra={"project_id": project_id})
            return None
        if not _is_success(resp):
            raise self._fail(resp, "fetch Motion project")

        data = self._json_object(resp, "fetch Motion project")
        return MotionProject(
            id=str(data.get("id") or project_id),
            name=str(data.get("name") or ""),
            workspace_id=str(data.get("workspaceId") or ""),
        )

    def create_project(self, *, name: str, workspace_id: str) -> str:
        resp = self._request("POST", "projects", json={"name": name, "workspaceId": workspace_id})
        if not _is_success(resp):
            raise self._fail(resp, "create Motion project")

        data = self._json_object(resp, "create Motion project")
        project_id = data.get("id")
        if not project_id:
            raise MotionApiError(
                "Failed to create Motion project: response has no id",
                status_code=resp.status_code,
            )
        logger.info(
            "Created Motion project",
            extra={"project_id": project_id, "workspace_id": workspace_id},
        )
        return str(project_id)

    def create_task(self, task: TaskData) -> str:
        resp = self._request("POST", "tasks", json=task.to_create_json())
        if not _is_success(resp):
            raise self._fail(resp, "create Motion task")

        data = self._json_object(resp, "create Motion task")
        task_id = data.get("id")
        if not task_id:
            raise MotionApiError(
                "Failed to create Motion task: response has no id",
                status_code=resp.status_code,
            )
        logger.info("Created Motion task", extra={"task_id": task_id})
        return str(task_id)

    def update_task(self, task_id: str, task: TaskData) -> bool:
        """Update a task in place.

        Returns:
            False when Motion reports the task as missing, so the caller can
            treat its binding as stale. Any other failure raises.
        """

        resp = self._request("PATCH", f"tasks/{task_id}", json=task.to_update_json())
        if resp.status_code == 404:
            logger.warning("Motion task not found", extra={"task_id": task_id})
            return False
        if not _is_success(resp):
            raise self._fail(resp, f"update Motion task {task_id}")

        logger.info("Updated Motion task", extra={"task_id": task_id})
        return True

    def list_statuses(self, workspace_id: str) -> list[MotionStatus]:
        resp = self._request("GET", "statuses", params={"workspaceId": workspace_id})
        if not _is_success(resp):
            raise self._fail(resp, "fetch workspace statuses")

        raw = self._json(resp, "fetch workspace statuses")
        if not isinstance(raw, list):
            raise MotionApiError("Failed to fetch workspace statuses: expected a list")

        statuses: list[MotionStatus] = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            statuses.append(
                MotionStatus(
                    name=str(item["name"]),
                    is_default=bool(item.get("isDefaultStatus")),
                    is_resolved=bool(item.get("isResolvedStatus")),
                )
            )
        return statuses

    def list_workspaces(self) -> list[MotionWorkspace]:
        resp = self._request("GET", "workspaces")
        if not _is_success(resp):
            raise self._fail(resp, "list Motion workspaces")

        workspaces = self._json_object(resp, "list Motion workspaces").get("workspaces")
        if not isinstance(workspaces, list):
            raise MotionApiError("Unable to find workspaces in the response")

        return [
            MotionWorkspace(id=str(item.get("id") or ""), name=str(item.get("name") or ""))
            for item in workspaces
            if isinstance(item, dict)
        ]
