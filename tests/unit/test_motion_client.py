"""Unit tests for the Motion REST client (session mocked)."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
import requests

from github_motion_relay.errors import MotionApiError
from github_motion_relay.motion.client import (
    MotionClient,
    MotionProject,
    MotionStatus,
    MotionWorkspace,
    TaskData,
)


def _response(status_code: int, payload: Any = None, text: str = "") -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = payload
    return resp


def _client(*responses: Mock) -> tuple[MotionClient, Mock]:
    session = Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    client = MotionClient(
        api_key="test-key",
        base_url="https://api.usemotion.com/v1/",
        timeout=5.0,
        session=session,
    )
    return client, session


TASK = TaskData(
    name="Crash on startup",
    description="https://github.com/octo-org/octo-repo/issues/7\n\nSteps",
    status="Todo",
    project_id="project-1",
    workspace_id="ws-1",
)


def test_api_key_is_required() -> None:
    with pytest.raises(ValueError):
        MotionClient(api_key="", session=Mock())


def test_session_carries_api_key_header() -> None:
    client, session = _client()

    assert session.headers["X-API-Key"] == "test-key"
    assert session.headers["Content-Type"] == "application/json"
    assert client.base_url == "https://api.usemotion.com/v1"


def test_get_project_returns_project() -> None:
    client, session = _client(
        _response(200, {"id": "project-1", "name": "octo-repo", "workspaceId": "ws-1"})
    )

    project = client.get_project("project-1")

    assert project == MotionProject(id="project-1", name="octo-repo", workspace_id="ws-1")
    session.request.assert_called_once_with(
        "GET", "https://api.usemotion.com/v1/projects/project-1", timeout=5.0
    )


def test_get_project_returns_none_on_404() -> None:
    client, _ = _client(_response(404, text="Not Found"))

    assert client.get_project("gone") is None


def test_get_project_raises_on_server_error() -> None:
    client, _ = _client(_response(500, text="boom"))

    with pytest.raises(MotionApiError) as excinfo:
        client.get_project("project-1")

    assert excinfo.value.status_code == 500


def test_create_project_posts_name_and_workspace() -> None:
    client, session = _client(_response(201, {"id": "project-9"}))

    assert client.create_project(name="octo-repo", workspace_id="ws-1") == "project-9"
    session.request.assert_called_once_with(
        "POST",
        "https://api.usemotion.com/v1/projects",
        timeout=5.0,
        json={"name": "octo-repo", "workspaceId": "ws-1"},
    )


def test_create_project_raises_on_failure() -> None:
    client, _ = _client(_response(400, text="bad request"))

    with pytest.raises(MotionApiError):
        client.create_project(name="octo-repo", workspace_id="ws-1")


def test_create_task_sends_full_payload() -> None:
    client, session = _client(_response(200, {"id": "task-1"}))

    assert client.create_task(TASK) == "task-1"
    _, kwargs = session.request.call_args
    assert kwargs["json"] == {
        "name": "Crash on startup",
        "description": "https://github.com/octo-org/octo-repo/issues/7\n\nSteps",
        "status": "Todo",
        "projectId": "project-1",
        "workspaceId": "ws-1",
    }


def test_create_task_without_id_is_an_error() -> None:
    client, _ = _client(_response(200, {}))

    with pytest.raises(MotionApiError):
        client.create_task(TASK)


@pytest.mark.parametrize(
    ("call", "payload"),
    [
        (lambda c: c.get_project("project-1"), ["unexpected"]),
        (lambda c: c.create_project(name="octo-repo", workspace_id="ws-1"), "project-9"),
        (lambda c: c.create_task(TASK), None),
        (lambda c: c.list_workspaces(), [{"id": "ws-1"}]),
    ],
)
def test_non_object_success_body_is_an_api_error(call: Any, payload: Any) -> None:
    client, _ = _client(_response(200, payload))

    with pytest.raises(MotionApiError) as excinfo:
        call(client)

    assert "expected a JSON object" in str(excinfo.value)
    assert excinfo.value.status_code == 200


def test_update_task_omits_workspace() -> None:
    client, session = _client(_response(200, {"id": "task-1"}))

    assert client.update_task("task-1", TASK) is True
    args, kwargs = session.request.call_args
    assert args == ("PATCH", "https://api.usemotion.com/v1/tasks/task-1")
    assert "workspaceId" not in kwargs["json"]
    assert kwargs["json"]["projectId"] == "project-1"


def test_update_task_reports_missing_task() -> None:
    client, _ = _client(_response(404, text="Not Found"))

    assert client.update_task("gone", TASK) is False


def test_update_task_raises_on_other_errors() -> None:
    client, _ = _client(_response(401, text="Unauthorized"))

    with pytest.raises(MotionApiError) as excinfo:
        client.update_task("task-1", TASK)

    assert excinfo.value.status_code == 401


def test_list_statuses_parses_flags() -> None:
    client, session = _client(
        _response(
            200,
            [
                {"name": "Todo", "isDefaultStatus": True, "isResolvedStatus": False},
                {"name": "Done", "isDefaultStatus": False, "isResolvedStatus": True},
                {"isDefaultStatus": True},
            ],
        )
    )

    statuses = client.list_statuses("ws-1")

    assert statuses == [
        MotionStatus(name="Todo", is_default=True, is_resolved=False),
        MotionStatus(name="Done", is_default=False, is_resolved=True),
    ]
    _, kwargs = session.request.call_args
    assert kwargs["params"] == {"workspaceId": "ws-1"}


def test_list_statuses_raises_on_failure() -> None:
    client, _ = _client(_response(503, text="unavailable"))

    with pytest.raises(MotionApiError):
        client.list_statuses("ws-1")


def test_list_workspaces() -> None:
    client, _ = _client(
        _response(200, {"workspaces": [{"id": "ws-1", "name": "Personal"}], "meta": {}})
    )

    assert client.list_workspaces() == [MotionWorkspace(id="ws-1", name="Personal")]


def test_list_workspaces_requires_workspaces_key() -> None:
    client, _ = _client(_response(200, {"meta": {}}))

    with pytest.raises(MotionApiError):
        client.list_workspaces()


def test_transport_errors_are_wrapped() -> None:
    session = Mock()
    session.headers = {}
    session.request.side_effect = requests.ConnectionError("connection refused")
    client = MotionClient(api_key="test-key", session=session)

    with pytest.raises(MotionApiError) as excinfo:
        client.get_project("project-1")

    assert excinfo.value.status_code is None
