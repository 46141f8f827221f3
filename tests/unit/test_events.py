from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from github_motion_relay.github.events import IssuesEvent


def test_numeric_ids_become_strings(make_issues_payload: Callable[..., dict[str, Any]]) -> None:
    event = IssuesEvent.model_validate(make_issues_payload(issue_id=1001))

    assert event.repository.id == "42"
    assert event.issue.id == "1001"
    assert event.sender.login == "octocat"
    assert event.action == "opened"


def test_null_body_is_allowed(make_issues_payload: Callable[..., dict[str, Any]]) -> None:
    event = IssuesEvent.model_validate(make_issues_payload(body=None))

    assert event.issue.body is None


@pytest.mark.parametrize(("state", "closed"), [("open", False), ("closed", True)])
def test_is_closed(
    make_issues_payload: Callable[..., dict[str, Any]], state: str, closed: bool
) -> None:
    event = IssuesEvent.model_validate(make_issues_payload(state=state))

    assert event.issue.is_closed is closed


def test_unknown_fields_are_ignored(make_issues_payload: Callable[..., dict[str, Any]]) -> None:
    payload = make_issues_payload()
    payload["installation"] = {"id": 5}
    payload["issue"]["labels"] = [{"name": "bug"}]

    event = IssuesEvent.model_validate(payload)

    assert event.issue.title == "Crash on startup"


def test_missing_repository_is_rejected(make_issues_payload: Callable[..., dict[str, Any]]) -> None:
    payload = make_issues_payload()
    del payload["repository"]

    with pytest.raises(ValidationError):
        IssuesEvent.model_validate(payload)
