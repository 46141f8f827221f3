"""Pydantic models for the parts of GitHub webhook payloads the relay reads.

Only the ``issues`` event is modelled. GitHub sends numeric ids; they are
coerced to strings because they are used as mapping keys.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

ISSUES_EVENT = "issues"


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GitHubSender(_Payload):
    login: str = Field(min_length=1)


class GitHubRepository(_Payload):
    id: str
    name: str
    full_name: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class GitHubIssue(_Payload):
    id: str
    title: str
    body: str | None = None
    state: str
    html_url: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"


class IssuesEvent(_Payload):
    """An ``issues`` webhook delivery (opened, edited, closed, reopened, ...)."""

    action: str = ""
    sender: GitHubSender
    repository: GitHubRepository
    issue: GitHubIssue
