"""GitHub webhook payload models."""

from github_motion_relay.github.events import (
    GitHubIssue,
    GitHubRepository,
    GitHubSender,
    IssuesEvent,
)

__all__ = ["GitHubIssue", "GitHubRepository", "GitHubSender", "IssuesEvent"]
