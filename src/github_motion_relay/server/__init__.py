"""FastAPI webhook adapter for github-motion-relay.

Design intent:
- Keep reconciliation logic in `github_motion_relay.sync.*`
- Keep HTTP concerns (status codes, sender check, payload validation) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from github_motion_relay.server.app import create_app
