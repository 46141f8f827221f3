"""CLI entrypoint for the relay.

- `serve` runs the webhook app under uvicorn
- `list-workspaces` prints the Motion workspaces an API key can see
- `replay` pushes a saved webhook delivery through the same handler as `serve`
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_motion_relay import __version__
from github_motion_relay.config import DEFAULT_MOTION_BASE_URL, RelaySettings
from github_motion_relay.errors import MotionApiError
from github_motion_relay.logging import configure_logging
from github_motion_relay.motion.client import MotionClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motion-relay",
        description="Relay GitHub issue webhooks into Motion tasks",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-motion-relay {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind")

    list_workspaces = subparsers.add_parser(
        "list-workspaces",
        help="Print the Motion workspaces (name and id) visible to an API key",
    )
    list_workspaces.add_argument("api_key", help="Motion API key")
    list_workspaces.add_argument(
        "--base-url",
        default=DEFAULT_MOTION_BASE_URL,
        help="Motion API base URL",
    )

    replay = subparsers.add_parser(
        "replay",
        help="Process a saved webhook delivery (JSON body) without running the server",
    )
    replay.add_argument("payload", type=Path, help="Path to the JSON payload file")
    replay.add_argument(
        "--event",
        default="issues",
        help="Value of the X-GitHub-Event header for this delivery",
    )
    return parser


def _list_workspaces(api_key: str, base_url: str) -> int:
    try:
        client = MotionClient(api_key=api_key, base_url=base_url)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        workspaces = client.list_workspaces()
    except MotionApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    print("Workspaces:")
    for workspace in workspaces:
        print(f'Name: {workspace.name}, ID: "{workspace.id}"')
    return 0


def _load_settings() -> RelaySettings | None:
    try:
        return RelaySettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        # The rendered exception echoes input values, API key included.
        for error in e.errors():
            field = ".".join(str(p) for p in error["loc"])
            print(f"  {field}: {error['msg']}" if field else f"  {error['msg']}", file=sys.stderr)
        return None


def _serve(settings: RelaySettings, *, host: str, port: int) -> int:
    import uvicorn

    from github_motion_relay.server.app import create_app

    app = create_app(settings)
    logger.info("Starting webhook server", extra={"host": host, "port": port})
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


def _replay(settings: RelaySettings, *, payload_path: Path, event: str) -> int:
    from github_motion_relay.server.app import build_service, handle_github_event

    try:
        payload = json.loads(payload_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Cannot read {payload_path}: {e}", file=sys.stderr)
        return 1
    if not isinstance(payload, dict):
        print(f"{payload_path} must contain a JSON object", file=sys.stderr)
        return 1

    service = build_service(settings)
    try:
        response = handle_github_event(event, payload, settings=settings, service=service)
    finally:
        service.close()
    print(f"{response.status_code} {bytes(response.body).decode('utf-8')}")
    return 0 if 200 <= response.status_code < 300 else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "list-workspaces":
        return _list_workspaces(args.api_key, args.base_url)

    settings = _load_settings()
    if settings is None:
        return 2

    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(settings, host=args.host, port=args.port)
    if args.command == "replay":
        return _replay(settings, payload_path=args.payload, event=args.event)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
