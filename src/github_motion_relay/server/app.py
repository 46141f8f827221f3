"""FastAPI app factory.

The webhook endpoint is a thin wrapper over :class:`IssueSyncService`: it checks
the sender, validates the payload and maps the outcome to a status code.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from github_motion_relay import __version__
from github_motion_relay.config import RelaySettings
from github_motion_relay.errors import RelayError
from github_motion_relay.github.events import ISSUES_EVENT, IssuesEvent
from github_motion_relay.motion.client import MotionClient
from github_motion_relay.store.mappings import MappingStore
from github_motion_relay.sync.reconciler import IssueSyncService

logger = logging.getLogger(__name__)


def _sender_login(payload: dict[str, Any]) -> str | None:
    sender = payload.get("sender")
    if not isinstance(sender, dict):
        return None
    login = sender.get("login")
    return login if isinstance(login, str) and login else None


def handle_github_event(
    event_type: str | None,
    payload: dict[str, Any],
    *,
    settings: RelaySettings,
    service: IssueSyncService,
) -> PlainTextResponse:
    """Process one webhook delivery.

    Only the configured sender is accepted. Events other than ``issues`` are
    acknowledged and ignored.
    """

    sender = _sender_login(payload)
    if sender is None:
        return PlainTextResponse("Sender not found", status_code=400)
    if sender != settings.allowed_sender:
        logger.warning("Rejected event from unexpected sender", extra={"sender": sender})
        return PlainTextResponse("Bad user", status_code=400)

    if event_type != ISSUES_EVENT:
        logger.info("Ignoring unsupported event", extra={"event": event_type})
        return PlainTextResponse("Event processed", status_code=200)

    try:
        event = IssuesEvent.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return PlainTextResponse(f"Invalid issues payload: {fields}", status_code=400)

    try:
        service.relay_issue_event(event, workspace_id=settings.motion_workspace_id)
    except RelayError as e:
        logger.exception("Error processing event", extra={"issue_id": event.issue.id})
        return PlainTextResponse(f"Error processing event: {e}", status_code=500)

    return PlainTextResponse("Event processed", status_code=200)


def build_service(settings: RelaySettings) -> IssueSyncService:
    motion = MotionClient(
        api_key=settings.motion_api_key,
        base_url=settings.motion_base_url,
        timeout=settings.motion_timeout_seconds,
    )
    store = MappingStore(settings.mappings_path)
    return IssueSyncService(motion=motion, store=store)


def create_app(
    settings: RelaySettings | None = None,
    *,
    service: IssueSyncService | None = None,
) -> FastAPI:
    if settings is None:
        settings = RelaySettings()
    if service is None:
        service = build_service(settings)

    app = FastAPI(
        title="GitHub Motion Relay",
        version=__version__,
        description="Relays GitHub issue webhooks into Motion tasks.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url=None,
    )

    # Expose settings and the service for request handlers and tests.
    app.state.settings = settings
    app.state.service = service

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_request: Request, _exc: RequestValidationError) -> PlainTextResponse:
        return PlainTextResponse("Invalid request", status_code=400)

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/", response_class=PlainTextResponse)
    def github_webhook(
        payload: dict[str, Any] = Body(...),
        x_github_event: str | None = Header(default=None),
    ) -> PlainTextResponse:
        return handle_github_event(
            x_github_event, payload, settings=settings, service=service
        )

    @app.api_route(
        "/",
        methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    def invalid_request() -> PlainTextResponse:
        return PlainTextResponse("Invalid request", status_code=400)

    return app
