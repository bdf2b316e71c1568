"""Call-event webhook pushed by the calling platform.

The route path is configurable, so the handler is registered on the app in
``main`` rather than through a decorator.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.responses import PlainTextResponse

from api.dependencies import get_relay
from config.settings import get_settings
from signaling.errors import WebhookRejectedError
from signaling.relay import SignalingRelay
from signaling.webhook import authenticate, ingest_call_event, parse_call_event

LOGGER = logging.getLogger(__name__)


async def receive_call_event(
    request: Request,
    relay: SignalingRelay = Depends(get_relay),
) -> PlainTextResponse:
    settings = get_settings()
    try:
        authenticate(request.headers.get(settings.webhook_secret_header), settings.webhook_secret)
        event = parse_call_event(await request.body())
    except WebhookRejectedError as exc:
        LOGGER.warning("Webhook rejected: %s", exc.detail)
        return PlainTextResponse("invalid body", status_code=400)

    # Delivery problems are logged by the relay; the platform still gets its ack.
    await ingest_call_event(event, relay)
    return PlainTextResponse("ok")
