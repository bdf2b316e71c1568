"""Authentication, parsing and ingestion of the platform's call-event webhook."""

from __future__ import annotations

import hmac
import json
import logging

from pydantic import ValidationError

from signaling import codec
from signaling.errors import InvalidWebhookBodyError, UnauthorizedWebhookError
from signaling.relay import DeliveryOutcome, SignalingRelay
from signaling.schemas import CallEvent

LOGGER = logging.getLogger(__name__)


def authenticate(presented: str | None, secret: str) -> None:
    # Header values arrive latin-1 decoded; latin-1 re-encoding restores the raw bytes.
    if presented is None or not hmac.compare_digest(presented.encode("latin-1"), secret.encode("utf-8")):
        raise UnauthorizedWebhookError()


def parse_call_event(raw: bytes) -> CallEvent:
    try:
        body = json.loads(raw)
    except ValueError as exc:
        raise InvalidWebhookBodyError(f"Invalid JSON: {exc}") from exc

    if not isinstance(body, dict):
        raise InvalidWebhookBodyError("Webhook body must be a JSON object.")

    try:
        return CallEvent.from_body(body)
    except ValidationError as exc:
        raise InvalidWebhookBodyError(
            f"Webhook body failed validation ({exc.error_count()} error(s))"
        ) from exc


async def ingest_call_event(event: CallEvent, relay: SignalingRelay) -> DeliveryOutcome:
    """Record the call identifiers and push the matching message to the client."""

    LOGGER.info("Call event %r for call %s", event.event, event.id_call)
    session = relay.registry.upsert(event.id_call, event.id_conversation)

    if event.event == "connect":
        outcome = await relay.offer_call(session, event.rtc_session)
    else:
        outcome = await relay.deliver(codec.log_envelope("call_event", event.body), session=session)

    if outcome is not DeliveryOutcome.DELIVERED:
        LOGGER.warning("Call event %r for call %s not delivered: %s", event.event, event.id_call, outcome.value)
    return outcome
