"""Wire codec for the signaling messages exchanged with the browser client.

Every frame is a JSON object with a string ``type`` discriminator. Variant
fields (``sdp``, ``candidate``, ``data``) are carried verbatim and are not
validated here; consumers deal with their shape.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar

from signaling.errors import SignalDecodeError, UnknownSignalTypeError


@dataclass(frozen=True)
class LogMessage:
    type: ClassVar[str] = "log"
    data: Any = None


@dataclass(frozen=True)
class OfferMessage:
    type: ClassVar[str] = "offer"
    sdp: Any = None


@dataclass(frozen=True)
class AnswerMessage:
    type: ClassVar[str] = "answer"
    sdp: Any = None


@dataclass(frozen=True)
class IceMessage:
    type: ClassVar[str] = "ice"
    candidate: Any = None


@dataclass(frozen=True)
class HangupMessage:
    type: ClassVar[str] = "hangup"


SignalMessage = LogMessage | OfferMessage | AnswerMessage | IceMessage | HangupMessage

_VARIANTS: dict[str, tuple[type, tuple[str, ...]]] = {
    "log": (LogMessage, ("data",)),
    "offer": (OfferMessage, ("sdp",)),
    "answer": (AnswerMessage, ("sdp",)),
    "ice": (IceMessage, ("candidate",)),
    "hangup": (HangupMessage, ()),
}


def log_envelope(kind: str, detail: dict[str, Any]) -> LogMessage:
    """Build a bridge-originated log message in the ``{kind, detail}`` envelope."""

    return LogMessage(data={"kind": kind, "detail": detail})


def encode(message: SignalMessage) -> str:
    _, fields = _VARIANTS[message.type]
    payload: dict[str, Any] = {"type": message.type}
    for name in fields:
        payload[name] = getattr(message, name)
    return json.dumps(payload)


def decode(raw: str | bytes) -> SignalMessage:
    """Parse one wire frame.

    Raises SignalDecodeError for anything that is not a JSON object with a
    string ``type``, and UnknownSignalTypeError when the type is not one of
    the known variants.
    """

    try:
        payload = json.loads(raw)
    except (ValueError, TypeError) as exc:
        raise SignalDecodeError(f"Invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise SignalDecodeError("Signaling message must be a JSON object.")

    message_type = payload.get("type")
    if not isinstance(message_type, str):
        raise SignalDecodeError("Signaling message has no string 'type' field.")

    variant = _VARIANTS.get(message_type)
    if variant is None:
        raise UnknownSignalTypeError(message_type)

    cls, fields = variant
    return cls(**{name: payload.get(name) for name in fields})
