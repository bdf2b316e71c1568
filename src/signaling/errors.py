"""Domain-specific exceptions for the signaling bridge.

Safe to import from API layers; nothing here touches the network.
"""

from __future__ import annotations


class BridgeError(Exception):
    default_detail: str = "Signaling bridge error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class WebhookRejectedError(BridgeError):
    default_detail = "Webhook rejected."


class UnauthorizedWebhookError(WebhookRejectedError):
    default_detail = "Webhook secret mismatch."


class InvalidWebhookBodyError(WebhookRejectedError):
    default_detail = "Webhook body is not a valid call event."


class SignalDecodeError(BridgeError):
    default_detail = "Signaling message could not be decoded."


class UnknownSignalTypeError(SignalDecodeError):
    default_detail = "Unknown signaling message type."

    def __init__(self, message_type: str) -> None:
        super().__init__(f"Unknown signaling message type: {message_type!r}")
        self.message_type = message_type


class CallCommandTransportError(BridgeError):
    default_detail = "Call command request failed."


class InvalidTransitionError(BridgeError):
    default_detail = "Illegal call session transition."
