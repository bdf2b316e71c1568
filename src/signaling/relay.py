"""Relay between the call session registry and the connected browser client."""

from __future__ import annotations

import logging
from enum import Enum

from integrations.call_api_client import CallCommandSender
from signaling import codec
from signaling.codec import (
    AnswerMessage,
    HangupMessage,
    IceMessage,
    LogMessage,
    OfferMessage,
    SignalMessage,
)
from signaling.errors import CallCommandTransportError, SignalDecodeError, UnknownSignalTypeError
from signaling.schemas import CallCommand
from signaling.sessions import CallSession, CallSessionRegistry, CallState, ClientConnection

LOGGER = logging.getLogger(__name__)


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    NO_ACTIVE_CONNECTION = "no_active_connection"
    SEND_FAILED = "send_failed"


class SignalingRelay:
    """Owns the current client connection and routes messages in both directions."""

    def __init__(self, registry: CallSessionRegistry, dispatcher: CallCommandSender) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._current: ClientConnection | None = None

    @property
    def registry(self) -> CallSessionRegistry:
        return self._registry

    @property
    def current_connection(self) -> ClientConnection | None:
        return self._current

    def on_connection_established(self, connection: ClientConnection) -> None:
        if self._current is not None and self._current is not connection:
            LOGGER.info("Client connected; replacing previous connection")
        else:
            LOGGER.info("Client connected")
        self._current = connection

    def on_connection_closed(self, connection: ClientConnection) -> None:
        if self._current is connection:
            self._current = None
        detached = self._registry.detach_connection(connection)
        LOGGER.info("Client disconnected (%d call session(s) detached)", detached)

    async def deliver(
        self,
        message: SignalMessage,
        *,
        session: CallSession | None = None,
    ) -> DeliveryOutcome:
        connection = session.connection if session is not None and session.connection else self._current
        if connection is None:
            LOGGER.warning("No client connected; dropping %s message", message.type)
            return DeliveryOutcome.NO_ACTIVE_CONNECTION

        try:
            await connection.send_text(codec.encode(message))
        except Exception:
            LOGGER.exception("Sending %s message to client failed", message.type)
            return DeliveryOutcome.SEND_FAILED

        LOGGER.debug("Sent %s message to client", message.type)
        return DeliveryOutcome.DELIVERED

    async def offer_call(self, session: CallSession, rtc_session: object) -> DeliveryOutcome:
        """Bind the session to the current client and send it the platform's offer."""

        session.transition(CallState.AWAITING_ANSWER)
        if self._current is not None:
            session.connection = self._current
        return await self.deliver(OfferMessage(sdp=rtc_session), session=session)

    async def on_message_received(self, connection: ClientConnection, raw: str | bytes) -> None:
        try:
            message = codec.decode(raw)
        except UnknownSignalTypeError as exc:
            LOGGER.warning("Ignoring message of unknown type %r", exc.message_type)
            return
        except SignalDecodeError as exc:
            LOGGER.warning("Discarding invalid client message: %s", exc.detail)
            return

        if isinstance(message, AnswerMessage):
            await self._handle_answer(connection, message)
        elif isinstance(message, HangupMessage):
            self._handle_hangup(connection)
        elif isinstance(message, OfferMessage):
            LOGGER.info("Offer received from client; not forwarded")
        elif isinstance(message, IceMessage):
            LOGGER.info("ICE candidate received from client; not forwarded")
        elif isinstance(message, LogMessage):
            LOGGER.info("Client log: %s", message.data)

    async def _handle_answer(self, connection: ClientConnection, message: AnswerMessage) -> None:
        session = self._registry.find_for_connection(connection)
        if session is None:
            await self._reject_answer(connection, None, "no call in progress")
            return
        if session.state is not CallState.AWAITING_ANSWER:
            await self._reject_answer(connection, session, f"call is {session.state.value}")
            return

        LOGGER.info("Answer received for call %s", session.id_call)
        session.connection = connection
        session.transition(CallState.ACCEPTING)
        self._registry.touch(session)

        command = CallCommand(
            id_call=session.id_call,
            id_conversation=session.id_conversation,
            rtc_session=message.sdp,
        )
        try:
            response = await self._dispatcher.send_call_command(command)
        except CallCommandTransportError as exc:
            if self._still_accepting(session):
                session.transition(CallState.AWAITING_ANSWER)
            await self.deliver(
                codec.log_envelope(
                    "call_command_failed",
                    {"idCall": session.id_call, "error": exc.detail},
                ),
                session=session,
            )
            return

        if not self._still_accepting(session):
            LOGGER.warning(
                "Accept for call %s finished after the call moved on (%s); result ignored",
                session.id_call,
                session.state.value,
            )
            return

        if not response.is_success:
            # The platform's status is not a dispatch failure; the client is not told.
            LOGGER.warning(
                "Platform refused accept for call %s with status %s",
                session.id_call,
                response.status_code,
            )
            session.transition(CallState.AWAITING_ANSWER)
            return

        session.transition(CallState.ACTIVE)

    def _still_accepting(self, session: CallSession) -> bool:
        """False once a re-offer, hangup or reclaim replaced the in-flight accept."""

        return self._registry.get(session.id_call) is session and session.state is CallState.ACCEPTING

    async def _reject_answer(
        self,
        connection: ClientConnection,
        session: CallSession | None,
        reason: str,
    ) -> None:
        id_call = session.id_call if session is not None else None
        LOGGER.warning("Rejecting answer (call %s): %s", id_call, reason)
        try:
            await connection.send_text(
                codec.encode(codec.log_envelope("answer_rejected", {"idCall": id_call, "reason": reason}))
            )
        except Exception:
            LOGGER.exception("Sending answer rejection to client failed")

    def _handle_hangup(self, connection: ClientConnection) -> None:
        session = self._registry.find_for_connection(connection)
        if session is None:
            LOGGER.info("Hangup received with no call in progress")
            return
        self._registry.end(session.id_call)
