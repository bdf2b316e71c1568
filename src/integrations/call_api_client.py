"""HTTP client for the calling platform's call-command endpoint."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from config.settings import Settings, get_settings
from signaling.errors import CallCommandTransportError
from signaling.schemas import CallCommand

LOGGER = logging.getLogger(__name__)


class CallCommandSender(Protocol):
    async def send_call_command(self, command: CallCommand) -> httpx.Response: ...


class CallApiClient:
    """Sends one authenticated command per call; no retries.

    The platform's status code is returned untouched. Only failures to
    complete the request at all (DNS, connect, timeout) raise.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._endpoint = settings.call_api_url
        self._timeout = settings.call_api_timeout_seconds
        self._headers = {
            "Content-Type": "application/json",
            "idSocialNetwork": settings.id_social_context,
            "Authorization": settings.call_api_token,
        }
        self._transport = transport

    async def send_call_command(self, command: CallCommand) -> httpx.Response:
        LOGGER.info("Sending %s command for call %s", command.event, command.id_call)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._endpoint,
                    json=command.as_body(),
                    headers=self._headers,
                )
        except httpx.TransportError as exc:
            LOGGER.error("Call command for call %s failed: %s", command.id_call, exc)
            raise CallCommandTransportError(f"{type(exc).__name__}: {exc}") from exc

        LOGGER.info(
            "Call command result for call %s: ok=%s status=%s",
            command.id_call,
            response.is_success,
            response.status_code,
        )
        return response
