"""Entry point for the call signaling bridge service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from api.signaling_routes import signaling_socket
from api.webhook_routes import receive_call_event
from config.settings import get_settings

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info("Call-event webhook on POST %s", settings.webhook_url)
    LOGGER.info("Signaling WebSocket on %s", settings.signaling_ws_path)
    yield


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title="Call Signaling Bridge",
    description="Relays calling-platform webhooks to a browser client over WebSocket signaling.",
    lifespan=lifespan,
)
app.add_api_route(
    settings.webhook_url,
    receive_call_event,
    methods=["POST"],
    name="receive_call_event",
    tags=["webhook"],
)
app.add_api_websocket_route(settings.signaling_ws_path, signaling_socket, name="signaling_socket")


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
