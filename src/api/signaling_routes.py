"""WebSocket endpoint carrying signaling messages to and from the browser."""

from __future__ import annotations

from fastapi import Depends, WebSocket

from api.dependencies import get_relay
from signaling.relay import SignalingRelay


async def signaling_socket(
    websocket: WebSocket,
    relay: SignalingRelay = Depends(get_relay),
) -> None:
    await websocket.accept()
    relay.on_connection_established(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                return
            # Text and binary frames carry the same JSON.
            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes")
            if raw is None:
                continue
            await relay.on_message_received(websocket, raw)
    finally:
        relay.on_connection_closed(websocket)
