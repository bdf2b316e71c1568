from __future__ import annotations

import os
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from signaling.errors import CallCommandTransportError  # noqa: E402
from signaling.relay import SignalingRelay  # noqa: E402
from signaling.sessions import CallSessionRegistry  # noqa: E402

WEBHOOK_PATH = "/webhooks/calls"
SECRET_HEADER = "X-Webhook-Secret"
SECRET = "s3cret"


class FakeDispatcher:
    """Records accept commands instead of calling the platform."""

    def __init__(self, *, status_code: int = 200, fail: bool = False) -> None:
        self.status_code = status_code
        self.fail = fail
        self.commands: list[dict] = []

    async def send_call_command(self, command) -> httpx.Response:
        self.commands.append(command.as_body())
        if self.fail:
            raise CallCommandTransportError("ConnectError: connection refused")
        return httpx.Response(self.status_code)


class FakeConnection:
    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[str] = []
        self.broken = broken

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.fixture(scope="session")
def app():
    # Must be set before importing modules that read settings.
    os.environ["CALL_API_URL"] = "https://calls.example.test/api/command"
    os.environ["CALL_API_TOKEN"] = "token-123"
    os.environ["ID_SOCIAL_CONTEXT"] = "ctx-1"
    os.environ["WEBHOOK_URL"] = WEBHOOK_PATH
    os.environ["WEBHOOK_SECRET_HEADER"] = SECRET_HEADER
    os.environ["WEBHOOK_SECRET"] = SECRET
    os.environ["PORT"] = "5000"

    import importlib

    for module_name in [
        "config.settings",
        "api.dependencies",
        "api.webhook_routes",
        "api.signaling_routes",
        "main",
    ]:
        sys.modules.pop(module_name, None)

    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture()
def relay(dispatcher) -> SignalingRelay:
    return SignalingRelay(CallSessionRegistry(), dispatcher)


@pytest.fixture()
def client(app, relay):
    import api.dependencies as deps

    app.dependency_overrides[deps.get_relay] = lambda: relay

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
