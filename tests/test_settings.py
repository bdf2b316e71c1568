from __future__ import annotations

import pytest
from pydantic import ValidationError

from config.settings import Settings

REQUIRED = {
    "call_api_url": "https://calls.example.test/api/command",
    "call_api_token": "token-123",
    "id_social_context": "ctx-1",
    "webhook_url": "/webhooks/calls",
    "webhook_secret_header": "X-Webhook-Secret",
    "webhook_secret": "s3cret",
    "port": 5000,
}


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_setting_fails(monkeypatch, missing):
    monkeypatch.delenv(missing.upper(), raising=False)
    values = {key: value for key, value in REQUIRED.items() if key != missing}

    with pytest.raises(ValidationError):
        Settings(_env_file=None, **values)


def test_defaults():
    settings = Settings(_env_file=None, **REQUIRED)

    assert settings.signaling_ws_path == "/ws/signaling"
    assert settings.call_api_timeout_seconds == 30.0
    assert settings.host == "0.0.0.0"


def test_webhook_url_must_be_a_path():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "webhook_url": "webhooks/calls"})
