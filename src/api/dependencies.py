"""Shared FastAPI dependencies.

Separated to avoid circular imports between route modules.
"""

from __future__ import annotations

from functools import lru_cache

from config.settings import get_settings
from integrations.call_api_client import CallApiClient
from signaling.relay import SignalingRelay
from signaling.sessions import CallSessionRegistry


@lru_cache(maxsize=1)
def _relay_factory() -> SignalingRelay:
    settings = get_settings()
    registry = CallSessionRegistry(ttl_seconds=settings.session_ttl_seconds)
    return SignalingRelay(registry, CallApiClient(settings))


def get_relay() -> SignalingRelay:
    return _relay_factory()
