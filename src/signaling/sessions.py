"""In-memory call session registry.

Note: This is a single-process store. All methods are synchronous, so each
mutation runs to completion on the event loop without interleaving.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from signaling.errors import InvalidTransitionError

LOGGER = logging.getLogger(__name__)


class ClientConnection(Protocol):
    async def send_text(self, data: str) -> None: ...


class CallState(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    ACCEPTING = "accepting"
    ACTIVE = "active"
    ENDED = "ended"


_ALLOWED_TRANSITIONS: dict[CallState, frozenset[CallState]] = {
    CallState.IDLE: frozenset({CallState.AWAITING_ANSWER, CallState.ENDED}),
    CallState.AWAITING_ANSWER: frozenset(
        {CallState.AWAITING_ANSWER, CallState.ACCEPTING, CallState.ENDED}
    ),
    CallState.ACCEPTING: frozenset({CallState.ACTIVE, CallState.AWAITING_ANSWER, CallState.ENDED}),
    # A fresh connect event for a live call renegotiates it.
    CallState.ACTIVE: frozenset({CallState.AWAITING_ANSWER, CallState.ENDED}),
    CallState.ENDED: frozenset(),
}


@dataclass
class CallSession:
    id_call: str
    id_conversation: str
    state: CallState = CallState.IDLE
    connection: ClientConnection | None = None
    updated_at: float = field(default_factory=time.monotonic)

    def transition(self, new_state: CallState) -> None:
        if new_state not in _ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Call {self.id_call}: cannot move from {self.state.value} to {new_state.value}"
            )
        LOGGER.debug("Call %s: %s -> %s", self.id_call, self.state.value, new_state.value)
        self.state = new_state


class CallSessionRegistry:
    """Call sessions keyed by the platform's call id."""

    def __init__(
        self,
        *,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, CallSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, id_call: object) -> bool:
        return id_call in self._sessions

    def get(self, id_call: str) -> CallSession | None:
        return self._sessions.get(id_call)

    def upsert(self, id_call: str, id_conversation: str) -> CallSession:
        self.reclaim_stale()
        session = self._sessions.get(id_call)
        if session is None:
            session = CallSession(id_call=id_call, id_conversation=id_conversation, updated_at=self._clock())
            self._sessions[id_call] = session
            LOGGER.info("Tracking call %s (conversation %s)", id_call, id_conversation)
        else:
            session.id_conversation = id_conversation
            self.touch(session)
        return session

    def touch(self, session: CallSession) -> None:
        session.updated_at = self._clock()

    def find_for_connection(self, connection: ClientConnection) -> CallSession | None:
        """Return the most recently touched session this connection may act on.

        Sessions bound to the connection win over unbound ones; sessions bound
        to a different connection are never returned.
        """

        self.reclaim_stale()
        bound = [s for s in self._sessions.values() if s.connection is connection]
        if bound:
            return max(bound, key=lambda s: s.updated_at)
        unbound = [s for s in self._sessions.values() if s.connection is None]
        if unbound:
            return max(unbound, key=lambda s: s.updated_at)
        return None

    def detach_connection(self, connection: ClientConnection) -> int:
        detached = 0
        for session in self._sessions.values():
            if session.connection is connection:
                session.connection = None
                detached += 1
        return detached

    def end(self, id_call: str) -> CallSession | None:
        session = self._sessions.pop(id_call, None)
        if session is not None:
            session.transition(CallState.ENDED)
            session.connection = None
            LOGGER.info("Call %s ended", id_call)
        return session

    def reclaim_stale(self) -> list[str]:
        cutoff = self._clock() - self._ttl_seconds
        stale = [id_call for id_call, s in self._sessions.items() if s.updated_at < cutoff]
        for id_call in stale:
            session = self._sessions.pop(id_call)
            session.state = CallState.ENDED
            session.connection = None
            LOGGER.info("Reclaimed stale call %s", id_call)
        return stale
