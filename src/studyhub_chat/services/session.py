"""Per-connection chat state."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from uuid import uuid4

from studyhub_chat.schemas.chat import CommunityTarget, OutboundEvent, UserProfile

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Authentication state of a live connection."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


class ConnectionSession:
    """State bound to one live client connection.

    A session starts unauthenticated, gains an identity and a stream once the
    gateway authenticates it, and collects the groups it joins during its
    lifetime. Nothing here is persisted; the session dies with the socket.

    Outbound events are queued on ``outbox`` without suspending, and a
    transport-specific writer drains the queue to the wire.
    """

    def __init__(self, session_id: str | None = None, outbox_size: int = 0) -> None:
        """Initialize an unauthenticated session.

        Args:
            session_id: Optional identifier; a random one is generated otherwise.
            outbox_size: Maximum queued events, zero for unbounded.
        """
        self.session_id = session_id or uuid4().hex
        self.user_id: str | None = None
        self.stream: str | None = None
        self.group_ids: set[str] = set()
        self.outbox: asyncio.Queue[OutboundEvent] = asyncio.Queue(maxsize=outbox_size)
        self._closed = False

    def __repr__(self) -> str:
        return f"ConnectionSession(id={self.session_id!r}, user={self.user_id!r})"

    @property
    def state(self) -> SessionState:
        if self._closed:
            return SessionState.CLOSED
        if self.user_id is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def community_target(self) -> CommunityTarget | None:
        """Community room the session was subscribed to at authentication."""
        if self.stream is None:
            return None
        return CommunityTarget(stream=self.stream)

    def bind_identity(self, user: UserProfile) -> None:
        """Record the authenticated identity; a later call replaces it."""
        self.user_id = user.id
        self.stream = user.stream

    def deliver(self, event: OutboundEvent) -> bool:
        """Queue an event for this connection without suspending.

        Returns:
            False if the session is closed or its outbox is full.
        """
        if self._closed:
            return False
        try:
            self.outbox.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "Dropping %s for session %s: outbox full", event.event, self.session_id
            )
            return False
        return True

    def drain(self) -> list[OutboundEvent]:
        """Remove and return every queued event."""
        events: list[OutboundEvent] = []
        while True:
            try:
                events.append(self.outbox.get_nowait())
            except asyncio.QueueEmpty:
                return events

    def close(self) -> None:
        """Mark the session closed; later deliveries are discarded."""
        self._closed = True
