"""Room naming and subscription routing for the realtime chat."""

from __future__ import annotations

import logging

from studyhub_chat.core.errors import InvalidTargetError
from studyhub_chat.repositories.membership_repo import MembershipStore
from studyhub_chat.schemas.chat import (
    ChatMessageResponse,
    ChatTarget,
    CommunityTarget,
    GroupTarget,
    OutboundEvent,
)
from studyhub_chat.schemas.group import MembershipStatus
from studyhub_chat.services.session import ConnectionSession

logger = logging.getLogger(__name__)


def resolve_target(group_id: str | None, stream: str | None) -> ChatTarget:
    """Return the room a request addresses.

    Empty strings count as absent.

    Raises:
        InvalidTargetError: If neither or both of ``group_id`` and ``stream`` are given.
    """
    if group_id and stream:
        raise InvalidTargetError("Both group_id and stream given")
    if group_id:
        return GroupTarget(group_id=group_id)
    if stream:
        return CommunityTarget(stream=stream)
    raise InvalidTargetError("Neither group_id nor stream given")


def target_of(message: ChatMessageResponse) -> ChatTarget:
    """Return the room a persisted message belongs to."""
    return resolve_target(message.group_id, message.stream)


class RoomRouter:
    """In-process map from room names to the sessions subscribed to them.

    Owned by one gateway; nothing is shared across processes.
    """

    def __init__(self, members: MembershipStore) -> None:
        """Initialize an empty router.

        Args:
            members: Store consulted before a session may join a group room.
        """
        self._members = members
        self._rooms: dict[str, set[ConnectionSession]] = {}
        self._session_rooms: dict[ConnectionSession, set[str]] = {}

    def subscribe(self, session: ConnectionSession, room: str) -> None:
        """Add a session to a room."""
        self._rooms.setdefault(room, set()).add(session)
        self._session_rooms.setdefault(session, set()).add(room)

    def unsubscribe(self, session: ConnectionSession, room: str) -> None:
        """Remove a session from a room; unknown pairs are ignored."""
        subscribers = self._rooms.get(room)
        if subscribers is not None:
            subscribers.discard(session)
            if not subscribers:
                del self._rooms[room]
        rooms = self._session_rooms.get(session)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._session_rooms[session]

    async def join_group_room(self, session: ConnectionSession, group_id: str) -> bool:
        """Subscribe a session to a group room if its user is an accepted member.

        Returns:
            True if the session is now subscribed, False if the join was dropped.
        """
        if not session.is_authenticated:
            return False

        memberships = await self._members.get_group_members(group_id)
        is_member = any(
            m.user_id == session.user_id and m.status is MembershipStatus.ACCEPTED
            for m in memberships
        )
        if not is_member:
            logger.debug(
                "Refusing group room %s for user %s: no accepted membership",
                group_id,
                session.user_id,
            )
            return False
        # The socket may have gone away while the lookup was in flight.
        if session.closed:
            return False

        self.subscribe(session, GroupTarget(group_id=group_id).room)
        session.group_ids.add(group_id)
        return True

    def leave(self, session: ConnectionSession) -> None:
        """Remove a session from every room it is subscribed to."""
        for room in self._session_rooms.pop(session, set()):
            subscribers = self._rooms.get(room)
            if subscribers is None:
                continue
            subscribers.discard(session)
            if not subscribers:
                del self._rooms[room]

    def subscribers(self, room: str) -> frozenset[ConnectionSession]:
        """Return the sessions currently subscribed to a room."""
        return frozenset(self._rooms.get(room, ()))

    def rooms_of(self, session: ConnectionSession) -> frozenset[str]:
        """Return the rooms a session is subscribed to."""
        return frozenset(self._session_rooms.get(session, ()))

    def broadcast(
        self,
        room: str,
        event: OutboundEvent,
        exclude: ConnectionSession | None = None,
    ) -> int:
        """Queue an event on every session subscribed to ``room`` right now.

        Returns:
            Number of sessions the event was queued for.
        """
        delivered = 0
        for session in list(self._rooms.get(room, ())):
            if session is exclude:
                continue
            if session.deliver(event):
                delivered += 1
        return delivered
