"""Realtime chat gateway.

The gateway owns the room router and coordinates every live chat event:
authentication, group room joins, message sends, reaction toggles, pin
changes and typing indicators. Transports (the WebSocket endpoint, the REST
pin route) are thin adapters over the methods defined here.

Policy failures (blocked content, disabled chat) are reported to the sender
as ``message_rejected`` events and never raised. Malformed or
unauthenticated requests and unknown messages are dropped and logged.
Database failures while writing abort the operation before anything is
broadcast.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from studyhub_chat.core.errors import InvalidTargetError, MessageNotFoundError
from studyhub_chat.core.settings import settings
from studyhub_chat.repositories.membership_repo import MembershipStore
from studyhub_chat.repositories.message_repo import MessageLog
from studyhub_chat.schemas.chat import (
    ChatMessageResponse,
    CommunityTarget,
    EnrichedMessage,
    MessageDraft,
    OutboundEvent,
    ReactionPayload,
    RejectionReason,
    SendMessagePayload,
    TypingPayload,
    UserProfile,
)
from studyhub_chat.services.moderation import ModerationFilter
from studyhub_chat.services.reactions import has_reacted, toggle_reaction
from studyhub_chat.services.rooms import RoomRouter, resolve_target, target_of
from studyhub_chat.services.session import ConnectionSession

logger = logging.getLogger(__name__)

# Outbound event names
EVENT_AUTHENTICATED = "authenticated"
EVENT_GROUP_JOINED = "group_joined"
EVENT_NEW_MESSAGE = "new_message"
EVENT_REACTION_UPDATED = "reaction_updated"
EVENT_MESSAGE_PINNED = "message_pinned"
EVENT_MESSAGE_REJECTED = "message_rejected"
EVENT_USER_TYPING = "user_typing"
EVENT_USER_STOP_TYPING = "user_stop_typing"

_REJECTION_TEXT = {
    RejectionReason.BLOCKED_CONTENT: "Your message contains inappropriate content",
    RejectionReason.CHAT_DISABLED: "Chat is currently disabled by admin",
}


def _event(name: str, **data: Any) -> OutboundEvent:
    return OutboundEvent(event=name, data=data)


def _enrich(message: ChatMessageResponse, author: UserProfile | None) -> EnrichedMessage:
    return EnrichedMessage(
        **message.model_dump(),
        user_name=author.name if author else None,
        user_photo=author.profile_photo if author else None,
    )


class ChatGateway:
    """Coordinates moderation, persistence and room fan-out for chat events."""

    def __init__(
        self,
        members: MembershipStore,
        messages: MessageLog,
        moderation: ModerationFilter | None = None,
        router: RoomRouter | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            members: Identity, membership and chat setting lookups.
            messages: Durable message log.
            moderation: Content filter; built from settings when omitted.
            router: Room router; a fresh one is created when omitted.
        """
        self.members = members
        self.messages = messages
        self.moderation = moderation or ModerationFilter.from_settings()
        self.router = router or RoomRouter(members)
        # One lock per message id while a reaction or pin write is in flight.
        self._message_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    # Connection lifecycle

    def connect(self, session_id: str | None = None) -> ConnectionSession:
        """Create the session for a newly opened connection."""
        session = ConnectionSession(session_id, outbox_size=settings.chat_outbox_size)
        logger.debug("Opened chat session %s", session.session_id)
        return session

    def disconnect(self, session: ConnectionSession) -> None:
        """Tear down a session after its transport closed."""
        self.router.leave(session)
        session.close()
        dropped = session.drain()
        logger.debug(
            "Closed chat session %s (%d undelivered events)",
            session.session_id,
            len(dropped),
        )

    async def authenticate(self, session: ConnectionSession, user_id: str) -> bool:
        """Bind a session to a user and subscribe it to its community room.

        Unknown users leave the session unauthenticated. A repeated call replaces the
        identity and drops every room the previous identity was subscribed to.
        """
        user = await self.members.get_user(user_id)
        if user is None:
            logger.info("Chat authentication failed for unknown user %s", user_id)
            return False
        if session.closed:
            return False

        # Group rooms were granted to the previous identity.
        self.router.leave(session)
        session.group_ids.clear()

        session.bind_identity(user)
        self.router.subscribe(session, CommunityTarget(stream=user.stream).room)
        session.deliver(
            _event(EVENT_AUTHENTICATED, user_id=user.id, stream=user.stream)
        )
        logger.info("User %s joined community:%s", user.username, user.stream)
        return True

    async def join_group(self, session: ConnectionSession, group_id: str) -> bool:
        """Subscribe an authenticated session to a group room it is accepted in."""
        joined = await self.router.join_group_room(session, group_id)
        if joined:
            session.deliver(_event(EVENT_GROUP_JOINED, group_id=group_id))
            logger.info("User %s joined group:%s", session.user_id, group_id)
        return joined

    # Messages

    async def send_message(
        self, session: ConnectionSession, payload: SendMessagePayload
    ) -> EnrichedMessage | None:
        """Validate, moderate, persist and broadcast a message.

        Returns:
            The broadcast message, or None when the message was dropped or rejected.
        """
        if not session.is_authenticated:
            logger.debug("Dropping message from unauthenticated session %s", session)
            return None

        try:
            target = resolve_target(payload.group_id, payload.stream)
        except InvalidTargetError as exc:
            logger.debug("Dropping message from %s: %s", session.user_id, exc)
            return None

        if self.moderation.should_reject(payload.kind, payload.content):
            logger.info("Blocked message from user %s", session.user_id)
            self._reject(session, RejectionReason.BLOCKED_CONTENT)
            return None

        author = await self.members.get_user(session.user_id)
        if author is None:
            logger.warning("Dropping message from vanished user %s", session.user_id)
            return None

        if isinstance(target, CommunityTarget) and not author.is_admin:
            setting = await self.members.get_chat_setting(target.stream)
            if setting is not None and not setting.enabled:
                self._reject(session, RejectionReason.CHAT_DISABLED)
                return None

        draft = MessageDraft(
            target=target,
            user_id=author.id,
            content=payload.content,
            kind=payload.kind,
        )
        try:
            message = await self.messages.create_message(draft)
        except SQLAlchemyError:
            logger.exception("Failed to store message from user %s", author.id)
            return None

        # No suspension between the write and the fan-out keeps per-room order
        # equal to persistence-completion order.
        enriched = _enrich(message, author)
        self.router.broadcast(
            target.room,
            _event(EVENT_NEW_MESSAGE, **enriched.model_dump(mode="json")),
        )
        return enriched

    async def add_reaction(
        self, session: ConnectionSession, payload: ReactionPayload
    ) -> ChatMessageResponse | None:
        """Toggle the session user's reaction on a message and broadcast the result."""
        if not session.is_authenticated:
            return None
        user_id = session.user_id

        async with self._lock_for(payload.message_id):
            message = await self.messages.get_message_by_id(payload.message_id)
            if message is None:
                logger.info("Reaction on unknown message %s ignored", payload.message_id)
                return None

            removing = has_reacted(message.reactions, payload.emoji, user_id)
            reactions = toggle_reaction(message.reactions, payload.emoji, user_id)
            try:
                updated = await self.messages.update_message_reactions(
                    message.id, reactions
                )
            except MessageNotFoundError:
                logger.info("Message %s vanished before its reaction was stored", message.id)
                return None
            except SQLAlchemyError:
                logger.exception("Failed to store reaction on message %s", message.id)
                return None

            logger.debug(
                "User %s %s %s on message %s",
                user_id,
                "removed" if removing else "added",
                payload.emoji,
                message.id,
            )
            self.router.broadcast(
                target_of(updated).room,
                _event(
                    EVENT_REACTION_UPDATED,
                    message_id=updated.id,
                    emoji=payload.emoji,
                    user_id=user_id,
                    reactions=updated.reactions,
                ),
            )
            return updated

    async def set_pinned(self, message_id: str, pinned: bool) -> ChatMessageResponse:
        """Set a message's pinned flag and broadcast it to the message's room.

        Callers are expected to have authorized the actor already.

        Raises:
            MessageNotFoundError: If the message does not exist.
        """
        async with self._lock_for(message_id):
            updated = await self.messages.update_message_pinned(message_id, pinned)
            self.router.broadcast(
                target_of(updated).room,
                _event(EVENT_MESSAGE_PINNED, message_id=updated.id, pinned=updated.pinned),
            )
            return updated

    # Typing indicators

    async def typing(
        self, session: ConnectionSession, payload: TypingPayload, active: bool = True
    ) -> None:
        """Tell the rest of a room that the session user started or stopped typing."""
        if not session.is_authenticated:
            return
        try:
            target = resolve_target(payload.group_id, payload.stream)
        except InvalidTargetError:
            return

        if active:
            # Same per-event lookup as new_message enrichment.
            user = await self.members.get_user(session.user_id)
            event = _event(
                EVENT_USER_TYPING,
                user_id=session.user_id,
                user_name=user.name if user else None,
            )
        else:
            event = _event(EVENT_USER_STOP_TYPING, user_id=session.user_id)
        self.router.broadcast(target.room, event, exclude=session)

    def _reject(self, session: ConnectionSession, reason: RejectionReason) -> None:
        session.deliver(
            _event(
                EVENT_MESSAGE_REJECTED,
                reason=reason.value,
                message=_REJECTION_TEXT[reason],
            )
        )

    def _lock_for(self, message_id: str) -> asyncio.Lock:
        lock = self._message_locks.get(message_id)
        if lock is None:
            lock = asyncio.Lock()
            self._message_locks[message_id] = lock
        return lock
