"""Data access helpers for the chat message log."""
from __future__ import annotations

import asyncio
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from studyhub_chat.core.errors import MessageNotFoundError
from studyhub_chat.models.message import ChatMessage
from studyhub_chat.schemas.chat import (
    ChatMessageResponse,
    ChatTarget,
    CommunityTarget,
    MessageDraft,
)

__all__ = ["MessageLog", "MessageRepository"]


class MessageLog(Protocol):
    """Append-only message store with mutable reaction and pin fields."""

    async def create_message(self, draft: MessageDraft) -> ChatMessageResponse: ...

    async def get_message_by_id(self, message_id: str) -> ChatMessageResponse | None: ...

    async def update_message_reactions(
        self, message_id: str, reactions: dict[str, list[str]]
    ) -> ChatMessageResponse: ...

    async def update_message_pinned(
        self, message_id: str, pinned: bool
    ) -> ChatMessageResponse: ...

    async def list_messages(
        self, target: ChatTarget, limit: int | None = None
    ) -> list[ChatMessageResponse]: ...


class MessageRepository:
    """SQLAlchemy-backed message log.

    Each call opens its own session and runs in a worker thread so the event
    loop keeps serving other connections while the database works.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the repository with a session factory."""
        self.session_factory = session_factory

    async def create_message(self, draft: MessageDraft) -> ChatMessageResponse:
        """Append a new message with no reactions and not pinned."""
        return await asyncio.to_thread(self._create_message, draft)

    async def get_message_by_id(self, message_id: str) -> ChatMessageResponse | None:
        """Return a message by identifier."""
        return await asyncio.to_thread(self._get_message_by_id, message_id)

    async def update_message_reactions(
        self, message_id: str, reactions: dict[str, list[str]]
    ) -> ChatMessageResponse:
        """Replace the reaction map of a message.

        Raises:
            MessageNotFoundError: If the message does not exist.
        """
        return await asyncio.to_thread(
            self._update, message_id, {"reactions": reactions}
        )

    async def update_message_pinned(
        self, message_id: str, pinned: bool
    ) -> ChatMessageResponse:
        """Set the pinned flag of a message.

        Raises:
            MessageNotFoundError: If the message does not exist.
        """
        return await asyncio.to_thread(self._update, message_id, {"pinned": pinned})

    async def list_messages(
        self, target: ChatTarget, limit: int | None = None
    ) -> list[ChatMessageResponse]:
        """Return a room's messages in ascending creation order."""
        return await asyncio.to_thread(self._list_messages, target, limit)

    def _create_message(self, draft: MessageDraft) -> ChatMessageResponse:
        target = draft.target
        message = ChatMessage(
            group_id=None if isinstance(target, CommunityTarget) else target.group_id,
            stream=target.stream if isinstance(target, CommunityTarget) else None,
            user_id=draft.user_id,
            content=draft.content,
            kind=draft.kind.value,
            pinned=False,
            reactions={},
        )
        with self.session_factory() as db:
            db.add(message)
            db.commit()
            db.refresh(message)
            return ChatMessageResponse.model_validate(message)

    def _get_message_by_id(self, message_id: str) -> ChatMessageResponse | None:
        with self.session_factory() as db:
            message = db.get(ChatMessage, message_id)
            if message is None:
                return None
            return ChatMessageResponse.model_validate(message)

    def _update(self, message_id: str, values: dict[str, Any]) -> ChatMessageResponse:
        with self.session_factory() as db:
            message = db.get(ChatMessage, message_id)
            if message is None:
                raise MessageNotFoundError(message_id)
            for key, value in values.items():
                setattr(message, key, value)
            db.commit()
            db.refresh(message)
            return ChatMessageResponse.model_validate(message)

    def _list_messages(
        self, target: ChatTarget, limit: int | None
    ) -> list[ChatMessageResponse]:
        stmt = select(ChatMessage)
        if isinstance(target, CommunityTarget):
            stmt = stmt.where(ChatMessage.stream == target.stream)
        else:
            stmt = stmt.where(ChatMessage.group_id == target.group_id)
        if limit is None:
            stmt = stmt.order_by(ChatMessage.created_at.asc())
        else:
            # Latest ``limit`` rows, flipped back to ascending below.
            stmt = stmt.order_by(ChatMessage.created_at.desc()).limit(limit)
        with self.session_factory() as db:
            rows = list(db.execute(stmt).scalars().all())
            if limit is not None:
                rows.reverse()
            return [ChatMessageResponse.model_validate(row) for row in rows]
