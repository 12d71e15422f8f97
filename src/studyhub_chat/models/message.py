# src/studyhub_chat/models/message.py
"""Models for community and group chat messages."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyhub_chat.db.session import Base
from studyhub_chat.db.time import new_id, utcnow


class ChatMessage(Base):
    """Message posted into a community stream or a private group.

    Exactly one of ``group_id`` and ``stream`` is set; it decides the room the
    message is broadcast to.
    """

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "(group_id IS NULL) <> (stream IS NULL)",
            name="ck_messages_single_scope",
        ),
        Index("ix_messages_group_id_created_at", "group_id", "created_at"),
        Index("ix_messages_stream_created_at", "stream", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    group_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=True
    )
    stream: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    # Text body, or the media URL for image messages.
    content: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(Text, nullable=False, default="text")
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # {emoji: [user_id, ...]}
    reactions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
