# src/studyhub_chat/schemas/chat.py
"""Chat message, room target and realtime event schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageKind(str, Enum):
    """Payload type of a chat message."""

    TEXT = "text"
    IMAGE = "image"


class RejectionReason(str, Enum):
    """Why a message was refused before it reached the log."""

    BLOCKED_CONTENT = "blocked_content"
    CHAT_DISABLED = "chat_disabled"


class CommunityTarget(BaseModel):
    """Community room shared by everyone on a stream."""

    model_config = ConfigDict(frozen=True)

    scope: Literal["community"] = "community"
    stream: str

    @property
    def room(self) -> str:
        return f"community:{self.stream}"


class GroupTarget(BaseModel):
    """Room of a single private group."""

    model_config = ConfigDict(frozen=True)

    scope: Literal["group"] = "group"
    group_id: str

    @property
    def room(self) -> str:
        return f"group:{self.group_id}"


ChatTarget = CommunityTarget | GroupTarget


class UserProfile(BaseModel):
    """Identity fields the chat reads from the membership store."""

    id: str
    name: str
    username: str
    stream: str
    profile_photo: str | None = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class MessageDraft(BaseModel):
    """Validated message about to be appended to the log."""

    target: ChatTarget = Field(..., discriminator="scope")
    user_id: str
    content: str
    kind: MessageKind = MessageKind.TEXT


class ChatMessageResponse(BaseModel):
    """Persisted chat message."""

    id: str
    group_id: str | None
    stream: str | None
    user_id: str
    content: str
    kind: MessageKind
    pinned: bool
    reactions: dict[str, list[str]] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EnrichedMessage(ChatMessageResponse):
    """Message decorated with the author's display name and avatar."""

    user_name: str | None = None
    user_photo: str | None = None


class PinUpdate(BaseModel):
    """Body of the pin/unpin request."""

    pinned: bool


# Inbound realtime payloads


class InboundFrame(BaseModel):
    """Envelope of every frame a client sends over the chat socket."""

    event: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class AuthenticatePayload(BaseModel):
    user_id: str = Field(..., min_length=1)


class JoinGroupPayload(BaseModel):
    group_id: str = Field(..., min_length=1)


class SendMessagePayload(BaseModel):
    """Message as submitted by a client; the room is resolved by the gateway."""

    content: str
    kind: MessageKind = MessageKind.TEXT
    group_id: str | None = None
    stream: str | None = None


class ReactionPayload(BaseModel):
    message_id: str = Field(..., min_length=1)
    emoji: str = Field(..., min_length=1)


class SetPinnedPayload(BaseModel):
    message_id: str = Field(..., min_length=1)
    pinned: bool


class TypingPayload(BaseModel):
    group_id: str | None = None
    stream: str | None = None


# Outbound realtime events


class OutboundEvent(BaseModel):
    """Envelope of every frame the server pushes to a session."""

    event: str
    data: dict[str, Any] = Field(default_factory=dict)
