"""
Pydantic schemas for API request/response models and realtime frames.

These schemas define the structure of API data for serialization and validation.
"""

from .chat import (
    ChatMessageResponse,
    ChatTarget,
    CommunityTarget,
    EnrichedMessage,
    GroupTarget,
    InboundFrame,
    MessageDraft,
    MessageKind,
    OutboundEvent,
    RejectionReason,
    UserProfile,
)
from .chat_setting import ChatSettingResponse, ChatSettingUpdate
from .group import (
    GroupCreate,
    GroupMemberResponse,
    GroupResponse,
    JoinRequestResponse,
    MembershipStatus,
)

__all__ = [
    "ChatMessageResponse", "ChatTarget", "CommunityTarget", "EnrichedMessage",
    "GroupTarget", "InboundFrame", "MessageDraft", "MessageKind", "OutboundEvent",
    "RejectionReason", "UserProfile",
    "ChatSettingResponse", "ChatSettingUpdate",
    "GroupCreate", "GroupMemberResponse", "GroupResponse", "JoinRequestResponse",
    "MembershipStatus",
]
