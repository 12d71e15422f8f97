# src/studyhub_chat/models/__init__.py
"""SQLAlchemy models for the StudyHub chat service."""

from .chat_setting import ChatSetting
from .group import ChatGroup, GroupMember
from .message import ChatMessage
from .user import User

__all__ = [
    "ChatSetting",
    "ChatGroup", "GroupMember",
    "ChatMessage",
    "User",
]
