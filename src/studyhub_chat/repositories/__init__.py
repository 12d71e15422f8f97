"""Data access layer backing the chat core."""

from .membership_repo import MembershipRepository, MembershipStore
from .message_repo import MessageLog, MessageRepository

__all__ = [
    "MembershipRepository", "MembershipStore",
    "MessageLog", "MessageRepository",
]
