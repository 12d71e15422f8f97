"""Business logic services for the StudyHub chat."""

from .gateway import ChatGateway
from .groups import GroupService
from .moderation import ModerationFilter
from .rooms import RoomRouter
from .session import ConnectionSession

__all__ = [
    "ChatGateway",
    "GroupService",
    "ModerationFilter",
    "RoomRouter",
    "ConnectionSession",
]
