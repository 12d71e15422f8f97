# src/studyhub_chat/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .chat import router as chat_router
from .chat_settings import router as chat_settings_router
from .groups import router as groups_router
from .messages import router as messages_router

__all__ = [
    "chat_router",
    "messages_router",
    "groups_router",
    "chat_settings_router",
]
