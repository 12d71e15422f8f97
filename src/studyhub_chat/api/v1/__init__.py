# src/studyhub_chat/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    chat_router,
    chat_settings_router,
    groups_router,
    messages_router,
)

__all__ = [
    "chat_router",
    "messages_router",
    "groups_router",
    "chat_settings_router",
]
