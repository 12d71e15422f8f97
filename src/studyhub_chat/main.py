# src/studyhub_chat/main.py
"""Main entry point for the StudyHub chat application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from studyhub_chat.api.v1 import (
    chat_router,
    chat_settings_router,
    groups_router,
    messages_router,
)
from studyhub_chat.core.settings import settings
from studyhub_chat.db.session import SessionLocal
from studyhub_chat.repositories import MembershipRepository, MessageRepository
from studyhub_chat.services.gateway import ChatGateway
from studyhub_chat.services.moderation import ModerationFilter

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="StudyHub Chat API",
    description="Realtime community and study group chat",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(chat_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")
app.include_router(groups_router, prefix="/api/v1")
app.include_router(chat_settings_router, prefix="/api/v1")


def build_gateway() -> ChatGateway:
    """Wire the chat gateway to the database-backed stores."""
    return ChatGateway(
        MembershipRepository(SessionLocal),
        MessageRepository(SessionLocal),
        moderation=ModerationFilter.from_settings(),
    )


@app.on_event("startup")
async def on_startup() -> None:
    app.state.chat_gateway = build_gateway()
    logger.info("%s %s ready", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "StudyHub Chat API",
        "version": settings.app_version,
        "description": "Realtime community and study group chat",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("studyhub_chat.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
