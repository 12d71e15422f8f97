# src/studyhub_chat/api/v1/endpoints/chat.py
"""Realtime chat socket for the StudyHub API.

Every frame is a JSON object ``{"event": <name>, "data": {...}}`` in both
directions. ``authenticate`` and ``join_group`` change the session's state
and are handled in arrival order; every other event runs as its own task so
a slow write never holds up the rest of the connection.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from studyhub_chat.core.errors import MessageNotFoundError
from studyhub_chat.schemas.chat import (
    AuthenticatePayload,
    InboundFrame,
    JoinGroupPayload,
    OutboundEvent,
    ReactionPayload,
    SendMessagePayload,
    SetPinnedPayload,
    TypingPayload,
)
from studyhub_chat.services.gateway import ChatGateway
from studyhub_chat.services.session import ConnectionSession

from ..dependencies import GatewayDep

router = APIRouter(prefix="/chat", tags=["chat"])

logger = logging.getLogger(__name__)

EVENT_ERROR = "error"

Handler = Callable[[ChatGateway, ConnectionSession, Any], Awaitable[Any]]


@dataclass(frozen=True)
class _Route:
    payload: type[BaseModel]
    handler: Handler
    inline: bool = False


async def _set_pinned(
    gateway: ChatGateway, session: ConnectionSession, payload: SetPinnedPayload
) -> None:
    try:
        await gateway.set_pinned(payload.message_id, payload.pinned)
    except MessageNotFoundError:
        logger.info("Pin on unknown message %s ignored", payload.message_id)


_ROUTES: dict[str, _Route] = {
    "authenticate": _Route(
        AuthenticatePayload,
        lambda gw, s, p: gw.authenticate(s, p.user_id),
        inline=True,
    ),
    "join_group": _Route(
        JoinGroupPayload,
        lambda gw, s, p: gw.join_group(s, p.group_id),
        inline=True,
    ),
    "send_message": _Route(SendMessagePayload, lambda gw, s, p: gw.send_message(s, p)),
    "add_reaction": _Route(ReactionPayload, lambda gw, s, p: gw.add_reaction(s, p)),
    "set_pinned": _Route(SetPinnedPayload, _set_pinned),
    "typing": _Route(TypingPayload, lambda gw, s, p: gw.typing(s, p, active=True)),
    "stop_typing": _Route(TypingPayload, lambda gw, s, p: gw.typing(s, p, active=False)),
}


def _error(reason: str, **extra: Any) -> OutboundEvent:
    return OutboundEvent(event=EVENT_ERROR, data={"reason": reason, **extra})


async def _run_guarded(
    route: _Route,
    event: str,
    gateway: ChatGateway,
    session: ConnectionSession,
    payload: BaseModel,
) -> None:
    try:
        await route.handler(gateway, session, payload)
    except SQLAlchemyError:
        logger.exception("Database error while handling %s for %s", event, session)
    except Exception:
        # Background tasks are never awaited.
        logger.exception("Unhandled error while handling %s for %s", event, session)


async def _pump_outbox(websocket: WebSocket, session: ConnectionSession) -> None:
    """Write queued events to the socket until the connection goes away."""
    while True:
        event = await session.outbox.get()
        try:
            await websocket.send_json(event.model_dump(mode="json"))
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            logger.debug("Stopped writing to %s: %s", session, exc)
            return


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, gateway: GatewayDep) -> None:
    """Serve one client's chat connection."""
    await websocket.accept()
    session = gateway.connect()
    writer = asyncio.create_task(_pump_outbox(websocket, session))
    in_flight: set[asyncio.Task[None]] = set()

    try:
        while True:
            try:
                frame = InboundFrame.model_validate(await websocket.receive_json())
            except ValueError:
                session.deliver(_error("invalid_frame"))
                continue

            route = _ROUTES.get(frame.event)
            if route is None:
                session.deliver(_error("unknown_event", event=frame.event))
                continue

            try:
                payload = route.payload.model_validate(frame.data)
            except ValidationError:
                session.deliver(_error("invalid_payload", event=frame.event))
                continue

            work = _run_guarded(route, frame.event, gateway, session, payload)
            if route.inline:
                await work
            else:
                task = asyncio.create_task(work)
                in_flight.add(task)
                task.add_done_callback(in_flight.discard)
    except WebSocketDisconnect:
        logger.info("Chat client %s disconnected", session.session_id)
    finally:
        gateway.disconnect(session)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
