"""Shared API dependencies for the chat stores and the realtime gateway."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker
from starlette.requests import HTTPConnection

from studyhub_chat.db.session import SessionLocal
from studyhub_chat.repositories.membership_repo import MembershipRepository
from studyhub_chat.repositories.message_repo import MessageRepository
from studyhub_chat.services.gateway import ChatGateway
from studyhub_chat.services.groups import GroupService


def get_session_factory() -> sessionmaker[Session]:
    """Return the session factory the repositories open sessions from."""
    return SessionLocal


SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


def get_membership_repo(session_factory: SessionFactoryDep) -> MembershipRepository:
    """Return a membership store bound to the current session factory."""
    return MembershipRepository(session_factory)


def get_message_repo(session_factory: SessionFactoryDep) -> MessageRepository:
    """Return a message log bound to the current session factory."""
    return MessageRepository(session_factory)


MembershipRepoDep = Annotated[MembershipRepository, Depends(get_membership_repo)]
MessageRepoDep = Annotated[MessageRepository, Depends(get_message_repo)]


def get_group_service(members: MembershipRepoDep) -> GroupService:
    """Return the group lifecycle service."""
    return GroupService(members)


def get_gateway(connection: HTTPConnection) -> ChatGateway:
    """Return the process-wide chat gateway created at startup.

    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.chat_gateway


GroupServiceDep = Annotated[GroupService, Depends(get_group_service)]
GatewayDep = Annotated[ChatGateway, Depends(get_gateway)]
