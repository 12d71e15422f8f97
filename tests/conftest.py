from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studyhub_chat.api.v1.dependencies import get_gateway, get_session_factory
from studyhub_chat.db.session import Base
from studyhub_chat.main import app as fastapi_app
from studyhub_chat.models import ChatGroup, ChatMessage, GroupMember, User
from studyhub_chat.repositories import MembershipRepository, MessageRepository
from studyhub_chat.services.gateway import ChatGateway
from studyhub_chat.services.groups import GroupService
from studyhub_chat.services.moderation import ModerationFilter

TEST_DB_URL = "sqlite://"
TEST_BLOCKED_TERMS = ("badword1", "badword2")

_USERNAME_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        # Repositories commit on their own sessions, so wipe every table.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def membership_repo(session_factory: sessionmaker[Session]) -> MembershipRepository:
    return MembershipRepository(session_factory)


@pytest.fixture()
def message_repo(session_factory: sessionmaker[Session]) -> MessageRepository:
    return MessageRepository(session_factory)


@pytest.fixture()
def moderation() -> ModerationFilter:
    return ModerationFilter(TEST_BLOCKED_TERMS)


@pytest.fixture()
def gateway(
    membership_repo: MembershipRepository,
    message_repo: MessageRepository,
    moderation: ModerationFilter,
) -> ChatGateway:
    return ChatGateway(membership_repo, message_repo, moderation=moderation)


@pytest.fixture()
def group_service(membership_repo: MembershipRepository) -> GroupService:
    return GroupService(membership_repo)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    session_factory: sessionmaker[Session],
    gateway: ChatGateway,
) -> Iterator[None]:
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_session_factory, None)
        app.dependency_overrides.pop(get_gateway, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(session_factory: sessionmaker[Session]) -> Callable[..., User]:
    """Return a factory that persists a user and returns it."""

    def _make_user(
        name: str,
        stream: str = "NEET",
        is_admin: bool = False,
        profile_photo: str | None = None,
    ) -> User:
        user = User(
            name=name,
            username=f"{name.lower()}{next(_USERNAME_COUNTER)}",
            stream=stream,
            is_admin=is_admin,
            profile_photo=profile_photo,
        )
        with session_factory() as db:
            db.add(user)
            db.commit()
            db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_group(session_factory: sessionmaker[Session]) -> Callable[..., ChatGroup]:
    """Return a factory that persists a group whose creator is an accepted member."""

    def _make_group(creator: User, name: str = "Physics Crew") -> ChatGroup:
        group = ChatGroup(
            name=name,
            username=f"group{next(_USERNAME_COUNTER)}",
            creator_id=creator.id,
        )
        with session_factory() as db:
            db.add(group)
            db.flush()
            db.add(GroupMember(group_id=group.id, user_id=creator.id, status="accepted"))
            db.commit()
            db.refresh(group)
        return group

    return _make_group


@pytest.fixture()
def add_member(session_factory: sessionmaker[Session]) -> Callable[..., GroupMember]:
    """Return a factory that persists a membership row."""

    def _add_member(group: ChatGroup, user: User, status: str = "accepted") -> GroupMember:
        member = GroupMember(group_id=group.id, user_id=user.id, status=status)
        with session_factory() as db:
            db.add(member)
            db.commit()
            db.refresh(member)
        return member

    return _add_member


@pytest.fixture()
def make_message(session_factory: sessionmaker[Session]) -> Callable[..., ChatMessage]:
    """Return a factory that persists a message directly through the ORM."""

    def _make_message(
        user_id: str,
        content: str = "hello",
        stream: str | None = None,
        group_id: str | None = None,
    ) -> ChatMessage:
        message = ChatMessage(
            user_id=user_id,
            content=content,
            stream=stream,
            group_id=group_id,
        )
        with session_factory() as db:
            db.add(message)
            db.commit()
            db.refresh(message)
        return message

    return _make_message
