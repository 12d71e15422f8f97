"""Group creation and join-request lifecycle."""

from __future__ import annotations

import logging

from studyhub_chat.core.errors import GroupUsernameTakenError
from studyhub_chat.repositories.membership_repo import MembershipRepository
from studyhub_chat.schemas.group import (
    GroupCreate,
    GroupMemberResponse,
    GroupResponse,
    JoinRequestResponse,
    MembershipStatus,
)

logger = logging.getLogger(__name__)


class GroupService:
    """Service handling group creation and membership state transitions.

    A membership moves from ``pending`` to ``accepted`` and nowhere else.
    Accepting a request does not touch live connections: the member has to
    join the group room again from an open session.
    """

    def __init__(self, members: MembershipRepository) -> None:
        self.members = members

    async def create_group(self, data: GroupCreate) -> GroupResponse:
        """Create a group with its creator as the first accepted member.

        Raises:
            GroupUsernameTakenError: If the handle is already in use.
        """
        if await self.members.get_group_by_username(data.username) is not None:
            raise GroupUsernameTakenError(data.username)
        group = await self.members.create_group(data)
        logger.info("User %s created group %s (%s)", data.creator_id, group.id, group.username)
        return group

    async def request_join(self, group_id: str, user_id: str) -> GroupMemberResponse:
        """Record a pending join request.

        Raises:
            GroupNotFoundError: If the group does not exist.
            DuplicateMembershipError: If the user already has a row for the group.
        """
        member = await self.members.create_group_member(
            group_id, user_id, MembershipStatus.PENDING
        )
        logger.info("User %s requested to join group %s", user_id, group_id)
        return member

    async def accept_join(self, membership_id: str) -> GroupMemberResponse:
        """Mark a join request accepted.

        Raises:
            MembershipNotFoundError: If the membership does not exist.
        """
        member = await self.members.update_group_member_status(
            membership_id, MembershipStatus.ACCEPTED
        )
        logger.info("User %s accepted into group %s", member.user_id, member.group_id)
        return member

    async def list_groups_for_user(self, user_id: str) -> list[GroupResponse]:
        """Return the groups a user has been accepted into."""
        return await self.members.get_groups_by_user(user_id)

    async def list_join_requests(self, group_id: str) -> list[JoinRequestResponse]:
        """Return a group's pending requests with the requester's name."""
        pending = [
            m
            for m in await self.members.get_group_members(group_id)
            if m.status is MembershipStatus.PENDING
        ]
        users = await self.members.get_users(m.user_id for m in pending)
        return [
            JoinRequestResponse(
                **m.model_dump(),
                user_name=users[m.user_id].name if m.user_id in users else "Unknown",
            )
            for m in pending
        ]
