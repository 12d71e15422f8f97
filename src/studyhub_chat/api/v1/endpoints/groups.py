# src/studyhub_chat/api/v1/endpoints/groups.py
"""Group and join-request endpoints for the StudyHub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from studyhub_chat.core.errors import (
    DuplicateMembershipError,
    GroupNotFoundError,
    GroupUsernameTakenError,
    MembershipNotFoundError,
)
from studyhub_chat.schemas.group import (
    GroupCreate,
    GroupMemberResponse,
    GroupResponse,
    JoinGroupRequest,
    JoinRequestResponse,
    MembershipStatusUpdate,
)

from ..dependencies import GroupServiceDep

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("/my/{user_id}", response_model=list[GroupResponse])
async def list_my_groups(user_id: str, groups: GroupServiceDep) -> list[GroupResponse]:
    """List the groups a user has been accepted into."""
    return await groups.list_groups_for_user(user_id)


@router.post("/", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(data: GroupCreate, groups: GroupServiceDep) -> GroupResponse:
    """Create a group; the creator becomes its first member."""
    try:
        return await groups.create_group(data)
    except GroupUsernameTakenError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Group username already taken",
        ) from exc


@router.post(
    "/{group_id}/join",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_join(
    group_id: str,
    request: JoinGroupRequest,
    groups: GroupServiceDep,
) -> GroupMemberResponse:
    """Ask to join a group; the request stays pending until the creator accepts it."""
    try:
        return await groups.request_join(group_id, request.user_id)
    except GroupNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        ) from exc
    except DuplicateMembershipError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Membership already exists",
        ) from exc


@router.patch("/members/{membership_id}", response_model=GroupMemberResponse)
async def update_membership(
    membership_id: str,
    update: MembershipStatusUpdate,
    groups: GroupServiceDep,
) -> GroupMemberResponse:
    """Accept a pending join request."""
    try:
        return await groups.accept_join(membership_id)
    except MembershipNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Membership not found",
        ) from exc


@router.get("/join-requests/{group_id}", response_model=list[JoinRequestResponse])
async def list_join_requests(
    group_id: str,
    groups: GroupServiceDep,
) -> list[JoinRequestResponse]:
    """List the pending join requests of a group."""
    return await groups.list_join_requests(group_id)
