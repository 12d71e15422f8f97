# tests/services/test_repositories.py
import pytest

from studyhub_chat.core.errors import MessageNotFoundError
from studyhub_chat.schemas.chat import GroupTarget, MessageDraft, MessageKind


@pytest.mark.asyncio
async def test_create_message_starts_clean(message_repo, make_user, make_group):
    carol = make_user("Carol")
    group = make_group(carol)

    message = await message_repo.create_message(
        MessageDraft(target=GroupTarget(group_id=group.id), user_id=carol.id, content="hey")
    )

    assert message.group_id == group.id
    assert message.stream is None
    assert message.kind is MessageKind.TEXT
    assert message.pinned is False
    assert message.reactions == {}
    assert await message_repo.get_message_by_id(message.id) == message


@pytest.mark.asyncio
async def test_updates_on_missing_message_raise(message_repo):
    with pytest.raises(MessageNotFoundError):
        await message_repo.update_message_reactions("missing", {})
    with pytest.raises(MessageNotFoundError):
        await message_repo.update_message_pinned("missing", True)
    assert await message_repo.get_message_by_id("missing") is None


@pytest.mark.asyncio
async def test_reaction_map_is_replaced(message_repo, make_user, make_message):
    asha = make_user("Asha")
    stored = make_message(asha.id, stream="NEET")

    updated = await message_repo.update_message_reactions(stored.id, {"🔥": [asha.id]})

    assert updated.reactions == {"🔥": [asha.id]}
    assert (await message_repo.get_message_by_id(stored.id)).reactions == {"🔥": [asha.id]}


@pytest.mark.asyncio
async def test_chat_setting_upsert(membership_repo):
    assert await membership_repo.get_chat_setting("NEET") is None

    first = await membership_repo.set_chat_setting("NEET", False)
    second = await membership_repo.set_chat_setting("NEET", True)

    assert first.enabled is False
    assert second.enabled is True
    assert (await membership_repo.get_chat_setting("NEET")).enabled is True


@pytest.mark.asyncio
async def test_get_users_skips_unknown_ids(membership_repo, make_user):
    asha = make_user("Asha")

    users = await membership_repo.get_users([asha.id, "missing"])

    assert set(users) == {asha.id}
    assert users[asha.id].name == "Asha"
    assert await membership_repo.get_users([]) == {}
