# tests/services/test_reactions.py
from studyhub_chat.services.reactions import has_reacted, toggle_reaction

THUMBS = "\U0001F44D"


def test_toggle_walks_through_two_users() -> None:
    """Reactions from U and V build up and wind down in order."""
    state: dict[str, list[str]] = {}
    state = toggle_reaction(state, THUMBS, "U")
    assert state == {THUMBS: ["U"]}
    state = toggle_reaction(state, THUMBS, "V")
    assert state == {THUMBS: ["U", "V"]}
    state = toggle_reaction(state, THUMBS, "U")
    assert state == {THUMBS: ["V"]}


def test_toggle_twice_restores_previous_state() -> None:
    before = {"❤️": ["A"]}
    once = toggle_reaction(before, THUMBS, "B")
    assert toggle_reaction(once, THUMBS, "B") == before


def test_last_user_removes_emoji_key() -> None:
    assert toggle_reaction({THUMBS: ["U"]}, THUMBS, "U") == {}


def test_input_is_not_modified() -> None:
    before = {THUMBS: ["U"]}
    toggle_reaction(before, THUMBS, "V")
    assert before == {THUMBS: ["U"]}


def test_none_is_treated_as_empty() -> None:
    assert toggle_reaction(None, THUMBS, "U") == {THUMBS: ["U"]}


def test_duplicates_and_empty_lists_are_cleaned() -> None:
    messy = {THUMBS: ["U", "U", "V"], "\U0001F602": []}
    assert toggle_reaction(messy, THUMBS, "W") == {THUMBS: ["U", "V", "W"]}


def test_has_reacted() -> None:
    reactions = {THUMBS: ["U"]}
    assert has_reacted(reactions, THUMBS, "U")
    assert not has_reacted(reactions, THUMBS, "V")
    assert not has_reacted(reactions, "\U0001F602", "U")
