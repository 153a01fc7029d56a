"""
Tests for embed builders.
"""

from domain.models.map_catalog import MapEntry
from domain.models.map_vote import VoteOutcome, VoteSession
from tests.conftest import HOST_ID, TEST_GUILD_ID
from utils.embeds import (
    create_filter_selection_embed,
    create_lobby_embed,
    create_lobby_list_embed,
    create_map_vote_embed,
    format_gamertags,
    format_vote_outcome,
)


def _fields(embed):
    return {field.name: field.value for field in embed.fields}


def test_lobby_embed_shows_roster(membership, make_lobby):
    lobby = make_lobby(max_size=2)
    for uid, tag in ((HOST_ID, "HostTag"), (2, "Two"), (3, "Three")):
        membership.join(lobby, uid, tag)

    embed = create_lobby_embed(lobby)
    fields = _fields(embed)

    assert embed.title == "Customs Lobby: Alpha"
    assert fields["Host"] == f"<@{HOST_ID}>"
    assert fields["Players"] == "2/2"
    assert fields["Gamertags"] == "HostTag\nTwo"
    assert fields["Waitlist"] == "Three"


def test_empty_lobby_embed(make_lobby):
    fields = _fields(create_lobby_embed(make_lobby()))

    assert fields["Players"] == "0/4"
    assert fields["Gamertags"] == "None"
    assert fields["Waitlist"] == "None"


def test_long_roster_is_truncated(membership, make_lobby):
    lobby = make_lobby(max_size=24)
    for uid in range(24):
        membership.join(lobby, uid, "g" * 60)

    value = format_gamertags(lobby, lobby.members)

    assert len(value) <= 1024
    assert value.endswith("...")


def test_lobby_list_embed(membership, make_lobby, registry):
    alpha = make_lobby("Alpha")
    make_lobby("Beta", host_id=2)
    membership.join(alpha, 5, "five")

    embed = create_lobby_list_embed(list(registry.list_by_guild(TEST_GUILD_ID)))
    fields = _fields(embed)

    assert embed.title == "Active Lobbies"
    assert "Players: 1/4" in fields["Lobby: Alpha"]
    assert "Host: <@2>" in fields["Lobby: Beta"]


def test_lobby_list_caps_fields(make_lobby, registry):
    for i in range(30):
        make_lobby(f"L{i}")

    embed = create_lobby_list_embed(list(registry.list_by_guild(TEST_GUILD_ID)))

    assert len(embed.fields) == 25
    assert "25 of 30" in embed.footer.text


def _voting_session():
    session = VoteSession(guild_id=TEST_GUILD_ID, host_id=HOST_ID, lobby_id="Alpha")
    session.open_voting([MapEntry("Blood Gulch", "Slayer"), MapEntry("Hangar")], deadline=0)
    return session


def test_filter_embed_reflects_selection():
    session = VoteSession(guild_id=TEST_GUILD_ID, host_id=HOST_ID, lobby_id="Alpha")
    assert "Please select" in create_filter_selection_embed(session).description

    session.sizes = ["small"]
    assert "Small 2-8" in create_filter_selection_embed(session).description


def test_map_vote_embed_lists_markers():
    embed = create_map_vote_embed(_voting_session())

    assert embed.title == "Map Vote for Lobby: Alpha"
    assert embed.description.splitlines() == [
        "1️⃣ **Blood Gulch** - Slayer",
        "2️⃣ **Hangar** - Unknown",
    ]


def test_vote_outcome_messages():
    session = _voting_session()

    session.resolve(VoteOutcome(map=session.candidates[0], votes=3, randomly_chosen=False))
    assert "**Blood Gulch** has been selected with **3** vote(s)!" in format_vote_outcome(session)

    session.resolve(VoteOutcome(map=session.candidates[1], votes=0, randomly_chosen=True))
    assert "No votes were cast. Randomly selected map: **Hangar**" in format_vote_outcome(session)

    session.outcome = None
    assert "error" in format_vote_outcome(session)
