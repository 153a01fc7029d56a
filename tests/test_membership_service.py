"""
Tests for MembershipService roster transitions.
"""

import pytest

from domain.models.lobby import JoinPlacement
from services import error_codes
from tests.conftest import HOST_ID, TEST_GUILD_ID, TEST_GUILD_ID_SECONDARY


def assert_roster_invariants(registry):
    """Every occupant is indexed to exactly the lobby holding them, and sizes hold."""
    seen = {}
    lobbies = [
        registry.get(snapshot.guild_id, snapshot.lobby_id)
        for guild_id in (TEST_GUILD_ID, TEST_GUILD_ID_SECONDARY)
        for snapshot in registry.list_by_guild(guild_id)
    ]
    for lobby in lobbies:
        assert len(lobby.members) <= lobby.max_size
        assert not set(lobby.members) & set(lobby.waitlist)
        for user_id in lobby.occupants():
            assert user_id not in seen, f"user {user_id} in two lobbies"
            seen[user_id] = lobby
            assert registry.lobby_of(user_id) is lobby
            assert user_id in lobby.gamertags


class TestJoin:
    def test_join_until_full_then_waitlist(self, registry, membership, make_lobby):
        lobby = make_lobby(max_size=2)

        placements = [membership.join(lobby, uid, f"user{uid}").value.placement for uid in (1, 2, 3)]

        assert placements == [JoinPlacement.MEMBER, JoinPlacement.MEMBER, JoinPlacement.WAITLIST]
        assert lobby.members == [1, 2]
        assert lobby.waitlist == [3]
        assert_roster_invariants(registry)

    def test_join_twice_rejected(self, membership, make_lobby):
        lobby = make_lobby()
        membership.join(lobby, 1, "one")

        result = membership.join(lobby, 1, "one")

        assert result.error_code == error_codes.ALREADY_MEMBER
        assert lobby.members == [1]

    def test_join_twice_from_waitlist_rejected(self, membership, make_lobby):
        lobby = make_lobby(max_size=2)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        assert membership.join(lobby, 3, "3").error_code == error_codes.ALREADY_MEMBER
        assert lobby.waitlist == [3]

    def test_join_migrates_out_of_previous_lobby(self, registry, membership, make_lobby, clock):
        alpha = make_lobby("Alpha")
        beta = make_lobby("Beta")
        membership.join(alpha, 1, "one")
        clock.advance(10)

        result = membership.join(beta, 1, "one")

        assert result.success
        assert result.value.previous_lobby.lobby_id == "Alpha"
        assert result.value.previous_lobby.members == ()
        assert alpha.members == []
        assert beta.members == [1]
        assert alpha.last_active == clock.now
        assert registry.lobby_of(1) is beta
        assert_roster_invariants(registry)

    def test_migration_crosses_guilds(self, registry, membership, make_lobby):
        alpha = make_lobby("Alpha", guild_id=TEST_GUILD_ID)
        other = make_lobby("Alpha", guild_id=TEST_GUILD_ID_SECONDARY)
        membership.join(alpha, 1, "one")

        result = membership.join(other, 1, "one")

        assert result.value.previous_lobby.guild_id == TEST_GUILD_ID
        assert alpha.members == []
        assert registry.lobby_of(1) is other

    def test_migration_out_of_waitlist(self, registry, membership, make_lobby):
        alpha = make_lobby("Alpha", max_size=2)
        beta = make_lobby("Beta")
        for uid in (1, 2, 3):
            membership.join(alpha, uid, str(uid))

        membership.join(beta, 3, "3")

        assert alpha.waitlist == []
        assert beta.members == [3]
        assert_roster_invariants(registry)

    def test_first_join_reports_no_previous_lobby(self, membership, make_lobby):
        result = membership.join(make_lobby(), 1, "one")
        assert result.value.previous_lobby is None

    def test_join_updates_last_active(self, membership, make_lobby, clock):
        lobby = make_lobby()
        clock.advance(30)

        membership.join(lobby, 1, "one")

        assert lobby.last_active == clock.now


class TestLeave:
    def test_leave_frees_slot_without_promotion(self, registry, membership, make_lobby):
        lobby = make_lobby(max_size=2)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        assert membership.leave(lobby, 1).success

        assert lobby.members == [2]
        assert lobby.waitlist == [3]
        assert registry.lobby_of(1) is None
        assert_roster_invariants(registry)

    def test_leave_twice_fails_second_time(self, membership, make_lobby):
        lobby = make_lobby()
        membership.join(lobby, 1, "one")

        assert membership.leave(lobby, 1).success
        assert membership.leave(lobby, 1).error_code == error_codes.NOT_IN_LOBBY

    def test_leave_from_waitlist(self, membership, make_lobby):
        lobby = make_lobby(max_size=2)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        membership.leave(lobby, 3)

        assert lobby.waitlist == []
        assert 3 not in lobby.gamertags


class TestKick:
    @pytest.fixture
    def full_lobby(self, membership, make_lobby):
        lobby = make_lobby(max_size=2)
        for uid in (HOST_ID, 2, 3):
            membership.join(lobby, uid, str(uid))
        return lobby

    def test_host_kicks_member(self, registry, membership, full_lobby):
        assert membership.kick(full_lobby, HOST_ID, 2).success
        assert full_lobby.members == [HOST_ID]
        assert registry.lobby_of(2) is None

    def test_manager_kicks_waitlisted(self, membership, full_lobby):
        assert membership.kick(full_lobby, 999, 3, actor_is_manager=True).success
        assert full_lobby.waitlist == []

    def test_non_host_forbidden(self, membership, full_lobby):
        result = membership.kick(full_lobby, 2, 3)
        assert result.error_code == error_codes.FORBIDDEN
        assert full_lobby.waitlist == [3]

    def test_cannot_kick_host(self, membership, full_lobby):
        result = membership.kick(full_lobby, 999, HOST_ID, actor_is_manager=True)
        assert result.error_code == error_codes.CANNOT_KICK_HOST

    def test_cannot_kick_self(self, membership, full_lobby):
        result = membership.kick(full_lobby, 2, 2, actor_is_manager=True)
        assert result.error_code == error_codes.CANNOT_KICK_SELF

    def test_kick_absent_user(self, membership, full_lobby):
        result = membership.kick(full_lobby, HOST_ID, 77)
        assert result.error_code == error_codes.NOT_IN_LOBBY


class TestReassignHost:
    def test_host_hands_over(self, membership, make_lobby):
        lobby = make_lobby()

        result = membership.reassign_host(lobby, HOST_ID, 2)

        assert result.value == HOST_ID
        assert lobby.host_id == 2
        assert 2 not in lobby.members

    def test_same_host_is_no_op(self, membership, make_lobby):
        lobby = make_lobby()
        assert membership.reassign_host(lobby, HOST_ID, HOST_ID).error_code == error_codes.NO_OP

    def test_outsider_forbidden(self, membership, make_lobby):
        lobby = make_lobby()
        assert membership.reassign_host(lobby, 5, 5).error_code == error_codes.FORBIDDEN
        assert lobby.host_id == HOST_ID

    def test_old_host_loses_rights(self, membership, make_lobby):
        lobby = make_lobby()
        membership.join(lobby, 3, "3")
        membership.reassign_host(lobby, HOST_ID, 2)

        assert membership.kick(lobby, HOST_ID, 3).error_code == error_codes.FORBIDDEN


class TestResize:
    def test_grow_keeps_waitlist(self, membership, make_lobby):
        lobby = make_lobby(max_size=2)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        result = membership.resize(lobby, HOST_ID, 6)

        assert result.value == 2
        assert lobby.max_size == 6
        assert lobby.waitlist == [3]

    def test_shrink_below_member_count_rejected(self, membership, make_lobby):
        lobby = make_lobby(max_size=4)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        result = membership.resize(lobby, HOST_ID, 2)

        assert result.error_code == error_codes.INVALID_SIZE
        assert lobby.max_size == 4

    def test_shrink_to_member_count_allowed(self, membership, make_lobby):
        lobby = make_lobby(max_size=4)
        for uid in (1, 2, 3):
            membership.join(lobby, uid, str(uid))

        assert membership.resize(lobby, HOST_ID, 3).success

    @pytest.mark.parametrize("size", [1, 25])
    def test_out_of_range(self, membership, make_lobby, size):
        assert membership.resize(make_lobby(), HOST_ID, size).error_code == error_codes.INVALID_SIZE

    def test_non_host_forbidden(self, membership, make_lobby):
        assert membership.resize(make_lobby(), 5, 10).error_code == error_codes.FORBIDDEN


def test_mixed_sequence_preserves_invariants(registry, membership, make_lobby):
    alpha = make_lobby("Alpha", max_size=2)
    beta = make_lobby("Beta", max_size=3)
    gamma = make_lobby("Gamma", guild_id=TEST_GUILD_ID_SECONDARY, max_size=2)

    steps = [
        (membership.join, alpha, 1),
        (membership.join, alpha, 2),
        (membership.join, alpha, 3),
        (membership.join, beta, 3),
        (membership.join, gamma, 1),
        (membership.leave, alpha, 2),
        (membership.join, beta, 4),
        (membership.join, alpha, 4),
        (membership.leave, gamma, 1),
        (membership.join, gamma, 5),
    ]
    for op, lobby, uid in steps:
        if op == membership.join:
            op(lobby, uid, str(uid))
        else:
            op(lobby, uid)
        assert_roster_invariants(registry)

    assert alpha.members == [4]
    assert beta.members == [3]
    assert gamma.members == [5]
