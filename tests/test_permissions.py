"""
Tests for permission helpers.
"""

from types import SimpleNamespace

from services.permissions import has_allowlisted_admin, has_manager_capability, has_manager_role


def _interaction(user_id, member=None, user_perms=None):
    guild = SimpleNamespace(get_member=lambda _uid: member) if member is not None else None
    user = SimpleNamespace(id=user_id, guild_permissions=user_perms)
    return SimpleNamespace(user=user, guild=guild)


def _member(roles=(), administrator=False, manage_guild=False):
    perms = SimpleNamespace(administrator=administrator, manage_guild=manage_guild)
    return SimpleNamespace(roles=[SimpleNamespace(name=r) for r in roles], guild_permissions=perms)


def test_has_allowlisted_admin(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [101])

    assert has_allowlisted_admin(_interaction(101)) is True
    assert has_allowlisted_admin(_interaction(102)) is False


def test_manager_capability_allowlist(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [202])

    assert has_manager_capability(_interaction(202)) is True


def test_manager_capability_uses_allowlist_check(monkeypatch):
    monkeypatch.setattr("services.permissions.has_allowlisted_admin", lambda _interaction: True)
    monkeypatch.setattr("services.permissions.MANAGER_ROLE_NAME", "")

    assert has_manager_capability(_interaction(203)) is True


def test_manager_role_grants_capability(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])
    monkeypatch.setattr("services.permissions.MANAGER_ROLE_NAME", "Custom Games Manager")
    interaction = _interaction(303, member=_member(roles=["Member", "Custom Games Manager"]))

    assert has_manager_role(interaction) is True
    assert has_manager_capability(interaction) is True


def test_other_roles_do_not_grant_capability(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])
    monkeypatch.setattr("services.permissions.MANAGER_ROLE_NAME", "Custom Games Manager")
    interaction = _interaction(304, member=_member(roles=["Member"]))

    assert has_manager_role(interaction) is False
    assert has_manager_capability(interaction) is False


def test_empty_role_name_disables_role_check(monkeypatch):
    monkeypatch.setattr("services.permissions.MANAGER_ROLE_NAME", "")
    interaction = _interaction(305, member=_member(roles=[""]))

    assert has_manager_role(interaction) is False


def test_guild_member_permissions(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])

    interaction = _interaction(306, member=_member(administrator=True))

    assert has_manager_capability(interaction) is True


def test_user_permissions_fallback(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])
    perms = SimpleNamespace(administrator=False, manage_guild=True)

    assert has_manager_capability(_interaction(404, user_perms=perms)) is True


def test_no_capability(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])

    assert has_manager_capability(_interaction(505)) is False
