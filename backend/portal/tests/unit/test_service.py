"""Tests for AccountService."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from portal.service import AccountService, PortalError
from shared.auth.models import SessionStatus, SkinModel, TextureKind
from shared.textures import InvalidTextureError

PASSWORD = "password123"


async def _register_with_profile(account_service: AccountService, email: str = "a@example.com", name: str = "Alice"):
    account = await account_service.register(email, PASSWORD)
    profile = await account_service.create_profile(account.account_id, name)
    return account, profile


class TestRegister:
    async def test_creates_account_with_default_locale(self, account_service: AccountService, accounts):
        account = await account_service.register("a@example.com", PASSWORD)

        stored = await accounts.get_by_email("a@example.com")
        assert stored == account
        assert stored.locale == "en_US"
        assert stored.password_hash != PASSWORD

    async def test_duplicate_email(self, account_service: AccountService):
        await account_service.register("a@example.com", PASSWORD)
        with pytest.raises(PortalError, match="already registered"):
            await account_service.register("a@example.com", PASSWORD)

    @pytest.mark.parametrize("email", ["no-at-sign", "two@@example.com", "a b@example.com", "x" * 120 + "@example.com"])
    async def test_rejects_bad_email(self, account_service: AccountService, email):
        with pytest.raises(PortalError, match="email"):
            await account_service.register(email, PASSWORD)

    @pytest.mark.parametrize("password", ["short", "x" * 49])
    async def test_rejects_bad_password(self, account_service: AccountService, password):
        with pytest.raises(PortalError, match="Password"):
            await account_service.register("a@example.com", password)


class TestLogin:
    async def test_opens_cookie_session(self, account_service: AccountService):
        account = await account_service.register("a@example.com", PASSWORD)

        session = await account_service.login("a@example.com", PASSWORD)

        assert session.account_id == account.account_id
        assert account_service.validate_session(session.session_id) == session

    async def test_wrong_password_and_unknown_email_look_alike(self, account_service: AccountService):
        await account_service.register("a@example.com", PASSWORD)
        with pytest.raises(PortalError, match="Invalid credentials"):
            await account_service.login("a@example.com", "wrong-password")
        with pytest.raises(PortalError, match="Invalid credentials"):
            await account_service.login("b@example.com", PASSWORD)

    async def test_blocked_after_repeated_failures(self, account_service: AccountService):
        await account_service.register("a@example.com", PASSWORD)
        with patch("shared.cache.time") as mock_time:
            mock_time.monotonic.return_value = 0.0
            for _ in range(4):
                with pytest.raises(PortalError):
                    await account_service.login("a@example.com", "wrong-password")
            with pytest.raises(PortalError):
                await account_service.login("a@example.com", PASSWORD)

            mock_time.monotonic.return_value = 61.0
            assert await account_service.login("a@example.com", PASSWORD)

    async def test_logout(self, account_service: AccountService):
        await account_service.register("a@example.com", PASSWORD)
        session = await account_service.login("a@example.com", PASSWORD)

        account_service.logout(session.session_id)

        assert account_service.validate_session(session.session_id) is None
        assert account_service.validate_session(None) is None


class TestProfiles:
    async def test_create_and_list(self, account_service: AccountService):
        account, alice = await _register_with_profile(account_service)
        bob = await account_service.create_profile(account.account_id, "Bob")

        listed = await account_service.list_profiles(account.account_id)

        assert {p.profile_id for p in listed} == {alice.profile_id, bob.profile_id}

    async def test_names_are_unique_across_accounts(self, account_service: AccountService):
        await _register_with_profile(account_service)
        other = await account_service.register("b@example.com", PASSWORD)
        with pytest.raises(PortalError, match="already taken"):
            await account_service.create_profile(other.account_id, "Alice")

    @pytest.mark.parametrize("name", ["", "has space", "x" * 33, "dash-name"])
    async def test_rejects_bad_names(self, account_service: AccountService, name):
        account = await account_service.register("a@example.com", PASSWORD)
        with pytest.raises(PortalError, match="Profile name"):
            await account_service.create_profile(account.account_id, name)

    async def test_rename(self, account_service: AccountService, profiles):
        account, alice = await _register_with_profile(account_service)

        await account_service.rename_profile(account.account_id, alice.profile_id, "Alicia")

        assert (await profiles.get_by_id(alice.profile_id)).name == "Alicia"
        assert await profiles.get_by_name("Alice") is None

    async def test_rename_demotes_sessions_holding_profile(self, account_service: AccountService, ledger):
        account, alice = await _register_with_profile(account_service)
        session = await ledger.issue(account.account_id)
        await ledger.attach_profile(session.access_token, alice.profile_id)

        await account_service.rename_profile(account.account_id, alice.profile_id, "Alicia")

        assert (await ledger.find(session.access_token)).status == SessionStatus.TEMPORARILY_INVALID

    async def test_rename_conflict_leaves_sessions_valid(self, account_service: AccountService, ledger):
        account, alice = await _register_with_profile(account_service)
        await account_service.create_profile(account.account_id, "Bob")
        session = await ledger.issue(account.account_id)
        await ledger.attach_profile(session.access_token, alice.profile_id)

        with pytest.raises(PortalError, match="already taken"):
            await account_service.rename_profile(account.account_id, alice.profile_id, "Bob")

        assert (await ledger.find(session.access_token)).status == SessionStatus.VALID

    async def test_cannot_touch_foreign_profile(self, account_service: AccountService, make_png):
        _, alice = await _register_with_profile(account_service)
        mallory = await account_service.register("m@example.com", PASSWORD)

        with pytest.raises(PortalError, match="not found"):
            await account_service.rename_profile(mallory.account_id, alice.profile_id, "Stolen")
        with pytest.raises(PortalError, match="not found"):
            await account_service.delete_profile(mallory.account_id, alice.profile_id)
        with pytest.raises(PortalError, match="not found"):
            await account_service.set_texture(mallory.account_id, alice.profile_id, TextureKind.SKIN, make_png(64, 64))

    async def test_delete(self, account_service: AccountService, profiles):
        account, alice = await _register_with_profile(account_service)
        await account_service.delete_profile(account.account_id, alice.profile_id)
        assert await profiles.get_by_id(alice.profile_id) is None


class TestTextures:
    async def test_set_and_clear_skin(self, account_service: AccountService, profiles, textures, make_png):
        account, alice = await _register_with_profile(account_service)
        data = make_png(64, 32)

        await account_service.set_texture(account.account_id, alice.profile_id, TextureKind.SKIN, data, SkinModel.SLIM)

        stored = await profiles.get_by_id(alice.profile_id)
        assert stored.slim is True
        assert await textures.get(stored.skin_hash) == data

        await account_service.set_texture(account.account_id, alice.profile_id, TextureKind.SKIN, b"", SkinModel.SLIM)
        cleared = await profiles.get_by_id(alice.profile_id)
        assert cleared.skin_hash == ""
        assert cleared.slim is False

    async def test_set_cape(self, account_service: AccountService, profiles, make_png):
        account, alice = await _register_with_profile(account_service)
        await account_service.set_texture(account.account_id, alice.profile_id, TextureKind.CAPE, make_png(64, 32))
        assert (await profiles.get_by_id(alice.profile_id)).cape_hash

    async def test_invalid_image_propagates(self, account_service: AccountService, make_png):
        account, alice = await _register_with_profile(account_service)
        with pytest.raises(InvalidTextureError):
            await account_service.set_texture(account.account_id, alice.profile_id, TextureKind.SKIN, b"not a png")
