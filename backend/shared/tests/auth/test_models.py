"""Tests for account, profile and session models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared.auth.models import DEFAULT_LOCALE, Account, Profile, SessionStatus, SkinModel


class TestProfile:
    def test_defaults_to_no_textures(self):
        profile = Profile(profile_id="p1", name="Alice", account_id="a1")
        assert profile.skin_hash == ""
        assert profile.cape_hash == ""
        assert profile.skin_model == SkinModel.DEFAULT

    def test_slim_flag_selects_slim_model(self):
        profile = Profile(profile_id="p1", name="Alice", account_id="a1", skin_hash="h", slim=True)
        assert profile.skin_model == SkinModel.SLIM

    def test_is_frozen(self):
        profile = Profile(profile_id="p1", name="Alice", account_id="a1")
        with pytest.raises(ValidationError):
            profile.name = "Bob"  # type: ignore[misc]


class TestAccount:
    def test_default_locale(self):
        account = Account(account_id="a1", email="a@example.com", password_hash="x")
        assert account.locale == DEFAULT_LOCALE == "en_US"


class TestSessionStatus:
    def test_round_trips_through_stored_value(self):
        for status in SessionStatus:
            assert SessionStatus(status.value) is status
