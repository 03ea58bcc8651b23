"""Tests for SqliteAccountRepository."""

from __future__ import annotations

import pytest

from shared.auth.models import Account
from shared.db import SqliteAccountRepository


def _account(account_id: str = "a1", email: str = "a@example.com") -> Account:
    return Account(account_id=account_id, email=email, password_hash="sha256$x")


class TestSqliteAccountRepository:
    async def test_create_and_get(self, accounts: SqliteAccountRepository) -> None:
        await accounts.create_account(_account())

        by_id = await accounts.get_by_id("a1")
        by_email = await accounts.get_by_email("a@example.com")
        assert by_id == by_email == _account()

    async def test_unknown_returns_none(self, accounts: SqliteAccountRepository) -> None:
        assert await accounts.get_by_id("missing") is None
        assert await accounts.get_by_email("nobody@example.com") is None

    async def test_duplicate_email_raises(self, accounts: SqliteAccountRepository) -> None:
        await accounts.create_account(_account())
        with pytest.raises(ValueError, match="already registered"):
            await accounts.create_account(_account(account_id="a2"))

    async def test_duplicate_id_raises(self, accounts: SqliteAccountRepository) -> None:
        await accounts.create_account(_account())
        with pytest.raises(ValueError, match="already exists"):
            await accounts.create_account(_account(email="b@example.com"))

    async def test_delete(self, accounts: SqliteAccountRepository) -> None:
        await accounts.create_account(_account())
        assert await accounts.delete_account("a1") is True
        assert await accounts.delete_account("a1") is False
        assert await accounts.get_by_id("a1") is None
