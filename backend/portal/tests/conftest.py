"""Fixtures for the portal account service."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from portal.service import AccountService
from shared.auth.session_store import PortalSessionStore
from yggdrasil.core import CredentialRateLimiter, TokenLedger

if TYPE_CHECKING:
    from shared.auth.password import SimpleHasher
    from shared.db import (
        Database,
        SqliteAccountRepository,
        SqliteProfileRepository,
        SqliteSessionRepository,
        SqliteTextureRepository,
    )


@pytest.fixture
def ledger(db: Database, sessions: SqliteSessionRepository) -> TokenLedger:
    return TokenLedger(db, sessions)


@pytest.fixture
def session_store() -> PortalSessionStore:
    return PortalSessionStore(ttl_seconds=3600)


@pytest.fixture
def account_service(
    accounts: SqliteAccountRepository,
    profiles: SqliteProfileRepository,
    textures: SqliteTextureRepository,
    ledger: TokenLedger,
    session_store: PortalSessionStore,
    hasher: SimpleHasher,
) -> AccountService:
    return AccountService(
        accounts=accounts,
        profiles=profiles,
        textures=textures,
        ledger=ledger,
        session_store=session_store,
        rate_limiter=CredentialRateLimiter(),
        password_hasher=hasher,
    )
