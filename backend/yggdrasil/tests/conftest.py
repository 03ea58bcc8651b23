"""Fixtures wiring the protocol core onto a temporary database."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from shared.auth.models import Account, Profile
from yggdrasil.core import AuthProtocolEngine, CredentialRateLimiter, JoinTicketCache, ProfileSigner, TokenLedger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cryptography.hazmat.primitives.asymmetric import rsa

    from shared.auth.password import SimpleHasher
    from shared.db import (
        Database,
        SqliteAccountRepository,
        SqliteProfileRepository,
        SqliteSessionRepository,
        SqliteTextureRepository,
    )

BASE_URL = "https://auth.example.com"
PASSWORD = "password123"


@pytest.fixture
def ledger(db: Database, sessions: SqliteSessionRepository) -> TokenLedger:
    return TokenLedger(db, sessions)


@pytest.fixture
def signer(signing_key: rsa.RSAPrivateKey) -> ProfileSigner:
    return ProfileSigner(signing_key, BASE_URL)


@pytest.fixture
def engine(
    accounts: SqliteAccountRepository,
    profiles: SqliteProfileRepository,
    textures: SqliteTextureRepository,
    ledger: TokenLedger,
    signer: ProfileSigner,
    hasher: SimpleHasher,
) -> AuthProtocolEngine:
    return AuthProtocolEngine(
        accounts=accounts,
        profiles=profiles,
        textures=textures,
        ledger=ledger,
        join_tickets=JoinTicketCache(),
        rate_limiter=CredentialRateLimiter(),
        signer=signer,
        password_hasher=hasher,
    )


@pytest.fixture
def create_account(
    accounts: SqliteAccountRepository,
    hasher: SimpleHasher,
) -> Callable[..., Awaitable[Account]]:
    async def _create(email: str = "a@example.com", password: str = PASSWORD) -> Account:
        account = Account(account_id=uuid4().hex, email=email, password_hash=await hasher.hash(password))
        await accounts.create_account(account)
        return account

    return _create


@pytest.fixture
def create_profile(profiles: SqliteProfileRepository) -> Callable[..., Awaitable[Profile]]:
    async def _create(account: Account, name: str = "Alice") -> Profile:
        profile = Profile(profile_id=uuid4().hex, name=name, account_id=account.account_id)
        await profiles.create_profile(profile)
        return profile

    return _create
