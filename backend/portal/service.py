"""Account service behind the portal: registration, sign-in and profile management."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.auth.models import DEFAULT_LOCALE, Account, Profile, SkinModel, TextureKind
from shared.textures import validate_texture

if TYPE_CHECKING:
    from shared.auth.models import PortalSession
    from shared.auth.password import PasswordHasher
    from shared.auth.session_store import PortalSessionStore
    from shared.dal import AccountRepository, ProfileRepository, TextureRepository
    from yggdrasil.core.rate_limit import CredentialRateLimiter
    from yggdrasil.core.tokens import TokenLedger

EMAIL_MAX_LENGTH = 128
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 48

PROFILE_NAME_PATTERN = re.compile(r"^[0-9a-zA-Z_]{1,32}$")

logger = structlog.get_logger()


class PortalError(Exception):
    """Request refused by the account service. The message is shown to the user."""


class AccountService:
    """Coordinate account registration, portal sign-in and profile ownership checks."""

    def __init__(
        self,
        *,
        accounts: AccountRepository,
        profiles: ProfileRepository,
        textures: TextureRepository,
        ledger: TokenLedger,
        session_store: PortalSessionStore,
        rate_limiter: CredentialRateLimiter,
        password_hasher: PasswordHasher,
    ) -> None:
        self._accounts = accounts
        self._profiles = profiles
        self._textures = textures
        self._ledger = ledger
        self._session_store = session_store
        self._rate_limiter = rate_limiter
        self._hasher = password_hasher

    # -- accounts --

    async def register(self, email: str, password: str) -> Account:
        _validate_email(email)
        _validate_password(password)
        if await self._accounts.get_by_email(email) is not None:
            raise PortalError("Email already registered")

        account = Account(
            account_id=uuid4().hex,
            email=email,
            password_hash=await self._hasher.hash(password),
            locale=DEFAULT_LOCALE,
        )
        try:
            await self._accounts.create_account(account)
        except ValueError as e:
            raise PortalError(str(e)) from e
        logger.info("account registered", account_id=account.account_id)
        return account

    async def login(self, email: str, password: str) -> PortalSession:
        """Check credentials under the failure rate limit and open a cookie session."""
        if self._rate_limiter.is_blocked(email):
            self._rate_limiter.record_failure(email)
            raise PortalError("Invalid credentials")
        account = await self._accounts.get_by_email(email)
        if account is None or not await self._hasher.verify(password, account.password_hash):
            self._rate_limiter.record_failure(email)
            raise PortalError("Invalid credentials")
        return self._session_store.create_session(account.account_id, account.email)

    def validate_session(self, session_id: str | None) -> PortalSession | None:
        if session_id is None:
            return None
        return self._session_store.get_session(session_id)

    def logout(self, session_id: str) -> None:
        self._session_store.delete_session(session_id)

    # -- profiles --

    async def create_profile(self, account_id: str, name: str) -> Profile:
        _validate_profile_name(name)
        if await self._profiles.get_by_name(name) is not None:
            raise PortalError("Profile name already taken")

        profile = Profile(profile_id=uuid4().hex, name=name, account_id=account_id)
        try:
            await self._profiles.create_profile(profile)
        except ValueError as e:
            raise PortalError(str(e)) from e
        logger.info("profile created", account_id=account_id, profile_id=profile.profile_id)
        return profile

    async def rename_profile(self, account_id: str, profile_id: str, name: str) -> None:
        """Rename an owned profile; sessions holding it must refresh before further use."""
        _validate_profile_name(name)
        await self._require_owned(account_id, profile_id)
        if not await self._profiles.rename(profile_id, name):
            raise PortalError("Profile name already taken")
        await self._ledger.temporarily_invalidate_for_profile(profile_id)
        logger.info("profile renamed", account_id=account_id, profile_id=profile_id)

    async def delete_profile(self, account_id: str, profile_id: str) -> None:
        await self._require_owned(account_id, profile_id)
        await self._profiles.delete_profile(profile_id)
        logger.info("profile deleted", account_id=account_id, profile_id=profile_id)

    async def list_profiles(self, account_id: str) -> list[Profile]:
        return await self._profiles.list_for_account(account_id)

    async def set_texture(
        self,
        account_id: str,
        profile_id: str,
        kind: TextureKind,
        data: bytes,
        model: SkinModel = SkinModel.DEFAULT,
    ) -> None:
        """Store and assign a texture. Empty data clears it.

        Raises shared.textures.InvalidTextureError for unacceptable images.
        """
        await self._require_owned(account_id, profile_id)
        texture_hash = ""
        if data:
            texture_hash = validate_texture(kind, data)
            await self._textures.save(texture_hash, data)

        if kind == TextureKind.SKIN:
            await self._profiles.set_skin(profile_id, texture_hash, slim=bool(data) and model == SkinModel.SLIM)
        else:
            await self._profiles.set_cape(profile_id, texture_hash)
        logger.info("texture updated", profile_id=profile_id, kind=kind, cleared=not data)

    # -- private helpers --

    async def _require_owned(self, account_id: str, profile_id: str) -> Profile:
        profile = await self._profiles.get_by_id(profile_id)
        if profile is None or profile.account_id != account_id:
            raise PortalError("Profile not found")
        return profile


def _validate_email(email: str) -> None:
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        raise PortalError("Invalid email address")


def _validate_password(password: str) -> None:
    """Validate password: 8-48 chars."""
    if len(password) < PASSWORD_MIN_LENGTH or len(password) > PASSWORD_MAX_LENGTH:
        raise PortalError(f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters")


def _validate_profile_name(name: str) -> None:
    if not PROFILE_NAME_PATTERN.match(name):
        raise PortalError("Profile name must be 1-32 letters, numbers, or underscores")
