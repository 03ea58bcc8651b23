"""Protocol operations of the authserver and sessionserver.

Each public coroutine implements one Yggdrasil endpoint and returns the
response body as a plain dict (or None for the empty 204 outcomes). Failures
are raised as ProtocolError subclasses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from shared.auth.models import SkinModel, TextureKind
from shared.textures import validate_texture
from yggdrasil.core.errors import IllegalArgument, InvalidCredentials, InvalidToken, RateLimited, TooManyProfiles
from yggdrasil.core.tokens import status_accepts

if TYPE_CHECKING:
    from shared.auth.models import Account, Profile, Session
    from shared.auth.password import PasswordHasher
    from shared.dal import AccountRepository, ProfileRepository, TextureRepository
    from yggdrasil.core.join_tickets import JoinTicketCache
    from yggdrasil.core.rate_limit import CredentialRateLimiter
    from yggdrasil.core.signing import ProfileSigner
    from yggdrasil.core.tokens import TokenLedger

DEFAULT_BATCH_LOOKUP_LIMIT = 8

logger = structlog.get_logger()


def serialize_user(account: Account) -> dict[str, Any]:
    return {
        "id": account.account_id,
        "properties": [{"name": "preferredLanguage", "value": account.locale}],
    }


class AuthProtocolEngine:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        profiles: ProfileRepository,
        textures: TextureRepository,
        ledger: TokenLedger,
        join_tickets: JoinTicketCache,
        rate_limiter: CredentialRateLimiter,
        signer: ProfileSigner,
        password_hasher: PasswordHasher,
        batch_lookup_limit: int = DEFAULT_BATCH_LOOKUP_LIMIT,
    ) -> None:
        self._accounts = accounts
        self._profiles = profiles
        self._textures = textures
        self._ledger = ledger
        self._join_tickets = join_tickets
        self._rate_limiter = rate_limiter
        self._signer = signer
        self._hasher = password_hasher
        self._batch_lookup_limit = batch_lookup_limit

    # -- authserver --

    async def authenticate(
        self,
        email: str,
        password: str,
        client_token: str | None = None,
        *,
        request_user: bool = False,
    ) -> dict[str, Any]:
        """Log in and issue a session. A sole profile is selected automatically."""
        account = await self._verify_credentials(email, password)
        session = await self._ledger.issue(account.account_id, client_token)

        profiles = await self._profiles.list_for_account(account.account_id)
        response: dict[str, Any] = {
            "accessToken": session.access_token,
            "clientToken": session.client_token,
            "availableProfiles": [self._signer.serialize(p) for p in profiles],
        }
        if len(profiles) == 1 and await self._ledger.attach_profile(session.access_token, profiles[0].profile_id):
            response["selectedProfile"] = response["availableProfiles"][0]
        if request_user:
            response["user"] = serialize_user(account)

        logger.info("authenticated", account_id=account.account_id, profiles=len(profiles))
        return response

    async def refresh(
        self,
        access_token: str,
        client_token: str | None = None,
        requested_profile_id: str | None = None,
        *,
        request_user: bool = False,
    ) -> dict[str, Any]:
        """Rotate the session, optionally selecting a profile on the new one."""
        session = await self._ledger.find(access_token)
        if session is None or not status_accepts(session.status, allow_temporarily_invalid=True):
            raise InvalidToken

        if requested_profile_id:
            await self._check_profile_selection(session, requested_profile_id)

        successor = await self._ledger.refresh(access_token, client_token, requested_profile_id or session.profile_id)
        if successor is None:
            raise InvalidToken

        response: dict[str, Any] = {
            "accessToken": successor.access_token,
            "clientToken": successor.client_token,
        }
        if successor.profile_id is not None:
            profile = await self._profiles.get_by_id(successor.profile_id)
            if profile is not None:
                response["selectedProfile"] = self._signer.serialize(profile)
        if request_user:
            account = await self._accounts.get_by_id(successor.account_id)
            if account is not None:
                response["user"] = serialize_user(account)
        return response

    async def validate(self, access_token: str, client_token: str | None = None) -> None:
        if not await self._ledger.check(access_token, client_token):
            raise InvalidToken

    async def invalidate(self, access_token: str) -> None:
        """Revoke the token. Unknown tokens are ignored."""
        await self._ledger.invalidate(access_token)

    async def sign_out(self, email: str, password: str) -> None:
        account = await self._verify_credentials(email, password)
        await self._ledger.invalidate_all(account.account_id)

    # -- sessionserver --

    async def join(self, access_token: str, profile_id: str, server_id: str) -> None:
        """First handshake phase: the client announces it is joining server_id."""
        session = await self._ledger.find_valid(access_token)
        if session is None or session.profile_id is None or session.profile_id != profile_id:
            raise InvalidToken
        self._join_tickets.put(profile_id, server_id)

    async def has_joined(
        self,
        username: str,
        server_id: str,
        ip: str | None = None,
        *,
        caller_address: str | None = None,
    ) -> dict[str, Any] | None:
        """Second handshake phase: the game server confirms the player joined.

        A non-empty ip must equal caller_address, the address this request
        was observed from. Returns the signed profile, or None when there is
        no matching ticket.
        """
        if ip and ip != caller_address:
            return None
        profile = await self._profiles.get_by_name(username)
        if profile is None:
            return None
        if not self._join_tickets.match(profile.profile_id, server_id):
            return None
        return self._signer.serialize(profile, include_properties=True, signed=True)

    async def lookup_profile(self, profile_id: str, *, signed: bool = False) -> dict[str, Any] | None:
        profile = await self._profiles.get_by_id(profile_id)
        if profile is None:
            return None
        return self._signer.serialize(profile, include_properties=True, signed=signed)

    async def lookup_profiles(self, names: list[str]) -> list[dict[str, Any]]:
        """Resolve distinct names to unsigned profiles, skipping unknown ones."""
        unique_names = list(dict.fromkeys(names))
        if len(unique_names) > self._batch_lookup_limit:
            raise TooManyProfiles
        found = []
        for name in unique_names:
            profile = await self._profiles.get_by_name(name)
            if profile is not None:
                found.append(self._signer.serialize(profile))
        return found

    # -- textures --

    async def upload_texture(
        self,
        access_token: str,
        profile_id: str,
        kind: TextureKind,
        data: bytes,
        model: SkinModel = SkinModel.DEFAULT,
    ) -> None:
        """Store a texture for the profile held by the bearer's session.

        Raises InvalidToken when the session does not hold the profile and
        shared.textures.InvalidTextureError for unacceptable images.
        """
        await self._require_profile_holder(access_token, profile_id)
        texture_hash = validate_texture(kind, data)
        await self._textures.save(texture_hash, data)
        await self._set_texture(profile_id, kind, texture_hash, model)
        logger.info("texture uploaded", profile_id=profile_id, kind=kind)

    async def clear_texture(self, access_token: str, profile_id: str, kind: TextureKind) -> None:
        await self._require_profile_holder(access_token, profile_id)
        await self._set_texture(profile_id, kind, "", SkinModel.DEFAULT)

    async def get_texture(self, texture_hash: str) -> bytes | None:
        return await self._textures.get(texture_hash)

    # -- private helpers --

    async def _verify_credentials(self, email: str, password: str) -> Account:
        """Check the password under the failure rate limit.

        Unknown address, wrong password and blocked key all raise the same
        InvalidCredentials so callers cannot tell them apart.
        """
        if self._rate_limiter.is_blocked(email):
            self._rate_limiter.record_failure(email)
            raise RateLimited
        account = await self._accounts.get_by_email(email)
        if account is None or not await self._hasher.verify(password, account.password_hash):
            self._rate_limiter.record_failure(email)
            raise InvalidCredentials
        return account

    async def _check_profile_selection(self, session: Session, requested_profile_id: str) -> Profile:
        if session.profile_id is not None:
            raise IllegalArgument("Access token already has a profile assigned.")
        profile = await self._profiles.get_by_id(requested_profile_id)
        if profile is None:
            raise IllegalArgument("No such profile.")
        if profile.account_id != session.account_id:
            raise InvalidToken
        return profile

    async def _require_profile_holder(self, access_token: str, profile_id: str) -> None:
        session = await self._ledger.find_valid(access_token)
        if session is None or session.profile_id != profile_id:
            raise InvalidToken

    async def _set_texture(self, profile_id: str, kind: TextureKind, texture_hash: str, model: SkinModel) -> None:
        if kind == TextureKind.SKIN:
            updated = await self._profiles.set_skin(profile_id, texture_hash, slim=model == SkinModel.SLIM)
        else:
            updated = await self._profiles.set_cape(profile_id, texture_hash)
        if not updated:
            raise InvalidToken
