"""Token ledger: issuance, rotation and revocation of access/client token pairs.

Status only moves forward: VALID may become TEMPORARILY_INVALID or INVALID,
TEMPORARILY_INVALID may become INVALID, nothing goes back to VALID.

A session older than the expiration is treated as absent by every lookup,
whatever its status, and is physically deleted by the background sweep.
Expiry is always decided before status.
"""

from __future__ import annotations

import asyncio
import contextlib
import secrets
import time
from dataclasses import replace
from typing import TYPE_CHECKING, assert_never
from uuid import uuid4

import structlog

from shared.auth.models import Session, SessionStatus, SessionView

if TYPE_CHECKING:
    from shared.dal.session_repository import SessionRepository
    from shared.db.connection import Database

ACCESS_TOKEN_BYTES = 128
DEFAULT_SESSION_EXPIRATION_SECONDS = 15 * 24 * 60 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 30

logger = structlog.get_logger()


def status_accepts(status: SessionStatus, *, allow_temporarily_invalid: bool = False) -> bool:
    """Whether a session in this status may still authenticate."""
    match status:
        case SessionStatus.VALID:
            return True
        case SessionStatus.TEMPORARILY_INVALID:
            return allow_temporarily_invalid
        case SessionStatus.INVALID:
            return False
        case _:
            assert_never(status)


def new_client_token() -> str:
    return uuid4().hex


class TokenLedger:
    """Owns the session state machine on top of a SessionRepository.

    Multi-step mutations run inside Database.transaction(), so a refresh
    holds the write lock from lookup to invalidation of the old token.
    Call start_sweeper() on app startup and stop_sweeper() on shutdown.
    """

    def __init__(
        self,
        db: Database,
        sessions: SessionRepository,
        *,
        expiration_seconds: float = DEFAULT_SESSION_EXPIRATION_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._db = db
        self._sessions = sessions
        self._expiration_seconds = expiration_seconds
        self._sweep_interval_seconds = sweep_interval_seconds
        self._sweep_task: asyncio.Task[None] | None = None

    async def issue(self, account_id: str, client_token: str | None = None) -> Session:
        """Mint a VALID session for the account, generating a client token if none is given."""
        session = Session(
            access_token=secrets.token_hex(ACCESS_TOKEN_BYTES),
            client_token=client_token or new_client_token(),
            account_id=account_id,
            profile_id=None,
            created_at=time.time(),
            status=SessionStatus.VALID,
        )
        await self._sessions.insert(session)
        return session

    async def attach_profile(self, access_token: str, profile_id: str) -> bool:
        """Bind a profile to a VALID session that has none yet. One shot: later calls return False."""
        if await self.find(access_token) is None:
            return False
        return await self._sessions.attach_profile(access_token, profile_id)

    async def find(self, access_token: str) -> Session | None:
        """Unexpired session for the token in any status."""
        session = await self._sessions.get(access_token)
        if session is None or self._is_expired(session):
            return None
        return session

    async def find_valid(self, access_token: str) -> SessionView | None:
        session = await self.find(access_token)
        if session is None or not status_accepts(session.status):
            return None
        return SessionView(
            access_token=session.access_token,
            client_token=session.client_token,
            account_id=session.account_id,
            profile_id=session.profile_id,
        )

    async def check(
        self,
        access_token: str,
        client_token: str | None = None,
        *,
        allow_temporarily_invalid: bool = False,
    ) -> bool:
        session = await self.find(access_token)
        if session is None:
            return False
        if not status_accepts(session.status, allow_temporarily_invalid=allow_temporarily_invalid):
            return False
        return client_token is None or client_token == session.client_token

    async def refresh(
        self,
        access_token: str,
        client_token: str | None = None,
        profile_id: str | None = None,
    ) -> Session | None:
        """Replace a session with a fresh one for the same account and client token.

        The old session must be VALID or TEMPORARILY_INVALID and, when a client
        token is supplied, must carry it. The requested profile, if any, is
        attached to the successor, and the old token is invalidated, all as
        one transaction. Returns None when the old session does not qualify.
        """
        async with self._db.transaction():
            session = await self.find(access_token)
            if session is None or not status_accepts(session.status, allow_temporarily_invalid=True):
                return None
            if client_token and client_token != session.client_token:
                return None

            successor = await self.issue(session.account_id, session.client_token)
            if profile_id is not None and await self._sessions.attach_profile(successor.access_token, profile_id):
                successor = replace(successor, profile_id=profile_id)
            await self._sessions.set_status(access_token, SessionStatus.INVALID)

        logger.debug("session refreshed", account_id=successor.account_id, profile_id=successor.profile_id)
        return successor

    async def invalidate(self, access_token: str) -> None:
        await self._sessions.set_status(access_token, SessionStatus.INVALID)

    async def invalidate_all(self, account_id: str) -> int:
        count = await self._sessions.set_status_for_account(account_id, SessionStatus.INVALID)
        logger.info("invalidated all sessions", account_id=account_id, count=count)
        return count

    async def temporarily_invalidate_for_profile(self, profile_id: str) -> int:
        """Soft-revoke every VALID session holding the profile, e.g. after a rename."""
        count = await self._sessions.demote_valid_for_profile(profile_id, SessionStatus.TEMPORARILY_INVALID)
        logger.info("temporarily invalidated sessions", profile_id=profile_id, count=count)
        return count

    async def sweep_expired(self) -> int:
        """Delete every session created more than the expiration ago, whatever its status."""
        removed = await self._sessions.delete_created_before(time.time() - self._expiration_seconds)
        if removed:
            logger.info("swept expired sessions", count=removed)
        return removed

    def start_sweeper(self) -> None:
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def stop_sweeper(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None

    def _is_expired(self, session: Session) -> bool:
        return time.time() - session.created_at >= self._expiration_seconds

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval_seconds)
            try:
                await self.sweep_expired()
            except Exception:
                logger.exception("session sweep failed")
