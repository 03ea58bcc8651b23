"""In-memory cookie sessions for the account portal, with periodic expiry cleanup."""

import asyncio
import contextlib
import secrets
import time

import structlog

from shared.auth.models import PortalSession

CLEANUP_INTERVAL_SECONDS = 60
DEFAULT_SESSION_TTL_SECONDS = 300

logger = structlog.get_logger()


class PortalSessionStore:
    """Portal sign-ins held in memory only; a restart signs everyone out.

    Each successful lookup slides the expiry forward by the TTL. Call
    start_cleanup() on app startup and stop_cleanup() on shutdown.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._ttl_seconds = ttl_seconds
        self._sessions: dict[str, PortalSession] = {}
        self._cleanup_task: asyncio.Task[None] | None = None

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def create_session(self, account_id: str, email: str) -> PortalSession:
        now = time.time()
        session = PortalSession(
            session_id=secrets.token_urlsafe(32),
            account_id=account_id,
            email=email,
            created_at=now,
            expires_at=now + self._ttl_seconds,
        )
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> PortalSession | None:
        """Return the live session and extend its expiry, or None."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        now = time.time()
        if now > session.expires_at:
            del self._sessions[session_id]
            return None
        session.expires_at = now + self._ttl_seconds
        return session

    def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        now = time.time()
        expired = [sid for sid, s in self._sessions.items() if now > s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("cleaned up expired portal sessions", count=len(expired))
        return len(expired)

    def start_cleanup(self) -> None:
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop_cleanup(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
            self.cleanup_expired()
