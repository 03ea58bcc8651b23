"""SQLite-backed session repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.auth.models import Session, SessionStatus
from shared.dal.session_repository import SessionRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

_COLUMNS = "access_token, client_token, account_id, profile_id, created_at, status"


class SqliteSessionRepository(SessionRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def insert(self, session: Session) -> None:
        async with self._db.transaction() as conn:
            conn.execute(
                f"INSERT INTO sessions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",  # noqa: S608
                (
                    session.access_token,
                    session.client_token,
                    session.account_id,
                    session.profile_id,
                    session.created_at,
                    session.status.value,
                ),
            )

    async def get(self, access_token: str) -> Session | None:
        row = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM sessions WHERE access_token = ?",  # noqa: S608
            (access_token,),
        ).fetchone()
        if row is None:
            return None
        return Session(
            access_token=row[0],
            client_token=row[1],
            account_id=row[2],
            profile_id=row[3],
            created_at=row[4],
            status=SessionStatus(row[5]),
        )

    async def attach_profile(self, access_token: str, profile_id: str) -> bool:
        return await self._execute(
            "UPDATE sessions SET profile_id = ? WHERE access_token = ? AND profile_id IS NULL AND status = ?",
            (profile_id, access_token, SessionStatus.VALID.value),
        ) > 0

    async def set_status(self, access_token: str, status: SessionStatus) -> bool:
        return await self._execute(
            "UPDATE sessions SET status = ? WHERE access_token = ?",
            (status.value, access_token),
        ) > 0

    async def set_status_for_account(self, account_id: str, status: SessionStatus) -> int:
        return await self._execute(
            "UPDATE sessions SET status = ? WHERE account_id = ?",
            (status.value, account_id),
        )

    async def demote_valid_for_profile(self, profile_id: str, status: SessionStatus) -> int:
        return await self._execute(
            "UPDATE sessions SET status = ? WHERE profile_id = ? AND status = ?",
            (status.value, profile_id, SessionStatus.VALID.value),
        )

    async def delete_created_before(self, cutoff: float) -> int:
        return await self._execute("DELETE FROM sessions WHERE created_at <= ?", (cutoff,))

    async def _execute(self, sql: str, params: tuple) -> int:
        async with self._db.transaction() as conn:
            cursor = conn.execute(sql, params)
        return cursor.rowcount
