"""SQLite-backed profile repository."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import Profile
from shared.dal.profile_repository import ProfileRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

_COLUMNS = "id, name, account_id, skin_hash, cape_hash, slim"


def _row_to_profile(row: tuple) -> Profile:
    return Profile(
        profile_id=row[0],
        name=row[1],
        account_id=row[2],
        skin_hash=row[3],
        cape_hash=row[4],
        slim=bool(row[5]),
    )


class SqliteProfileRepository(ProfileRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_profile(self, profile: Profile) -> None:
        try:
            async with self._db.transaction() as conn:
                conn.execute(
                    f"INSERT INTO profiles ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",  # noqa: S608
                    (
                        profile.profile_id,
                        profile.name,
                        profile.account_id,
                        profile.skin_hash,
                        profile.cape_hash,
                        int(profile.slim),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            error_msg = str(exc).lower()
            if "profiles.name" in error_msg:
                raise ValueError(f"Profile name '{profile.name}' already taken") from exc
            if "foreign key" in error_msg:
                raise ValueError(f"Account '{profile.account_id}' does not exist") from exc
            raise ValueError(f"Profile with id '{profile.profile_id}' already exists") from exc

    async def get_by_id(self, profile_id: str) -> Profile | None:
        return self._fetch_one("id", profile_id)

    async def get_by_name(self, name: str) -> Profile | None:
        return self._fetch_one("name", name)

    async def list_for_account(self, account_id: str) -> list[Profile]:
        rows = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM profiles WHERE account_id = ? ORDER BY name",  # noqa: S608
            (account_id,),
        ).fetchall()
        return [_row_to_profile(row) for row in rows]

    async def rename(self, profile_id: str, name: str) -> bool:
        try:
            return await self._update("UPDATE profiles SET name = ? WHERE id = ?", (name, profile_id))
        except sqlite3.IntegrityError:
            return False

    async def set_skin(self, profile_id: str, skin_hash: str, *, slim: bool) -> bool:
        return await self._update(
            "UPDATE profiles SET skin_hash = ?, slim = ? WHERE id = ?",
            (skin_hash, int(slim), profile_id),
        )

    async def set_cape(self, profile_id: str, cape_hash: str) -> bool:
        return await self._update("UPDATE profiles SET cape_hash = ? WHERE id = ?", (cape_hash, profile_id))

    async def delete_profile(self, profile_id: str) -> bool:
        return await self._update("DELETE FROM profiles WHERE id = ?", (profile_id,))

    def _fetch_one(self, column: str, value: str) -> Profile | None:
        row = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM profiles WHERE {column} = ?",  # noqa: S608
            (value,),
        ).fetchone()
        return None if row is None else _row_to_profile(row)

    async def _update(self, sql: str, params: tuple) -> bool:
        async with self._db.transaction() as conn:
            cursor = conn.execute(sql, params)
        return cursor.rowcount > 0
