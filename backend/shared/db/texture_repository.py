"""SQLite-backed texture blob store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.dal.texture_repository import TextureRepository

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteTextureRepository(TextureRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def save(self, texture_hash: str, data: bytes) -> None:
        async with self._db.transaction() as conn:
            conn.execute("INSERT OR IGNORE INTO textures (hash, data) VALUES (?, ?)", (texture_hash, data))

    async def get(self, texture_hash: str) -> bytes | None:
        row = self._db.connection.execute("SELECT data FROM textures WHERE hash = ?", (texture_hash,)).fetchone()
        return None if row is None else bytes(row[0])
