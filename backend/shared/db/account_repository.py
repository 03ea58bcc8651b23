"""SQLite-backed account repository."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import Account
from shared.dal.account_repository import AccountRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

_COLUMNS = "id, email, password_hash, locale"


def _row_to_account(row: tuple) -> Account:
    return Account(account_id=row[0], email=row[1], password_hash=row[2], locale=row[3])


class SqliteAccountRepository(AccountRepository):
    """Relies on the table's uniqueness constraints and maps IntegrityError to ValueError."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_account(self, account: Account) -> None:
        try:
            async with self._db.transaction() as conn:
                conn.execute(
                    f"INSERT INTO accounts ({_COLUMNS}) VALUES (?, ?, ?, ?)",  # noqa: S608
                    (account.account_id, account.email, account.password_hash, account.locale),
                )
        except sqlite3.IntegrityError as exc:
            if "accounts.email" in str(exc).lower():
                raise ValueError(f"Email '{account.email}' is already registered") from exc
            raise ValueError(f"Account with id '{account.account_id}' already exists") from exc

    async def get_by_id(self, account_id: str) -> Account | None:
        row = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE id = ?",  # noqa: S608
            (account_id,),
        ).fetchone()
        return None if row is None else _row_to_account(row)

    async def get_by_email(self, email: str) -> Account | None:
        row = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE email = ?",  # noqa: S608
            (email,),
        ).fetchone()
        return None if row is None else _row_to_account(row)

    async def delete_account(self, account_id: str) -> bool:
        async with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        return cursor.rowcount > 0
