"""SQLite database layer: connection management and repository implementations."""

from shared.db.account_repository import SqliteAccountRepository
from shared.db.connection import Database
from shared.db.profile_repository import SqliteProfileRepository
from shared.db.session_repository import SqliteSessionRepository
from shared.db.texture_repository import SqliteTextureRepository

__all__ = [
    "Database",
    "SqliteAccountRepository",
    "SqliteProfileRepository",
    "SqliteSessionRepository",
    "SqliteTextureRepository",
]
