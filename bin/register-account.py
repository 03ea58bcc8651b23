"""Create an account and, optionally, its first profile.

Usage: uv run python bin/register-account.py <email> <password> [profile_name]

Reads PORTAL_DATABASE_PATH and PORTAL_PASSWORD_HASHER like the portal does.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from portal.server.settings import PortalSettings
from portal.service import AccountService, PortalError
from shared.auth.password import get_hasher
from shared.auth.session_store import PortalSessionStore
from shared.db import (
    Database,
    SqliteAccountRepository,
    SqliteProfileRepository,
    SqliteSessionRepository,
    SqliteTextureRepository,
)
from yggdrasil.core import CredentialRateLimiter, TokenLedger


async def main() -> None:
    if len(sys.argv) not in {3, 4}:
        print(f"Usage: {sys.argv[0]} <email> <password> [profile_name]")
        sys.exit(1)

    email, password = sys.argv[1], sys.argv[2]
    profile_name = sys.argv[3] if len(sys.argv) == 4 else None
    settings = PortalSettings()

    db = Database(settings.database_path)
    db.connect()

    try:
        account_service = AccountService(
            accounts=SqliteAccountRepository(db),
            profiles=SqliteProfileRepository(db),
            textures=SqliteTextureRepository(db),
            ledger=TokenLedger(db, SqliteSessionRepository(db)),
            session_store=PortalSessionStore(),
            rate_limiter=CredentialRateLimiter(),
            password_hasher=get_hasher(settings.password_hasher),
        )

        try:
            account = await account_service.register(email, password)
            print(f"Account registered: {account.email} (id: {account.account_id})")
            if profile_name is not None:
                profile = await account_service.create_profile(account.account_id, profile_name)
                print(f"Profile created: {profile.name} (id: {profile.profile_id})")
        except PortalError as e:
            print(f"Error: {e}")
            sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(main())
