"""Portal server configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from shared.auth.session_store import DEFAULT_SESSION_TTL_SECONDS
from yggdrasil.core.rate_limit import DEFAULT_MAX_FAILURES, DEFAULT_WINDOW_SECONDS


class PortalSettings(BaseSettings):
    model_config = {"env_prefix": "PORTAL_"}

    # Same SQLite file as the protocol server.
    database_path: str = "backend/storage.db"
    log_dir: str = "backend/logs/portal"

    # Cookie Secure flag -- True in production, False for local dev (HTTP)
    cookie_secure: bool = False
    session_ttl_seconds: int = Field(default=DEFAULT_SESSION_TTL_SECONDS, ge=1)

    rate_limit_max_failures: int = Field(default=DEFAULT_MAX_FAILURES, ge=1)
    rate_limit_window_seconds: float = Field(default=DEFAULT_WINDOW_SECONDS, gt=0)

    password_hasher: str = "bcrypt"
