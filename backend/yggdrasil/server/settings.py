"""Protocol server configuration via environment variables."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings.sources.base import PydanticBaseSettingsSource

from shared.validators import StringListEnvSettingsSource, parse_string_list
from yggdrasil.core.engine import DEFAULT_BATCH_LOOKUP_LIMIT
from yggdrasil.core.join_tickets import DEFAULT_JOIN_TICKET_TTL_SECONDS
from yggdrasil.core.rate_limit import DEFAULT_MAX_FAILURES, DEFAULT_WINDOW_SECONDS
from yggdrasil.core.tokens import DEFAULT_SESSION_EXPIRATION_SECONDS, DEFAULT_SWEEP_INTERVAL_SECONDS


class YggdrasilSettings(BaseSettings):
    model_config = {"env_prefix": "YGGDRASIL_"}

    database_path: str = "backend/storage.db"
    log_dir: str = "backend/logs/yggdrasil"

    # PEM RSA private key used to sign profile properties.
    signing_key_path: str = "backend/signing_key.pem"
    generate_signing_key: bool = False

    # Public address of this server; texture URLs are built from it and the
    # texture upload routes are only served when it is set.
    base_url: str = ""
    skin_domains: list[str] = []

    server_name: str = "Yggdrasil"
    implementation_name: str = "yggdrasil-server"
    implementation_version: str = ""  # falls back to the build version
    meta: dict[str, Any] = {}

    session_expiration_seconds: float = Field(default=DEFAULT_SESSION_EXPIRATION_SECONDS, gt=0)
    session_sweep_interval_seconds: float = Field(default=DEFAULT_SWEEP_INTERVAL_SECONDS, gt=0)
    join_ticket_ttl_seconds: float = Field(default=DEFAULT_JOIN_TICKET_TTL_SECONDS, gt=0)
    rate_limit_max_failures: int = Field(default=DEFAULT_MAX_FAILURES, ge=1)
    rate_limit_window_seconds: float = Field(default=DEFAULT_WINDOW_SECONDS, gt=0)
    batch_lookup_limit: int = Field(default=DEFAULT_BATCH_LOOKUP_LIMIT, ge=1)

    password_hasher: str = "bcrypt"

    @field_validator("skin_domains", mode="before")
    @classmethod
    def validate_skin_domains(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            StringListEnvSettingsSource(settings_cls, frozenset({"skin_domains"})),
            dotenv_settings,
            file_secret_settings,
        )
