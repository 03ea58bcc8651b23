from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from shared.auth.password import get_hasher
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.db import (
    Database,
    SqliteAccountRepository,
    SqliteProfileRepository,
    SqliteSessionRepository,
    SqliteTextureRepository,
)
from shared.logging import setup_logging
from yggdrasil.core import (
    AuthProtocolEngine,
    CredentialRateLimiter,
    JoinTicketCache,
    ProfileSigner,
    ProtocolError,
    TokenLedger,
    load_signing_key,
)
from yggdrasil.server.settings import YggdrasilSettings
from yggdrasil.views import api, authserver, sessionserver, textures

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from cryptography.hazmat.primitives.asymmetric import rsa
    from starlette.requests import Request


async def _protocol_error_handler(_request: Request, exc: Exception) -> Response:
    error = cast("ProtocolError", exc)
    return JSONResponse(error.to_payload(), status_code=error.status_code)


async def _unexpected_error_handler(request: Request, exc: Exception) -> Response:
    logger.error("unhandled error", path=request.url.path, exc_info=exc)
    return Response(status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def _build_routes(settings: YggdrasilSettings) -> list[Route]:
    routes = [
        Route("/", textures.metadata, methods=["GET"], name="metadata"),
        Route("/health", health, methods=["GET"], name="health"),
        Route("/authserver/authenticate", authserver.authenticate, methods=["POST"], name="authenticate"),
        Route("/authserver/refresh", authserver.refresh, methods=["POST"], name="refresh"),
        Route("/authserver/validate", authserver.validate, methods=["POST"], name="validate"),
        Route("/authserver/invalidate", authserver.invalidate, methods=["POST"], name="invalidate"),
        Route("/authserver/signout", authserver.signout, methods=["POST"], name="signout"),
        Route("/sessionserver/session/minecraft/join", sessionserver.join, methods=["POST"], name="join"),
        Route(
            "/sessionserver/session/minecraft/hasJoined",
            sessionserver.has_joined,
            methods=["GET"],
            name="has_joined",
        ),
        Route(
            "/sessionserver/session/minecraft/profile/{profile_id}",
            sessionserver.profile,
            methods=["GET"],
            name="profile",
        ),
        Route("/api/profiles/minecraft", api.lookup_profiles, methods=["POST"], name="lookup_profiles"),
        Route("/textures/{texture_hash}", textures.texture, methods=["GET"], name="texture"),
    ]
    if settings.base_url:
        routes.extend(
            [
                Route(
                    "/api/user/profile/{profile_id}/{texture_type}",
                    api.upload_texture,
                    methods=["PUT"],
                    name="upload_texture",
                ),
                Route(
                    "/api/user/profile/{profile_id}/{texture_type}",
                    api.clear_texture,
                    methods=["DELETE"],
                    name="clear_texture",
                ),
            ],
        )
    else:
        logger.warning("base_url is not set, texture upload routes are disabled")
    return routes


def create_app(
    settings: YggdrasilSettings | None = None,
    signing_key: rsa.RSAPrivateKey | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = YggdrasilSettings()
    if signing_key is None:
        signing_key = load_signing_key(settings.signing_key_path, generate_missing=settings.generate_signing_key)

    db = Database(settings.database_path)
    db.connect()
    accounts = SqliteAccountRepository(db)
    profiles = SqliteProfileRepository(db)
    textures_repo = SqliteTextureRepository(db)
    ledger = TokenLedger(
        db,
        SqliteSessionRepository(db),
        expiration_seconds=settings.session_expiration_seconds,
        sweep_interval_seconds=settings.session_sweep_interval_seconds,
    )
    signer = ProfileSigner(signing_key, settings.base_url)
    engine = AuthProtocolEngine(
        accounts=accounts,
        profiles=profiles,
        textures=textures_repo,
        ledger=ledger,
        join_tickets=JoinTicketCache(settings.join_ticket_ttl_seconds),
        rate_limiter=CredentialRateLimiter(
            max_failures=settings.rate_limit_max_failures,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        signer=signer,
        password_hasher=get_hasher(settings.password_hasher),
        batch_lookup_limit=settings.batch_lookup_limit,
    )

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        ledger.start_sweeper()
        yield
        await ledger.stop_sweeper()
        db.close()

    app = Starlette(
        routes=_build_routes(settings),
        lifespan=lifespan,
        exception_handlers={
            ProtocolError: _protocol_error_handler,
            Exception: _unexpected_error_handler,
        },
    )
    app.state.db = db
    app.state.settings = settings
    app.state.ledger = ledger
    app.state.engine = engine
    app.state.metadata = textures.build_metadata(settings, signer)

    logger.info("yggdrasil server ready", base_url=settings.base_url or None)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory yggdrasil.server.app:get_app."""
    s = YggdrasilSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)
