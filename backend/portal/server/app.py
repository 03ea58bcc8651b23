from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.authentication import requires
from starlette.exceptions import HTTPException
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from portal.auth import SessionCookieBackend
from portal.server.settings import PortalSettings
from portal.service import AccountService
from portal.views.handlers import (
    BadRequest,
    create_profile,
    delete_profile,
    list_profiles,
    login,
    logout,
    register,
    rename_profile,
    upload_texture,
)
from shared.auth.password import get_hasher
from shared.auth.session_store import PortalSessionStore
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.db import (
    Database,
    SqliteAccountRepository,
    SqliteProfileRepository,
    SqliteSessionRepository,
    SqliteTextureRepository,
)
from shared.logging import setup_logging
from yggdrasil.core import CredentialRateLimiter, TokenLedger

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable
    from typing import Any

    from starlette.requests import Request


def signed_in(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require the portal session cookie; answer 403 without it."""
    return requires("authenticated", status_code=HTTPStatus.FORBIDDEN)(endpoint)


async def _http_error_handler(_request: Request, exc: Exception) -> Response:
    http_exc = cast("HTTPException", exc)
    return JSONResponse({"error": http_exc.detail}, status_code=http_exc.status_code, headers=http_exc.headers)


async def _bad_request_handler(_request: Request, exc: Exception) -> Response:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.BAD_REQUEST)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def create_app(settings: PortalSettings | None = None) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = PortalSettings()

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/api/register", register, methods=["POST"], name="register"),
        Route("/api/login", login, methods=["POST"], name="login"),
        Route("/api/logout", signed_in(logout), methods=["POST"], name="logout"),
        Route("/api/profile/create", signed_in(create_profile), methods=["POST"], name="create_profile"),
        Route("/api/profile/rename", signed_in(rename_profile), methods=["POST"], name="rename_profile"),
        Route("/api/profile/delete", signed_in(delete_profile), methods=["POST"], name="delete_profile"),
        Route("/api/profile/list", signed_in(list_profiles), methods=["GET"], name="list_profiles"),
        Route("/api/profile/skin", signed_in(upload_texture), methods=["POST"], name="upload_texture"),
    ]

    db = Database(settings.database_path)
    db.connect()
    session_store = PortalSessionStore(ttl_seconds=settings.session_ttl_seconds)
    account_service = AccountService(
        accounts=SqliteAccountRepository(db),
        profiles=SqliteProfileRepository(db),
        textures=SqliteTextureRepository(db),
        # The protocol server runs the expiry sweep; the portal only demotes sessions.
        ledger=TokenLedger(db, SqliteSessionRepository(db)),
        session_store=session_store,
        rate_limiter=CredentialRateLimiter(
            max_failures=settings.rate_limit_max_failures,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        password_hasher=get_hasher(settings.password_hasher),
    )

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        session_store.start_cleanup()
        yield
        await session_store.stop_cleanup()
        db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            HTTPException: _http_error_handler,
            BadRequest: _bad_request_handler,
        },
    )
    app.add_middleware(AuthenticationMiddleware, backend=SessionCookieBackend(account_service))  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.account_service = account_service

    logger.info("portal server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory portal.server.app:get_app."""
    s = PortalSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)
