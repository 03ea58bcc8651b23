"""Authserver endpoints: authenticate, refresh, validate, invalidate, signout."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, Response

from yggdrasil.views.parsing import parse_body
from yggdrasil.views.types import AuthenticateRequest, RefreshRequest, SignoutRequest, TokenRequest

if TYPE_CHECKING:
    from starlette.requests import Request

    from yggdrasil.core.engine import AuthProtocolEngine


async def authenticate(request: Request) -> Response:
    """POST /authserver/authenticate - log in and issue an access token."""
    engine: AuthProtocolEngine = request.app.state.engine
    body: AuthenticateRequest = await parse_body(request, AuthenticateRequest)
    result = await engine.authenticate(
        body.username,
        body.password,
        body.client_token,
        request_user=body.request_user,
    )
    return JSONResponse(result)


async def refresh(request: Request) -> Response:
    """POST /authserver/refresh - swap the access token for a new one."""
    engine: AuthProtocolEngine = request.app.state.engine
    body: RefreshRequest = await parse_body(request, RefreshRequest)
    requested_profile_id = body.selected_profile.id if body.selected_profile is not None else None
    result = await engine.refresh(
        body.access_token,
        body.client_token,
        requested_profile_id,
        request_user=body.request_user,
    )
    return JSONResponse(result)


async def validate(request: Request) -> Response:
    engine: AuthProtocolEngine = request.app.state.engine
    body: TokenRequest = await parse_body(request, TokenRequest)
    await engine.validate(body.access_token, body.client_token)
    return Response(status_code=204)


async def invalidate(request: Request) -> Response:
    engine: AuthProtocolEngine = request.app.state.engine
    body: TokenRequest = await parse_body(request, TokenRequest)
    await engine.invalidate(body.access_token)
    return Response(status_code=204)


async def signout(request: Request) -> Response:
    """POST /authserver/signout - revoke every session of the account."""
    engine: AuthProtocolEngine = request.app.state.engine
    body: SignoutRequest = await parse_body(request, SignoutRequest)
    await engine.sign_out(body.username, body.password)
    return Response(status_code=204)
