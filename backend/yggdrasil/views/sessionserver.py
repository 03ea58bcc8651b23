"""Sessionserver endpoints: the join/hasJoined handshake and profile lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, Response

from yggdrasil.views.parsing import parse_body, parse_query
from yggdrasil.views.types import HasJoinedQuery, JoinRequest

if TYPE_CHECKING:
    from starlette.requests import Request

    from yggdrasil.core.engine import AuthProtocolEngine


async def join(request: Request) -> Response:
    """POST /sessionserver/session/minecraft/join - client side of the handshake."""
    engine: AuthProtocolEngine = request.app.state.engine
    body: JoinRequest = await parse_body(request, JoinRequest)
    await engine.join(body.access_token, body.selected_profile, body.server_id)
    return Response(status_code=204)


async def has_joined(request: Request) -> Response:
    """GET /sessionserver/session/minecraft/hasJoined - game server side of the handshake."""
    engine: AuthProtocolEngine = request.app.state.engine
    query: HasJoinedQuery = parse_query(request, HasJoinedQuery)
    caller_address = request.client.host if request.client is not None else None
    profile = await engine.has_joined(query.username, query.server_id, query.ip, caller_address=caller_address)
    if profile is None:
        return Response(status_code=204)
    return JSONResponse(profile)


async def profile(request: Request) -> Response:
    """GET /sessionserver/session/minecraft/profile/{profile_id}

    The profile is signed only for ``unsigned=false``.
    """
    engine: AuthProtocolEngine = request.app.state.engine
    signed = request.query_params.get("unsigned") == "false"
    result = await engine.lookup_profile(request.path_params["profile_id"], signed=signed)
    if result is None:
        return Response(status_code=204)
    return JSONResponse(result)
