"""Profile API: batch name lookup and bearer-authenticated texture upload."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from pydantic import TypeAdapter
from starlette.datastructures import UploadFile
from starlette.responses import JSONResponse, Response

from shared.auth.models import SkinModel, TextureKind
from shared.textures import MAX_TEXTURE_BYTES, InvalidTextureError
from yggdrasil.core.errors import IllegalArgument, InvalidToken
from yggdrasil.views.parsing import parse_body_as

if TYPE_CHECKING:
    from starlette.requests import Request

    from yggdrasil.core.engine import AuthProtocolEngine

_NAMES = TypeAdapter(list[str])


async def lookup_profiles(request: Request) -> Response:
    """POST /api/profiles/minecraft - resolve a list of player names."""
    engine: AuthProtocolEngine = request.app.state.engine
    names: list[str] = await parse_body_as(request, _NAMES)
    return JSONResponse(await engine.lookup_profiles(names))


def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _texture_kind(request: Request) -> TextureKind | None:
    try:
        return TextureKind(request.path_params["texture_type"])
    except ValueError:
        return None


def _unauthorized() -> JSONResponse:
    return JSONResponse(InvalidToken().to_payload(), status_code=HTTPStatus.UNAUTHORIZED)


async def upload_texture(request: Request) -> Response:
    """PUT /api/user/profile/{profile_id}/{skin|cape}

    Multipart form with the PNG in ``file`` and, for skins, ``model`` set
    to "slim" for the slim arm model or left empty. Other values are 400.
    """
    engine: AuthProtocolEngine = request.app.state.engine
    kind = _texture_kind(request)
    if kind is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)
    access_token = _bearer_token(request)
    if access_token is None:
        return _unauthorized()

    async with request.form(max_files=1) as form:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise IllegalArgument("Missing texture file.")
        data = await upload.read(MAX_TEXTURE_BYTES + 1)
        requested_model = form.get("model", "")
        if requested_model not in {SkinModel.SLIM.value, ""}:
            raise IllegalArgument("Skin model must be \"slim\" or empty.")
        model = SkinModel.SLIM if requested_model == SkinModel.SLIM else SkinModel.DEFAULT

    try:
        await engine.upload_texture(access_token, request.path_params["profile_id"], kind, data, model)
    except InvalidToken:
        return _unauthorized()
    except InvalidTextureError as e:
        raise IllegalArgument(str(e)) from None
    return Response(status_code=204)


async def clear_texture(request: Request) -> Response:
    """DELETE /api/user/profile/{profile_id}/{skin|cape}"""
    engine: AuthProtocolEngine = request.app.state.engine
    kind = _texture_kind(request)
    if kind is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)
    access_token = _bearer_token(request)
    if access_token is None:
        return _unauthorized()
    try:
        await engine.clear_texture(access_token, request.path_params["profile_id"], kind)
    except InvalidToken:
        return _unauthorized()
    return Response(status_code=204)
