"""Portal endpoints: registration, sign-in, and profile management for the signed-in account."""

from __future__ import annotations

import base64
import binascii
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from starlette.responses import JSONResponse, Response

from portal.auth import SESSION_COOKIE
from portal.service import PortalError
from portal.views.types import (
    CreateProfileRequest,
    Credentials,
    DeleteProfileRequest,
    RenameProfileRequest,
    TextureUploadRequest,
)
from shared.textures import InvalidTextureError

if TYPE_CHECKING:
    from pydantic import BaseModel
    from starlette.requests import Request

    from portal.auth import AuthenticatedAccount
    from portal.server.settings import PortalSettings
    from portal.service import AccountService
    from shared.auth.models import PortalSession, Profile


class BadRequest(Exception):
    """Malformed request body; answered with 400."""


async def _parse_json_body(request: Request, model: type[BaseModel]) -> Any:
    try:
        body = await request.json()
    except ValueError:
        raise BadRequest("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise BadRequest(str(e)) from None


def _forbidden(error: PortalError) -> JSONResponse:
    return JSONResponse({"error": str(error)}, status_code=HTTPStatus.FORBIDDEN)


def _serialize_profile(profile: Profile) -> dict[str, Any]:
    return {
        "id": profile.profile_id,
        "name": profile.name,
        "skin": profile.skin_hash,
        "cape": profile.cape_hash,
        "model": profile.skin_model.value,
    }


def _response_with_session_cookie(session: PortalSession, settings: PortalSettings) -> Response:
    response = Response(status_code=HTTPStatus.NO_CONTENT)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.session_id,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
        max_age=settings.session_ttl_seconds,
        path="/",
    )
    return response


async def register(request: Request) -> Response:
    """POST /api/register - create an account and sign it in."""
    account_service: AccountService = request.app.state.account_service
    body: Credentials = await _parse_json_body(request, Credentials)
    try:
        await account_service.register(body.email, body.password)
        session = await account_service.login(body.email, body.password)
    except PortalError as e:
        return _forbidden(e)
    return _response_with_session_cookie(session, request.app.state.settings)


async def login(request: Request) -> Response:
    """POST /api/login - validate credentials and set the session cookie."""
    account_service: AccountService = request.app.state.account_service
    body: Credentials = await _parse_json_body(request, Credentials)
    try:
        session = await account_service.login(body.email, body.password)
    except PortalError as e:
        return _forbidden(e)
    return _response_with_session_cookie(session, request.app.state.settings)


async def logout(request: Request) -> Response:
    account_service: AccountService = request.app.state.account_service
    user: AuthenticatedAccount = request.user
    account_service.logout(user.session_id)
    response = Response(status_code=HTTPStatus.NO_CONTENT)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response


async def create_profile(request: Request) -> Response:
    """POST /api/profile/create - returns the new profile id."""
    account_service: AccountService = request.app.state.account_service
    body: CreateProfileRequest = await _parse_json_body(request, CreateProfileRequest)
    try:
        profile = await account_service.create_profile(request.user.account_id, body.name)
    except PortalError as e:
        return _forbidden(e)
    return JSONResponse({"id": profile.profile_id}, status_code=HTTPStatus.CREATED)


async def rename_profile(request: Request) -> Response:
    account_service: AccountService = request.app.state.account_service
    body: RenameProfileRequest = await _parse_json_body(request, RenameProfileRequest)
    try:
        await account_service.rename_profile(request.user.account_id, body.profile, body.name)
    except PortalError as e:
        return _forbidden(e)
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def delete_profile(request: Request) -> Response:
    account_service: AccountService = request.app.state.account_service
    body: DeleteProfileRequest = await _parse_json_body(request, DeleteProfileRequest)
    try:
        await account_service.delete_profile(request.user.account_id, body.id)
    except PortalError as e:
        return _forbidden(e)
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def list_profiles(request: Request) -> Response:
    account_service: AccountService = request.app.state.account_service
    profiles = await account_service.list_profiles(request.user.account_id)
    return JSONResponse([_serialize_profile(p) for p in profiles])


async def upload_texture(request: Request) -> Response:
    """POST /api/profile/skin - set or clear a skin or cape from base64 PNG data."""
    account_service: AccountService = request.app.state.account_service
    body: TextureUploadRequest = await _parse_json_body(request, TextureUploadRequest)
    try:
        data = base64.b64decode(body.payload.data, validate=True)
    except binascii.Error:
        raise BadRequest("Texture data is not valid base64") from None

    try:
        await account_service.set_texture(
            request.user.account_id,
            body.profile,
            body.payload.type,
            data,
            body.payload.model,
        )
    except PortalError as e:
        return _forbidden(e)
    except InvalidTextureError as e:
        raise BadRequest(str(e)) from None
    return Response(status_code=HTTPStatus.NO_CONTENT)
