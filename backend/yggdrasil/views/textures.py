"""Texture downloads and the API metadata document served at the root."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from starlette.responses import JSONResponse, Response

from shared.build_info import version_string

if TYPE_CHECKING:
    from starlette.requests import Request

    from yggdrasil.core.engine import AuthProtocolEngine
    from yggdrasil.core.signing import ProfileSigner
    from yggdrasil.server.settings import YggdrasilSettings


def build_metadata(settings: YggdrasilSettings, signer: ProfileSigner) -> dict[str, Any]:
    meta = {
        **settings.meta,
        "serverName": settings.server_name,
        "implementationName": settings.implementation_name,
        "implementationVersion": settings.implementation_version or version_string(),
    }
    return {
        "meta": meta,
        "skinDomains": settings.skin_domains,
        "signaturePublickey": signer.public_key_pem,
    }


async def metadata(request: Request) -> Response:
    """GET / - server metadata and the public key for signature checks."""
    return JSONResponse(request.app.state.metadata)


async def texture(request: Request) -> Response:
    """GET /textures/{texture_hash} - raw PNG bytes of a stored texture."""
    engine: AuthProtocolEngine = request.app.state.engine
    data = await engine.get_texture(request.path_params["texture_hash"])
    if data is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)
    return Response(data, media_type="image/png", headers={"Cache-Control": "public, max-age=31536000, immutable"})
