"""Texture image checks and content addressing.

Only the PNG header is inspected: the signature and the IHDR chunk carry the
dimensions, which is all skin and cape validation needs.
"""

import hashlib
import struct

from shared.auth.models import TextureKind

MAX_TEXTURE_BYTES = 8192

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_IHDR = struct.Struct(">I4sII")  # chunk length, chunk type, width, height

ALLOWED_DIMENSIONS: dict[TextureKind, frozenset[tuple[int, int]]] = {
    TextureKind.SKIN: frozenset({(64, 64), (64, 32)}),
    TextureKind.CAPE: frozenset({(64, 32), (22, 17)}),
}


class InvalidTextureError(ValueError):
    """Uploaded bytes are not an acceptable texture image."""


def texture_hash(data: bytes) -> str:
    """Content address of a texture: hex SHA-256 of its bytes."""
    return hashlib.sha256(data).hexdigest()


def png_dimensions(data: bytes) -> tuple[int, int]:
    """Return (width, height) from a PNG header. Raise InvalidTextureError otherwise."""
    header_end = len(_PNG_SIGNATURE) + _IHDR.size
    if len(data) < header_end or not data.startswith(_PNG_SIGNATURE):
        raise InvalidTextureError("Not a PNG image")
    _length, chunk_type, width, height = _IHDR.unpack_from(data, len(_PNG_SIGNATURE))
    if chunk_type != b"IHDR":
        raise InvalidTextureError("PNG image is missing its IHDR header")
    return width, height


def validate_texture(kind: TextureKind, data: bytes) -> str:
    """Check size and dimensions for the texture kind and return its hash."""
    if len(data) > MAX_TEXTURE_BYTES:
        raise InvalidTextureError(f"Texture exceeds {MAX_TEXTURE_BYTES} bytes")
    width, height = png_dimensions(data)
    if (width, height) not in ALLOWED_DIMENSIONS[kind]:
        raise InvalidTextureError(f"{width}x{height} is not a valid {kind.value} size")
    return texture_hash(data)
