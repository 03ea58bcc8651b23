"""Profile serialization and texture property signing.

Game servers and clients verify the ``textures`` property of a profile with
the authority's public key (published in the metadata document). The
signature is RSA PKCS#1 v1.5 over SHA-1 of the property value exactly as it
is sent, i.e. the base64 text of the textures document.
"""

from __future__ import annotations

import base64
import json
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from shared.auth.models import TextureKind

if TYPE_CHECKING:
    from shared.auth.models import Profile

SIGNING_KEY_BITS = 4096
UPLOADABLE_TEXTURES = ",".join(kind.value for kind in TextureKind)

_KEY_FILE_PERMISSIONS = 0o600

logger = structlog.get_logger()


def load_signing_key(path: str | Path, *, generate_missing: bool = False) -> rsa.RSAPrivateKey:
    """Load a PEM RSA private key, optionally creating one when the file does not exist."""
    key_path = Path(path)
    if not key_path.exists():
        if not generate_missing:
            raise FileNotFoundError(f"Signing key not found: {key_path}")
        return _generate_signing_key(key_path)

    key = serialization.load_pem_private_key(key_path.read_bytes(), password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise TypeError(f"Signing key in {key_path} is not an RSA private key")
    return key


def _generate_signing_key(key_path: Path) -> rsa.RSAPrivateKey:
    key = rsa.generate_private_key(public_exponent=65537, key_size=SIGNING_KEY_BITS)
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    key_path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, _KEY_FILE_PERMISSIONS)
    with os.fdopen(fd, "wb") as f:
        f.write(pem)
    logger.warning("generated a new profile signing key", path=str(key_path))
    return key


def public_key_pem(key: rsa.RSAPrivateKey) -> str:
    return (
        key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )


def sign_value(key: rsa.RSAPrivateKey, value: str) -> str:
    signature = key.sign(value.encode("utf-8"), padding.PKCS1v15(), hashes.SHA1())  # noqa: S303
    return base64.b64encode(signature).decode("ascii")


def texture_url(base_url: str, texture_hash: str) -> str:
    return f"{base_url.rstrip('/')}/textures/{texture_hash}"


def build_textures_document(profile: Profile, base_url: str) -> dict[str, Any]:
    """Texture metadata embedded (base64 JSON) in the ``textures`` property."""
    textures: dict[str, Any] = {}
    if profile.skin_hash:
        textures["SKIN"] = {
            "url": texture_url(base_url, profile.skin_hash),
            "metadata": {"model": profile.skin_model.value},
        }
    if profile.cape_hash:
        textures["CAPE"] = {"url": texture_url(base_url, profile.cape_hash)}
    return {
        "timestamp": int(time.time() * 1000),
        "profileId": profile.profile_id,
        "profileName": profile.name,
        "textures": textures,
    }


def serialize_profile(
    profile: Profile,
    *,
    base_url: str,
    include_properties: bool = False,
    signing_key: rsa.RSAPrivateKey | None = None,
) -> dict[str, Any]:
    """Public representation of a profile: ``{id, name, properties?}``.

    Properties are included only on request; each one gets a signature when a
    signing key is passed.
    """
    serialized: dict[str, Any] = {"id": profile.profile_id, "name": profile.name}
    if not include_properties:
        return serialized

    document = json.dumps(build_textures_document(profile, base_url), separators=(",", ":"))
    properties = [
        {"name": "textures", "value": base64.b64encode(document.encode("utf-8")).decode("ascii")},
        {"name": "uploadableTextures", "value": UPLOADABLE_TEXTURES},
    ]
    if signing_key is not None:
        for prop in properties:
            prop["signature"] = sign_value(signing_key, prop["value"])
    serialized["properties"] = properties
    return serialized


class ProfileSigner:
    """Binds the signing key and texture base address for serialize_profile."""

    def __init__(self, signing_key: rsa.RSAPrivateKey, base_url: str) -> None:
        self._signing_key = signing_key
        self._base_url = base_url

    @property
    def public_key_pem(self) -> str:
        return public_key_pem(self._signing_key)

    def serialize(self, profile: Profile, *, include_properties: bool = False, signed: bool = False) -> dict[str, Any]:
        return serialize_profile(
            profile,
            base_url=self._base_url,
            include_properties=include_properties,
            signing_key=self._signing_key if signed else None,
        )
