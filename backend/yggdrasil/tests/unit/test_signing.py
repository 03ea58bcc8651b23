"""Tests for profile serialization and texture signatures."""

from __future__ import annotations

import base64
import json
import stat

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding

from shared.auth.models import Profile
from yggdrasil.core import signing
from yggdrasil.core.signing import ProfileSigner, load_signing_key, serialize_profile, texture_url

BASE_URL = "https://auth.example.com/"


def _verify(signer: ProfileSigner, value: str, signature: str) -> None:
    public_key = serialization.load_pem_public_key(signer.public_key_pem.encode("ascii"))
    public_key.verify(base64.b64decode(signature), value.encode("utf-8"), padding.PKCS1v15(), hashes.SHA1())


def _textures_document(serialized: dict) -> dict:
    prop = next(p for p in serialized["properties"] if p["name"] == "textures")
    return json.loads(base64.b64decode(prop["value"]))


@pytest.fixture
def profile() -> Profile:
    return Profile(profile_id="p1", name="Alice", account_id="a1", skin_hash="abc", cape_hash="def", slim=True)


class TestSerializeProfile:
    def test_without_properties(self, profile):
        assert serialize_profile(profile, base_url=BASE_URL) == {"id": "p1", "name": "Alice"}

    def test_textures_document(self, profile):
        serialized = serialize_profile(profile, base_url=BASE_URL, include_properties=True)
        document = _textures_document(serialized)

        assert document["profileId"] == "p1"
        assert document["profileName"] == "Alice"
        assert isinstance(document["timestamp"], int)
        assert document["textures"] == {
            "SKIN": {"url": "https://auth.example.com/textures/abc", "metadata": {"model": "slim"}},
            "CAPE": {"url": "https://auth.example.com/textures/def"},
        }
        assert all("signature" not in p for p in serialized["properties"])

    def test_profile_without_textures_has_empty_map(self):
        bare = Profile(profile_id="p2", name="Bob", account_id="a1")
        document = _textures_document(serialize_profile(bare, base_url=BASE_URL, include_properties=True))
        assert document["textures"] == {}

    def test_lists_uploadable_textures(self, profile):
        serialized = serialize_profile(profile, base_url=BASE_URL, include_properties=True)
        uploadable = next(p for p in serialized["properties"] if p["name"] == "uploadableTextures")
        assert uploadable["value"] == "skin,cape"

    def test_texture_url_joins_without_double_slash(self):
        assert texture_url("https://a.example.com/", "h") == "https://a.example.com/textures/h"


class TestProfileSigner:
    def test_signature_verifies_with_public_key(self, profile, signing_key):
        signer = ProfileSigner(signing_key, BASE_URL)
        serialized = signer.serialize(profile, include_properties=True, signed=True)

        for prop in serialized["properties"]:
            _verify(signer, prop["value"], prop["signature"])

    def test_tampered_payload_fails_verification(self, profile, signing_key):
        signer = ProfileSigner(signing_key, BASE_URL)
        prop = signer.serialize(profile, include_properties=True, signed=True)["properties"][0]

        raw = bytearray(base64.b64decode(prop["value"]))
        raw[10] ^= 0x01
        tampered = base64.b64encode(bytes(raw)).decode("ascii")

        with pytest.raises(InvalidSignature):
            _verify(signer, tampered, prop["signature"])

    def test_unsigned_serialization_has_no_signatures(self, profile, signing_key):
        signer = ProfileSigner(signing_key, BASE_URL)
        serialized = signer.serialize(profile, include_properties=True)
        assert all("signature" not in p for p in serialized["properties"])

    def test_public_key_is_spki_pem(self, signing_key):
        pem = ProfileSigner(signing_key, BASE_URL).public_key_pem
        assert pem.startswith("-----BEGIN PUBLIC KEY-----")


class TestLoadSigningKey:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Signing key not found"):
            load_signing_key(tmp_path / "key.pem")

    def test_generates_and_reloads(self, tmp_path, monkeypatch):
        monkeypatch.setattr(signing, "SIGNING_KEY_BITS", 2048)
        path = tmp_path / "keys" / "key.pem"

        generated = load_signing_key(path, generate_missing=True)
        reloaded = load_signing_key(path)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert generated.private_numbers() == reloaded.private_numbers()

    def test_rejects_non_rsa_key(self, tmp_path):
        key = ec.generate_private_key(ec.SECP256R1())
        path = tmp_path / "ec.pem"
        path.write_bytes(
            key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            ),
        )
        with pytest.raises(TypeError, match="not an RSA private key"):
            load_signing_key(path)
