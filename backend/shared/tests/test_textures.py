import pytest

from shared.auth.models import TextureKind
from shared.textures import MAX_TEXTURE_BYTES, InvalidTextureError, png_dimensions, texture_hash, validate_texture


class TestPngDimensions:
    def test_reads_width_and_height(self, make_png):
        assert png_dimensions(make_png(64, 32)) == (64, 32)

    def test_rejects_non_png(self):
        with pytest.raises(InvalidTextureError, match="Not a PNG"):
            png_dimensions(b"GIF89a" + b"\x00" * 40)

    def test_rejects_truncated_header(self, make_png):
        with pytest.raises(InvalidTextureError):
            png_dimensions(make_png(64, 64)[:20])


class TestValidateTexture:
    @pytest.mark.parametrize(("width", "height"), [(64, 64), (64, 32)])
    def test_accepts_skin_sizes(self, make_png, width, height):
        data = make_png(width, height)
        assert validate_texture(TextureKind.SKIN, data) == texture_hash(data)

    @pytest.mark.parametrize(("width", "height"), [(64, 32), (22, 17)])
    def test_accepts_cape_sizes(self, make_png, width, height):
        validate_texture(TextureKind.CAPE, make_png(width, height))

    def test_rejects_cape_sized_skin(self, make_png):
        with pytest.raises(InvalidTextureError, match="22x17 is not a valid skin size"):
            validate_texture(TextureKind.SKIN, make_png(22, 17))

    def test_rejects_oversized_file(self, make_png):
        with pytest.raises(InvalidTextureError, match="exceeds"):
            validate_texture(TextureKind.SKIN, make_png(64, 64, padding=MAX_TEXTURE_BYTES))

    def test_hash_is_content_address(self):
        assert texture_hash(b"abc") == texture_hash(b"abc")
        assert texture_hash(b"abc") != texture_hash(b"abd")
        assert len(texture_hash(b"abc")) == 64
