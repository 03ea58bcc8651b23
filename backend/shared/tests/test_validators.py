import pytest
from pydantic_settings import BaseSettings

from shared.validators import StringListEnvSettingsSource, parse_string_list


class TestParseStringList:
    def test_json_array_string(self):
        result = parse_string_list('["skins.example.com",".cdn.example.com"]')
        assert result == ["skins.example.com", ".cdn.example.com"]

    def test_comma_separated_with_whitespace(self):
        result = parse_string_list("skins.example.com , .cdn.example.com")
        assert result == ["skins.example.com", ".cdn.example.com"]

    def test_passthrough_list(self):
        assert parse_string_list(["a", " b "]) == ["a", "b"]

    def test_skips_empty_segments(self):
        assert parse_string_list("a,,b,") == ["a", "b"]

    def test_empty_string_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            parse_string_list("")

    def test_empty_allowed_when_requested(self):
        assert parse_string_list("", allow_empty=True) == []
        assert parse_string_list("[]", allow_empty=True) == []

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Invalid JSON array"):
            parse_string_list("[not valid json")

    def test_json_mixed_types_array_raises(self):
        with pytest.raises(ValueError, match="must be an array of strings"):
            parse_string_list('["a", 123]')


class _DomainSettings(BaseSettings):
    model_config = {"env_prefix": "TEST_"}

    domains: list[str] = []


class TestStringListEnvSettingsSource:
    def test_hands_raw_text_to_listed_fields(self, monkeypatch):
        monkeypatch.setenv("TEST_DOMAINS", '["a.example.com"]')
        source = StringListEnvSettingsSource(_DomainSettings, frozenset({"domains"}))
        assert source()["domains"] == '["a.example.com"]'

    def test_other_fields_keep_default_decoding(self, monkeypatch):
        monkeypatch.setenv("TEST_DOMAINS", '["a.example.com"]')
        source = StringListEnvSettingsSource(_DomainSettings, frozenset())
        assert source()["domains"] == ["a.example.com"]
