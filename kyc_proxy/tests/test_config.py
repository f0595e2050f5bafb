"""
Configuration Tests

Tests settings loading from the environment, credential validation and
the non-fatal configuration report.
"""

import pytest
from pydantic import ValidationError

from kyc_proxy.config import Settings, get_settings, validate_configuration


def test_token_loaded_from_environment(monkeypatch):
    monkeypatch.setenv("AIRTABLE_API_TOKEN", "patAbc123.secret")

    settings = get_settings()

    assert settings.AIRTABLE_API_TOKEN == "patAbc123.secret"
    assert settings.airtable_table_url == (
        "https://api.airtable.com/v0/appc0ZVhbKj8hMLvH/tblIxT2t2gHoZMucn"
    )


def test_legacy_api_key_variable_accepted(monkeypatch):
    monkeypatch.setenv("AIRTABLE_API_KEY", "keyLegacy")

    assert get_settings().AIRTABLE_API_TOKEN == "keyLegacy"


def test_token_read_once(monkeypatch):
    """Test the credential is cached after first load"""
    monkeypatch.setenv("AIRTABLE_API_TOKEN", "first")
    first = get_settings()

    monkeypatch.setenv("AIRTABLE_API_TOKEN", "second")

    assert get_settings() is first
    assert get_settings().AIRTABLE_API_TOKEN == "first"


def test_token_read_from_env_file(tmp_path):
    (tmp_path / ".env").write_text("AIRTABLE_API_TOKEN=fromdotenv\n")

    assert get_settings().AIRTABLE_API_TOKEN == "fromdotenv"


def test_missing_token_fails():
    with pytest.raises(ValidationError) as exc_info:
        Settings()

    assert "AIRTABLE_API_TOKEN" in str(exc_info.value)


@pytest.mark.parametrize("token", ["", "   ", "has space"])
def test_unusable_token_fails(token):
    with pytest.raises(ValidationError):
        Settings(AIRTABLE_API_TOKEN=token, _env_file=None)


def test_token_is_stripped():
    settings = Settings(AIRTABLE_API_TOKEN="  secrettoken\n", _env_file=None)

    assert settings.AIRTABLE_API_TOKEN == "secrettoken"


@pytest.mark.parametrize("field", ["AIRTABLE_BASE_ID", "AIRTABLE_TABLE_ID"])
def test_table_location_must_be_alphanumeric(field):
    with pytest.raises(ValidationError):
        Settings(AIRTABLE_API_TOKEN="secrettoken", _env_file=None, **{field: "app/../x"})


def test_api_url_trailing_slash_stripped():
    settings = Settings(
        AIRTABLE_API_TOKEN="secrettoken",
        AIRTABLE_API_URL="http://airtable.local/v0/",
        AIRTABLE_BASE_ID="BASE123",
        AIRTABLE_TABLE_ID="TBL456",
        _env_file=None,
    )

    assert settings.airtable_table_url == "http://airtable.local/v0/BASE123/TBL456"


def test_log_level_validated():
    assert Settings(AIRTABLE_API_TOKEN="t", LOG_LEVEL="debug", _env_file=None).LOG_LEVEL == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(AIRTABLE_API_TOKEN="t", LOG_LEVEL="LOUD", _env_file=None)


def test_allowed_origins_list():
    assert Settings(AIRTABLE_API_TOKEN="t", _env_file=None).allowed_origins_list == ["*"]

    settings = Settings(
        AIRTABLE_API_TOKEN="t",
        ALLOWED_ORIGINS="https://a.example, https://b.example,",
        _env_file=None,
    )
    assert settings.allowed_origins_list == ["https://a.example", "https://b.example"]


def test_validate_configuration_warnings():
    settings = Settings(
        AIRTABLE_API_TOKEN="xq9",
        AIRTABLE_API_URL="http://airtable.local/v0",
        _env_file=None,
    )

    report = validate_configuration(settings)

    assert len(report["warnings"]) == 3
    assert "xq9" not in " ".join(report["warnings"])


def test_validate_configuration_clean():
    settings = Settings(
        AIRTABLE_API_TOKEN="pat0123456789abcdef.0123456789",
        ALLOWED_ORIGINS="https://app.example",
        _env_file=None,
    )

    assert validate_configuration(settings)["warnings"] == []
