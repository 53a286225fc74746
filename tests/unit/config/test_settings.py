"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from mljboard.config import LastfmSettings, RelaySettings, Settings


class TestSettings:
    """Test settings defaults and env loading."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LASTFM__API_KEY", raising=False)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.database.url == "sqlite+aiosqlite:///./mljboard.db"
        assert settings.api_prefix == "/api"
        assert settings.lastfm.is_configured() is False
        assert settings.http.relay_timeout == 10.0
        assert settings.http.maloja_timeout == 30.0
        assert settings.http.lastfm_timeout == 30.0

    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELAY__HOST", "hos.example")
        monkeypatch.setenv("RELAY__HTTPS", "true")
        monkeypatch.setenv("RELAY__PASSWORD", "pw")
        monkeypatch.setenv("LASTFM__API_KEY", "abc")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.relay.base_url == "https://hos.example:9000"
        assert settings.relay.password == "pw"
        assert settings.lastfm.is_configured() is True


class TestSectionValidation:
    """Test per-section constraints."""

    def test_relay_port_range(self) -> None:
        with pytest.raises(ValidationError):
            RelaySettings(port=70000)

    def test_lastfm_page_size_max_200(self) -> None:
        with pytest.raises(ValidationError):
            LastfmSettings(page_size=201)

    def test_blank_api_key_is_not_configured(self) -> None:
        assert LastfmSettings(api_key="  ").is_configured() is False
