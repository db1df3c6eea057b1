"""Tests for settings and form config models."""

from pathlib import Path

import httpx
import pytest

from schemaform.core.errors import SettingsError
from schemaform.runtime.config import (
    ENV_BASE_URL,
    ClientSettings,
    FormConfig,
    load_settings,
)


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(ENV_BASE_URL, raising=False)

        settings = load_settings(tmp_path / "schemaform.toml")

        assert settings == ClientSettings()
        assert settings.timeout == 10.0

    def test_reads_client_table(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(ENV_BASE_URL, raising=False)
        path = tmp_path / "schemaform.toml"
        path.write_text(
            '[client]\nbase_url = "https://api.example.com/"\ntimeout = 3\n'
            '[client.headers]\nAccept-Language = "cs"\n'
        )

        settings = load_settings(path)

        assert settings.base_url == "https://api.example.com/"
        assert settings.timeout == 3
        assert settings.headers == {"Accept-Language": "cs"}

    def test_env_overrides_base_url(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "schemaform.toml"
        path.write_text('[client]\nbase_url = "https://file.example.com/"\n')
        monkeypatch.setenv(ENV_BASE_URL, "https://env.example.com/")

        assert load_settings(path).base_url == "https://env.example.com/"

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "schemaform.toml"
        path.write_text("[client\n")

        with pytest.raises(SettingsError):
            load_settings(path)

    def test_invalid_values(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(ENV_BASE_URL, raising=False)
        path = tmp_path / "schemaform.toml"
        path.write_text("[client]\ntimeout = -1\n")

        with pytest.raises(SettingsError):
            load_settings(path)

    def test_unknown_key_rejected(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(ENV_BASE_URL, raising=False)
        path = tmp_path / "schemaform.toml"
        path.write_text("[client]\nretries = 3\n")

        with pytest.raises(SettingsError):
            load_settings(path)


class TestClientSettings:
    @pytest.mark.asyncio
    async def test_create_client(self):
        settings = ClientSettings(base_url="https://api.example.com/", timeout=2)

        async with settings.create_client() as client:
            assert isinstance(client, httpx.AsyncClient)
            assert str(client.base_url) == "https://api.example.com/"
            assert client.timeout.read == 2


class TestFormConfig:
    def test_defaults(self):
        config = FormConfig.model_validate({"layout": [["a"]]})

        assert config.has_initial_data is False
        assert config.method is None
        assert config.actions is None

    def test_extra_keys_kept(self):
        config = FormConfig.model_validate({"layout": [], "restrict_to_fields": ["a"]})

        assert config.model_extra == {"restrict_to_fields": ["a"]}
