"""Tests for environment-driven Settings."""

import pytest
from pydantic import ValidationError

from settings import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("BACKEND", "PERSISTENCE", "ROOT_PATH", "STRICT_NAMES", "SERVER_PORT"):
            monkeypatch.delenv(f"FILE_MANAGER_{name}", raising=False)

        settings = Settings()

        assert settings.backend == "mock"
        assert settings.persistence == "sqlite"
        assert settings.root_path == "/"
        assert not settings.strict_names
        assert settings.server_port == 3001

    def test_environment_overrides(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("FILE_MANAGER_BACKEND", "remote")
        monkeypatch.setenv("FILE_MANAGER_STRICT_NAMES", "true")
        monkeypatch.setenv("FILE_MANAGER_SERVER_ROOT", str(tmp_path))

        settings = Settings()

        assert settings.backend == "remote"
        assert settings.strict_names
        assert settings.server_root == tmp_path

    def test_invalid_values(self) -> None:
        with pytest.raises(ValidationError):
            Settings(backend="ftp")
        with pytest.raises(ValidationError):
            Settings(remote_timeout=0)

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
