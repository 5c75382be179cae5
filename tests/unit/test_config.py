"""
Unit tests for oscapxml settings.
"""

import pytest
from pydantic import ValidationError

from oscapxml.config import Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test environment driven settings."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.log_level == "WARNING"
        assert settings.max_file_size == 100 * 1024 * 1024
        assert settings.huge_tree is False

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("OSCAPXML_LOG_LEVEL", "debug")
        monkeypatch.setenv("OSCAPXML_MAX_FILE_SIZE", "2048")
        monkeypatch.setenv("OSCAPXML_HUGE_TREE", "true")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.max_file_size == 2048
        assert settings.huge_tree is True

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="CHATTY")

    def test_max_file_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_file_size=0)

    def test_env_file(self, tmp_path, monkeypatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("OSCAPXML_MAX_FILE_SIZE=4096\n")

        assert Settings(_env_file=env_file).max_file_size == 4096

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
