"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest

from formatcache.config import get_settings, reload_settings
from formatcache.config.settings import Settings, set_toml_config


@pytest.fixture
def empty_toml_config() -> None:
    """Make sure no TOML values from another test leak into Settings()."""
    set_toml_config({})


@pytest.mark.usefixtures("empty_toml_config")
class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings has sensible defaults."""
        monkeypatch.delenv("FORMATCACHE_DEV_MODE", raising=False)
        settings = Settings()
        assert settings.dev_mode is False

    def test_cache_defaults(self) -> None:
        """Cache configuration has defaults."""
        settings = Settings()
        assert settings.cache.max_size_kb == 100000
        assert settings.cache.concurrency_level == 4
        assert settings.cache.formatter_subdir == "formatter"

    def test_observability_defaults(self) -> None:
        """Observability configuration has defaults."""
        settings = Settings()
        assert settings.observability.logging.format == "json"
        assert settings.observability.metrics.enabled is True

    def test_constructor_arguments_win(self) -> None:
        """Explicit arguments take precedence over everything else."""
        set_toml_config({"dev_mode": False})
        assert Settings(dev_mode=True).dev_mode is True

    def test_logging_level_only_under_observability(self) -> None:
        """The log level has one home: observability.logging."""
        set_toml_config({"observability": {"logging": {"level": "DEBUG"}}})
        settings = Settings()
        assert set(Settings.model_fields) == {"dev_mode", "cache", "observability"}
        assert settings.observability.logging.level == "DEBUG"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_settings_instance(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """get_settings returns a Settings instance."""
        mock_toml_files({"default.toml": "dev_mode = true"})
        monkeypatch.setenv("FORMATCACHE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("FORMATCACHE_ENV", "nonexistent")

        settings = get_settings()
        assert isinstance(settings, Settings)
        assert settings.dev_mode is True

    def test_settings_cached(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """get_settings returns cached instance."""
        mock_toml_files({"default.toml": "dev_mode = true"})
        monkeypatch.setenv("FORMATCACHE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("FORMATCACHE_ENV", "nonexistent")

        assert get_settings() is get_settings()

    def test_reload_settings_reads_files_again(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """reload_settings picks up changed configuration files."""
        mock_toml_files({"default.toml": "dev_mode = false"})
        monkeypatch.setenv("FORMATCACHE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("FORMATCACHE_ENV", "nonexistent")
        assert get_settings().dev_mode is False

        mock_toml_files({"default.toml": "dev_mode = true"})
        assert reload_settings().dev_mode is True

    def test_toml_cache_section(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Nested cache values come from TOML."""
        mock_toml_files({"default.toml": "[cache]\nmax_size_kb = 2048\nconcurrency_level = 8"})
        monkeypatch.setenv("FORMATCACHE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("FORMATCACHE_ENV", "nonexistent")

        settings = get_settings()
        assert settings.cache.max_size_kb == 2048
        assert settings.cache.concurrency_level == 8

    def test_env_var_overrides_toml(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """FORMATCACHE_* environment variables override TOML values."""
        mock_toml_files({"default.toml": "dev_mode = false\n[cache]\nmax_size_kb = 10"})
        monkeypatch.setenv("FORMATCACHE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("FORMATCACHE_ENV", "nonexistent")
        monkeypatch.setenv("FORMATCACHE_DEV_MODE", "true")
        monkeypatch.setenv("FORMATCACHE_CACHE__MAX_SIZE_KB", "20")

        settings = get_settings()
        assert settings.dev_mode is True
        assert settings.cache.max_size_kb == 20
