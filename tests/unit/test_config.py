"""Unit tests for configuration loading and validation."""

import pytest

from core.config import (
    MIN_KDF_ITERATIONS,
    AppConfig,
    AppInfo,
    FlaskConfig,
    SecurityConfig,
    SettingsConfig,
    get_config,
    reset_config,
)


class TestValidation:

    @pytest.mark.parametrize("port", [0, 70000])
    def test_invalid_port(self, port):
        with pytest.raises(ValueError):
            FlaskConfig(port=port)

    def test_iterations_below_minimum(self):
        with pytest.raises(ValueError):
            SecurityConfig(key_iterations=MIN_KDF_ITERATIONS - 1)

    def test_short_hash_length(self):
        with pytest.raises(ValueError):
            SecurityConfig(hash_length=32)

    def test_short_iv(self):
        with pytest.raises(ValueError):
            SecurityConfig(iv_length=8)

    def test_settings_bounds(self):
        with pytest.raises(ValueError):
            SettingsConfig(cache_ttl_seconds=0)
        with pytest.raises(ValueError):
            SettingsConfig(max_backups=0)

    def test_app_identity_required(self):
        with pytest.raises(ValueError):
            AppInfo(name="")

    def test_frozen(self):
        config = SettingsConfig()
        with pytest.raises(AttributeError):
            config.max_backups = 10


class TestFromEnvironment:

    def test_defaults(self, app_config, tmp_path):
        assert app_config.paths.data_dir == tmp_path / "data"
        assert app_config.paths.database_url == f"sqlite:///{tmp_path / 'data' / 'draftpad.db'}"
        assert app_config.flask.host == "127.0.0.1"
        assert app_config.security.key_iterations == MIN_KDF_ITERATIONS
        assert app_config.settings.cache_ttl_seconds == 300
        assert app_config.settings.max_backups == 5

    def test_directories_created(self, app_config):
        assert app_config.paths.logs_dir.is_dir()
        assert app_config.paths.backups_dir.is_dir()

    def test_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DRAFTPAD_DATA_DIR", str(tmp_path / "elsewhere"))
        monkeypatch.setenv("DRAFTPAD_PORT", "6000")
        monkeypatch.setenv("DRAFTPAD_APP_NAME", "Draftpad Beta")
        monkeypatch.setenv("DRAFTPAD_MAX_BACKUPS", "2")
        monkeypatch.setenv("DRAFTPAD_CACHE_TTL_SECONDS", "60")

        config = AppConfig.from_environment(base_dir=tmp_path)

        assert config.paths.data_dir == tmp_path / "elsewhere"
        assert config.flask.port == 6000
        assert config.app.name == "Draftpad Beta"
        assert config.settings.max_backups == 2
        assert config.settings.cache_ttl_seconds == 60

    def test_invalid_override_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DRAFTPAD_KEY_ITERATIONS", "1000")
        with pytest.raises(ValueError):
            AppConfig.from_environment(base_dir=tmp_path)


class TestSingleton:

    def test_get_config_cached(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DRAFTPAD_DATA_DIR", str(tmp_path))
        reset_config()
        try:
            assert get_config() is get_config()
        finally:
            reset_config()
