"""Tests for ConfigManager."""

import logging

import pytest
import yaml

from noise.config import ConfigManager, NoiseConfig


class TestConfigManager:
    """Test ConfigManager functionality."""

    def test_load_config_creates_default_if_missing(self, path_resolver):
        """Should create a default config file when none exists."""
        config_path = path_resolver.get_noise_config_path()
        assert not config_path.exists()

        config = ConfigManager(path_resolver, environ={}).load()

        assert isinstance(config, NoiseConfig)
        assert config.server.port == 3001
        assert config.jwt.expires_in_days == 30
        assert config.upload.max_file_size_mb == 20
        assert config.text.max_length == 200
        assert config_path.exists()

    def test_load_config_with_existing_file(self, path_resolver):
        """Should load values from an existing YAML file."""
        config_path = path_resolver.get_noise_config_path()
        config_path.write_text(
            yaml.dump(
                {
                    "environment": "production",
                    "server": {"port": 8080},
                    "cors": {"origins": ["https://noise.example"]},
                    "upload": {"max_file_size_mb": 5},
                }
            )
        )

        config = ConfigManager(path_resolver, environ={}).load()

        assert config.is_production
        assert config.server.port == 8080
        assert config.cors.origins == ["https://noise.example"]
        assert config.upload.max_file_size_bytes == 5 * 1024 * 1024
        # Untouched sections keep their defaults
        assert config.rate_limit.max_requests == 100

    def test_empty_file_uses_defaults(self, path_resolver):
        """Should treat an empty config file as all defaults."""
        path_resolver.get_noise_config_path().write_text("")

        config = ConfigManager(path_resolver, environ={}).load()

        assert config == NoiseConfig()

    def test_environment_overrides(self, path_resolver):
        """Should apply deployment environment variables over the file."""
        environ = {
            "PORT": "4000",
            "NODE_ENV": "production",
            "JWT_SECRET": "s3cret",
            "JWT_EXPIRES_IN_DAYS": "7",
            "CORS_ORIGINS": "https://a.example, https://b.example",
            "MAX_FILE_SIZE_MB": "2",
            "UPLOAD_DIR": "/srv/uploads",
            "STORAGE_TYPE": "s3",
            "AWS_REGION": "eu-west-1",
            "S3_BUCKET_NAME": "bucket",
            "RATE_LIMIT_WINDOW_MS": "900000",
            "RATE_LIMIT_MAX_REQUESTS": "50",
            "UPLOAD_RATE_LIMIT_WINDOW_MS": "30000",
            "UPLOAD_RATE_LIMIT_MAX_REQUESTS": "3",
        }

        config = ConfigManager(path_resolver, environ=environ).load()

        assert config.server.port == 4000
        assert config.environment == "production"
        assert config.jwt.secret == "s3cret"
        assert config.jwt.expires_in_days == 7
        assert config.cors.origins == ["https://a.example", "https://b.example"]
        assert config.upload.max_file_size_mb == 2
        assert config.upload.upload_dir == "/srv/uploads"
        assert config.storage.type == "s3"
        assert config.storage.s3.region == "eu-west-1"
        assert config.storage.s3.bucket == "bucket"
        assert config.rate_limit.window_seconds == 900
        assert config.rate_limit.max_requests == 50
        assert config.rate_limit.upload_window_seconds == 30
        assert config.rate_limit.upload_max_requests == 3

    def test_empty_environment_values_are_ignored(self, path_resolver):
        """Should skip environment variables that are set but empty."""
        config = ConfigManager(path_resolver, environ={"PORT": ""}).load()

        assert config.server.port == 3001

    def test_invalid_environment_value_raises(self, path_resolver):
        """Should raise ValueError naming the variable when conversion fails."""
        with pytest.raises(ValueError, match="PORT"):
            ConfigManager(path_resolver, environ={"PORT": "not-a-port"}).load()

    def test_invalid_config_raises_value_error(self, path_resolver):
        """Should wrap pydantic validation errors in ValueError."""
        path_resolver.get_noise_config_path().write_text(
            yaml.dump({"storage": {"type": "ftp"}})
        )

        with pytest.raises(ValueError, match="Configuration validation failed"):
            ConfigManager(path_resolver, environ={}).load()

    def test_unknown_environment_runs_as_development(self, path_resolver, caplog):
        """Should treat unknown deployment environments as development."""
        with caplog.at_level(logging.WARNING):
            config = ConfigManager(path_resolver, environ={"NODE_ENV": "staging"}).load()

        assert config.environment == "development"
        assert not config.is_production
        assert "staging" in caplog.text

    def test_save_creates_backup(self, path_resolver):
        """Should keep a backup of the previous file when saving."""
        manager = ConfigManager(path_resolver, environ={})
        config = manager.load()
        config.server.port = 9000

        manager.save(config)

        backup_path = path_resolver.get_noise_config_path().with_suffix(".yaml.backup")
        assert backup_path.exists()
        assert yaml.safe_load(backup_path.read_text())["server"]["port"] == 3001
        assert manager.reload().server.port == 9000

    @pytest.mark.parametrize(
        "value,expected",
        [("1", True), ("true", True), ("yes", True), ("0", False), ("", False)],
    )
    def test_should_enable_debug(self, monkeypatch, value, expected):
        """Should read the NOISE_DEBUG flag."""
        monkeypatch.setenv("NOISE_DEBUG", value)

        assert ConfigManager.should_enable_debug() is expected
