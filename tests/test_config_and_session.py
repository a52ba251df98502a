"""Tests for configuration, sessions, logging and error formatting."""

import logging
from unittest.mock import patch

import pytest

from cloud_ops.utils.config import ConfigManager, parse_bool
from cloud_ops.utils.exceptions import (
    CloudOpsError,
    ConfigError,
    ValidationRules,
)
from cloud_ops.utils.logger import resolve_level, setup_logger
from cloud_ops.utils.session import SessionManager


class TestConfigManager:
    """Test ConfigManager."""

    @pytest.fixture
    def config(self, tmp_path):
        (tmp_path / "settings.yml").write_text(
            "aws:\n"
            "  region: us-west-2\n"
            "  ec2:\n"
            "    compress_user_data: 'yes'\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        return ConfigManager(config_dir=tmp_path)

    def test_prefers_yml_file(self, config, tmp_path):
        assert config.settings_file == tmp_path / "settings.yml"

    def test_dot_path_lookup(self, config):
        assert config.get_value("aws.region") == "us-west-2"
        assert config.get_value("aws.missing.key", "fallback") == "fallback"

    def test_environment_override(self, config, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "eu-central-1")
        assert config.get_aws_region() == "eu-central-1"

    def test_compress_user_data(self, config, monkeypatch):
        monkeypatch.delenv("CLOUD_OPS_COMPRESS_USER_DATA", raising=False)
        assert config.get_compress_user_data() is True
        monkeypatch.setenv("CLOUD_OPS_COMPRESS_USER_DATA", "0")
        assert config.get_compress_user_data() is False

    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.delenv("CLOUD_OPS_COMPRESS_USER_DATA", raising=False)
        config = ConfigManager(config_dir=tmp_path)
        assert config.get_aws_region() == "ap-southeast-2"
        assert config.get_compress_user_data() is False

    def test_config_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLOUD_OPS_CONFIG_DIR", str(tmp_path))
        assert ConfigManager().config_dir == tmp_path

    def test_require_value(self, config):
        assert config.require_value("logging.level") == "DEBUG"
        with pytest.raises(ConfigError):
            config.require_value("vault.addr")

    def test_reload_config(self, config, tmp_path):
        assert config.get_value("aws.region") == "us-west-2"
        (tmp_path / "settings.yml").write_text("aws:\n  region: sa-east-1\n")
        config.reload_config()
        assert config.get_value("aws.region") == "sa-east-1"

    def test_logging_level_is_text(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        (tmp_path / "settings.yml").write_text("logging:\n  level: 10\n")
        assert ConfigManager(config_dir=tmp_path).get_logging_level() == "10"
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert ConfigManager(config_dir=tmp_path).get_logging_level() == "warning"

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), ("true", True), ("ON", True), ("1", True), ("no", False), (None, False)],
    )
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected


class TestSessionManager:
    """Test boto3 session helpers."""

    @patch("cloud_ops.utils.session.boto3.Session")
    def test_session_from_secret(self, mock_session):
        secret = {
            "aws_access_key_id": "AKIA",
            "aws_secret_access_key": "s3cr3t",
            "aws_session_token": "tok",
        }

        SessionManager.get_session_from_secret(secret, region="us-east-1")

        mock_session.assert_called_once_with(
            aws_access_key_id="AKIA",
            aws_secret_access_key="s3cr3t",
            aws_session_token="tok",
            region_name="us-east-1",
        )

    @pytest.mark.parametrize(
        "secret", ["plain-string", {"aws_access_key_id": "AKIA"}]
    )
    def test_session_from_bad_secret(self, secret):
        with pytest.raises(ValueError):
            SessionManager.get_session_from_secret(secret)


class TestErrorsAndValidation:
    """Test error formatting and id validation."""

    def test_error_context_in_message(self):
        error = CloudOpsError("rejected", operation="stop", resource_ids=["i-1", "i-2"])
        assert str(error) == "[stop i-1, i-2] rejected"

    def test_error_without_context(self):
        assert str(CloudOpsError("plain")) == "plain"

    @pytest.mark.parametrize(
        "instance_id,valid",
        [
            ("i-0123abcd", True),
            ("i-0123456789abcdef0", True),
            ("i-xyz", False),
            ("vol-0123abcd", False),
            ("", False),
        ],
    )
    def test_instance_id_format(self, instance_id, valid):
        assert ValidationRules.validate_instance_id(instance_id) is valid

    def test_subnet_id_format(self):
        assert ValidationRules.validate_subnet_id("subnet-0123456789abcdef0")
        assert not ValidationRules.validate_subnet_id("sn-1")


class TestLogger:
    """Test setup_logger."""

    def test_no_duplicate_handlers(self):
        first = setup_logger("cloud_ops.tests.dup")
        second = setup_logger("cloud_ops.tests.dup")
        assert first is second
        assert len(second.handlers) == 1
        assert second.propagate is False

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("debug", logging.DEBUG),
            (" WARNING ", logging.WARNING),
            ("10", logging.DEBUG),
            (30, logging.WARNING),
            ("verbose", logging.INFO),
            ("basicConfig", logging.INFO),
        ],
    )
    def test_level_names_and_numbers(self, level, expected):
        assert resolve_level(level) == expected

    def test_file_handler(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        logger = setup_logger("cloud_ops.tests.file", "test.log", level="debug")
        assert logger.level == logging.DEBUG
        assert (tmp_path / "logs").is_dir()
        assert len(logger.handlers) == 2
