#!/usr/bin/env python3
"""
utils/config.py

Simple configuration management utilities.
Provides centralized configuration loading.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from cloud_ops.core.constants import DEFAULT_AWS_REGION, VAULT_DEFAULT_TIMEOUT
from cloud_ops.utils.exceptions import ConfigError
from cloud_ops.utils.logger import setup_logger

logger = setup_logger(__name__, "config.log")

CONFIG_DIR_ENV_VAR = "CLOUD_OPS_CONFIG_DIR"
TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_bool(value: Any) -> bool:
    """Interpret YAML or environment values as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


class ConfigManager:
    """
    Simple configuration manager.

    Features:
    - YAML configuration loading
    - Environment variable override support
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Custom config directory path (defaults to
                $CLOUD_OPS_CONFIG_DIR, then PROJECT_ROOT/configs)
        """
        self.project_root = Path(__file__).parent.parent.parent.parent
        env_dir = os.environ.get(CONFIG_DIR_ENV_VAR)
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif env_dir:
            self.config_dir = Path(env_dir)
        else:
            self.config_dir = self.project_root / "configs"

        # Try both .yml and .yaml extensions
        yml_file = self.config_dir / "settings.yml"
        yaml_file = self.config_dir / "settings.yaml"

        if yml_file.exists():
            self.settings_file = yml_file
        elif yaml_file.exists():
            self.settings_file = yaml_file
        else:
            self.settings_file = yaml_file  # Default to .yaml for error messages

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file safely.
        """
        if not file_path.exists():
            logger.debug(f"Config file not found: {file_path}")
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                return content or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {file_path}: {e}")
            return {}

    def load_settings(self) -> Dict[str, Any]:
        """
        Load application settings.
        """
        return self._load_yaml_file(self.settings_file)

    def get_value(
        self, key_path: str, default: Any = None, env_var: Optional[str] = None
    ) -> Any:
        """
        Get configuration value with dot notation support and environment variable override.
        """
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        keys = key_path.split(".")
        current = self.config

        try:
            for key in keys:
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def require_value(self, key_path: str, env_var: Optional[str] = None) -> Any:
        """Get a configuration value that must be present and non-empty."""
        value = self.get_value(key_path, env_var=env_var)
        if value is None or value == "":
            hint = f" (or set {env_var})" if env_var else ""
            raise ConfigError(
                f"Missing required configuration '{key_path}'{hint} in {self.settings_file}"
            )
        return value

    def get_aws_region(self) -> str:
        """Get AWS region with environment variable override support."""
        return self.get_value("aws.region", DEFAULT_AWS_REGION, env_var="AWS_REGION")

    def get_compress_user_data(self) -> bool:
        """Whether instance user data is gzip-compressed before transport."""
        return parse_bool(
            self.get_value(
                "aws.ec2.compress_user_data",
                False,
                env_var="CLOUD_OPS_COMPRESS_USER_DATA",
            )
        )

    def get_vault_config(self) -> Dict[str, Any]:
        """Get Vault configuration with environment variable overrides."""
        return {
            "addr": self.require_value("vault.addr", env_var="VAULT_ADDR"),
            "app_id": self.require_value("vault.app_id", env_var="VAULT_APP_ID"),
            "user_id_path": self.require_value(
                "vault.user_id_path", env_var="VAULT_USER_ID_PATH"
            ),
            "verify": self.get_vault_verify(),
            "timeout": float(
                self.get_value("vault.timeout", VAULT_DEFAULT_TIMEOUT)
            ),
        }

    def get_vault_verify(self) -> Union[bool, str]:
        """TLS verification for Vault: a CA bundle path, or a boolean."""
        value = self.get_value("vault.verify", True, env_var="VAULT_CACERT")
        if isinstance(value, bool):
            return value
        if str(value).strip().lower() in {"0", "false", "no", "off"}:
            return False
        if str(value).strip().lower() in TRUE_VALUES:
            return True
        return str(value)

    def get_logging_level(self) -> str:
        """Get logging level."""
        level = self.get_value("logging.level", env_var="LOG_LEVEL")
        return "INFO" if level is None else str(level).strip()

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration as a cached property."""
        if not hasattr(self, "_cached_config"):
            self._cached_config = self.load_settings()
        return self._cached_config

    def reload_config(self) -> None:
        """Force reload of configuration from file."""
        if hasattr(self, "_cached_config"):
            delattr(self, "_cached_config")
