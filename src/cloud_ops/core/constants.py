#!/usr/bin/env python3
"""Core constants for cloud operations."""

# AWS Service Constants
DEFAULT_AWS_REGION = "ap-southeast-2"

# Instance provisioning policy
DEFAULT_ROOT_SIZE_GB = 20
ROOT_DEVICE_NAME = "/dev/xvda"
ROOT_VOLUME_TYPE = "gp2"
USER_DATA_COMPRESSION_LEVEL = 9

# Tag keys
NAME_TAG_KEY = "Name"

# Vault Constants
VAULT_API_VERSION = "v1"
VAULT_APP_ID_LOGIN_PATH = "auth/app-id/login"
VAULT_TOKEN_HEADER = "X-Vault-Token"
VAULT_DEFAULT_TIMEOUT = 10

# Logging Constants
LOG_DIR = "logs"
LOG_ROTATION_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5
