#!/usr/bin/env python3
"""
utils/session.py

Builds boto3 sessions from AWS credentials read out of Vault.
"""

from typing import Any, Mapping

import boto3

from cloud_ops.core.constants import DEFAULT_AWS_REGION
from .logger import setup_logger

logger = setup_logger(__name__, "session.log")


class SessionManager:
    """Turns a Vault credentials secret into a boto3 session."""

    @classmethod
    def get_session_from_secret(
        cls, secret: Mapping[str, Any], region: str = DEFAULT_AWS_REGION
    ) -> boto3.Session:
        """Create a boto3 Session from a credentials secret read out of Vault.

        The secret must be a mapping holding ``aws_access_key_id`` and
        ``aws_secret_access_key``; ``aws_session_token`` is optional.
        """
        if not isinstance(secret, Mapping):
            raise ValueError(
                f"Credentials secret must be a mapping, got {type(secret).__name__}"
            )

        access_key = secret.get("aws_access_key_id")
        secret_key = secret.get("aws_secret_access_key")
        if not access_key or not secret_key:
            raise ValueError(
                "Credentials secret is missing aws_access_key_id or aws_secret_access_key"
            )

        session_token = secret.get("aws_session_token")
        logger.info(
            f"Building session in {region} from secret credentials "
            f"({'temporary' if session_token else 'long-lived'})"
        )
        return boto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=session_token,
            region_name=region,
        )
