"""Exception classes and validation utilities for cloud operations.

Every failure surfaced by the compute and secret clients derives from
:class:`CloudOpsError`, which records the operation that failed and the
resource identifiers involved. Provider errors are chained onto these with
``raise ... from``, and the provider's error code is kept on ``error_code``.
"""

import re
from typing import Iterable, Optional, Sequence


class CloudOpsError(Exception):
    """Base class for all cloud operations errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        resource_ids: Optional[Iterable[str]] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.resource_ids = list(resource_ids or [])
        self.error_code = error_code

    def __str__(self) -> str:
        context = []
        if self.operation:
            context.append(self.operation)
        if self.resource_ids:
            context.append(", ".join(self.resource_ids))
        if context:
            return f"[{' '.join(context)}] {self.message}"
        return self.message


class TransportError(CloudOpsError):
    """Unclassified provider or network failure."""


class ProvisionError(CloudOpsError):
    """Instance provisioning was rejected by the provider."""


class StateTransitionError(CloudOpsError):
    """A start, stop or terminate request was rejected."""


class TaggingError(CloudOpsError):
    """Creating or deleting tags was rejected."""


class NotFoundError(CloudOpsError):
    """The requested resource or secret does not exist."""


class AuthError(CloudOpsError):
    """Authentication against the secret store failed."""


class NotAuthenticatedError(CloudOpsError):
    """A secret was read before the session authenticated."""


class SecretClientError(CloudOpsError):
    """The secret store failed to serve a request."""


class ConfigError(CloudOpsError):
    """Required configuration is missing or malformed."""


class ValidationRules:
    """Validation utilities for AWS resources."""

    INSTANCE_ID_PATTERN = re.compile(r"^i-[0-9a-f]{8}([0-9a-f]{9})?$")
    SUBNET_ID_PATTERN = re.compile(r"^subnet-[0-9a-f]{8}([0-9a-f]{9})?$")

    @classmethod
    def validate_instance_id(cls, instance_id: str) -> bool:
        """Validate EC2 instance ID format (i- followed by 8 or 17 hex digits)."""
        return bool(cls.INSTANCE_ID_PATTERN.match(instance_id or ""))

    @classmethod
    def validate_subnet_id(cls, subnet_id: str) -> bool:
        """Validate VPC subnet ID format."""
        return bool(cls.SUBNET_ID_PATTERN.match(subnet_id or ""))

    @classmethod
    def invalid_instance_ids(cls, instance_ids: Sequence[str]) -> list:
        """Return the ids that do not look like EC2 instance ids."""
        return [i for i in instance_ids if not cls.validate_instance_id(i)]
