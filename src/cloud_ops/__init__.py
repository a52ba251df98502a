"""cloud_ops - EC2 instance lifecycle and Vault secret clients."""

from .core import (
    EC2Manager,
    create_ec2_manager,
    VaultClient,
    create_vault_client,
    InstanceDefinition,
    InstanceInfo,
    InstanceState,
    ProvisionResult,
    StateReason,
    SubnetInfo,
    Tag,
)
from .utils import (
    AuthError,
    CloudOpsError,
    ConfigError,
    ConfigManager,
    NotAuthenticatedError,
    NotFoundError,
    ProvisionError,
    SecretClientError,
    SessionManager,
    StateTransitionError,
    TaggingError,
    TransportError,
)

__version__ = "1.0.0"

__all__ = [
    "EC2Manager",
    "create_ec2_manager",
    "VaultClient",
    "create_vault_client",
    "InstanceDefinition",
    "InstanceInfo",
    "InstanceState",
    "ProvisionResult",
    "StateReason",
    "SubnetInfo",
    "Tag",
    "ConfigManager",
    "SessionManager",
    "CloudOpsError",
    "ConfigError",
    "ProvisionError",
    "StateTransitionError",
    "TaggingError",
    "NotFoundError",
    "AuthError",
    "NotAuthenticatedError",
    "SecretClientError",
    "TransportError",
]
