"""Core cloud operations: compute lifecycle, secrets and data models."""

from .aws import EC2Manager, create_ec2_manager
from .secrets import VaultClient, create_vault_client
from .models import (
    InstanceDefinition,
    InstanceInfo,
    InstanceState,
    ProvisionResult,
    StateReason,
    SubnetInfo,
    Tag,
)

__all__ = [
    # Managers
    "EC2Manager",
    "create_ec2_manager",
    "VaultClient",
    "create_vault_client",
    # Models
    "InstanceDefinition",
    "InstanceInfo",
    "ProvisionResult",
    "StateReason",
    "SubnetInfo",
    "Tag",
    # Enums
    "InstanceState",
]
