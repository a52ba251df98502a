"""Simple data models for cloud resources."""

# Instance models
from .instance import (
    InstanceState,
    InstanceDefinition,
    InstanceInfo,
    StateReason,
    ProvisionResult,
)

# Subnet models
from .subnet import (
    SubnetInfo,
)

# Tag models
from .tags import (
    Tag,
    tags_to_dict,
    tag_filter,
)

__all__ = [
    # Instance models
    "InstanceState",
    "InstanceDefinition",
    "InstanceInfo",
    "StateReason",
    "ProvisionResult",
    # Subnet models
    "SubnetInfo",
    # Tag models
    "Tag",
    "tags_to_dict",
    "tag_filter",
]
