"""Instance Data Models

Data models for provisioning EC2 instances and reading back their state."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from cloud_ops.core.constants import DEFAULT_ROOT_SIZE_GB, NAME_TAG_KEY
from .tags import tags_to_dict


class InstanceState(Enum):
    """EC2 Instance states."""
    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class InstanceDefinition:
    """Everything needed to launch a batch of identical instances.

    ``root_size_gb`` of ``None`` or ``0`` falls back to the default root
    volume size. With ``public_ip`` set, subnet and security group are sent
    as a network interface specification instead of top-level fields.
    """
    image_id: str
    subnet_id: str
    security_group_id: str
    key_name: str
    instance_type: str
    user_data: bytes = b""
    count: int = 1
    root_size_gb: Optional[int] = None
    public_ip: bool = False

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Instance count must be at least 1, got {self.count}")
        if self.root_size_gb is not None and self.root_size_gb < 0:
            raise ValueError(
                f"Root volume size must not be negative, got {self.root_size_gb}"
            )
        if isinstance(self.user_data, str):
            object.__setattr__(self, "user_data", self.user_data.encode("utf-8"))

    @property
    def effective_root_size_gb(self) -> int:
        return self.root_size_gb or DEFAULT_ROOT_SIZE_GB


@dataclass(frozen=True)
class StateReason:
    """Why an instance last changed state."""
    code: str = ""
    message: str = ""

    @classmethod
    def from_aws(cls, reason: Optional[Dict[str, Any]]) -> Optional["StateReason"]:
        if not reason:
            return None
        return cls(code=reason.get("Code", ""), message=reason.get("Message", ""))


@dataclass(frozen=True)
class InstanceInfo:
    """Read-only snapshot of an instance taken at query time."""
    instance_id: str
    image_id: str = ""
    key_name: str = ""
    instance_type: str = ""
    state: str = ""
    private_ip: Optional[str] = None
    public_ip: Optional[str] = None
    subnet_id: Optional[str] = None
    security_groups: Tuple[str, ...] = ()
    state_reason: Optional[StateReason] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.tags.get(NAME_TAG_KEY, self.instance_id)

    @property
    def is_running(self) -> bool:
        return self.state == InstanceState.RUNNING.value

    @property
    def is_stopped(self) -> bool:
        return self.state == InstanceState.STOPPED.value

    @property
    def is_terminated(self) -> bool:
        return self.state == InstanceState.TERMINATED.value

    def get_tag(self, key: str, default: str = "") -> str:
        return self.tags.get(key, default)

    @classmethod
    def from_aws_instance(cls, instance: Dict[str, Any]) -> "InstanceInfo":
        """Create InstanceInfo from AWS instance data."""
        security_groups = tuple(
            group["GroupId"]
            for group in instance.get("SecurityGroups") or []
            if group.get("GroupId")
        )

        return cls(
            instance_id=instance["InstanceId"],
            image_id=instance.get("ImageId", ""),
            key_name=instance.get("KeyName", ""),
            instance_type=instance.get("InstanceType", ""),
            state=(instance.get("State") or {}).get("Name", ""),
            private_ip=instance.get("PrivateIpAddress") or None,
            public_ip=instance.get("PublicIpAddress") or None,
            subnet_id=instance.get("SubnetId") or None,
            security_groups=security_groups,
            state_reason=StateReason.from_aws(instance.get("StateReason")),
            tags=tags_to_dict(instance.get("Tags")),
        )


@dataclass(frozen=True, eq=False)
class ProvisionResult(Sequence):
    """Instance ids returned by a launch request, in provider order.

    A result holding fewer ids than requested is ``partial``; the ids the
    provider did return are kept so the caller can act on them. Compares
    equal to any list or tuple holding the same ids.
    """
    instance_ids: Tuple[str, ...]
    requested_count: int

    @property
    def complete(self) -> bool:
        return len(self.instance_ids) == self.requested_count

    @property
    def partial(self) -> bool:
        return not self.complete

    def __iter__(self) -> Iterator[str]:
        return iter(self.instance_ids)

    def __len__(self) -> int:
        return len(self.instance_ids)

    def __getitem__(self, index):
        return self.instance_ids[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, ProvisionResult):
            return (self.instance_ids, self.requested_count) == (
                other.instance_ids,
                other.requested_count,
            )
        if isinstance(other, (list, tuple)):
            return self.instance_ids == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.instance_ids, self.requested_count))
