"""Simple data models for VPC subnets."""

from dataclasses import dataclass, field
from typing import Any, Dict

from .tags import tags_to_dict


@dataclass(frozen=True)
class SubnetInfo:
    """Snapshot of a subnet as reported by the provider."""
    subnet_id: str
    vpc_id: str = ""
    availability_zone: str = ""
    cidr_block: str = ""
    available_ip_address_count: int = 0
    state: str = ""
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_available(self) -> bool:
        return self.state == "available"

    def get_tag(self, key: str, default: str = "") -> str:
        return self.tags.get(key, default)

    @classmethod
    def from_aws_subnet(cls, subnet: Dict[str, Any]) -> "SubnetInfo":
        """Create SubnetInfo from AWS subnet data."""
        return cls(
            subnet_id=subnet.get("SubnetId", ""),
            vpc_id=subnet.get("VpcId", ""),
            availability_zone=subnet.get("AvailabilityZone", ""),
            cidr_block=subnet.get("CidrBlock", ""),
            available_ip_address_count=subnet.get("AvailableIpAddressCount", 0),
            state=subnet.get("State", ""),
            tags=tags_to_dict(subnet.get("Tags")),
        )
