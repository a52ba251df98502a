"""Simple data models for AWS resource tags."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class Tag:
    """A single key/value tag applied to one or more resources."""
    key: str
    value: str = ""

    def __post_init__(self):
        if not self.key:
            raise ValueError("Tag key must not be empty")

    def to_aws(self, include_value: bool = True) -> Dict[str, str]:
        """Provider tag shape. Deletion requests match on the key alone."""
        if include_value:
            return {"Key": self.key, "Value": self.value}
        return {"Key": self.key}


def tags_to_dict(tags: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, str]:
    """Convert an AWS tag list into a dictionary."""
    result = {}
    for tag in tags or []:
        if tag.get("Key"):
            result[tag["Key"]] = tag.get("Value", "")
    return result


def escape_filter_value(value: str) -> str:
    """Escape EC2 filter wildcards (``*``, ``?``) so the value matches literally."""
    return value.replace("\\", "\\\\").replace("*", "\\*").replace("?", "\\?")


def tag_filter(key: str, value: str) -> Dict[str, Any]:
    """DescribeInstances filter matching resources tagged exactly key=value."""
    return {"Name": f"tag:{key}", "Values": [escape_filter_value(value)]}
