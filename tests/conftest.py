"""Shared fixtures for cloud_ops tests."""

import re
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from cloud_ops.core.aws.ec2 import EC2Manager


def client_error(code, message="boom", operation="Operation"):
    """Build a real botocore ClientError."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def filter_value_matches(pattern, value):
    """EC2 filter value semantics: ``*`` and ``?`` are wildcards, ``\\`` escapes."""
    regex = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            regex.append(re.escape(next(chars, "\\")))
        elif char == "*":
            regex.append(".*")
        elif char == "?":
            regex.append(".")
        else:
            regex.append(re.escape(char))
    return re.fullmatch("".join(regex), value, re.DOTALL) is not None


def aws_instance(instance_id, tags=None, state="running", **extra):
    """Minimal DescribeInstances instance entry."""
    instance = {
        "InstanceId": instance_id,
        "State": {"Name": state},
        "Tags": [{"Key": k, "Value": v} for k, v in (tags or {}).items()],
    }
    instance.update(extra)
    return instance


class FakeEC2Client:
    """In-memory stand-in for the EC2 API calls EC2Manager makes.

    DescribeInstances honours ``InstanceIds`` and ``tag:<key>`` filters, and
    groups instances into one reservation per launch, the way EC2 does.
    """

    def __init__(self):
        self.reservations = []
        self.run_calls = []
        self._next_id = 0

    def add_reservation(self, *instances):
        self.reservations.append({"Instances": list(instances)})

    def run_instances(self, **params):
        self.run_calls.append(params)
        instances = []
        for _ in range(params["MaxCount"]):
            self._next_id += 1
            instances.append(aws_instance(f"i-{self._next_id:017x}", state="pending"))
        self.add_reservation(*instances)
        return {"Instances": [dict(i) for i in instances]}

    def _all_instances(self):
        for reservation in self.reservations:
            for instance in reservation["Instances"]:
                yield instance

    def create_tags(self, Resources, Tags):
        for instance in self._all_instances():
            if instance["InstanceId"] in Resources:
                for tag in Tags:
                    instance["Tags"] = [
                        t for t in instance["Tags"] if t["Key"] != tag["Key"]
                    ] + [dict(tag)]

    def delete_tags(self, Resources, Tags):
        keys = {tag["Key"] for tag in Tags}
        for instance in self._all_instances():
            if instance["InstanceId"] in Resources:
                instance["Tags"] = [t for t in instance["Tags"] if t["Key"] not in keys]

    def _matches(self, instance, instance_ids, filters):
        if instance_ids and instance["InstanceId"] not in instance_ids:
            return False
        tags = {t["Key"]: t["Value"] for t in instance["Tags"]}
        for f in filters:
            key = f["Name"][len("tag:"):]
            if key not in tags or not any(
                filter_value_matches(pattern, tags[key]) for pattern in f["Values"]
            ):
                return False
        return True

    def get_paginator(self, name):
        assert name == "describe_instances"
        paginator = Mock()

        def paginate(InstanceIds=None, Filters=None):
            page = {"Reservations": []}
            for reservation in self.reservations:
                matched = [
                    dict(i)
                    for i in reservation["Instances"]
                    if self._matches(i, InstanceIds, Filters or [])
                ]
                if matched:
                    page["Reservations"].append({"Instances": matched})
            return [page]

        paginator.paginate.side_effect = paginate
        return paginator


@pytest.fixture
def ec2_client():
    """Mocked boto3 EC2 client."""
    return Mock()


@pytest.fixture
def manager(ec2_client):
    """EC2Manager over a mocked client, user data uncompressed."""
    return EC2Manager(client=ec2_client, compress_user_data=False)


@pytest.fixture
def fake_ec2():
    return FakeEC2Client()


@pytest.fixture
def fake_manager(fake_ec2):
    """EC2Manager over the in-memory EC2 fake."""
    return EC2Manager(client=fake_ec2, compress_user_data=False)
