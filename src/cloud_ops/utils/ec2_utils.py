#!/usr/bin/env python3
"""
EC2 utility functions for cloud operations.

This module builds the request parameters EC2Manager sends and flattens the
responses it gets back, keeping provider request shapes out of the manager.
"""

import gzip
from typing import Any, Dict, Iterable, List

from cloud_ops.core.constants import (
    ROOT_DEVICE_NAME,
    ROOT_VOLUME_TYPE,
    USER_DATA_COMPRESSION_LEVEL,
)
from cloud_ops.core.models import InstanceDefinition


def encode_user_data(user_data: bytes, compress: bool = False) -> bytes:
    """
    Prepare instance user data for the RunInstances request.

    botocore base64-encodes ``UserData`` for RunInstances itself, so this only
    applies the optional gzip step. The gzip header timestamp is pinned so
    equal payloads always produce equal bytes.

    Args:
        user_data: Raw user data payload (may be empty)
        compress: Gzip the payload before transport

    Returns:
        Bytes to send as ``UserData``

    Example:
        encode_user_data(b"#!/bin/bash\\necho hi", compress=True)
    """
    payload = bytes(user_data or b"")
    if not compress:
        return payload
    return gzip.compress(payload, compresslevel=USER_DATA_COMPRESSION_LEVEL, mtime=0)


def build_root_block_device(size_gb: int) -> Dict[str, Any]:
    """Root volume mapping. Device name and volume type are fixed."""
    return {
        "DeviceName": ROOT_DEVICE_NAME,
        "Ebs": {
            "DeleteOnTermination": True,
            "VolumeSize": size_gb,
            "VolumeType": ROOT_VOLUME_TYPE,
        },
    }


def build_run_instances_params(
    definition: InstanceDefinition, compress_user_data: bool = False
) -> Dict[str, Any]:
    """
    Build RunInstances parameters for an InstanceDefinition.

    Top-level SubnetId/SecurityGroupIds and NetworkInterfaces are mutually
    exclusive, so a public address request places the instance through a
    primary network interface instead.

    Args:
        definition: What to launch
        compress_user_data: Gzip user data before transport

    Returns:
        Keyword arguments for ``ec2_client.run_instances``
    """
    params = {
        "ImageId": definition.image_id,
        "MinCount": definition.count,
        "MaxCount": definition.count,
        "KeyName": definition.key_name,
        "InstanceType": definition.instance_type,
        "BlockDeviceMappings": [
            build_root_block_device(definition.effective_root_size_gb)
        ],
        "UserData": encode_user_data(definition.user_data, compress_user_data),
    }

    if definition.public_ip:
        params["NetworkInterfaces"] = [
            {
                "DeviceIndex": 0,
                "SubnetId": definition.subnet_id,
                "Groups": [definition.security_group_id],
                "AssociatePublicIpAddress": True,
                "DeleteOnTermination": True,
            }
        ]
    else:
        params["SubnetId"] = definition.subnet_id
        params["SecurityGroupIds"] = [definition.security_group_id]

    return params


def flatten_reservations(pages: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Collect instances from DescribeInstances pages across all reservations.

    Order follows the provider response: page by page, reservation by
    reservation.
    """
    instances = []
    for page in pages:
        for reservation in page.get("Reservations") or []:
            for instance in reservation.get("Instances") or []:
                instances.append(instance)
    return instances


def error_code(error: Exception) -> str:
    """Provider error code of a botocore ClientError, or the exception type name."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Code") or type(error).__name__


def error_message(error: Exception) -> str:
    """Provider error message of a botocore ClientError, or str(error)."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Message") or str(error)
