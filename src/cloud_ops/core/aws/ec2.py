"""EC2 Manager for instance lifecycle operations."""

from typing import Any, Dict, List, NoReturn, Optional, Sequence, Type

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cloud_ops.core.models import (
    InstanceDefinition,
    InstanceInfo,
    ProvisionResult,
    SubnetInfo,
    Tag,
    tag_filter,
)
from cloud_ops.utils.config import ConfigManager
from cloud_ops.utils.ec2_utils import (
    build_run_instances_params,
    error_code,
    error_message,
    flatten_reservations,
)
from cloud_ops.utils.exceptions import (
    CloudOpsError,
    NotFoundError,
    ProvisionError,
    StateTransitionError,
    TaggingError,
    TransportError,
    ValidationRules,
)
from cloud_ops.utils.logger import setup_logger

INSTANCE_NOT_FOUND_CODES = {"InvalidInstanceID.NotFound", "InvalidInstanceID.Malformed"}
SUBNET_NOT_FOUND_CODES = {"InvalidSubnetID.NotFound", "InvalidSubnetID.Malformed"}


class EC2Manager:
    """AWS EC2 instance lifecycle manager.

    Provisions, starts, stops, terminates, tags and describes instances.
    Every call is a single request (or one paginated query); nothing is
    retried or polled, and the manager keeps no state between calls.
    """

    def __init__(
        self,
        session: Optional[boto3.Session] = None,
        region: Optional[str] = None,
        client: Any = None,
        compress_user_data: Optional[bool] = None,
        config_manager: Optional[ConfigManager] = None,
    ):
        """Initialize EC2Manager.

        Args:
            session: boto3 session used to build the EC2 client
            region: AWS region for the client, from configuration when not given
            client: Pre-built EC2 client; takes precedence over ``session``
            compress_user_data: Gzip user data before launch. Read from
                configuration when not given.
            config_manager: Configuration source for unset options
        """
        if client is None and session is None:
            raise ValueError("EC2Manager needs a boto3 session or an EC2 client")

        config_manager = config_manager or ConfigManager()
        self.session = session
        self.region = region or config_manager.get_aws_region()
        self.ec2_client = client if client is not None else session.client(
            "ec2", region_name=self.region
        )
        if compress_user_data is None:
            compress_user_data = config_manager.get_compress_user_data()
        self.compress_user_data = compress_user_data
        self.logger = setup_logger(
            __name__, "ec2_manager.log", config_manager.get_logging_level()
        )

    def provision(self, definition: InstanceDefinition) -> ProvisionResult:
        """Launch ``definition.count`` instances and return their ids."""
        params = build_run_instances_params(definition, self.compress_user_data)

        try:
            response = self.ec2_client.run_instances(**params)
        except ClientError as e:
            self._fail(
                ProvisionError,
                e,
                "provision",
                [definition.image_id],
                f"Failed to launch {definition.count} x {definition.instance_type}",
            )
        except BotoCoreError as e:
            self._fail(TransportError, e, "provision", [definition.image_id])

        instance_ids = tuple(
            instance["InstanceId"]
            for instance in response.get("Instances") or []
            if instance.get("InstanceId")
        )
        result = ProvisionResult(
            instance_ids=instance_ids, requested_count=definition.count
        )

        if result.partial:
            self.logger.warning(
                f"Requested {definition.count} instances from {definition.image_id}, "
                f"provider returned {len(instance_ids)}: {list(instance_ids)}"
            )
        else:
            self.logger.info(
                f"Launched {len(instance_ids)} instances from {definition.image_id}: "
                f"{list(instance_ids)}"
            )
        return result

    def start(self, instance_ids: Sequence[str]) -> None:
        """Start EC2 instances."""
        ids = self._require_ids(instance_ids, "start")
        self._transition("start", self.ec2_client.start_instances, ids)
        self.logger.info(f"Started instances: {ids}")

    def stop(self, instance_ids: Sequence[str], force: bool = False) -> None:
        """Stop EC2 instances."""
        ids = self._require_ids(instance_ids, "stop")
        self._transition("stop", self.ec2_client.stop_instances, ids, Force=force)
        self.logger.info(f"Stopped instances: {ids}")

    def terminate(self, instance_ids: Sequence[str]) -> None:
        """Terminate EC2 instances."""
        ids = self._require_ids(instance_ids, "terminate")
        self._transition("terminate", self.ec2_client.terminate_instances, ids)
        self.logger.info(f"Terminated instances: {ids}")

    def find_by_tag(self, key: str, value: str) -> List[str]:
        """Ids of instances tagged exactly ``key=value``. May be empty."""
        try:
            instances = self._describe(Filters=[tag_filter(key, value)])
        except (ClientError, BotoCoreError) as e:
            self._fail(TransportError, e, "find_by_tag", [f"{key}={value}"])

        instance_ids = [i["InstanceId"] for i in instances if i.get("InstanceId")]
        self.logger.info(f"Found {len(instance_ids)} instances tagged {key}={value}")
        return instance_ids

    def tag(self, resource_ids: Sequence[str], key: str, value: str) -> None:
        """Apply one tag to every resource in a single request."""
        ids = self._require_ids(resource_ids, "tag", validate=False)
        try:
            self.ec2_client.create_tags(Resources=ids, Tags=[Tag(key, value).to_aws()])
        except ClientError as e:
            self._fail(TaggingError, e, "tag", ids, f"Failed to set tag {key}={value}")
        except BotoCoreError as e:
            self._fail(TransportError, e, "tag", ids)
        self.logger.info(f"Tagged {ids} with {key}={value}")

    def untag(self, resource_ids: Sequence[str], key: str) -> None:
        """Remove one tag key from every resource in a single request."""
        ids = self._require_ids(resource_ids, "untag", validate=False)
        try:
            self.ec2_client.delete_tags(
                Resources=ids, Tags=[Tag(key).to_aws(include_value=False)]
            )
        except ClientError as e:
            self._fail(TaggingError, e, "untag", ids, f"Failed to remove tag {key}")
        except BotoCoreError as e:
            self._fail(TransportError, e, "untag", ids)
        self.logger.info(f"Removed tag {key} from {ids}")

    def describe_instances(self, instance_ids: Sequence[str]) -> List[InstanceInfo]:
        """Describe instances, one InstanceInfo per instance across reservations."""
        ids = self._require_ids(instance_ids, "describe_instances")
        try:
            instances = self._describe(InstanceIds=ids)
        except ClientError as e:
            error_cls = (
                NotFoundError if error_code(e) in INSTANCE_NOT_FOUND_CODES else TransportError
            )
            self._fail(error_cls, e, "describe_instances", ids)
        except BotoCoreError as e:
            self._fail(TransportError, e, "describe_instances", ids)

        return [InstanceInfo.from_aws_instance(instance) for instance in instances]

    def describe_subnet(self, subnet_id: str) -> SubnetInfo:
        """Describe a single subnet."""
        if not ValidationRules.validate_subnet_id(subnet_id):
            self.logger.warning(f"'{subnet_id}' does not look like a subnet id")

        try:
            response = self.ec2_client.describe_subnets(SubnetIds=[subnet_id])
        except ClientError as e:
            error_cls = (
                NotFoundError if error_code(e) in SUBNET_NOT_FOUND_CODES else TransportError
            )
            self._fail(error_cls, e, "describe_subnet", [subnet_id])
        except BotoCoreError as e:
            self._fail(TransportError, e, "describe_subnet", [subnet_id])

        subnets = response.get("Subnets") or []
        if not subnets:
            self.logger.error(f"Subnet {subnet_id} not found")
            raise NotFoundError(
                f"Subnet {subnet_id} not found",
                operation="describe_subnet",
                resource_ids=[subnet_id],
            )
        return SubnetInfo.from_aws_subnet(subnets[0])

    def _describe(self, **params) -> List[Dict[str, Any]]:
        paginator = self.ec2_client.get_paginator("describe_instances")
        return flatten_reservations(paginator.paginate(**params))

    def _transition(self, operation: str, call, ids: List[str], **params) -> None:
        try:
            call(InstanceIds=ids, **params)
        except ClientError as e:
            self._fail(StateTransitionError, e, operation, ids)
        except BotoCoreError as e:
            self._fail(TransportError, e, operation, ids)

    def _require_ids(
        self, resource_ids: Sequence[str], operation: str, validate: bool = True
    ) -> List[str]:
        if isinstance(resource_ids, str):
            resource_ids = [resource_ids]
        ids = list(resource_ids or [])
        if not ids:
            raise ValueError(f"{operation} needs at least one resource id")
        if validate:
            malformed = ValidationRules.invalid_instance_ids(ids)
            if malformed:
                self.logger.warning(f"{operation}: ids do not look like instance ids: {malformed}")
        return ids

    def _fail(
        self,
        error_cls: Type[CloudOpsError],
        error: Exception,
        operation: str,
        resource_ids: Sequence[str],
        summary: Optional[str] = None,
    ) -> NoReturn:
        code = error_code(error)
        message = f"{code}: {error_message(error)}"
        if summary:
            message = f"{summary}: {message}"
        self.logger.error(f"Error in {operation} for {list(resource_ids)}: {message}")
        raise error_cls(
            message, operation=operation, resource_ids=resource_ids, error_code=code
        ) from error


def create_ec2_manager(
    session: boto3.Session, region: Optional[str] = None, **kwargs
) -> EC2Manager:
    """Create EC2Manager instance."""
    return EC2Manager(session, region, **kwargs)
