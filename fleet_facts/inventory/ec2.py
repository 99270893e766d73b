"""Target discovery from running EC2 instances."""

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from fleet_facts.errors import InventoryError
from fleet_facts.models import Target

logger = logging.getLogger(__name__)

RUNNING_STATES = ["running", "pending"]


def target_from_instance(instance: dict[str, Any]) -> Target:
    """Convert one ``describe_instances`` entry into a Target.

    Private address comes first, then public; empty ones are skipped.
    """
    addresses = [
        address
        for address in (
            instance.get("PrivateIpAddress"),
            instance.get("PublicIpAddress"),
        )
        if address
    ]
    tags = {tag["Key"]: tag["Value"] for tag in instance.get("Tags") or []}
    return Target(
        id=instance.get("InstanceId", ""),
        name=tags.get("Name", ""),
        addresses=tuple(addresses),
        tags=tags,
    )


class EC2Inventory:
    """List running and pending EC2 instances as targets."""

    def __init__(self, region: str | None = None, session: Any = None) -> None:
        """Initialize EC2 inventory.

        Args:
            region: AWS region, or None for the session default
            session: Optional boto3 session, mainly for tests
        """
        self.region = region
        self._session = session

    def _client(self) -> Any:
        session = self._session or boto3.Session()
        return session.client("ec2", region_name=self.region)

    def list_targets(self) -> list[Target]:
        """Describe instances and return them in API order.

        Raises:
            InventoryError: If the EC2 API call fails
        """
        targets = []
        try:
            paginator = self._client().get_paginator("describe_instances")
            pages = paginator.paginate(
                Filters=[{"Name": "instance-state-name", "Values": RUNNING_STATES}]
            )
            for page in pages:
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        targets.append(target_from_instance(instance))
        except (BotoCoreError, ClientError) as e:
            raise InventoryError(f"Can't fetch ec2 instances list: {e}") from e

        logger.info(
            "AWS: found %d instance(s) in running or pending state...", len(targets)
        )
        return targets
