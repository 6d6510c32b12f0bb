# src/ecs_exporter/collectors/batch_describer.py
"""
Fetches details for a list of identifiers in batches.

The ECS describe calls accept at most 10 identifiers. A call can fail as a
whole (network, auth, throttling), which aborts the operation, or succeed
while reporting named failures for some identifiers, which are logged and
left out of the result.
"""

import logging
from typing import Iterator, List, Sequence, TypeVar

from ..core.ecs_client import BaseEcsClient
from ..models.ecs import DescribeFailure, DescribePage, DetailRecord, ResourceType

logger = logging.getLogger(__name__)

# Hard limit of the DescribeServices / DescribeContainerInstances APIs.
DESCRIBE_BATCH_SIZE = 10

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yields consecutive chunks of at most ``size`` items, preserving order."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}.")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


async def _describe_batch(
    client: BaseEcsClient, cluster_name: str, resource_type: ResourceType, batch: List[str]
) -> DescribePage:
    if resource_type == ResourceType.SERVICES:
        return await client.describe_services(cluster_name, batch)
    return await client.describe_container_instances(cluster_name, batch)


def log_failures(cluster_name: str, resource_type: ResourceType, failures: List[DescribeFailure]) -> None:
    for failure in failures:
        logger.warning(
            "Failed to describe %s in cluster '%s': arn=%s reason=%s detail=%s",
            resource_type.value,
            cluster_name,
            failure.arn,
            failure.reason,
            failure.detail,
        )


async def describe_details(
    client: BaseEcsClient,
    cluster_name: str,
    resource_type: ResourceType,
    identifiers: Sequence[str],
) -> List[DetailRecord]:
    """
    Returns the details of the given resources, in batch order.

    This only raises if a call itself fails. Resources the API could not
    resolve are logged and are simply absent from the result.
    """
    records: List[DetailRecord] = []
    batches = 0
    for batch in chunked(identifiers, DESCRIBE_BATCH_SIZE):
        page = await _describe_batch(client, cluster_name, resource_type, batch)
        batches += 1
        log_failures(cluster_name, resource_type, page.failures)
        records.extend(page.records)

    logger.debug(
        "Described %d of %d %s in cluster '%s' with %d call(s).",
        len(records),
        len(identifiers),
        resource_type.value,
        cluster_name,
        batches,
    )
    return records
