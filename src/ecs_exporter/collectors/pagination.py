# src/ecs_exporter/collectors/pagination.py
"""
Enumerates every identifier of one resource type in a cluster by following
the continuation token of the ECS list calls.
"""

import logging
from typing import List, Optional

from ..core.ecs_client import BaseEcsClient
from ..models.ecs import IdentifierPage, ResourceType

logger = logging.getLogger(__name__)


async def _list_page(
    client: BaseEcsClient, cluster_name: str, resource_type: ResourceType, next_token: Optional[str]
) -> IdentifierPage:
    if resource_type == ResourceType.SERVICES:
        return await client.list_services(cluster_name, next_token)
    return await client.list_container_instances(cluster_name, next_token)


async def list_identifiers(client: BaseEcsClient, cluster_name: str, resource_type: ResourceType) -> List[str]:
    """
    Returns all identifiers of ``resource_type`` in ``cluster_name``, in the
    order the API returned them.

    The first failing page aborts the whole listing; its error propagates
    and no partial result is returned.
    """
    identifiers: List[str] = []
    next_token: Optional[str] = None
    pages = 0
    while True:
        page = await _list_page(client, cluster_name, resource_type, next_token)
        pages += 1
        identifiers.extend(page.identifiers)
        next_token = page.next_token
        if not next_token:
            break

    logger.debug(
        "Listed %d %s in cluster '%s' over %d page(s).", len(identifiers), resource_type.value, cluster_name, pages
    )
    return identifiers
