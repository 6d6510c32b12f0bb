# src/ecs_exporter/collectors/cluster_collector.py
"""
Collects services and container instances for one or more ECS clusters.

Every (cluster, resource type) pair is collected by its own pipeline
(list, then describe in batches). Pipelines run concurrently and a failed
pipeline only affects its own pair: it is logged, recorded as unsuccessful,
and contributes no records.
"""

import asyncio
import logging
from typing import List, Tuple

from ..core.ecs_client import BaseEcsClient
from ..models.ecs import ClusterSnapshot, DetailRecord, ResourceType
from ..models.metrics import CollectionResult, PipelineOutcome, ScrapeOutcome
from .base_collector import BaseCollector
from .batch_describer import describe_details
from .pagination import list_identifiers

logger = logging.getLogger(__name__)

PIPELINE_ORDER = (ResourceType.SERVICES, ResourceType.CLUSTER_INSTANCES)


class ClusterCollector(BaseCollector):
    """
    Runs the list + describe pipelines for each cluster against a shared ECS client.
    """

    def __init__(self, client: BaseEcsClient):
        self._client = client

    async def _run_pipeline(self, cluster_name: str, resource_type: ResourceType) -> Tuple[List[DetailRecord], bool]:
        try:
            identifiers = await list_identifiers(self._client, cluster_name, resource_type)
            records = await describe_details(self._client, cluster_name, resource_type, identifiers)
        except Exception as e:
            logger.error(
                "Failed to collect %s for cluster '%s': %s", resource_type.value, cluster_name, e, exc_info=True
            )
            return [], False
        return records, True

    async def collect(self, cluster_names: List[str]) -> CollectionResult:
        """
        Collects every requested cluster.

        Returns:
            CollectionResult: one snapshot per distinct cluster name, and one
            pipeline outcome per (cluster, resource type) pair.
        """
        # dict.fromkeys drops duplicates and keeps first-seen order
        clusters = list(dict.fromkeys(cluster_names))
        pairs = [(cluster, resource_type) for cluster in clusters for resource_type in PIPELINE_ORDER]

        results = await asyncio.gather(*(self._run_pipeline(cluster, rt) for cluster, rt in pairs))

        collected = dict(zip(pairs, results))
        snapshots = {}
        outcomes: List[PipelineOutcome] = []
        for cluster in clusters:
            services, services_ok = collected[(cluster, ResourceType.SERVICES)]
            instances, instances_ok = collected[(cluster, ResourceType.CLUSTER_INSTANCES)]
            snapshots[cluster] = ClusterSnapshot(cluster_name=cluster, services=services, instances=instances)
            outcomes.append(
                PipelineOutcome(cluster_name=cluster, resource_type=ResourceType.SERVICES, success=services_ok)
            )
            outcomes.append(
                PipelineOutcome(
                    cluster_name=cluster, resource_type=ResourceType.CLUSTER_INSTANCES, success=instances_ok
                )
            )
            logger.debug(
                "Cluster '%s': %d service(s), %d container instance(s).", cluster, len(services), len(instances)
            )

        return CollectionResult(snapshots=snapshots, outcome=ScrapeOutcome(pipelines=outcomes))
