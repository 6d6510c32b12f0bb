# src/ecs_exporter/core/deriver.py
"""
Translates cluster snapshots into metric samples.

Everything here is pure: no I/O and no exceptions for data gaps. A record
without its identifying field yields no sample, since an empty label value
would be indistinguishable from a real resource.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Tuple

from ..models.ecs import ClusterSnapshot, ContainerInstanceRecord, ResourceKind, ServiceRecord
from ..models.metrics import CollectionResult, MetricSample, ScrapeOutcome

logger = logging.getLogger(__name__)


class FamilySpec(NamedTuple):
    name: str
    documentation: str
    labelnames: Tuple[str, ...]


SERVICE_DESIRED_TASKS = FamilySpec(
    "aws_ecs_service_desired_tasks",
    "Number of tasks the service should be running",
    ("cluster", "service"),
)
SERVICE_CURRENT_TASKS = FamilySpec(
    "aws_ecs_service_current_tasks",
    "Number of tasks of the service per state",
    ("cluster", "service", "state"),
)
INSTANCE_TASKS = FamilySpec(
    "aws_ecs_cluster_instance_tasks",
    "Number of tasks on the container instance per state",
    ("cluster", "instance", "state"),
)
INSTANCE_REGISTERED_RESOURCES = FamilySpec(
    "aws_ecs_cluster_instance_registered_resources",
    "Resources registered by the container instance",
    ("cluster", "instance", "resource"),
)
INSTANCE_REMAINING_RESOURCES = FamilySpec(
    "aws_ecs_cluster_instance_remaining_resources",
    "Resources of the container instance not allocated to tasks",
    ("cluster", "instance", "resource"),
)
EXPORTER_SUCCESS = FamilySpec(
    "aws_ecs_exporter_success",
    "Whether retrieval of the resource from the AWS API was successful",
    ("cluster", "scraped_resource"),
)

SCRAPE_FAMILIES = (
    SERVICE_DESIRED_TASKS,
    SERVICE_CURRENT_TASKS,
    INSTANCE_TASKS,
    INSTANCE_REGISTERED_RESOURCES,
    INSTANCE_REMAINING_RESOURCES,
    EXPORTER_SUCCESS,
)

# Only these resource kinds have a metric; anything else is dropped.
RESOURCE_LABELS: Dict[str, str] = {
    ResourceKind.CPU.value: "cpu",
    ResourceKind.MEMORY.value: "ram",
}


def _sample(family: FamilySpec, value: int, **labels: str) -> MetricSample:
    return MetricSample(family_name=family.name, labels=labels, value=value)


def derive_service_samples(cluster_name: str, services: Iterable[ServiceRecord]) -> List[MetricSample]:
    samples: List[MetricSample] = []
    for service in services:
        if not service.name:
            logger.warning("Skipping service without a name in cluster '%s'.", cluster_name)
            continue
        labels = {"cluster": cluster_name, "service": service.name}
        samples.append(_sample(SERVICE_DESIRED_TASKS, service.desired_count, **labels))
        samples.append(_sample(SERVICE_CURRENT_TASKS, service.running_count, state="running", **labels))
        samples.append(_sample(SERVICE_CURRENT_TASKS, service.pending_count, state="pending", **labels))
    return samples


def _resource_samples(
    family: FamilySpec, cluster_name: str, instance_id: str, resources: Dict[str, int]
) -> List[MetricSample]:
    samples = []
    for kind, value in resources.items():
        label = RESOURCE_LABELS.get(kind)
        if label is None:
            continue
        samples.append(_sample(family, value, cluster=cluster_name, instance=instance_id, resource=label))
    return samples


def derive_instance_samples(cluster_name: str, instances: Iterable[ContainerInstanceRecord]) -> List[MetricSample]:
    samples: List[MetricSample] = []
    for instance in instances:
        instance_id = instance.ec2_instance_id
        if not instance_id:
            logger.warning("Skipping container instance without an EC2 instance id in cluster '%s'.", cluster_name)
            continue
        labels = {"cluster": cluster_name, "instance": instance_id}
        samples.append(_sample(INSTANCE_TASKS, instance.running_tasks_count, state="running", **labels))
        samples.append(_sample(INSTANCE_TASKS, instance.pending_tasks_count, state="pending", **labels))
        samples.extend(
            _resource_samples(INSTANCE_REGISTERED_RESOURCES, cluster_name, instance_id, instance.registered_resources)
        )
        samples.extend(
            _resource_samples(INSTANCE_REMAINING_RESOURCES, cluster_name, instance_id, instance.remaining_resources)
        )
    return samples


def derive_snapshot_samples(snapshot: ClusterSnapshot) -> List[MetricSample]:
    return derive_service_samples(snapshot.cluster_name, snapshot.services) + derive_instance_samples(
        snapshot.cluster_name, snapshot.instances
    )


def derive_health_samples(outcome: ScrapeOutcome) -> List[MetricSample]:
    """One success sample (1 or 0) per (cluster, resource type) pipeline."""
    return [
        _sample(
            EXPORTER_SUCCESS,
            1 if pipeline.success else 0,
            cluster=pipeline.cluster_name,
            scraped_resource=pipeline.resource_type.value,
        )
        for pipeline in outcome.pipelines
    ]


def derive_samples(result: CollectionResult) -> List[MetricSample]:
    """All samples of a collection pass: cluster data first, then health."""
    samples: List[MetricSample] = []
    for snapshot in result.snapshots.values():
        samples.extend(derive_snapshot_samples(snapshot))
    samples.extend(derive_health_samples(result.outcome))
    return samples
