# src/ecs_exporter/models/ecs.py
"""
Pydantic models for the ECS objects the exporter reads from the AWS API.

The ``from_api`` constructors accept the raw dictionaries returned by
botocore and keep only the fields the metric model needs.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    """The two kinds of resources collected per cluster."""

    SERVICES = "services"
    CLUSTER_INSTANCES = "cluster_instances"


class ResourceKind(str, Enum):
    """Capacity dimensions reported on a container instance."""

    CPU = "CPU"
    MEMORY = "MEMORY"
    PORTS = "PORTS"
    PORTS_UDP = "PORTS_UDP"
    GPU = "GPU"


def _resource_value(resource: Dict[str, Any]) -> int:
    # ECS fills exactly one of these depending on the resource type.
    if resource.get("integerValue") is not None:
        return int(resource["integerValue"])
    if resource.get("longValue") is not None:
        return int(resource["longValue"])
    if resource.get("doubleValue") is not None:
        return int(resource["doubleValue"])
    return len(resource.get("stringSetValue") or [])


def _resource_map(resources: Optional[List[Dict[str, Any]]]) -> Dict[str, int]:
    result: Dict[str, int] = {}
    for resource in resources or []:
        name = resource.get("name")
        if name:
            result[name] = _resource_value(resource)
    return result


class ServiceRecord(BaseModel):
    """
    A single ECS service and its task counts.

    Attributes:
        name: Service name. Absent only on malformed API payloads.
        desired_count: Number of tasks the scheduler tries to keep running.
        running_count: Number of tasks currently running.
        pending_count: Number of tasks currently pending.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(None, description="Service name")
    desired_count: int = Field(0, ge=0)
    running_count: int = Field(0, ge=0)
    pending_count: int = Field(0, ge=0)

    @classmethod
    def from_api(cls, service: Dict[str, Any]) -> "ServiceRecord":
        return cls(
            name=service.get("serviceName"),
            desired_count=service.get("desiredCount") or 0,
            running_count=service.get("runningCount") or 0,
            pending_count=service.get("pendingCount") or 0,
        )


class ContainerInstanceRecord(BaseModel):
    """
    A container instance registered to a cluster.

    The resource mappings are keyed by the raw ECS resource name
    (see ``ResourceKind``) so that unknown names survive parsing.
    """

    model_config = ConfigDict(frozen=True)

    ec2_instance_id: Optional[str] = Field(None, description="EC2 instance id")
    running_tasks_count: int = Field(0, ge=0)
    pending_tasks_count: int = Field(0, ge=0)
    registered_resources: Dict[str, int] = Field(default_factory=dict)
    remaining_resources: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, instance: Dict[str, Any]) -> "ContainerInstanceRecord":
        return cls(
            ec2_instance_id=instance.get("ec2InstanceId"),
            running_tasks_count=instance.get("runningTasksCount") or 0,
            pending_tasks_count=instance.get("pendingTasksCount") or 0,
            registered_resources=_resource_map(instance.get("registeredResources")),
            remaining_resources=_resource_map(instance.get("remainingResources")),
        )


DetailRecord = Union[ServiceRecord, ContainerInstanceRecord]


class DescribeFailure(BaseModel):
    """A named resource the API could not resolve within a describe call."""

    model_config = ConfigDict(frozen=True)

    arn: Optional[str] = None
    reason: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def from_api(cls, failure: Dict[str, Any]) -> "DescribeFailure":
        return cls(arn=failure.get("arn"), reason=failure.get("reason"), detail=failure.get("detail"))


class IdentifierPage(BaseModel):
    """One page of a list call."""

    identifiers: List[str] = Field(default_factory=list)
    next_token: Optional[str] = None


class DescribePage(BaseModel):
    """The result of one describe call: resolved records plus named failures."""

    records: List[DetailRecord] = Field(default_factory=list)
    failures: List[DescribeFailure] = Field(default_factory=list)


class ClusterSnapshot(BaseModel):
    """Services and container instances of one cluster at scrape time."""

    model_config = ConfigDict(frozen=True)

    cluster_name: str = Field(..., min_length=1)
    services: List[ServiceRecord] = Field(default_factory=list)
    instances: List[ContainerInstanceRecord] = Field(default_factory=list)
