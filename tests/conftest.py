# tests/conftest.py

from typing import Dict, List, Optional, Set, Tuple

import pytest
from botocore.exceptions import ClientError

from ecs_exporter.core.ecs_client import BaseEcsClient
from ecs_exporter.models.ecs import (
    ContainerInstanceRecord,
    DescribeFailure,
    DescribePage,
    IdentifierPage,
    ServiceRecord,
)

ACCOUNT = "123456789012"
REGION = "eu-west-1"


def build_service_arn(cluster: str, name: str) -> str:
    return f"arn:aws:ecs:{REGION}:{ACCOUNT}:service/{cluster}/{name}"


def build_instance_arn(cluster: str, instance_id: str) -> str:
    return f"arn:aws:ecs:{REGION}:{ACCOUNT}:container-instance/{cluster}/{instance_id}"


def build_client_error(code: str, operation: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def build_instance(instance_id: str, running: int = 1, pending: int = 0, cpu: int = 2048, memory: int = 7982):
    return ContainerInstanceRecord(
        ec2_instance_id=instance_id,
        running_tasks_count=running,
        pending_tasks_count=pending,
        registered_resources={"CPU": cpu, "MEMORY": memory, "PORTS": 5},
        remaining_resources={"CPU": cpu // 2, "MEMORY": memory // 2, "PORTS": 5},
    )


class FakeEcsClient(BaseEcsClient):
    """
    In-memory stand-in for the ECS API.

    List calls page through identifiers ``page_size`` at a time using the
    offset as continuation token. Identifiers in ``missing`` are reported as
    named failures by describe calls. ``errors`` maps (method, cluster) to
    an exception raised by that call.
    """

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.services: Dict[str, Dict[str, ServiceRecord]] = {}
        self.instances: Dict[str, Dict[str, ContainerInstanceRecord]] = {}
        self.missing: Set[str] = set()
        self.errors: Dict[Tuple[str, str], Exception] = {}
        self.calls: List[Tuple[str, str, object]] = []

    def add_cluster(self, cluster: str, services=(), instances=()):
        self.services[cluster] = {build_service_arn(cluster, s.name or "unnamed"): s for s in services}
        self.instances[cluster] = {build_instance_arn(cluster, i.ec2_instance_id or "none"): i for i in instances}

    def _check(self, method: str, cluster: str, operation: str):
        if (method, cluster) in self.errors:
            raise self.errors[(method, cluster)]
        if cluster not in self.services:
            raise build_client_error("ClusterNotFoundException", operation, "Cluster not found.")

    def _page(self, identifiers: List[str], next_token: Optional[str]) -> IdentifierPage:
        start = int(next_token) if next_token else 0
        end = start + self.page_size
        return IdentifierPage(
            identifiers=identifiers[start:end],
            next_token=str(end) if end < len(identifiers) else None,
        )

    def _describe(self, known: Dict[str, object], identifiers: List[str]) -> DescribePage:
        records, failures = [], []
        for arn in identifiers:
            if arn in self.missing or arn not in known:
                failures.append(DescribeFailure(arn=arn, reason="MISSING", detail=None))
            else:
                records.append(known[arn])
        return DescribePage(records=records, failures=failures)

    async def list_services(self, cluster, next_token=None):
        self.calls.append(("list_services", cluster, next_token))
        self._check("list_services", cluster, "ListServices")
        return self._page(list(self.services[cluster]), next_token)

    async def describe_services(self, cluster, services):
        self.calls.append(("describe_services", cluster, list(services)))
        self._check("describe_services", cluster, "DescribeServices")
        return self._describe(self.services[cluster], services)

    async def list_container_instances(self, cluster, next_token=None):
        self.calls.append(("list_container_instances", cluster, next_token))
        self._check("list_container_instances", cluster, "ListContainerInstances")
        return self._page(list(self.instances[cluster]), next_token)

    async def describe_container_instances(self, cluster, container_instances):
        self.calls.append(("describe_container_instances", cluster, list(container_instances)))
        self._check("describe_container_instances", cluster, "DescribeContainerInstances")
        return self._describe(self.instances[cluster], container_instances)

    def calls_to(self, method: str) -> list:
        return [c for c in self.calls if c[0] == method]


@pytest.fixture
def ecs_factory():
    """Builds empty fake ECS APIs: ``ecs_factory(page_size=...)``."""
    return FakeEcsClient


@pytest.fixture
def service_arn():
    return build_service_arn


@pytest.fixture
def instance_arn():
    return build_instance_arn


@pytest.fixture
def client_error():
    """Builds the ``ClientError`` botocore raises for a failed ECS call."""
    return build_client_error


@pytest.fixture
def make_instance():
    return build_instance


@pytest.fixture
def fake_ecs():
    """A fake ECS API with two healthy clusters, paging 10 identifiers at a time."""
    fake = FakeEcsClient(page_size=10)
    fake.add_cluster(
        "production",
        services=[
            ServiceRecord(name="web", desired_count=3, running_count=3, pending_count=0),
            ServiceRecord(name="worker", desired_count=2, running_count=1, pending_count=1),
        ],
        instances=[
            build_instance("i-0a1b2c3d4e5f60001", running=3),
            build_instance("i-0a1b2c3d4e5f60002", running=1),
        ],
    )
    fake.add_cluster(
        "staging",
        services=[ServiceRecord(name="web", desired_count=1, running_count=1, pending_count=0)],
        instances=[build_instance("i-0f9e8d7c6b5a40001", running=1, pending=1)],
    )
    return fake


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Keeps the exporter configuration predictable and isolated from the
    actual environment for every test.
    """
    for key in (
        "ECS_EXPORTER_CLUSTERS",
        "ECS_EXPORTER_LISTEN",
        "ECS_EXPORTER_ROLE",
        "ECS_EXPORTER_TLS_KEY",
        "ECS_EXPORTER_TLS_CERT",
    ):
        monkeypatch.delenv(key, raising=False)
