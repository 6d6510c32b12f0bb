# tests/collectors/test_batch_describer.py

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from ecs_exporter.collectors.batch_describer import DESCRIBE_BATCH_SIZE, chunked, describe_details
from ecs_exporter.models.ecs import DescribeFailure, DescribePage, ResourceType, ServiceRecord


@pytest.fixture
def services_fake(ecs_factory):
    """Builds a fake with ``count`` services named svc-00.. in cluster 'demo'."""

    def _build(count: int):
        fake = ecs_factory()
        fake.add_cluster("demo", services=[ServiceRecord(name=f"svc-{i:02d}", desired_count=1) for i in range(count)])
        return fake

    return _build


def test_chunked_preserves_order_and_size():
    chunks = list(chunked(list(range(25)), 10))
    assert [len(c) for c in chunks] == [10, 10, 5]
    assert [x for c in chunks for x in c] == list(range(25))


def test_chunked_empty_and_invalid_size():
    assert list(chunked([], 10)) == []
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))


def test_batch_size_is_the_api_limit():
    assert DESCRIBE_BATCH_SIZE == 10


@pytest.mark.asyncio
@pytest.mark.parametrize("count, expected_calls", [(0, 0), (1, 1), (10, 1), (11, 2), (25, 3)])
async def test_one_call_per_batch_of_ten(count, expected_calls, services_fake, service_arn):
    fake = services_fake(count)
    arns = [service_arn("demo", f"svc-{i:02d}") for i in range(count)]

    records = await describe_details(fake, "demo", ResourceType.SERVICES, arns)

    calls = fake.calls_to("describe_services")
    assert len(calls) == expected_calls
    assert all(len(call[2]) <= 10 for call in calls)
    assert [arn for call in calls for arn in call[2]] == arns
    assert [r.name for r in records] == [f"svc-{i:02d}" for i in range(count)]


@pytest.mark.asyncio
async def test_named_failures_are_excluded_and_logged(caplog, services_fake, service_arn):
    """8 resolved and 2 named failures out of 10: the result holds the 8, the call does not fail."""
    fake = services_fake(10)
    arns = [service_arn("demo", f"svc-{i:02d}") for i in range(10)]
    fake.missing = {arns[3], arns[7]}

    with caplog.at_level(logging.WARNING, logger="ecs_exporter.collectors.batch_describer"):
        records = await describe_details(fake, "demo", ResourceType.SERVICES, arns)

    assert len(records) == 8
    assert {"svc-03", "svc-07"}.isdisjoint(r.name for r in records)
    assert arns[3] in caplog.text
    assert arns[7] in caplog.text
    assert "MISSING" in caplog.text


@pytest.mark.asyncio
async def test_call_level_failure_aborts_whole_operation(client_error):
    """A failing second batch raises; records of the first batch are not returned."""
    client = MagicMock()
    client.describe_services = AsyncMock(
        side_effect=[
            DescribePage(records=[ServiceRecord(name=f"s{i}") for i in range(10)]),
            client_error("AccessDeniedException", "DescribeServices"),
        ]
    )

    with pytest.raises(ClientError):
        await describe_details(client, "demo", ResourceType.SERVICES, [f"arn-{i}" for i in range(15)])

    assert client.describe_services.await_count == 2


@pytest.mark.asyncio
async def test_describes_container_instances(ecs_factory, make_instance, instance_arn):
    fake = ecs_factory()
    fake.add_cluster("demo", instances=[make_instance(f"i-{i}") for i in range(12)])
    arns = [instance_arn("demo", f"i-{i}") for i in range(12)]

    records = await describe_details(fake, "demo", ResourceType.CLUSTER_INSTANCES, arns)

    assert [r.ec2_instance_id for r in records] == [f"i-{i}" for i in range(12)]
    assert len(fake.calls_to("describe_container_instances")) == 2
    assert fake.calls_to("describe_services") == []


@pytest.mark.asyncio
async def test_batch_with_only_failures_yields_nothing():
    client = MagicMock()
    client.describe_services = AsyncMock(
        return_value=DescribePage(records=[], failures=[DescribeFailure(arn="arn-1", reason="MISSING")])
    )

    assert await describe_details(client, "demo", ResourceType.SERVICES, ["arn-1"]) == []
