# src/ecs_exporter/core/ecs_client.py
"""
Access to the AWS ECS API.

``BaseEcsClient`` is the capability the collection pipeline depends on:
two list RPCs and two batch describe RPCs. ``AioBotoEcsClient`` implements
it on top of an ``aioboto3`` ECS client. One instance is shared by every
scrape; it holds no per-call state.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import aioboto3

from ..models.ecs import (
    ContainerInstanceRecord,
    DescribeFailure,
    DescribePage,
    IdentifierPage,
    ServiceRecord,
)
from .aws_auth import assume_role_session

logger = logging.getLogger(__name__)


class BaseEcsClient(ABC):
    """
    Abstract Base Class for ECS API access.
    """

    @abstractmethod
    async def list_services(self, cluster: str, next_token: Optional[str] = None) -> IdentifierPage:
        pass

    @abstractmethod
    async def describe_services(self, cluster: str, services: List[str]) -> DescribePage:
        pass

    @abstractmethod
    async def list_container_instances(self, cluster: str, next_token: Optional[str] = None) -> IdentifierPage:
        pass

    @abstractmethod
    async def describe_container_instances(self, cluster: str, container_instances: List[str]) -> DescribePage:
        pass


def _list_kwargs(cluster: str, next_token: Optional[str]) -> dict:
    kwargs = {"cluster": cluster}
    if next_token:
        kwargs["nextToken"] = next_token
    return kwargs


def _failures(response: dict) -> List[DescribeFailure]:
    return [DescribeFailure.from_api(f) for f in response.get("failures") or []]


class AioBotoEcsClient(BaseEcsClient):
    """Adapts an open aioboto3 ECS client to ``BaseEcsClient``."""

    def __init__(self, client):
        self._client = client

    async def list_services(self, cluster: str, next_token: Optional[str] = None) -> IdentifierPage:
        response = await self._client.list_services(**_list_kwargs(cluster, next_token))
        return IdentifierPage(
            identifiers=response.get("serviceArns") or [],
            next_token=response.get("nextToken"),
        )

    async def describe_services(self, cluster: str, services: List[str]) -> DescribePage:
        response = await self._client.describe_services(cluster=cluster, services=services)
        return DescribePage(
            records=[ServiceRecord.from_api(s) for s in response.get("services") or []],
            failures=_failures(response),
        )

    async def list_container_instances(self, cluster: str, next_token: Optional[str] = None) -> IdentifierPage:
        response = await self._client.list_container_instances(**_list_kwargs(cluster, next_token))
        return IdentifierPage(
            identifiers=response.get("containerInstanceArns") or [],
            next_token=response.get("nextToken"),
        )

    async def describe_container_instances(self, cluster: str, container_instances: List[str]) -> DescribePage:
        response = await self._client.describe_container_instances(
            cluster=cluster, containerInstances=container_instances
        )
        return DescribePage(
            records=[ContainerInstanceRecord.from_api(i) for i in response.get("containerInstances") or []],
            failures=_failures(response),
        )


@asynccontextmanager
async def open_ecs_client(
    region: Optional[str] = None,
    profile: Optional[str] = None,
    role: Optional[str] = None,
) -> AsyncIterator[AioBotoEcsClient]:
    """
    Opens a single ECS client for the lifetime of the context.

    Credentials come from the standard AWS chain. When ``role`` is set, the
    client uses that role's temporary credentials instead.
    """
    if role:
        session = await assume_role_session(role, region=region, profile=profile)
    else:
        session = aioboto3.Session(profile_name=profile, region_name=region)
    async with session.client("ecs") as client:
        logger.info(
            "ECS client opened (region=%s, profile=%s, role=%s).",
            region or "default",
            profile or "default",
            role or "none",
        )
        yield AioBotoEcsClient(client)
    logger.debug("ECS client closed.")
