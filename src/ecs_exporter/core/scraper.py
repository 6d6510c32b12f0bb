# src/ecs_exporter/core/scraper.py
"""
The scrape contract used by the HTTP layer.

A scraper produces a fresh, self-contained registry on every call. The two
variants only differ in how many clusters they cover; both share the ECS
client they are given.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from prometheus_client import CollectorRegistry

from ..collectors.cluster_collector import ClusterCollector
from .deriver import derive_samples
from .ecs_client import BaseEcsClient
from .registry import build_registry

logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """
    Abstract Base Class for scrapers.
    """

    @abstractmethod
    async def scrape(self) -> CollectorRegistry:
        """
        Collects the configured clusters and returns a new registry with
        the derived metrics and the per-pipeline success gauge.
        """
        pass


async def _scrape_clusters(collector: ClusterCollector, cluster_names: List[str]) -> CollectorRegistry:
    result = await collector.collect(cluster_names)
    failed = [p for p in result.outcome.pipelines if not p.success]
    if failed:
        logger.warning(
            "Scrape finished with %d failed pipeline(s): %s",
            len(failed),
            ", ".join(f"{p.cluster_name}/{p.resource_type.value}" for p in failed),
        )
    return build_registry(derive_samples(result))


class SingleClusterScraper(BaseScraper):
    """Scrapes one cluster."""

    def __init__(self, client: BaseEcsClient, cluster_name: str):
        if not cluster_name:
            raise ValueError("cluster_name must not be empty")
        self.cluster_name = cluster_name
        self._collector = ClusterCollector(client)

    async def scrape(self) -> CollectorRegistry:
        return await _scrape_clusters(self._collector, [self.cluster_name])


class MultiClusterScraper(BaseScraper):
    """Scrapes several clusters concurrently; one failing cluster does not affect the others."""

    def __init__(self, client: BaseEcsClient, cluster_names: List[str]):
        if any(not name for name in cluster_names):
            raise ValueError("cluster names must not be empty")
        self.cluster_names = list(cluster_names)
        self._collector = ClusterCollector(client)

    async def scrape(self) -> CollectorRegistry:
        return await _scrape_clusters(self._collector, self.cluster_names)


def build_scraper(client: BaseEcsClient, cluster_names: List[str]) -> BaseScraper:
    """Returns the scraper variant matching the number of clusters."""
    if len(cluster_names) == 1:
        return SingleClusterScraper(client, cluster_names[0])
    return MultiClusterScraper(client, cluster_names)
