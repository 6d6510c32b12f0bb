# src/ecs_exporter/collectors/base_collector.py
"""
This module defines the abstract base class for cluster collectors.
A collector turns a list of cluster names into snapshots plus the outcome
of every (cluster, resource type) pipeline it ran.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.metrics import CollectionResult


class BaseCollector(ABC):
    """
    Abstract Base Class for cluster collectors.
    """

    @abstractmethod
    async def collect(self, cluster_names: List[str]) -> CollectionResult:
        """
        Fetches the state of the given clusters. Failures of individual
        pipelines are reported in the result, never raised.
        """
        pass
