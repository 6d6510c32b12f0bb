# src/ecs_exporter/core/registry.py
"""
Builds the per-scrape Prometheus registry.

A new ``CollectorRegistry`` and new metric objects are created on every
call, so no family can be registered twice across scrapes and no value
outlives the scrape that produced it.
"""

import logging
from typing import Dict, Iterable

from prometheus_client import CollectorRegistry, Gauge

from ..models.metrics import MetricSample
from .deriver import SCRAPE_FAMILIES

logger = logging.getLogger(__name__)


def build_registry(samples: Iterable[MetricSample]) -> CollectorRegistry:
    """
    Registers every scrape family in a fresh registry and sets the samples.

    Raises:
        ValueError: If a sample names an unknown family or does not carry
            exactly the family's labels.
    """
    registry = CollectorRegistry()
    gauges: Dict[str, Gauge] = {
        family.name: Gauge(family.name, family.documentation, family.labelnames, registry=registry)
        for family in SCRAPE_FAMILIES
    }

    count = 0
    for sample in samples:
        gauge = gauges.get(sample.family_name)
        if gauge is None:
            raise ValueError(f"Unknown metric family '{sample.family_name}'")
        gauge.labels(**sample.labels).set(sample.value)
        count += 1

    logger.debug("Built scrape registry with %d sample(s).", count)
    return registry
