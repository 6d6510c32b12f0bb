# src/ecs_exporter/models/metrics.py
"""
Pydantic models for the outcome of a collection pass and the metric
samples derived from it.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ecs import ClusterSnapshot, ResourceType


class PipelineOutcome(BaseModel):
    """Whether the list + describe sequence for one (cluster, resource type) pair succeeded."""

    model_config = ConfigDict(frozen=True)

    cluster_name: str
    resource_type: ResourceType
    success: bool


class ScrapeOutcome(BaseModel):
    """All pipeline outcomes of one collection pass, in collection order."""

    pipelines: List[PipelineOutcome] = Field(default_factory=list)


class CollectionResult(BaseModel):
    """Snapshots keyed by cluster name, plus the outcome of every pipeline."""

    snapshots: Dict[str, ClusterSnapshot] = Field(default_factory=dict)
    outcome: ScrapeOutcome = Field(default_factory=ScrapeOutcome)


class MetricSample(BaseModel):
    """
    A single value of a metric family.

    Attributes:
        family_name: Name of the metric family the sample belongs to.
        labels: Label name to label value. Values are never empty.
        value: Integer value of the sample.
    """

    model_config = ConfigDict(frozen=True)

    family_name: str = Field(..., min_length=1)
    labels: Dict[str, str] = Field(default_factory=dict)
    value: int

    @field_validator("labels")
    @classmethod
    def _labels_not_empty(cls, labels: Dict[str, str]) -> Dict[str, str]:
        for name, value in labels.items():
            if not value:
                raise ValueError(f"Label '{name}' must not be empty")
        return labels
