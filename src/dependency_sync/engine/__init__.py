"""Classification and aggregation engine."""

from .classifier import Classifier
from .aggregator import (
    InternalAggregator,
    ExternalAggregator,
    aggregate_status,
    max_planned_sprint,
    is_leaf_completed,
)
from .scoping import affected_milestones

__all__ = [
    "Classifier",
    "InternalAggregator",
    "ExternalAggregator",
    "aggregate_status",
    "max_planned_sprint",
    "is_leaf_completed",
    "affected_milestones",
]
