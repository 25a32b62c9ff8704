"""Data models for dependency sync."""

from .items import (
    TaskStatus,
    LeafItem,
    Milestone,
    Program,
    WorkItem,
)
from .events import (
    ChangeKind,
    ChangeEvent,
)
from .dependencies import (
    LinkPartition,
    TeamDependency,
    MilestoneResult,
)

__all__ = [
    "TaskStatus",
    "LeafItem",
    "Milestone",
    "Program",
    "WorkItem",
    "ChangeKind",
    "ChangeEvent",
    "LinkPartition",
    "TeamDependency",
    "MilestoneResult",
]
