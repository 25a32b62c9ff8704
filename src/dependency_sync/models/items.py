"""Item models for the program-management hierarchy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class TaskStatus(str, Enum):
    """Aggregated completion state of an item."""
    COMPLETED = "completed"
    BLOCKED = "blocked"
    NOT_DONE = "not_done"
    NO_STATUS = "no_status"
    IN_PROGRESS = "in_progress"  # aggregated from partially done children


@dataclass
class LeafItem:
    """A unit of work contributing to a milestone."""
    
    item_id: str
    name: str
    project: str  # owning group display name
    
    status: TaskStatus = TaskStatus.NO_STATUS
    completed: bool = False  # explicit leaf "completed" flag
    
    # Custom columns, e.g. "Planned sprint" or the derived dependency fields
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class Milestone:
    """A scheduled container whose links define cross-team dependencies."""
    
    item_id: str
    name: str
    project: str
    
    # Leaf items directly beneath the milestone
    children: list[str] = field(default_factory=list)
    # Explicit dependency edges to items anywhere in the hierarchy
    links: list[str] = field(default_factory=list)
    
    status: TaskStatus = TaskStatus.NO_STATUS
    completed: bool = False
    color: Optional[str] = None
    fields: dict[str, str] = field(default_factory=dict)


WorkItem = Union[LeafItem, Milestone]


@dataclass(frozen=True)
class Program:
    """A cross-team delivery initiative, identified by its project name."""
    name: str
