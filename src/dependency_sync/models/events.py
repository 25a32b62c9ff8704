"""Change notifications delivered by the host."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChangeKind(str, Enum):
    """What changed on the notified item."""
    TASK = "task"  # status, completion or any other task-level change
    LINKS = "links"  # linked-task set changed
    CUSTOM_FIELD = "custom_field"


@dataclass(frozen=True)
class ChangeEvent:
    """A single change notification."""
    
    item_id: str
    kind: ChangeKind = ChangeKind.TASK
    field: Optional[str] = None  # custom column name for CUSTOM_FIELD events
    
    @classmethod
    def from_dict(cls, data: dict) -> "ChangeEvent":
        """Create a ChangeEvent from raw event data."""
        return cls(
            item_id=str(data["item_id"]),
            kind=ChangeKind(data.get("kind", ChangeKind.TASK.value)),
            field=data.get("field"),
        )
