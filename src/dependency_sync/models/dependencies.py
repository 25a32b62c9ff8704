"""Dependency models produced by classification and aggregation."""

from dataclasses import dataclass, field
from typing import Optional

from .items import WorkItem


@dataclass
class LinkPartition:
    """A milestone's team-scoped links split by program membership."""
    
    internal: list[WorkItem] = field(default_factory=list)
    external: list[WorkItem] = field(default_factory=list)


@dataclass(frozen=True)
class TeamDependency:
    """One team's contribution to a milestone summary."""
    
    team: str
    value: str  # furthest open sprint, or aggregated status label
    
    def render(self) -> str:
        return f"{self.team} ({self.value})"


@dataclass
class MilestoneResult:
    """Derived values for a milestone and how they were written back."""
    
    milestone_id: str
    internal: str = ""
    external: str = ""
    
    # Translated by the host into its own visual convention
    has_external_dependency: bool = False
    
    # Child leaf ids that received each value
    internal_written: list[str] = field(default_factory=list)
    external_written: list[str] = field(default_factory=list)
    # Child leaf ids whose empty external value was suppressed
    external_suppressed: list[str] = field(default_factory=list)
    
    error: Optional[str] = None
