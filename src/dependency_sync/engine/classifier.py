"""Classifier - splits a milestone's links by program membership."""

from typing import Optional

from ..host import HostProtocol
from ..models.dependencies import LinkPartition
from ..models.items import Milestone, Program, WorkItem


class Classifier:
    """
    Partitions the items a milestone links to into internal and external.
    
    Only links into team projects (owning project named with the team
    prefix) take part; anything else is left out of both partitions.
    """
    
    def __init__(self, host: HostProtocol, team_prefix: str = "Team - "):
        self.host = host
        self.team_prefix = team_prefix
    
    def is_team_item(self, item: WorkItem) -> bool:
        return item.project.startswith(self.team_prefix)
    
    def team_name(self, item: WorkItem) -> Optional[str]:
        """Team owning an item, None for items outside team projects."""
        if not self.is_team_item(item):
            return None
        return item.project[len(self.team_prefix):]
    
    def classify(self, milestone: Milestone, program: Optional[Program] = None) -> LinkPartition:
        """
        Classify a milestone's linked items.
        
        Args:
            milestone: Milestone whose links are classified
            program: Program to classify against, defaults to the
                     milestone's own project
        
        Returns:
            LinkPartition with in-program links as internal and the
            remaining team-scoped links as external
        """
        program_name = program.name if program else milestone.project
        partition = LinkPartition()
        
        for item in self.host.linked_items(milestone):
            team = self.team_name(item)
            if team is None:
                continue
            
            if self.host.is_team_in_program(program_name, team):
                partition.internal.append(item)
            else:
                partition.external.append(item)
        
        return partition
