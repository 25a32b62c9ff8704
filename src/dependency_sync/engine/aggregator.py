"""Aggregators - roll a classified partition up into summary strings."""

import re
from collections import defaultdict
from typing import Iterable, Optional

from ..models.dependencies import TeamDependency
from ..models.items import TaskStatus, WorkItem
from .classifier import Classifier

NOT_SET = "not set"

SPRINT_PATTERN = re.compile(r"S\d+")


def aggregate_status(statuses: Iterable[TaskStatus]) -> str:
    """
    Reduce a group of statuses to one label.
    
    Blocked dominates, then unanimous Completed, then unanimous
    NotDone/NoStatus; anything else is In progress. An empty group is
    Not done.
    """
    statuses = list(statuses)
    
    if not statuses:
        return "Not done"
    if any(s == TaskStatus.BLOCKED for s in statuses):
        return "Blocked"
    if all(s == TaskStatus.COMPLETED for s in statuses):
        return "Completed"
    if all(s in (TaskStatus.NOT_DONE, TaskStatus.NO_STATUS) for s in statuses):
        return "Not done"
    return "In progress"


def max_planned_sprint(value: str, delimiter: str = ";") -> Optional[str]:
    """
    Greatest sprint label in a multi-valued planned sprint tag.
    
    Labels compare as strings, so "S2" beats "S10". Tokens are taken
    as-is; a padded " S4 " is not a sprint label.
    """
    labels = [
        token for token in (value or "").split(delimiter)
        if SPRINT_PATTERN.fullmatch(token)
    ]
    return max(labels) if labels else None


def is_leaf_completed(item: WorkItem) -> bool:
    return item.completed or item.status == TaskStatus.COMPLETED


class InternalAggregator:
    """Builds the internal dependency summary: each team's furthest open sprint."""
    
    def __init__(
        self,
        classifier: Classifier,
        planned_sprint_field: str = "Planned sprint",
        sprint_delimiter: str = ";",
    ):
        self.classifier = classifier
        self.planned_sprint_field = planned_sprint_field
        self.sprint_delimiter = sprint_delimiter
    
    def dependencies(self, internal_links: list[WorkItem]) -> list[TeamDependency]:
        """Per-team furthest open sprint, ordered by sprint label then team."""
        sprints_by_team: dict[str, list[Optional[str]]] = defaultdict(list)
        
        for item in internal_links:
            if is_leaf_completed(item):
                continue
            
            tag = self.classifier.host.get_custom_field(item, self.planned_sprint_field)
            sprints_by_team[self.classifier.team_name(item)].append(
                max_planned_sprint(tag, self.sprint_delimiter)
            )
        
        dependencies = []
        for team, sprints in sprints_by_team.items():
            labels = [s for s in sprints if s is not None]
            dependencies.append(TeamDependency(team, max(labels) if labels else NOT_SET))
        
        dependencies.sort(key=lambda d: (d.value, d.team))
        return dependencies
    
    def summarize(self, internal_links: list[WorkItem]) -> str:
        """Render the summary; a single remaining team is not a dependency."""
        dependencies = self.dependencies(internal_links)
        if len(dependencies) < 2:
            return ""
        return " ".join(d.render() for d in dependencies)


class ExternalAggregator:
    """Builds the external dependency summary: each outside team's aggregated status."""
    
    def __init__(self, classifier: Classifier):
        self.classifier = classifier
    
    def dependencies(self, external_links: list[WorkItem]) -> list[TeamDependency]:
        """Per-team aggregated status, ordered by rendered token."""
        statuses_by_team: dict[str, list[TaskStatus]] = defaultdict(list)
        
        for item in external_links:
            statuses_by_team[self.classifier.team_name(item)].append(item.status)
        
        dependencies = {
            TeamDependency(team, aggregate_status(statuses))
            for team, statuses in statuses_by_team.items()
        }
        return sorted(dependencies, key=lambda d: d.render())
    
    def summarize(self, external_links: list[WorkItem]) -> str:
        return ", ".join(d.render() for d in self.dependencies(external_links))
