"""Host environment adapter supporting both a protocol and an in-memory snapshot."""

import json
import re
from pathlib import Path
from typing import Optional, Protocol

from .models.items import LeafItem, Milestone, Program, TaskStatus, WorkItem
from .roster import ProgramTeamsConfig


class HostProtocol(Protocol):
    """Protocol for the capabilities the behavior needs from its host."""
    
    def find_programs(self, name_pattern: str, inverted: bool = False) -> list[Program]:
        """Discover programs whose name matches (or, inverted, does not match) a pattern."""
        ...
    
    def is_team_in_program(self, program: str, team: str) -> bool:
        """Membership oracle."""
        ...
    
    def get_item(self, item_id: str) -> Optional[WorkItem]:
        """Resolve an item id to a live item, None if it no longer exists."""
        ...
    
    def milestones(self, program: Program) -> list[Milestone]:
        """All milestones scheduled in a program."""
        ...
    
    def children(self, milestone: Milestone) -> list[LeafItem]:
        """Leaf items directly beneath a milestone."""
        ...
    
    def linked_items(self, milestone: Milestone) -> list[WorkItem]:
        """Items a milestone explicitly links to."""
        ...
    
    def tagged_milestones(self, item: WorkItem) -> list[Milestone]:
        """Milestones an item sits directly beneath."""
        ...
    
    def linking_milestones(self, item: WorkItem) -> list[Milestone]:
        """Milestones holding an explicit link to an item."""
        ...
    
    def get_custom_field(self, item: WorkItem, name: str) -> str:
        """Read a custom column as text, empty if unset."""
        ...
    
    def set_custom_field(self, item: WorkItem, name: str, value: str) -> None:
        """Write a custom column."""
        ...
    
    def has_custom_field(self, item: WorkItem, name: str) -> bool:
        """Check whether a custom column has ever been set on an item."""
        ...
    
    def clear_custom_field(self, item: WorkItem, name: str) -> None:
        """Remove a custom column value, leaving it unset."""
        ...
    
    def get_color(self, milestone: Milestone) -> Optional[str]:
        """Read a milestone's display color."""
        ...
    
    def set_color(self, milestone: Milestone, color: Optional[str]) -> None:
        """Write a milestone's display color."""
        ...


class InMemoryHost:
    """
    Host backed by a JSON hierarchy snapshot.
    
    Every write is applied to the held items and recorded in `writes`
    so callers can inspect exactly what the behavior changed.
    """
    
    ITEM_TYPES = {"leaf", "milestone"}
    
    def __init__(
        self,
        snapshot_path: Optional[str] = None,
        data: Optional[dict] = None,
        roster: Optional[ProgramTeamsConfig] = None,
    ):
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.items: dict[str, WorkItem] = {}
        self.writes: list[dict] = []
        
        if data is None:
            data = self._load_snapshot()
        
        self.roster = roster or ProgramTeamsConfig(data.get("programs", {}))
        self._program_names = sorted(set(data.get("programs", {})) | set(self.roster.programs))
        self._load_items(data.get("items", []))
    
    def _load_snapshot(self) -> dict:
        """Load snapshot data from file."""
        if self.snapshot_path and self.snapshot_path.exists():
            with open(self.snapshot_path, "r") as f:
                return json.load(f)
        return {"programs": {}, "items": []}
    
    def _load_items(self, raw_items: list[dict]):
        for raw in raw_items:
            item = self._parse_item(raw)
            if item.item_id in self.items:
                raise ValueError(f"Duplicate item id: {item.item_id}")
            self.items[item.item_id] = item
        
        for item in self.items.values():
            if not isinstance(item, Milestone):
                continue
            for child_id in item.children:
                if not isinstance(self.items.get(child_id), LeafItem):
                    raise ValueError(f"Milestone {item.item_id} has unknown child leaf: {child_id}")
            for link_id in item.links:
                if link_id not in self.items:
                    raise ValueError(f"Milestone {item.item_id} links unknown item: {link_id}")
    
    def _parse_item(self, raw: dict) -> WorkItem:
        item_type = raw.get("type", "leaf")
        if item_type not in self.ITEM_TYPES:
            raise ValueError(f"Unknown item type '{item_type}' for item {raw.get('id')}")
        
        try:
            status = TaskStatus(raw.get("status", TaskStatus.NO_STATUS.value))
        except ValueError:
            raise ValueError(f"Unknown status '{raw.get('status')}' for item {raw.get('id')}") from None
        
        common = dict(
            item_id=str(raw["id"]),
            name=raw.get("name", str(raw["id"])),
            project=raw.get("project", ""),
            status=status,
            completed=bool(raw.get("completed", False)),
            fields=dict(raw.get("fields", {})),
        )
        
        if item_type == "milestone":
            return Milestone(
                children=[str(c) for c in raw.get("children", [])],
                links=[str(link) for link in raw.get("links", [])],
                color=raw.get("color"),
                **common,
            )
        return LeafItem(**common)
    
    def find_programs(self, name_pattern: str, inverted: bool = False) -> list[Program]:
        """Return programs whose name the pattern is found in, or not found in when inverted."""
        regex = re.compile(name_pattern)
        return [
            Program(name)
            for name in self._program_names
            if bool(regex.search(name)) != inverted
        ]
    
    def is_team_in_program(self, program: str, team: str) -> bool:
        return self.roster.is_team_in_program(program, team)
    
    def get_item(self, item_id: str) -> Optional[WorkItem]:
        return self.items.get(item_id)
    
    def milestones(self, program: Program) -> list[Milestone]:
        return [
            item for item in self._all_milestones()
            if item.project == program.name
        ]
    
    def children(self, milestone: Milestone) -> list[LeafItem]:
        return [self.items[child_id] for child_id in milestone.children]
    
    def linked_items(self, milestone: Milestone) -> list[WorkItem]:
        return [self.items[link_id] for link_id in milestone.links]
    
    def tagged_milestones(self, item: WorkItem) -> list[Milestone]:
        return [m for m in self._all_milestones() if item.item_id in m.children]
    
    def linking_milestones(self, item: WorkItem) -> list[Milestone]:
        return [m for m in self._all_milestones() if item.item_id in m.links]
    
    def get_custom_field(self, item: WorkItem, name: str) -> str:
        return item.fields.get(name, "")
    
    def set_custom_field(self, item: WorkItem, name: str, value: str) -> None:
        item.fields[name] = value
        self.writes.append({"item_id": item.item_id, "field": name, "value": value})
    
    def has_custom_field(self, item: WorkItem, name: str) -> bool:
        return name in item.fields
    
    def clear_custom_field(self, item: WorkItem, name: str) -> None:
        item.fields.pop(name, None)
        self.writes.append({"item_id": item.item_id, "field": name, "value": None})
    
    def get_color(self, milestone: Milestone) -> Optional[str]:
        return milestone.color
    
    def set_color(self, milestone: Milestone, color: Optional[str]) -> None:
        milestone.color = color
        self.writes.append({"item_id": milestone.item_id, "field": "color", "value": color})
    
    def _all_milestones(self) -> list[Milestone]:
        return sorted(
            (item for item in self.items.values() if isinstance(item, Milestone)),
            key=lambda m: m.item_id,
        )
    
    def to_dict(self) -> dict:
        """Serialize the current hierarchy state in snapshot format."""
        items = []
        for item in self.items.values():
            raw = {
                "id": item.item_id,
                "type": "milestone" if isinstance(item, Milestone) else "leaf",
                "name": item.name,
                "project": item.project,
                "status": item.status.value,
                "completed": item.completed,
                "fields": dict(item.fields),
            }
            if isinstance(item, Milestone):
                raw["children"] = list(item.children)
                raw["links"] = list(item.links)
                raw["color"] = item.color
            items.append(raw)
        
        programs = {name: sorted(self.roster.teams(name)) for name in self._program_names}
        return {"programs": programs, "items": items}
    
    def save(self, path: str):
        """Save the current hierarchy state to a snapshot file."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
