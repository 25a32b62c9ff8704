"""Incremental scoping - which milestones a change notification touches."""

from ..host import HostProtocol
from ..models.items import LeafItem, Milestone, WorkItem


def affected_milestones(
    host: HostProtocol,
    item: WorkItem,
    monitored: set[str],
) -> list[Milestone]:
    """
    Resolve the monitored milestones whose derived values depend on an item.
    
    A milestone affects itself. A leaf affects the milestones it sits
    directly beneath and the milestones linking to it. Only milestones
    of monitored programs are returned, ordered by id.
    """
    match item:
        case Milestone():
            candidates = [item]
        case LeafItem():
            candidates = host.tagged_milestones(item) + host.linking_milestones(item)
        case _:
            candidates = []
    
    affected = {m.item_id: m for m in candidates if m.project in monitored}
    return [affected[item_id] for item_id in sorted(affected)]
