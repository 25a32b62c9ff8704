"""Main entry point for the dependency sync behavior."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .behavior import DependencyBehavior
from .config import SyncConfig, get_config
from .host import InMemoryHost
from .models.events import ChangeEvent
from .models.items import Milestone
from .observability import logger
from .roster import ProgramTeamsConfig


def load_events(path: str) -> list[ChangeEvent]:
    """Load a JSON list of change events."""
    with open(path, "r") as f:
        data = json.load(f)
    
    if not isinstance(data, list):
        raise ValueError(f"Events file must contain a JSON list: {path}")
    
    return [ChangeEvent.from_dict(raw) for raw in data]


def run_sync(
    config: Optional[SyncConfig] = None,
    events_path: Optional[str] = None,
    output_path: Optional[str] = None,
) -> dict:
    """
    Run the behavior over a hierarchy snapshot.
    
    Args:
        config: Optional config override
        events_path: JSON list of change events to replay after startup
        output_path: Where to write the updated snapshot
    
    Returns:
        Dictionary with run results
    """
    config = config or get_config()
    
    try:
        roster = None
        if config.program_teams_path:
            roster = ProgramTeamsConfig.from_file(config.program_teams_path)
            logger.info(f"Loaded program teams from {config.program_teams_path}")
        
        host = InMemoryHost(snapshot_path=config.snapshot_path, roster=roster)
        logger.info(f"Loaded {len(host.items)} items from {config.snapshot_path}")
        
        behavior = DependencyBehavior(host, config)
        behavior.initialize()
        
        if not behavior.initialization_ok:
            return {"success": False, "error": "no monitored programs", "milestones": {}}
        
        events_processed = 0
        if events_path:
            for event in load_events(events_path):
                behavior.on_change(event)
                events_processed += 1
            logger.info(f"Replayed {events_processed} change events")
        
        milestones = {}
        for program in behavior.programs:
            for milestone in host.milestones(program):
                milestones[milestone.item_id] = _describe(host, milestone, config)
        
        if output_path:
            host.save(output_path)
            logger.info(f"Saved updated snapshot to {output_path}")
        
        return {
            "success": True,
            "programs": [p.name for p in behavior.programs],
            "events_processed": events_processed,
            "writes": len(host.writes),
            "milestones": milestones,
        }
    
    except Exception as e:
        logger.error(f"Dependency sync failed: {e}")
        return {
            "success": False,
            "error": str(e),
        }


def _describe(host: InMemoryHost, milestone: Milestone, config: SyncConfig) -> dict:
    """Current derived values under a milestone."""
    return {
        "name": milestone.name,
        "color": milestone.color,
        "children": {
            leaf.item_id: {
                "internal": host.get_custom_field(leaf, config.internal_field),
                "external": host.get_custom_field(leaf, config.external_field),
            }
            for leaf in host.children(milestone)
        },
    }


def print_results(result: dict):
    """Print derived values per milestone."""
    print("\n" + "=" * 60)
    print("DEPENDENCY SYNC")
    print("=" * 60)
    print(f"Programs: {', '.join(result['programs'])}")
    print(f"Events replayed: {result['events_processed']}")
    print(f"Writes: {result['writes']}")
    
    for milestone_id, info in result["milestones"].items():
        print(f"\n--- {milestone_id}: {info['name']} (color: {info['color']}) ---")
        for leaf_id, values in info["children"].items():
            print(f"  {leaf_id}")
            print(f"    Internal: {values['internal'] or '-'}")
            print(f"    External: {values['external'] or '-'}")
    print("=" * 60)


def cli():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Derive internal and external dependency columns for program milestones"
    )
    parser.add_argument(
        "--snapshot",
        help="Hierarchy snapshot JSON (default: SNAPSHOT_PATH)"
    )
    parser.add_argument(
        "--events",
        help="JSON list of change events to replay after the startup resync"
    )
    parser.add_argument(
        "--output",
        help="Write the updated snapshot to this path"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    
    args = parser.parse_args()
    
    if args.debug:
        logging.getLogger("dependency_sync").setLevel(logging.DEBUG)
    
    config = get_config()
    if args.snapshot:
        config.snapshot_path = args.snapshot
    
    if not Path(config.snapshot_path).exists():
        print(f"\n❌ Snapshot not found: {config.snapshot_path}")
        sys.exit(1)
    
    result = run_sync(
        config=config,
        events_path=args.events,
        output_path=args.output,
    )
    
    if result["success"]:
        print_results(result)
        print("\n✅ Dependency columns synced")
    else:
        print(f"\n❌ Dependency sync failed: {result.get('error')}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
