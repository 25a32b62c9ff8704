"""Configuration for dependency sync."""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class SyncConfig:
    """Main configuration for the dependency behavior."""
    
    # Program discovery
    program_pattern: str = ""
    inverted: bool = False
    
    # Team naming convention
    team_prefix: str = "Team - "
    
    # Program/team membership table (JSON)
    program_teams_path: str = ""
    
    # Derived columns written back to leaf items
    internal_field: str = "Internal dependencies"
    external_field: str = "External dependencies"
    
    # Planned sprint tag on leaf items
    planned_sprint_field: str = "Planned sprint"
    sprint_delimiter: str = ";"
    
    # Milestone color when external dependencies exist
    alert_color: str = "#DC6464"
    
    # Hierarchy snapshot for the in-memory host
    snapshot_path: str = "fixtures/hierarchy.json"
    
    @property
    def derived_fields(self) -> frozenset[str]:
        """Columns owned by the behavior itself."""
        return frozenset({self.internal_field, self.external_field})
    
    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Load configuration from environment variables."""
        return cls(
            program_pattern=os.getenv("PROGRAM_PATTERN", ""),
            inverted=os.getenv("INVERTED_MATCH", "no").strip().lower() == "yes",
            team_prefix=os.getenv("TEAM_PREFIX", "Team - "),
            program_teams_path=os.getenv("PROGRAM_TEAMS_PATH", ""),
            alert_color=os.getenv("ALERT_COLOR", "#DC6464"),
            snapshot_path=os.getenv("SNAPSHOT_PATH", "fixtures/hierarchy.json"),
        )


def get_config() -> SyncConfig:
    """Get the current configuration."""
    return SyncConfig.from_env()
