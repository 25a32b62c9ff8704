"""Program/team membership table."""

import json
from pathlib import Path
from typing import Optional


class ProgramTeamsConfig:
    """
    Membership oracle answering "is this team part of that program".
    
    The table maps a program name to its roster of team names, e.g.:
        {"Program - Phoenix": ["Alpha", "Beta"]}
    
    The behavior only ever reads it.
    """
    
    def __init__(self, rosters: Optional[dict[str, list[str]]] = None):
        self._rosters: dict[str, frozenset[str]] = {
            program: frozenset(teams)
            for program, teams in (rosters or {}).items()
        }
    
    @classmethod
    def from_file(cls, path: str) -> "ProgramTeamsConfig":
        """
        Load the membership table from a JSON file.
        
        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the content is not a program -> team list mapping
        """
        roster_path = Path(path)
        if not roster_path.exists():
            raise FileNotFoundError(f"Program teams file not found: {roster_path}")
        
        with open(roster_path, "r") as f:
            data = json.load(f)
        
        return cls(cls._validate(data))
    
    @staticmethod
    def _validate(data) -> dict[str, list[str]]:
        if not isinstance(data, dict):
            raise ValueError("Program teams table must be a JSON object")
        
        for program, teams in data.items():
            if not isinstance(teams, list) or not all(isinstance(t, str) for t in teams):
                raise ValueError(f"Roster for program '{program}' must be a list of team names")
        
        return data
    
    @property
    def programs(self) -> list[str]:
        """Names of all programs with a declared roster."""
        return sorted(self._rosters)
    
    def teams(self, program: str) -> frozenset[str]:
        """Roster of a program, empty if the program is unknown."""
        return self._rosters.get(program, frozenset())
    
    def is_team_in_program(self, program: str, team: str) -> bool:
        """Check whether a team is a declared member of a program."""
        return team in self.teams(program)
    
    def to_dict(self) -> dict[str, list[str]]:
        return {program: sorted(teams) for program, teams in self._rosters.items()}
