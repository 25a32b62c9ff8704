"""Test configuration and shared fixtures."""

import pytest
from pathlib import Path

from dependency_sync.config import SyncConfig
from dependency_sync.host import InMemoryHost


@pytest.fixture
def fixtures_path():
    """Path to fixture files."""
    return Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def snapshot_path(fixtures_path):
    """Path to the sample hierarchy snapshot."""
    return str(fixtures_path / "hierarchy.json")


@pytest.fixture
def config(snapshot_path):
    """Config monitoring every program in the sample snapshot."""
    return SyncConfig(program_pattern="", snapshot_path=snapshot_path)


@pytest.fixture
def host(snapshot_path):
    """In-memory host loaded from the sample snapshot."""
    return InMemoryHost(snapshot_path=snapshot_path)


@pytest.fixture
def make_host():
    """Build a host from a roster and a compact item list."""
    def _make(programs: dict, items: list[dict]) -> InMemoryHost:
        return InMemoryHost(data={"programs": programs, "items": items})
    return _make


def team_item(item_id: str, team: str, status: str = "not_done", sprint: str = "", completed: bool = False) -> dict:
    """Raw snapshot entry for a leaf item in a team project."""
    fields = {"Planned sprint": sprint} if sprint else {}
    return {
        "id": item_id,
        "type": "leaf",
        "project": f"Team - {team}",
        "status": status,
        "completed": completed,
        "fields": fields,
    }


def milestone(item_id: str, program: str, children: list[str], links: list[str]) -> dict:
    """Raw snapshot entry for a milestone."""
    return {
        "id": item_id,
        "type": "milestone",
        "project": program,
        "children": children,
        "links": links,
        "color": "#FFFFFF",
    }


def feature(item_id: str, program: str) -> dict:
    """Raw snapshot entry for a leaf item inside a program."""
    return {"id": item_id, "type": "leaf", "project": program}
