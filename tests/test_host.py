"""Tests for the host adapter, membership table and configuration."""

import json

import pytest

from dependency_sync.config import SyncConfig
from dependency_sync.host import InMemoryHost
from dependency_sync.models import LeafItem, Milestone, Program, TaskStatus
from dependency_sync.roster import ProgramTeamsConfig


class TestInMemoryHost:
    """Tests for InMemoryHost."""
    
    def test_loads_snapshot(self, host):
        assert isinstance(host.get_item("M1"), Milestone)
        assert isinstance(host.get_item("T1"), LeafItem)
        assert host.get_item("T3").status == TaskStatus.BLOCKED
        assert host.get_item("T4").completed
    
    def test_missing_snapshot_is_empty(self, tmp_path):
        host = InMemoryHost(snapshot_path=str(tmp_path / "missing.json"))
        
        assert host.items == {}
        assert host.find_programs("") == []
    
    def test_find_programs(self, host):
        assert host.find_programs("") == [Program("Program - Atlas"), Program("Program - Phoenix")]
        assert host.find_programs("Phoe") == [Program("Program - Phoenix")]
        assert host.find_programs("Phoe", inverted=True) == [Program("Program - Atlas")]
    
    def test_find_programs_regex(self, host):
        assert host.find_programs("^Program - (Atlas|Nova)$") == [Program("Program - Atlas")]
    
    def test_hierarchy_queries(self, host):
        m1 = host.get_item("M1")
        f2 = host.get_item("F2")
        t1 = host.get_item("T1")
        
        assert [m.item_id for m in host.milestones(Program("Program - Phoenix"))] == ["M1", "M2"]
        assert [c.item_id for c in host.children(m1)] == ["F1", "F2"]
        assert [i.item_id for i in host.linked_items(m1)] == ["T1", "T2", "T3", "T4", "X1"]
        assert [m.item_id for m in host.tagged_milestones(f2)] == ["M1", "M2"]
        assert [m.item_id for m in host.linking_milestones(t1)] == ["M1"]
    
    def test_membership(self, host):
        assert host.is_team_in_program("Program - Phoenix", "Alpha")
        assert not host.is_team_in_program("Program - Phoenix", "Delta")
        assert not host.is_team_in_program("Program - Unknown", "Alpha")
    
    def test_writes_recorded(self, host):
        f1 = host.get_item("F1")
        m1 = host.get_item("M1")
        
        host.set_custom_field(f1, "Internal dependencies", "A (S1) B (S2)")
        host.set_color(m1, "#DC6464")
        
        assert host.get_custom_field(f1, "Internal dependencies") == "A (S1) B (S2)"
        assert host.get_color(m1) == "#DC6464"
        assert host.writes == [
            {"item_id": "F1", "field": "Internal dependencies", "value": "A (S1) B (S2)"},
            {"item_id": "M1", "field": "color", "value": "#DC6464"},
        ]
    
    def test_unset_field_is_empty(self, host):
        assert host.get_custom_field(host.get_item("F1"), "External dependencies") == ""
    
    def test_save_round_trip(self, host, tmp_path):
        host.set_custom_field(host.get_item("F1"), "External dependencies", "Zeta (Blocked)")
        output = tmp_path / "out" / "snapshot.json"
        
        host.save(str(output))
        reloaded = InMemoryHost(snapshot_path=str(output))
        
        assert reloaded.to_dict() == host.to_dict()
        assert reloaded.get_custom_field(reloaded.get_item("F1"), "External dependencies") == "Zeta (Blocked)"
    
    def test_separate_roster(self):
        roster = ProgramTeamsConfig({"Program - Nova": ["Alpha"]})
        host = InMemoryHost(data={"programs": {}, "items": []}, roster=roster)
        
        assert host.find_programs("") == [Program("Program - Nova")]
        assert host.is_team_in_program("Program - Nova", "Alpha")
    
    @pytest.mark.parametrize("items, message", [
        ([{"id": "A", "type": "epic"}], "Unknown item type"),
        ([{"id": "A", "status": "done"}], "Unknown status"),
        ([{"id": "A"}, {"id": "A"}], "Duplicate item id"),
        ([{"id": "M", "type": "milestone", "children": ["nope"]}], "unknown child"),
        ([{"id": "M", "type": "milestone", "links": ["nope"]}], "links unknown item"),
    ])
    def test_malformed_snapshot(self, items, message):
        with pytest.raises(ValueError, match=message):
            InMemoryHost(data={"programs": {}, "items": items})


class TestProgramTeamsConfig:
    """Tests for the membership table."""
    
    def test_membership(self):
        roster = ProgramTeamsConfig({"Program - Phoenix": ["Alpha", "Beta"]})
        
        assert roster.is_team_in_program("Program - Phoenix", "Beta")
        assert not roster.is_team_in_program("Program - Phoenix", "Gamma")
        assert roster.teams("Program - Unknown") == frozenset()
        assert roster.programs == ["Program - Phoenix"]
    
    def test_from_file(self, tmp_path):
        path = tmp_path / "program_teams.json"
        path.write_text(json.dumps({"Program - Phoenix": ["Beta", "Alpha"]}))
        
        roster = ProgramTeamsConfig.from_file(str(path))
        
        assert roster.to_dict() == {"Program - Phoenix": ["Alpha", "Beta"]}
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ProgramTeamsConfig.from_file(str(tmp_path / "missing.json"))
    
    @pytest.mark.parametrize("content", [
        ["Alpha"],
        {"Program - Phoenix": "Alpha"},
        {"Program - Phoenix": ["Alpha", 3]},
    ])
    def test_malformed_file(self, tmp_path, content):
        path = tmp_path / "program_teams.json"
        path.write_text(json.dumps(content))
        
        with pytest.raises(ValueError):
            ProgramTeamsConfig.from_file(str(path))


class TestSyncConfig:
    """Tests for configuration loading."""
    
    def test_defaults(self):
        config = SyncConfig()
        
        assert config.team_prefix == "Team - "
        assert config.alert_color == "#DC6464"
        assert config.derived_fields == {"Internal dependencies", "External dependencies"}
        assert not config.inverted
    
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PROGRAM_PATTERN", "Phoenix")
        monkeypatch.setenv("INVERTED_MATCH", "YES")
        monkeypatch.setenv("TEAM_PREFIX", "Squad: ")
        monkeypatch.setenv("ALERT_COLOR", "#FF0000")
        
        config = SyncConfig.from_env()
        
        assert config.program_pattern == "Phoenix"
        assert config.inverted
        assert config.team_prefix == "Squad: "
        assert config.alert_color == "#FF0000"
    
    def test_only_yes_inverts(self, monkeypatch):
        monkeypatch.setenv("INVERTED_MATCH", "true")
        
        assert not SyncConfig.from_env().inverted
