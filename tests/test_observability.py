"""Tests for sync metrics and logging."""

import logging

import pytest

from dependency_sync.observability import MetricsLogger


class TestMetricsLogger:
    """Tests for MetricsLogger."""
    
    def test_timer_records_duration(self):
        metrics = MetricsLogger(trigger="change")
        
        with metrics.track_milestone("M1"):
            pass
        
        assert "M1" in metrics.metrics.milestone_durations_ms
        assert metrics.metrics.failures == []
    
    def test_timer_records_failure_without_suppressing(self):
        metrics = MetricsLogger()
        
        with pytest.raises(RuntimeError):
            with metrics.track_milestone("M1"):
                raise RuntimeError("boom")
        
        assert metrics.metrics.failures == ["M1: RuntimeError: boom"]
    
    def test_summary_reports_milestone_durations(self, caplog):
        metrics = MetricsLogger()
        metrics.start()
        metrics.record_milestone_duration("M1", 12)
        metrics.record_milestone_duration("M2", 40)
        metrics.record_milestone(fields_written=4, writes_suppressed=1, flagged=True)
        metrics.finish()
        
        with caplog.at_level(logging.INFO, logger="dependency_sync"):
            metrics.log_summary()
        
        lines = [r.getMessage() for r in caplog.records]
        assert "  - M2: 40ms" in lines
        assert lines.index("  - M2: 40ms") < lines.index("  - M1: 12ms")
        assert "Writes suppressed: 1" in lines
        assert "Status: all milestones synced" in lines
