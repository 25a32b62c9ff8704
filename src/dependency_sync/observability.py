"""Observability and metrics for dependency sync passes."""

import logging
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional
from uuid import uuid4

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("dependency_sync")


@dataclass
class SyncMetrics:
    """Metrics collected during a full resync or a change event."""
    
    run_id: str = field(default_factory=lambda: str(uuid4())[:8])
    run_timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    trigger: str = "full_resync"  # full_resync, change
    
    # Milestone metrics
    milestones_processed: int = 0
    milestones_flagged: int = 0
    
    # Write-back
    fields_written: int = 0
    writes_suppressed: int = 0
    
    # Timing
    milestone_durations_ms: dict[str, int] = field(default_factory=dict)
    total_duration_ms: int = 0
    
    # Errors
    failures: list[str] = field(default_factory=list)
    
    def to_dict(self) -> dict:
        """Convert to dictionary for logging/storage."""
        return asdict(self)


class MetricsLogger:
    """
    Collects and logs metrics for one sync pass.
    
    Usage:
        metrics = MetricsLogger(trigger="full_resync")
        metrics.start()
        
        with metrics.track_milestone("M1"):
            # classify, aggregate, write back
        
        metrics.finish()
        metrics.log_summary()
    """
    
    def __init__(self, trigger: str = "full_resync"):
        self.metrics = SyncMetrics(trigger=trigger)
        self._start_time: Optional[float] = None
    
    def start(self):
        """Start pass timing."""
        self._start_time = time.time()
        logger.info(f"Sync pass started: {self.metrics.run_id} ({self.metrics.trigger})")
    
    def finish(self):
        """Finish pass timing."""
        if self._start_time:
            self.metrics.total_duration_ms = int(
                (time.time() - self._start_time) * 1000
            )
    
    def record_milestone(
        self,
        fields_written: int,
        writes_suppressed: int = 0,
        flagged: bool = False,
    ):
        """Record the write-back of one milestone."""
        self.metrics.milestones_processed += 1
        self.metrics.fields_written += fields_written
        self.metrics.writes_suppressed += writes_suppressed
        if flagged:
            self.metrics.milestones_flagged += 1
    
    def record_milestone_duration(self, milestone_id: str, duration_ms: int):
        """Record duration for a milestone."""
        self.metrics.milestone_durations_ms[milestone_id] = duration_ms
    
    def record_failure(self, error: str):
        """Record a failure."""
        self.metrics.failures.append(error)
        logger.error(f"Sync failure: {error}")
    
    def track_milestone(self, milestone_id: str):
        """Context manager for tracking milestone processing."""
        return MilestoneTimer(self, milestone_id)
    
    def log_summary(self):
        """Log a summary of the sync pass."""
        m = self.metrics
        
        logger.info("=" * 50)
        logger.info(f"Sync Pass Summary: {m.run_id}")
        logger.info("=" * 50)
        logger.info(f"Trigger: {m.trigger}")
        logger.info(f"Timestamp: {m.run_timestamp}")
        logger.info(f"Duration: {m.total_duration_ms}ms")
        logger.info(f"Milestones processed: {m.milestones_processed}")
        logger.info(f"Milestones flagged: {m.milestones_flagged}")
        logger.info(f"Fields written: {m.fields_written}")
        
        if m.writes_suppressed:
            logger.info(f"Writes suppressed: {m.writes_suppressed}")
        
        if m.milestone_durations_ms:
            slowest = sorted(m.milestone_durations_ms.items(), key=lambda x: -x[1])
            logger.info("Milestone durations (slowest first):")
            for milestone_id, ms in slowest[:10]:
                logger.info(f"  - {milestone_id}: {ms}ms")
        
        if m.failures:
            logger.warning(f"Failed milestones: {len(m.failures)}")
            for failure in m.failures:
                logger.warning(f"  - {failure}")
        else:
            logger.info("Status: all milestones synced")
        
        logger.info("=" * 50)


class MilestoneTimer:
    """Context manager for timing milestone processing."""
    
    def __init__(self, metrics_logger: MetricsLogger, milestone_id: str):
        self.metrics_logger = metrics_logger
        self.milestone_id = milestone_id
        self.start_time: Optional[float] = None
    
    def __enter__(self):
        self.start_time = time.time()
        logger.debug(f"Processing milestone: {self.milestone_id}")
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            duration_ms = int((time.time() - self.start_time) * 1000)
            self.metrics_logger.record_milestone_duration(self.milestone_id, duration_ms)
            logger.debug(f"Milestone {self.milestone_id} processed in {duration_ms}ms")
        
        if exc_type:
            self.metrics_logger.record_failure(
                f"{self.milestone_id}: {exc_type.__name__}: {exc_val}"
            )
        
        return False  # Don't suppress exceptions
