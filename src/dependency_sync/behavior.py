"""Dependency behavior - keeps the derived dependency columns in sync."""

import threading
from typing import Optional

from .config import SyncConfig, get_config
from .host import HostProtocol

# Engine
from .engine import Classifier, InternalAggregator, ExternalAggregator, affected_milestones

# Models
from .models.dependencies import MilestoneResult
from .models.events import ChangeEvent, ChangeKind
from .models.items import LeafItem, Milestone, Program

# Observability
from .observability import MetricsLogger, SyncMetrics, logger


class DependencyBehavior:
    """
    Maintains "Internal dependencies" and "External dependencies" on the
    leaf items of every monitored program.
    
    Entry points:
    1. initialize() - discover programs, then run a full resync
    2. on_full_resync() - re-derive every milestone of every program
    3. on_change(event) - re-derive only the milestones an event touches
    
    A failed or empty program discovery leaves the behavior disabled:
    every later call is ignored and nothing is written.
    """
    
    title = "DependencyBehavior"
    
    def __init__(
        self,
        host: HostProtocol,
        config: Optional[SyncConfig] = None,
    ):
        self.host = host
        self.config = config or get_config()
        
        # Engine components
        self.classifier = Classifier(host, self.config.team_prefix)
        self.internal_aggregator = InternalAggregator(
            self.classifier,
            planned_sprint_field=self.config.planned_sprint_field,
            sprint_delimiter=self.config.sprint_delimiter,
        )
        self.external_aggregator = ExternalAggregator(self.classifier)
        
        self.programs: list[Program] = []
        self.initialization_ok = False
        self.last_metrics: Optional[SyncMetrics] = None
        
        # Full resyncs and change events never overlap
        self._lock = threading.RLock()
    
    @property
    def monitored(self) -> set[str]:
        """Names of the monitored programs."""
        return {program.name for program in self.programs}
    
    def initialize(self) -> Optional[list[MilestoneResult]]:
        """
        Discover the monitored programs and run the startup full resync.
        
        Returns:
            Results of the startup resync, or None if the behavior is disabled
        """
        with self._lock:
            self.initialization_ok = False
            self.programs = []
        
            try:
                programs = self.host.find_programs(
                    self.config.program_pattern,
                    self.config.inverted,
                )
            except Exception as e:
                logger.error(f"{self.title}: program discovery failed, behavior disabled: {e}")
                return None
        
            if not programs:
                logger.warning(
                    f"{self.title}: no programs match '{self.config.program_pattern}' "
                    f"(inverted={self.config.inverted}), behavior disabled"
                )
                return None
        
            self.programs = list(programs)
            self.initialization_ok = True
            logger.info(f"{self.title}: monitoring {len(self.programs)} programs")
            
            return self.on_full_resync()
    
    def on_full_resync(self) -> Optional[list[MilestoneResult]]:
        """Re-derive both values for every milestone of every monitored program."""
        if not self.initialization_ok:
            return None
        
        with self._lock:
            metrics = MetricsLogger(trigger="full_resync")
            metrics.start()
            
            results = []
            for program in self.programs:
                for milestone in self.host.milestones(program):
                    results.append(self._process_isolated(milestone, program, metrics))
            
            metrics.finish()
            metrics.log_summary()
            self.last_metrics = metrics.metrics
            
            return results
    
    def on_change(self, event: ChangeEvent) -> Optional[list[MilestoneResult]]:
        """
        React to a single change notification.
        
        Returns:
            Results for the affected milestones, or None when the event
            is out of scope or the behavior is disabled
        """
        if not self.initialization_ok:
            return None
        
        if event.kind == ChangeKind.CUSTOM_FIELD and event.field in self.config.derived_fields:
            logger.debug(f"{self.title}: ignoring write-back echo on {event.item_id}")
            return None
        
        with self._lock:
            item = self.host.get_item(event.item_id)
            if item is None:
                logger.debug(f"{self.title}: ignoring event for unknown item {event.item_id}")
                return None
            
            milestones = affected_milestones(self.host, item, self.monitored)
            if not milestones:
                logger.debug(f"{self.title}: item {event.item_id} is outside monitored programs")
                return None
            
            metrics = MetricsLogger(trigger="change")
            metrics.start()
            
            results = [
                self._process_isolated(milestone, None, metrics)
                for milestone in milestones
            ]
            
            metrics.finish()
            self.last_metrics = metrics.metrics
            
            return results
    
    def compute_internal(self, milestone: Milestone) -> str:
        """Internal dependency summary of a milestone, without writing it."""
        partition = self.classifier.classify(milestone)
        return self.internal_aggregator.summarize(partition.internal)
    
    def compute_external(self, milestone: Milestone) -> str:
        """External dependency summary of a milestone, without writing it."""
        partition = self.classifier.classify(milestone)
        return self.external_aggregator.summarize(partition.external)
    
    def process_milestone(
        self,
        milestone: Milestone,
        program: Optional[Program] = None,
    ) -> MilestoneResult:
        """
        Classify, aggregate and write back one milestone.
        
        All values are derived before the first write, and the writes
        for the milestone are rolled back together if one of them fails.
        """
        partition = self.classifier.classify(milestone, program)
        
        result = MilestoneResult(
            milestone_id=milestone.item_id,
            internal=self.internal_aggregator.summarize(partition.internal),
            external=self.external_aggregator.summarize(partition.external),
            has_external_dependency=bool(partition.external),
        )
        
        writes = []
        for leaf in self.host.children(milestone):
            writes.append((leaf, self.config.internal_field, result.internal))
            result.internal_written.append(leaf.item_id)
            
            if not result.external and self._surfaced_elsewhere(leaf, milestone):
                result.external_suppressed.append(leaf.item_id)
                continue
            
            writes.append((leaf, self.config.external_field, result.external))
            result.external_written.append(leaf.item_id)
        
        self._write_back(milestone, writes, result.has_external_dependency)
        
        if result.has_external_dependency:
            logger.debug(f"Milestone {milestone.item_id} has external dependencies: {result.external}")
        
        return result
    
    def _surfaced_elsewhere(self, leaf: LeafItem, milestone: Milestone) -> bool:
        """Check if another milestone the leaf is tagged to has external dependencies."""
        for other in self.host.tagged_milestones(leaf):
            if other.item_id == milestone.item_id:
                continue
            if self.compute_external(other):
                return True
        return False
    
    def _write_back(
        self,
        milestone: Milestone,
        writes: list[tuple[LeafItem, str, str]],
        flag: bool,
    ):
        """Apply color and column writes for one milestone as a unit."""
        applied = []
        
        try:
            if flag:
                previous = self.host.get_color(milestone)
                self.host.set_color(milestone, self.config.alert_color)
                applied.append((milestone, None, previous))
            
            for leaf, name, value in writes:
                previous = (
                    self.host.get_custom_field(leaf, name)
                    if self.host.has_custom_field(leaf, name) else None
                )
                self.host.set_custom_field(leaf, name, value)
                applied.append((leaf, name, previous))
        except Exception:
            logger.warning(f"Write-back failed for milestone {milestone.item_id}, restoring prior values")
            for item, name, previous in reversed(applied):
                if name is None:
                    self.host.set_color(item, previous)
                elif previous is None:
                    self.host.clear_custom_field(item, name)
                else:
                    self.host.set_custom_field(item, name, previous)
            raise
    
    def _process_isolated(
        self,
        milestone: Milestone,
        program: Optional[Program],
        metrics: MetricsLogger,
    ) -> MilestoneResult:
        """Process one milestone so that its failure does not stop the others."""
        try:
            with metrics.track_milestone(milestone.item_id):
                result = self.process_milestone(milestone, program)
        except Exception as e:
            return MilestoneResult(milestone_id=milestone.item_id, error=f"{type(e).__name__}: {e}")
        
        metrics.record_milestone(
            fields_written=len(result.internal_written) + len(result.external_written),
            writes_suppressed=len(result.external_suppressed),
            flagged=result.has_external_dependency,
        )
        return result
