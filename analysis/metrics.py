"""
Metrics Tracking for the Permanent Resource Allocation Simulator.

Summarizes a finished simulation run from the final graph state and the
event log.
"""

import statistics
from dataclasses import dataclass, field
from typing import Dict, List

from analysis.events import EventLog, EventType
from models.resource_graph import ResourceGraph


@dataclass
class SimulationMetrics:
    """
    Accumulated metrics for a single simulation run.

    Tracks:
    1. Deadlock Occurrence: Steps where the deadlock check reported a cycle
    2. Resource Utilization %: allocated / total resources after each step
    3. Completion Rate: completed processes / total processes
    """
    total_steps: int = 0
    total_processes: int = 0
    completed_processes: int = 0
    blocked_processes: int = 0
    total_resources: int = 0
    allocated_resources: int = 0
    deadlock_count: int = 0

    # Per-step samples
    utilization_samples: List[float] = field(default_factory=list)

    # Per-process tracking
    process_blocking_resources: Dict[int, List[int]] = field(default_factory=dict)

    @classmethod
    def from_run(cls, graph: ResourceGraph, event_log: EventLog) -> "SimulationMetrics":
        """
        Collect metrics from a completed simulation.

        Args:
            graph: Graph after the simulation pass
            event_log: Events recorded during the pass

        Returns:
            Populated SimulationMetrics
        """
        allocated = graph.allocated_vector
        completed = graph.completed_vector

        metrics = cls(
            total_steps=graph.simulation_step,
            total_processes=graph.num_processes,
            completed_processes=int(completed.sum()),
            blocked_processes=sum(1 for p in graph.processes if p.blocked),
            total_resources=graph.num_resources,
            allocated_resources=int(allocated.sum()),
        )

        # Resources only become allocated on ACQUIRED events, so replaying
        # them gives the allocated count after every step.
        allocated_so_far = 0
        acquired_by_step = {
            e.step: len(e.resource_ids)
            for e in event_log.get_events_by_type(EventType.ACQUIRED)
        }
        for check in event_log.get_events_by_type(EventType.DEADLOCK_CHECK):
            allocated_so_far += acquired_by_step.get(check.step, 0)
            metrics.record_step(allocated_so_far)
            if check.deadlock:
                metrics.record_deadlock()

        for event in event_log.get_events_by_type(EventType.BLOCKED):
            metrics.process_blocking_resources[event.process_id] = list(event.resource_ids)

        return metrics

    def record_step(self, allocated_resources: int) -> None:
        """
        Record resource utilization after a single simulation step.

        Args:
            allocated_resources: Number of allocated resources after the step
        """
        if self.total_resources > 0:
            utilization = (allocated_resources / self.total_resources) * 100
            self.utilization_samples.append(utilization)

    def record_deadlock(self) -> None:
        """Record a deadlock occurrence."""
        self.deadlock_count += 1

    def get_final_utilization(self) -> float:
        """Percentage of resources allocated at the end of the run."""
        if self.total_resources == 0:
            return 0.0
        return (self.allocated_resources / self.total_resources) * 100

    def get_avg_utilization(self) -> float:
        """Average resource utilization over all steps."""
        if not self.utilization_samples:
            return 0.0
        return statistics.mean(self.utilization_samples)

    def get_completion_rate(self) -> float:
        """Completed processes / total processes."""
        if self.total_processes == 0:
            return 0.0
        return self.completed_processes / self.total_processes

    def display(self) -> str:
        """
        Format metrics for display at end of simulation.

        Returns:
            Formatted metrics report string
        """
        lines = []
        lines.append("\n" + "="*60)
        lines.append("SIMULATION METRICS")
        lines.append("="*60)

        lines.append(f"Total Steps: {self.total_steps}")
        lines.append(f"Total Processes: {self.total_processes}")
        lines.append(f"Completed Processes: {self.completed_processes}")
        lines.append(f"Blocked Processes: {self.blocked_processes}")
        lines.append("")

        lines.append(f"Allocated Resources: {self.allocated_resources}/{self.total_resources}")
        lines.append(f"Final Resource Utilization: {self.get_final_utilization():.2f}%")
        lines.append(f"Average Resource Utilization: {self.get_avg_utilization():.2f}%")
        lines.append(f"Completion Rate: {self.get_completion_rate():.2%}")
        lines.append(f"Deadlocks Detected: {self.deadlock_count}")

        if self.process_blocking_resources:
            lines.append("")
            lines.append("BLOCKED PROCESSES:")
            lines.append("-" * 60)
            for pid in sorted(self.process_blocking_resources):
                blocking = ", ".join(f"R{rid}" for rid in self.process_blocking_resources[pid])
                lines.append(f"  P{pid}: waiting on [{blocking}]")

        lines.append("="*60)
        return "\n".join(lines)
