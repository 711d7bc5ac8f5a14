"""
Event Model for the Permanent Resource Allocation Simulator.

Defines event types for tracking simulation actions step by step.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class EventType(Enum):
    """Types of events in the simulation."""
    ACQUIRED = "acquired"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    DEADLOCK_CHECK = "deadlock_check"


@dataclass(frozen=True)
class SimulationEvent:
    """
    Represents a single event in the simulation.

    Attributes:
        step: Simulation step when event occurred
        event_type: Type of event
        process_id: PID involved in event
        resource_ids: Resources involved (acquired, or blocking for BLOCKED)
        deadlock: Result of the deadlock check (DEADLOCK_CHECK only)
        cycle: PIDs on the detected cycle (DEADLOCK_CHECK only)
    """
    step: int
    event_type: EventType
    process_id: int
    resource_ids: Tuple[int, ...] = ()
    deadlock: bool = False
    cycle: Tuple[int, ...] = ()

    def __str__(self) -> str:
        """Format event for logging."""
        base = f"Step {self.step}: P{self.process_id}"
        resources = ", ".join(f"R{rid}" for rid in self.resource_ids)

        if self.event_type == EventType.ACQUIRED:
            return f"{base} acquires [{resources}]"
        elif self.event_type == EventType.BLOCKED:
            return f"{base} BLOCKED on [{resources}]"
        elif self.event_type == EventType.COMPLETED:
            return f"{base} - COMPLETED"
        elif self.event_type == EventType.DEADLOCK_CHECK:
            if self.deadlock:
                cycle = ", ".join(f"P{pid}" for pid in self.cycle)
                return f"{base} - DEADLOCK DETECTED ([{cycle}])"
            return f"{base} - no deadlock"
        else:
            return f"{base} - {self.event_type.value}"


@dataclass
class EventLog:
    """Collection of simulation events."""
    events: List[SimulationEvent] = field(default_factory=list)

    def add(self, event: SimulationEvent) -> None:
        """Add an event to the log."""
        self.events.append(event)

    def get_events_by_type(self, event_type: EventType) -> List[SimulationEvent]:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_by_step(self, step: int) -> List[SimulationEvent]:
        """Get all events from a specific step."""
        return [e for e in self.events if e.step == step]

    def execution_order(self) -> List[int]:
        """PIDs in the order they were executed (one deadlock check per step)."""
        return [e.process_id for e in self.get_events_by_type(EventType.DEADLOCK_CHECK)]

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)
