"""
Process model for the Permanent Resource Allocation Simulator.

Represents a process node that needs a set of resources to complete.
"""

from dataclasses import dataclass
from enum import Enum

from models.node import NodeKind, StateConflictError, node_key, node_label


class ProcessState(Enum):
    """Process states in the simulation."""
    PENDING = "PENDING"
    BLOCKED = "BLOCKED"
    COMPLETED = "COMPLETED"


@dataclass(eq=False)
class Process:
    """
    Represents a process in the resource graph.

    Attributes:
        pid: Process identifier (unique among processes)
        state: Current process state

    Invariant:
        A process reaches COMPLETED at most once and never leaves it.
        BLOCKED processes are never retried within a run.
    """
    pid: int
    state: ProcessState = ProcessState.PENDING

    kind = NodeKind.PROCESS

    @property
    def node_id(self) -> int:
        return self.pid

    @property
    def completed(self) -> bool:
        """True once the process has acquired all of its resources."""
        return self.state == ProcessState.COMPLETED

    @property
    def blocked(self) -> bool:
        return self.state == ProcessState.BLOCKED

    def mark_completed(self) -> None:
        """
        Mark the process as completed.

        Raises:
            StateConflictError: If the process is already completed
        """
        if self.completed:
            raise StateConflictError(f"{self}: process already completed")
        self.state = ProcessState.COMPLETED

    def mark_blocked(self) -> None:
        """
        Record a failed acquisition attempt.

        Raises:
            StateConflictError: If the process has already completed
        """
        if self.completed:
            raise StateConflictError(f"{self}: completed process cannot block")
        self.state = ProcessState.BLOCKED

    def __eq__(self, other) -> bool:
        if not isinstance(other, Process):
            return NotImplemented
        return self.pid == other.pid

    def __hash__(self) -> int:
        return hash(node_key(self.kind, self.pid))

    def __str__(self) -> str:
        return node_label(self.kind, self.pid)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"Process(pid={self.pid}, state={self.state.value})"
