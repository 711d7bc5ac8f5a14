"""
Logger utility for the Permanent Resource Allocation Simulator.

Renders step headers, state snapshots and outcomes to the console, with
optional mirroring to a log file and verbosity levels.
"""

from typing import List, Optional
from datetime import datetime

from models.resource_graph import GraphSnapshot, format_snapshot


class SimulatorLogger:
    """
    Logger for simulation steps and state snapshots.

    Format: "=== STEP X: EXECUTING PROCESS PY ===" followed by the state
    block, the deadlock check result and the completion/blocked line.
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Simulation Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        # Console output
        print(formatted)

        # File output
        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_initial_state(self, snapshot: GraphSnapshot) -> None:
        """Log the graph before any process executes."""
        self.log("\nINITIAL RESOURCE GRAPH STATE:")
        self.log_system_state(snapshot)
        self.log("\nStarting simulation...\n")

    def log_step_header(self, step: int, process_label: str) -> None:
        """Log the start of a simulation step."""
        self.log(f"=== STEP {step}: EXECUTING PROCESS {process_label} ===")

    def log_system_state(self, snapshot: GraphSnapshot) -> None:
        """
        Log a full state snapshot.

        Args:
            snapshot: Read-only view of the graph
        """
        self.log(format_snapshot(snapshot))

    def log_deadlock_check(self, step: int, deadlock: bool, cycle: List[int]) -> None:
        """
        Log the result of a deadlock check.

        Args:
            step: Current simulation step
            deadlock: Whether a circular wait was found
            cycle: PIDs on the cycle (empty when no deadlock)
        """
        if deadlock:
            self.log("DEADLOCK DETECTED: Circular wait condition exists")
            pids_str = ", ".join(f"P{pid}" for pid in cycle)
            self.log(f"Step {step}: processes in circular wait: [{pids_str}]", "debug")
        else:
            self.log("No deadlock condition detected")

    def log_completion(self, process_label: str, resource_labels: List[str]) -> None:
        """Log a process that acquired its resources and completed."""
        resources_str = ", ".join(resource_labels)
        self.log(f"{process_label} COMPLETED PERMANENTLY USING RESOURCES: {resources_str}")

    def log_blocked(self, process_label: str) -> None:
        """Log a process that could not acquire its resources."""
        self.log(f"{process_label} BLOCKED - REQUIRED RESOURCES UNAVAILABLE")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
