"""
Process Execution Engine for the Permanent Resource Allocation Simulator.

Runs a single ordered pass over all processes. Each process gets exactly one
attempt to acquire every resource it requires; resources are never released
and blocked processes are never retried.
"""

from typing import List, Optional

from algorithms.detection import build_wait_for_graph, detect_deadlock
from analysis.events import EventLog, EventType, SimulationEvent
from models.edge import EdgeStatus
from models.process import Process
from models.resource import Resource
from models.resource_graph import ResourceGraph
from utils.logger import SimulatorLogger


def execution_order(graph: ResourceGraph) -> List[Process]:
    """
    Order processes by number of required resources (fewest first).

    The sort is stable, so ties keep creation (PID) order.
    """
    return sorted(graph.processes, key=graph.request_count)


def attempt_resource_acquisition(
    graph: ResourceGraph,
    process: Process,
    required_resources: List[Resource]
) -> bool:
    """
    Try to acquire all required resources at once.

    Succeeds iff none of the required resources is allocated. On success
    every resource is allocated and its edge marked ACQUIRED. On failure
    each edge is marked BLOCKED if its resource is allocated, else REQUESTED.

    Returns:
        True if all resources were acquired
    """
    if not any(resource.allocated for resource in required_resources):
        allocate_resources(graph, process, required_resources)
        return True

    update_resource_request_statuses(graph, process, required_resources)
    return False


def allocate_resources(
    graph: ResourceGraph,
    process: Process,
    required_resources: List[Resource]
) -> None:
    """
    Permanently allocate resources to a process.

    Raises:
        StateConflictError: If any resource is already allocated
    """
    for resource in required_resources:
        resource.allocate()
        graph.update_edge_status(process, resource, EdgeStatus.ACQUIRED)


def update_resource_request_statuses(
    graph: ResourceGraph,
    process: Process,
    required_resources: List[Resource]
) -> None:
    """Mark each request edge BLOCKED (resource taken) or REQUESTED (still free)."""
    for resource in required_resources:
        if resource.allocated:
            graph.update_edge_status(process, resource, EdgeStatus.BLOCKED)
        else:
            graph.update_edge_status(process, resource, EdgeStatus.REQUESTED)


def simulate_process_execution(
    graph: ResourceGraph,
    logger: Optional[SimulatorLogger] = None,
    event_log: Optional[EventLog] = None
) -> EventLog:
    """
    Execute every process once, in execution order.

    Step Ordering:
    1. Advance the step counter and report the header
    2. Attempt acquisition of all required resources
    3. Complete the process, or leave it blocked for the rest of the run
    4. Run deadlock detection on the updated state
    5. Report the state snapshot, deadlock result and outcome

    Args:
        graph: Resource graph to simulate (mutated in place)
        logger: Reporter for step output; nothing is rendered if None
        event_log: Log to append to; a new one is created if None

    Returns:
        EventLog containing all simulation events

    Raises:
        StateConflictError: If an allocation or completion invariant breaks
    """
    if event_log is None:
        event_log = EventLog()

    order = execution_order(graph)
    if logger:
        logger.log(
            "Execution order: " + ", ".join(
                f"{p}[{graph.request_count(p)}]" for p in order
            ),
            "debug"
        )

    for process in order:
        graph.simulation_step += 1
        step = graph.simulation_step
        if logger:
            logger.log_step_header(step, str(process))

        required_resources = graph.required_resources(process)
        if logger:
            logger.log(
                f"{process} requires: [{', '.join(str(r) for r in required_resources)}]",
                "debug"
            )

        acquired = attempt_resource_acquisition(graph, process, required_resources)
        resource_ids = tuple(r.rid for r in required_resources)

        if acquired:
            process.mark_completed()
            event_log.add(SimulationEvent(
                step=step,
                event_type=EventType.ACQUIRED,
                process_id=process.pid,
                resource_ids=resource_ids
            ))
            event_log.add(SimulationEvent(
                step=step,
                event_type=EventType.COMPLETED,
                process_id=process.pid
            ))
        else:
            process.mark_blocked()
            event_log.add(SimulationEvent(
                step=step,
                event_type=EventType.BLOCKED,
                process_id=process.pid,
                resource_ids=tuple(r.rid for r in required_resources if r.allocated)
            ))

        deadlock, cycle = detect_deadlock(graph)
        event_log.add(SimulationEvent(
            step=step,
            event_type=EventType.DEADLOCK_CHECK,
            process_id=process.pid,
            deadlock=deadlock,
            cycle=tuple(cycle)
        ))

        if logger and logger.verbose:
            wait_for = build_wait_for_graph(graph)
            logger.log(
                "Wait-for: " + (", ".join(
                    f"{p} -> [{', '.join(str(r) for r in resources)}]"
                    for p, resources in wait_for.items()
                ) or "empty"),
                "debug"
            )

        if logger:
            logger.log_system_state(graph.snapshot())
            logger.log_deadlock_check(step, deadlock, cycle)
            if acquired:
                logger.log_completion(str(process), [str(r) for r in required_resources])
            else:
                logger.log_blocked(str(process))
            logger.log("")

    return event_log
