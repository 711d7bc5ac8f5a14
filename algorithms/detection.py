"""
Deadlock Detection Algorithm for the Permanent Resource Allocation Simulator.

Builds a wait-for relation from the current allocation state and searches it
for a circular wait with an iterative depth-first traversal.
"""

import numpy as np
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from models.process import Process
from models.resource import Resource
from models.resource_graph import ResourceGraph

WaitForGraph = Dict[Process, List[Resource]]
OwnerResolver = Callable[[Resource], Optional[Process]]


def build_wait_for_graph(graph: ResourceGraph) -> WaitForGraph:
    """
    Map each incomplete process to the allocated resources it still requires.

    Computed as Request & Allocated (row-wise), restricted to incomplete
    processes. Processes waiting on nothing are left out.

    Args:
        graph: Current resource graph

    Returns:
        Dict of process -> allocated required resources, in process id order
    """
    if graph.num_processes == 0 or graph.num_resources == 0:
        return {}

    waiting = graph.request_matrix & graph.allocated_vector
    waiting[graph.completed_vector] = False

    wait_for = {}
    for pid in np.flatnonzero(waiting.any(axis=1)):
        wait_for[graph.processes[pid]] = [
            graph.resources[rid] for rid in np.flatnonzero(waiting[pid])
        ]
    return wait_for


def find_resource_owner(graph: ResourceGraph, resource: Resource) -> Optional[Process]:
    """
    Find the process holding a resource.

    Ownership is taken from the Request edges of completed processes: the
    owner is the first completed process (by id) that required the resource.
    Assignment edges are not consulted.

    Returns:
        Owning process, or None if no completed process required it
    """
    if graph.num_processes == 0:
        return None

    holders = graph.completed_vector & graph.request_matrix[:, resource.rid]
    owners = np.flatnonzero(holders)
    if owners.size == 0:
        return None
    return graph.processes[owners[0]]


def find_cycle(wait_for: WaitForGraph, owner_of: OwnerResolver) -> List[Process]:
    """
    Search the wait-for relation for a circular wait.

    Depth-first traversal with an explicit stack. Each process is marked
    visited on entry and kept in on_stack while its successors are explored.
    The successors of a process are the owners of the resources it waits on;
    a resource without an owner ends that branch.

    Args:
        wait_for: Process -> resources it waits on
        owner_of: Resolves a resource to the process holding it

    Returns:
        Processes on the first cycle found (in traversal order), or [] if none
    """
    visited = set()
    on_stack = set()

    def successors(process: Process) -> Iterator[Process]:
        for resource in wait_for.get(process, []):
            owner = owner_of(resource)
            if owner is not None:
                yield owner

    for start in wait_for:
        if start in visited:
            continue

        path = [start]
        stack = [successors(start)]
        visited.add(start)
        on_stack.add(start)

        while stack:
            successor = next(stack[-1], None)

            if successor is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue

            if successor in on_stack:
                return path[path.index(successor):]
            if successor in visited:
                continue

            visited.add(successor)
            on_stack.add(successor)
            path.append(successor)
            stack.append(successors(successor))

    return []


def has_cyclic_dependencies(wait_for: WaitForGraph, owner_of: OwnerResolver) -> bool:
    """Check whether the wait-for relation contains a cycle."""
    return bool(find_cycle(wait_for, owner_of))


def detect_deadlock(graph: ResourceGraph) -> Tuple[bool, List[int]]:
    """
    Detect a circular wait in the current graph state.

    Advisory only: the result is reported but never changes scheduling.

    Args:
        graph: Current resource graph

    Returns:
        Tuple of (deadlock_exists, PIDs on the detected cycle)
    """
    wait_for = build_wait_for_graph(graph)
    cycle = find_cycle(wait_for, lambda resource: find_resource_owner(graph, resource))
    return bool(cycle), [process.pid for process in cycle]
