"""
Random graph construction for the Permanent Resource Allocation Simulator.

Populates a ResourceGraph with one Assignment edge per process and between
one and three Request edges per process, drawn from an explicit random source.
"""

import random
from typing import Optional

from models.edge import EdgeType
from models.process import Process
from models.resource import Resource
from models.resource_graph import ResourceGraph

MIN_REQUIRED_RESOURCES = 1
MAX_REQUIRED_RESOURCES = 3


def build_random_graph(
    resource_count: int,
    process_count: int,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None
) -> ResourceGraph:
    """
    Build a random resource graph.

    Construction order (fixed so a seeded rng reproduces the same edges):
    1. Create resources R0..R{R-1} and processes P0..P{P-1}
    2. For each process: assign one random resource (resource -> process)
    3. For each process: draw k in [1, 3], then draw k random resources and
       add a Request edge for each pair not already connected

    Duplicate draws are skipped, so a process may end up with fewer than k
    requests. With no resources, no edges are created.

    Args:
        resource_count: Number of resource nodes (>= 0)
        process_count: Number of process nodes (>= 0)
        rng: Random source; takes precedence over seed
        seed: Seed for a fresh random.Random when rng is not given

    Returns:
        Fully populated ResourceGraph

    Raises:
        ValueError: If either count is negative
    """
    if rng is None:
        rng = random.Random(seed)

    graph = ResourceGraph.with_nodes(resource_count, process_count)
    _assign_processes_to_resources(graph, rng)
    _create_resource_requests(graph, rng)
    return graph


def _assign_processes_to_resources(graph: ResourceGraph, rng: random.Random) -> None:
    """Create one Assignment edge per process (several may share a resource)."""
    for process in graph.processes:
        if graph.resources:
            resource = _random_resource(graph, rng)
            graph.add_edge(resource, process, EdgeType.ASSIGNMENT)


def _create_resource_requests(graph: ResourceGraph, rng: random.Random) -> None:
    """Create Request edges from each process to 1-3 random resources."""
    for process in graph.processes:
        required_count = rng.randint(MIN_REQUIRED_RESOURCES, MAX_REQUIRED_RESOURCES)
        if not graph.resources:
            continue
        for _ in range(required_count):
            _request(graph, process, _random_resource(graph, rng))


def _request(graph: ResourceGraph, process: Process, resource: Resource) -> None:
    graph.add_edge(process, resource, EdgeType.REQUEST)


def _random_resource(graph: ResourceGraph, rng: random.Random) -> Resource:
    return graph.resources[rng.randrange(graph.num_resources)]
