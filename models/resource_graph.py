"""
Resource Graph model for the Permanent Resource Allocation Simulator.

Holds the complete simulation context: process and resource nodes, the
append-only edge list and the step counter. Derived numpy views of the
request relation and node flags are used by deadlock detection and metrics.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.edge import EdgeStatus, EdgeType, GraphEdge, GraphNode
from models.process import Process
from models.resource import Resource


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Read-only view of the graph handed to the reporter.

    Attributes:
        step: Simulation step the snapshot was taken at
        resources: (label, allocated) per resource, ordered by id
        processes: (label, completed) per process, ordered by id
        edges: (source label, destination label, status) in creation order
    """
    step: int
    resources: Tuple[Tuple[str, bool], ...]
    processes: Tuple[Tuple[str, bool], ...]
    edges: Tuple[Tuple[str, str, str], ...]


@dataclass
class ResourceGraph:
    """
    Simulation context shared by the builder, execution engine and detector.

    Attributes:
        resources: Resource nodes, resources[i].rid == i
        processes: Process nodes, processes[i].pid == i
        edges: All edges in creation order (append-only)
        simulation_step: Number of steps executed so far
    """
    resources: List[Resource] = field(default_factory=list)
    processes: List[Process] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    simulation_step: int = 0

    _request_matrix: Optional[np.ndarray] = field(default=None, init=False, repr=False, compare=False)
    _request_matrix_edges: int = field(default=0, init=False, repr=False, compare=False)

    @classmethod
    def with_nodes(cls, resource_count: int, process_count: int) -> "ResourceGraph":
        """
        Create a graph with resources 0..R-1 and processes 0..P-1 and no edges.

        Raises:
            ValueError: If either count is negative
        """
        if resource_count < 0 or process_count < 0:
            raise ValueError(
                f"Node counts must be non-negative "
                f"(resources={resource_count}, processes={process_count})"
            )
        return cls(
            resources=[Resource(i) for i in range(resource_count)],
            processes=[Process(i) for i in range(process_count)],
        )

    @property
    def num_processes(self) -> int:
        """Number of processes in the graph."""
        return len(self.processes)

    @property
    def num_resources(self) -> int:
        """Number of resources in the graph."""
        return len(self.resources)

    def add_edge(
        self,
        source: GraphNode,
        destination: GraphNode,
        edge_type: EdgeType
    ) -> Optional[GraphEdge]:
        """
        Append an edge unless the (source, destination) pair already exists.

        Returns:
            The new edge, or None if the pair was already connected
        """
        if self.edge_exists(source, destination):
            return None
        edge = GraphEdge(source, destination, edge_type)
        self.edges.append(edge)
        return edge

    def edge_exists(self, source: GraphNode, destination: GraphNode) -> bool:
        """Check if any edge (of either type) connects source to destination."""
        return self.find_edge(source, destination) is not None

    def find_edge(self, source: GraphNode, destination: GraphNode) -> Optional[GraphEdge]:
        """Return the first edge from source to destination, if any."""
        return next((e for e in self.edges if e.connects(source, destination)), None)

    def update_edge_status(
        self,
        source: GraphNode,
        destination: GraphNode,
        status: EdgeStatus
    ) -> None:
        """Set the status of the edge from source to destination, if it exists."""
        edge = self.find_edge(source, destination)
        if edge is not None:
            edge.status = status

    def request_edges(self, process: Process) -> List[GraphEdge]:
        """Request edges leaving a process, in creation order."""
        return [
            e for e in self.edges
            if e.edge_type == EdgeType.REQUEST and e.source == process
        ]

    def required_resources(self, process: Process) -> List[Resource]:
        """Resources a process must acquire to complete, in edge order."""
        return [e.destination for e in self.request_edges(process)]

    def request_count(self, process: Process) -> int:
        """Number of Request edges leaving a process."""
        return len(self.request_edges(process))

    @property
    def request_matrix(self) -> np.ndarray:
        """
        Get request matrix [P][R].
        request_matrix[p][r] is True iff process p has a Request edge to r.

        Rebuilt whenever edges have been appended since the last build, so
        edges added directly to `edges` are picked up as well.
        """
        if (self._request_matrix is None
                or self._request_matrix_edges != len(self.edges)
                or self._request_matrix.shape != (self.num_processes, self.num_resources)):
            self._build_request_matrix()
        return self._request_matrix

    @property
    def allocated_vector(self) -> np.ndarray:
        """Get allocation flags [R]."""
        return np.array([r.allocated for r in self.resources], dtype=bool)

    @property
    def completed_vector(self) -> np.ndarray:
        """Get completion flags [P]."""
        return np.array([p.completed for p in self.processes], dtype=bool)

    def _build_request_matrix(self) -> None:
        """Build request matrix from Request edges."""
        self._request_matrix = np.zeros((self.num_processes, self.num_resources), dtype=bool)
        for edge in self.edges:
            if edge.edge_type == EdgeType.REQUEST:
                self._request_matrix[edge.source.pid][edge.destination.rid] = True
        self._request_matrix_edges = len(self.edges)

    def snapshot(self) -> GraphSnapshot:
        """Capture the current node flags and edge statuses."""
        return GraphSnapshot(
            step=self.simulation_step,
            resources=tuple((str(r), r.allocated) for r in self.resources),
            processes=tuple((str(p), p.completed) for p in self.processes),
            edges=tuple(
                (str(e.source), str(e.destination), e.status.value)
                for e in self.edges
            ),
        )

    def display(self) -> str:
        """
        Generate readable string representation of the graph state.

        Returns:
            Formatted string showing resources, processes and connections
        """
        return format_snapshot(self.snapshot())


def format_snapshot(snapshot: GraphSnapshot) -> str:
    """Render a snapshot as the CURRENT SYSTEM STATE block."""
    output = ["CURRENT SYSTEM STATE:"]
    output.append("Resources: " + ", ".join(
        f"{label}({'allocated' if allocated else 'available'})"
        for label, allocated in snapshot.resources
    ))
    output.append("Processes: " + ", ".join(
        f"{label}({'completed' if completed else 'pending'})"
        for label, completed in snapshot.processes
    ))
    output.append("Connections:")
    for source, destination, status in snapshot.edges:
        output.append(f"  {source} -> {destination} ({status})")
    return "\n".join(output)
