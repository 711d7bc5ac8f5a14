"""
Edge model for the Permanent Resource Allocation Simulator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from models.process import Process
from models.resource import Resource

GraphNode = Union[Process, Resource]


class EdgeType(Enum):
    """Kind of connection between two nodes (fixed at creation)."""
    ASSIGNMENT = "ASSIGNMENT"  # resource -> process
    REQUEST = "REQUEST"        # process -> resource


class EdgeStatus(Enum):
    """Current status of an edge (changes during simulation)."""
    ASSIGNED = "ASSIGNED"
    REQUESTED = "REQUESTED"
    ACQUIRED = "ACQUIRED"
    BLOCKED = "BLOCKED"


@dataclass
class GraphEdge:
    """
    Directed edge between a process and a resource.

    Attributes:
        source: Source node
        destination: Destination node
        edge_type: ASSIGNMENT or REQUEST, never changes
        status: Initially ASSIGNED for assignments, REQUESTED for requests
    """
    source: GraphNode
    destination: GraphNode
    edge_type: EdgeType
    status: EdgeStatus = field(init=False)

    def __post_init__(self):
        if self.edge_type == EdgeType.ASSIGNMENT:
            self.status = EdgeStatus.ASSIGNED
        else:
            self.status = EdgeStatus.REQUESTED

    def connects(self, source: GraphNode, destination: GraphNode) -> bool:
        """Check whether this edge goes from source to destination."""
        return self.source == source and self.destination == destination

    def __str__(self) -> str:
        return f"{self.source} -> {self.destination} ({self.status.value})"
