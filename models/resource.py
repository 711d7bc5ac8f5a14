"""
Resource model for the Permanent Resource Allocation Simulator.

Represents a single-instance resource. Allocation is permanent: once a
resource is allocated it is never released for the rest of the run.
"""

from dataclasses import dataclass

from models.node import NodeKind, StateConflictError, node_key, node_label


@dataclass(eq=False)
class Resource:
    """
    Represents a resource node in the resource graph.

    Attributes:
        rid: Resource identifier (unique among resources)
        allocated: Whether the resource has been handed to a process

    Invariant:
        allocated only ever transitions False -> True
    """
    rid: int
    allocated: bool = False

    kind = NodeKind.RESOURCE

    @property
    def node_id(self) -> int:
        return self.rid

    def allocate(self) -> None:
        """
        Permanently allocate the resource.

        Raises:
            StateConflictError: If the resource is already allocated
        """
        if self.allocated:
            raise StateConflictError(f"{self}: resource already allocated")
        self.allocated = True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.rid == other.rid

    def __hash__(self) -> int:
        return hash(node_key(self.kind, self.rid))

    def __str__(self) -> str:
        return node_label(self.kind, self.rid)

    def __repr__(self) -> str:
        return f"Resource(rid={self.rid}, allocated={self.allocated})"
