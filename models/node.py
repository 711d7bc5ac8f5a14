"""
Node identity for the Permanent Resource Allocation Simulator.

Processes and resources are two variants of a graph node. They share no base
class; a node is identified by its kind tag and numeric id only.
"""

from enum import Enum
from typing import Tuple


class NodeKind(Enum):
    """Variant tag of a graph node (value is the display letter)."""
    PROCESS = "P"
    RESOURCE = "R"


class StateConflictError(RuntimeError):
    """
    Raised when a monotonic flag is set twice.

    Allocating an allocated resource or completing a completed process is a
    programming-invariant violation. It is never caught by the simulator.
    """
    pass


def node_key(kind: NodeKind, node_id: int) -> Tuple[str, int]:
    """Identity key used for equality and hashing of nodes."""
    return (kind.value, node_id)


def node_label(kind: NodeKind, node_id: int) -> str:
    """
    Render a node as its type letter followed by its id.

    Returns:
        Label such as "P0" or "R3"
    """
    return f"{kind.value}{node_id}"
