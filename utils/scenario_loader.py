"""
Scenario Loader for the Permanent Resource Allocation Simulator.

Loads and validates JSON scenario files describing a fixed graph topology,
as an alternative to random generation.

Format:
    {
        "description": "optional text",
        "resources": 2,
        "processes": 2,
        "assignments": [{"resource": 0, "process": 1}],
        "requests": [{"process": 0, "resources": [0, 1]}]
    }
"""

import json
from typing import Any, Dict, List

from models.edge import EdgeType
from models.resource_graph import ResourceGraph


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> ResourceGraph:
    """
    Load a resource graph from a JSON scenario file.

    Edges are added in file order: all assignments first, then requests.
    Request pairs that are already connected are skipped.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        ResourceGraph with nodes and edges from the scenario

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return build_scenario(data)


def build_scenario(data: Dict[str, Any]) -> ResourceGraph:
    """
    Build a resource graph from already-parsed scenario data.

    Raises:
        ScenarioLoadError: If the scenario is invalid
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    # Validate required fields
    for name in ('resources', 'processes'):
        if name not in data:
            raise ScenarioLoadError(f"Scenario missing '{name}' field")
        value = data[name]
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ScenarioLoadError(
                f"Scenario '{name}' must be a non-negative integer, got {value!r}"
            )

    graph = ResourceGraph.with_nodes(data['resources'], data['processes'])

    _load_assignments(graph, _entry_list(data, 'assignments'))
    _load_requests(graph, _entry_list(data, 'requests'))

    return graph


def _load_assignments(graph: ResourceGraph, assignments: List[Dict]) -> None:
    """
    Add Assignment edges (resource -> process).

    Raises:
        ScenarioLoadError: If an entry is malformed or a process is assigned twice
    """
    assigned = set()

    for entry in assignments:
        _require_object(entry, "Assignment")
        for name in ('resource', 'process'):
            if name not in entry:
                raise ScenarioLoadError(f"Assignment missing '{name}' field: {entry}")

        pid = _validate_id(entry['process'], graph.num_processes, "process")
        rid = _validate_id(entry['resource'], graph.num_resources, "resource")

        if pid in assigned:
            raise ScenarioLoadError(f"Process P{pid} has more than one assignment")
        assigned.add(pid)

        graph.add_edge(graph.resources[rid], graph.processes[pid], EdgeType.ASSIGNMENT)


def _load_requests(graph: ResourceGraph, requests: List[Dict]) -> None:
    """
    Add Request edges (process -> resource).

    Raises:
        ScenarioLoadError: If an entry is malformed
    """
    for entry in requests:
        _require_object(entry, "Request")
        if 'process' not in entry:
            raise ScenarioLoadError(f"Request missing 'process' field: {entry}")
        if 'resources' not in entry:
            raise ScenarioLoadError(f"Request missing 'resources' field: {entry}")

        pid = _validate_id(entry['process'], graph.num_processes, "process")
        process = graph.processes[pid]

        if not isinstance(entry['resources'], list):
            raise ScenarioLoadError(
                f"Request for P{pid}: 'resources' must be a list, got {entry['resources']!r}"
            )

        for resource_id in entry['resources']:
            rid = _validate_id(resource_id, graph.num_resources, "resource")
            graph.add_edge(process, graph.resources[rid], EdgeType.REQUEST)


def _entry_list(data: Dict[str, Any], name: str) -> List[Any]:
    """
    Return an optional list field of the scenario (empty if absent).

    Raises:
        ScenarioLoadError: If the field is present but not a list
    """
    entries = data.get(name, [])
    if not isinstance(entries, list):
        raise ScenarioLoadError(f"Scenario '{name}' must be a list, got {type(entries).__name__}")
    return entries


def _require_object(entry: Any, kind: str) -> None:
    if not isinstance(entry, dict):
        raise ScenarioLoadError(f"{kind} entry must be an object, got {entry!r}")


def _validate_id(value: Any, count: int, kind: str) -> int:
    """
    Check that value is a valid node id in range(count).

    Raises:
        ScenarioLoadError: If value is not an integer id in range
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ScenarioLoadError(f"Invalid {kind} id {value!r}")
    if value < 0 or value >= count:
        raise ScenarioLoadError(
            f"{kind.capitalize()} id {value} out of range (0..{count - 1})"
        )
    return value


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present or unreadable
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
