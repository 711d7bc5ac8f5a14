#!/usr/bin/env python3
"""
Permanent Resource Allocation Simulator
Main entry point for the simulation system.

Models processes that request resources which, once allocated, are never
released, and reports whether the allocation pattern forms a deadlock.
"""

import argparse
import random
import sys
from typing import Callable, List, Optional, Tuple

from algorithms.execution import simulate_process_execution
from analysis.events import EventLog
from analysis.metrics import SimulationMetrics
from models.resource_graph import ResourceGraph
from utils.graph_builder import build_random_graph
from utils.logger import SimulatorLogger
from utils.scenario_loader import ScenarioLoadError, get_scenario_description, load_scenario


class InputFormatError(ValueError):
    """Exception raised when a node count cannot be read from the terminal."""
    pass


def read_node_count(prompt: str, input_fn: Callable[[str], str] = input) -> int:
    """
    Prompt for a non-negative integer.

    Args:
        prompt: Text shown before reading
        input_fn: Line reader (defaults to builtin input)

    Returns:
        Parsed count

    Raises:
        InputFormatError: If input is missing, not an integer or negative
    """
    try:
        raw = input_fn(prompt)
    except EOFError:
        raise InputFormatError(f"Missing input for: {prompt.strip()}")

    try:
        value = int(raw.strip())
    except ValueError:
        raise InputFormatError(f"Expected an integer, got {raw.strip()!r}")

    if value < 0:
        raise InputFormatError(f"Expected a non-negative integer, got {value}")
    return value


def run_simulation(
    graph: ResourceGraph,
    logger: SimulatorLogger,
    summary: bool = False
) -> Tuple[EventLog, SimulationMetrics]:
    """
    Run the single execution pass over a prepared graph.

    Args:
        graph: Resource graph to simulate
        logger: Logger instance
        summary: Print the metrics report after the pass

    Returns:
        Tuple of (event_log, metrics)
    """
    logger.log_initial_state(graph.snapshot())

    event_log = simulate_process_execution(graph, logger)
    metrics = SimulationMetrics.from_run(graph, event_log)

    logger.log(f"{'='*60}")
    logger.log("SIMULATION COMPLETE")
    logger.log(f"{'='*60}")

    if summary:
        logger.log(metrics.display())

    return event_log, metrics


def _non_negative_int(value: str) -> int:
    """argparse type for node counts."""
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if count < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {count}")
    return count


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description='Permanent Resource Allocation Simulator'
    )
    parser.add_argument(
        '--resources',
        type=_non_negative_int,
        help='Number of resource nodes (prompted if omitted)'
    )
    parser.add_argument(
        '--processes',
        type=_non_negative_int,
        help='Number of process nodes (prompted if omitted)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for the random graph (default: nondeterministic)'
    )
    parser.add_argument(
        '--scenario',
        type=str,
        help='Path to scenario JSON file (replaces random generation; '
             'not combinable with --resources, --processes or --seed)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write output to this file'
    )
    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print run metrics after the simulation'
    )
    return parser


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    """Main entry point for the simulator."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.scenario and any(
            value is not None for value in (args.resources, args.processes, args.seed)):
        parser.error("--scenario cannot be combined with --resources, --processes or --seed")
    logger = SimulatorLogger(verbose=args.verbose, log_file=args.log_file)

    try:
        if args.scenario:
            try:
                graph = load_scenario(args.scenario)
            except ScenarioLoadError as e:
                logger.log(f"Failed to load scenario: {e}", "error")
                return 1
            description = get_scenario_description(args.scenario)
            logger.log(f"Scenario: {args.scenario}")
            if description:
                logger.log(f"  {description}")
        else:
            try:
                resource_count = args.resources
                if resource_count is None:
                    resource_count = read_node_count("Enter number of Resource nodes: ", input_fn)
                process_count = args.processes
                if process_count is None:
                    process_count = read_node_count("Enter number of Process nodes: ", input_fn)
            except InputFormatError as e:
                logger.log(f"Invalid input: {e}", "error")
                return 2

            graph = build_random_graph(
                resource_count,
                process_count,
                rng=random.Random(args.seed)
            )
            logger.log(
                f"Built graph: {resource_count} resources, {process_count} processes "
                f"(seed={args.seed})",
                "debug"
            )

        run_simulation(graph, logger, summary=args.summary)
        return 0
    finally:
        logger.close()


if __name__ == '__main__':
    sys.exit(main())
