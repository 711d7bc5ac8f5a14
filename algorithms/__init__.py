"""
Algorithms package for the Permanent Resource Allocation Simulator.
Contains the process execution engine and deadlock detection.
"""
