"""Models package for the Permanent Resource Allocation Simulator."""
