"""
TestHarness - minimal concurrent test harness.

This package provides tools to:
- Discover test modules declaring an ``assertions`` mapping
- Run every assertion concurrently on a single event loop
- Record coverage snapshots around the run
- Report pass/fail per module and overall
"""

__version__ = "0.1.0"
__author__ = "TestHarness Team"
