"""Core test discovery and execution functionality."""

from testharness.core.discovery import TestDiscovery
from testharness.core.executor import TestExecutor
from testharness.core.runner import HarnessRunner

__all__ = ["HarnessRunner", "TestDiscovery", "TestExecutor"]
