"""Reporting of harness activity and results."""

from testharness.report.console import ConsoleReporter, TestLogger

__all__ = ["ConsoleReporter", "TestLogger"]
