"""Shared fixtures for the test suite."""

import textwrap
from pathlib import Path
from unittest.mock import Mock

import pytest

from testharness.core.models import AssertionDef, TestModule
from testharness.report.console import TestLogger


@pytest.fixture
def reporter():
    """Create a mock reporter."""
    return Mock(spec=TestLogger)


@pytest.fixture
def write_module():
    """Write a test module source file, creating parent directories."""

    def _write(path: Path, source: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return _write


def make_module(module_id: str, **assertions) -> TestModule:
    """Build a TestModule from keyword assertion functions."""
    return TestModule(
        id=module_id,
        assertions={name: AssertionDef(function=fn) for name, fn in assertions.items()},
    )


PASSING_MODULE = """
    def check():
        assert 1 + 1 == 2

    assertions = {"adds": {"function": check}}
"""

FAILING_MODULE = """
    def check():
        assert 1 + 1 == 3, "math is broken"

    assertions = {"adds": {"function": check}}
"""

FATAL_MODULE = """
    def check():
        raise RuntimeError("boom")

    assertions = {"explodes": {"function": check}}
"""
