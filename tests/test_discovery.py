"""Tests for test module discovery."""

import asyncio

import pytest

from conftest import FAILING_MODULE, PASSING_MODULE
from testharness.core.discovery import TestDiscovery, discover_test_modules
from testharness.errors import DiscoveryError


def _discover(roots, excludes, reporter):
    return asyncio.run(discover_test_modules(roots, excludes, reporter))


class TestTestDiscovery:
    """Tests for TestDiscovery."""

    def test_finds_modules_in_directory(self, tmp_path, reporter, write_module):
        """Test modules in a flat directory are found."""
        write_module(tmp_path / "a.py", PASSING_MODULE)
        write_module(tmp_path / "b.py", FAILING_MODULE)

        modules = _discover([tmp_path], [], reporter)

        assert [m.id for m in modules] == ["a.py", "b.py"]

    def test_recurses_into_subdirectories(self, tmp_path, reporter, write_module):
        """Test the whole subtree is discovered."""
        write_module(tmp_path / "top.py", PASSING_MODULE)
        write_module(tmp_path / "unit" / "inner.py", PASSING_MODULE)
        write_module(tmp_path / "unit" / "deep" / "deepest.py", PASSING_MODULE)
        write_module(tmp_path / "integration" / "other.py", PASSING_MODULE)

        modules = _discover([tmp_path], [], reporter)

        assert sorted(m.id for m in modules) == ["deepest.py", "inner.py", "other.py", "top.py"]

    def test_order_is_deterministic(self, tmp_path, reporter, write_module):
        """Test modules are returned in sorted traversal order."""
        write_module(tmp_path / "b" / "two.py", PASSING_MODULE)
        write_module(tmp_path / "a" / "one.py", PASSING_MODULE)
        write_module(tmp_path / "c.py", PASSING_MODULE)
        write_module(tmp_path / "a" / "z" / "three.py", PASSING_MODULE)

        first = [m.id for m in _discover([tmp_path], [], reporter)]
        second = [m.id for m in _discover([tmp_path], [], reporter)]

        assert first == ["one.py", "three.py", "two.py", "c.py"]
        assert first == second

    def test_ignores_non_source_and_non_test_files(self, tmp_path, reporter, write_module):
        """Test other files and plain modules are silently ignored."""
        write_module(tmp_path / "test_real.py", PASSING_MODULE)
        write_module(tmp_path / "helpers.py", "def helper():\n    return 1\n")
        write_module(tmp_path / "notes.txt", "assertions = {}\n")

        modules = _discover([tmp_path], [], reporter)

        assert [m.id for m in modules] == ["test_real.py"]
        reporter.error.assert_not_called()

    def test_broken_file_is_skipped(self, tmp_path, reporter, write_module):
        """Test one broken file does not abort discovery of its siblings."""
        write_module(tmp_path / "a.py", PASSING_MODULE)
        write_module(tmp_path / "broken.py", "def broken(:\n")
        write_module(tmp_path / "c.py", PASSING_MODULE)

        modules = _discover([tmp_path], [], reporter)

        assert [m.id for m in modules] == ["a.py", "c.py"]
        reporter.error.assert_called_once()
        error = reporter.error.call_args[0][0]
        assert isinstance(error, DiscoveryError)
        assert error.path == tmp_path / "broken.py"

    def test_exiting_script_is_skipped(self, tmp_path, reporter, write_module):
        """Test a file calling sys.exit() at import time is skipped like a broken one."""
        write_module(tmp_path / "a.py", PASSING_MODULE)
        write_module(tmp_path / "script.py", "import sys\nsys.exit(3)\n")
        write_module(tmp_path / "z.py", PASSING_MODULE)

        modules = _discover([tmp_path], [], reporter)

        assert [m.id for m in modules] == ["a.py", "z.py"]
        reporter.error.assert_called_once()
        error = reporter.error.call_args[0][0]
        assert isinstance(error, DiscoveryError)
        assert error.path == tmp_path / "script.py"
        assert "SystemExit" in str(error)

    def test_excluded_directory_never_visited(self, tmp_path, reporter, write_module):
        """Test an excluded directory and its descendants are skipped silently."""
        write_module(tmp_path / "test_ok.py", PASSING_MODULE)
        write_module(tmp_path / "fixtures" / "broken.py", "def broken(:\n")
        write_module(tmp_path / "fixtures" / "nested" / "test_hidden.py", PASSING_MODULE)

        modules = _discover([tmp_path], [tmp_path / "fixtures"], reporter)

        assert [m.id for m in modules] == ["test_ok.py"]
        reporter.error.assert_not_called()
        debug_messages = [c[0][0] for c in reporter.debug.call_args_list]
        assert any("is excluded" in m for m in debug_messages)
        assert not any("broken.py" in m for m in debug_messages)

    def test_exclusion_requires_exact_path(self, tmp_path, reporter, write_module):
        """Test only the exact excluded path is skipped, not equally named ones."""
        write_module(tmp_path / "fixtures" / "a.py", PASSING_MODULE)
        write_module(tmp_path / "unit" / "fixtures" / "b.py", PASSING_MODULE)

        modules = _discover([tmp_path], [tmp_path / "fixtures"], reporter)

        assert [m.id for m in modules] == ["b.py"]

    def test_multiple_roots_merged_in_order(self, tmp_path, reporter, write_module):
        """Test modules from several roots are merged into one list."""
        write_module(tmp_path / "second" / "b.py", PASSING_MODULE)
        write_module(tmp_path / "first" / "a.py", PASSING_MODULE)

        modules = _discover([tmp_path / "second", tmp_path / "first"], [], reporter)

        assert [m.id for m in modules] == ["b.py", "a.py"]

    def test_missing_root_raises(self, tmp_path, reporter):
        """Test an unreadable root directory is fatal for discovery."""
        with pytest.raises(DiscoveryError):
            _discover([tmp_path / "missing"], [], reporter)

    def test_is_excluded_resolves_paths(self, tmp_path, reporter):
        """Test exclusion compares resolved paths."""
        (tmp_path / "fixtures").mkdir()
        discovery = TestDiscovery(reporter, [tmp_path / "fixtures"])

        assert discovery.is_excluded(tmp_path / "unit" / ".." / "fixtures")
        assert not discovery.is_excluded(tmp_path)
