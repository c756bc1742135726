"""Coverage provider backed by coverage.py."""

import time
from typing import Any, Optional

import coverage

from testharness.profiling.base import CoverageProvider


class CoveragePyProvider(CoverageProvider):
    """Records line (and branch) coverage with coverage.py."""

    def __init__(
        self,
        source: Optional[list[str]] = None,
        branch: bool = True,
    ):
        """Initialize the provider.

        Args:
            source: Packages or directories to measure (default: everything
                not in the standard library or site-packages)
            branch: Record arcs in addition to lines
        """
        self.source = source
        self.branch = branch
        self._coverage: Optional[coverage.Coverage] = None
        self._running = False

    def start(self) -> None:
        # data_file=None keeps the collected data in memory only
        self._coverage = coverage.Coverage(
            data_file=None,
            branch=self.branch,
            source=self.source,
        )
        self._coverage.start()
        self._running = True

    def snapshot(self) -> dict[str, Any]:
        if self._coverage is None:
            raise RuntimeError("Coverage recording was never started")

        self.stop()
        data = self._coverage.get_data()

        result = []
        for filename in sorted(data.measured_files()):
            lines = sorted(data.lines(filename) or [])
            entry: dict[str, Any] = {
                "url": filename,
                "lines": lines,
                "ranges": _line_ranges(lines),
            }
            if data.has_arcs():
                entry["arcs"] = sorted(data.arcs(filename) or [])
            result.append(entry)

        return {
            "tool": "coverage.py",
            "version": coverage.__version__,
            "timestamp": int(time.time() * 1000),
            "branch": self.branch,
            "result": result,
        }

    def stop(self) -> None:
        if self._coverage is not None and self._running:
            self._coverage.stop()
            self._running = False


def _line_ranges(lines: list[int]) -> list[dict[str, int]]:
    """Collapse sorted line numbers into contiguous executed ranges."""
    ranges: list[dict[str, int]] = []
    for line in lines:
        if ranges and ranges[-1]["endLine"] == line - 1:
            ranges[-1]["endLine"] = line
        else:
            ranges.append({"startLine": line, "endLine": line, "count": 1})
    return ranges
