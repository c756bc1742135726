"""Bracketing of a test run with coverage recording."""

import json
import time
from pathlib import Path
from typing import Any, Optional

from testharness.errors import CoverageError
from testharness.profiling.base import CoverageProvider
from testharness.report.console import TestLogger

SENTINEL_ENTRY = ".gitignore"
SENTINEL_CONTENT = "*\n!.gitignore\n"


class CoverageRecorder:
    """Starts, snapshots and persists coverage for one run.

    Apart from ``start``, every operation is best effort: failures are
    reported through the logger and never raised, so coverage problems
    cannot change the outcome of a run.
    """

    def __init__(
        self,
        provider: CoverageProvider,
        directory: Path,
        logger: TestLogger,
        clear: bool = False,
    ):
        """Initialize the recorder.

        Args:
            provider: Profiling channel to record with
            directory: Directory snapshot files are written to
            logger: Reporter receiving debug and error messages
            clear: Remove previous snapshot files before writing a new one
        """
        self.provider = provider
        self.directory = Path(directory)
        self.logger = logger
        self.clear_directory = clear

    def start(self) -> None:
        """Start recording.

        Raises:
            CoverageError: If the provider cannot be started
        """
        self.logger.debug("Starting coverage recording")
        try:
            self.provider.start()
        except Exception as e:
            raise CoverageError(f"Cannot start coverage recording: {e}") from e

    def stop_and_snapshot(self) -> Optional[dict[str, Any]]:
        """Request the final snapshot, or None if the provider fails."""
        try:
            return self.provider.snapshot()
        except Exception as e:
            self.logger.error(CoverageError(f"Cannot take coverage snapshot: {e}"))
            return None

    def clear(self) -> None:
        """Remove every file in the coverage directory except the sentinel.

        The first failing deletion stops the remaining ones.
        """
        try:
            entries = sorted(p for p in self.directory.iterdir() if p.name != SENTINEL_ENTRY)
        except OSError as e:
            self.logger.error(CoverageError(f"Cannot list {self.directory}: {e}"))
            return

        for entry in entries:
            self.logger.debug(f"Removing {entry}")
            try:
                entry.unlink()
            except OSError as e:
                self.logger.error(CoverageError(f"Cannot remove {entry}: {e}"))
                return

    def persist(self, snapshot: dict[str, Any]) -> Optional[Path]:
        """Write a snapshot to ``coverage-<epoch millis>.json``.

        Returns:
            Path of the written file, or None if writing failed
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            coverage_file = self._next_file()
            self.logger.debug(f"Writing {coverage_file}")
            with open(coverage_file, "x", encoding="utf-8") as f:
                json.dump(snapshot, f)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(CoverageError(f"Cannot write coverage snapshot: {e}"))
            return None

        return coverage_file

    def record(self, snapshot: dict[str, Any]) -> Optional[Path]:
        """Clear the directory if configured, then persist the snapshot."""
        if self.clear_directory:
            self.clear()
        return self.persist(snapshot)

    def finish(self) -> Optional[Path]:
        """Snapshot and persist the coverage of the run, if any was collected."""
        snapshot = self.stop_and_snapshot()
        if snapshot is None:
            return None
        return self.record(snapshot)

    def close(self) -> None:
        """Release the provider."""
        try:
            self.provider.stop()
        except Exception as e:
            self.logger.error(CoverageError(f"Cannot stop coverage recording: {e}"))

    def _next_file(self) -> Path:
        millis = int(time.time() * 1000)
        while (self.directory / f"coverage-{millis}.json").exists():
            millis += 1
        return self.directory / f"coverage-{millis}.json"


def prepare_directory(directory: Path) -> Path:
    """Create a coverage directory holding the sentinel entry.

    The sentinel keeps snapshot files out of version control and is the one
    entry ``CoverageRecorder.clear`` never removes. An existing sentinel is
    left untouched.

    Returns:
        Path of the sentinel file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    sentinel = directory / SENTINEL_ENTRY
    if not sentinel.exists():
        sentinel.write_text(SENTINEL_CONTENT, encoding="utf-8")
    return sentinel
