"""Test run orchestration."""

import asyncio
from pathlib import Path
from typing import Optional

from testharness.config import HarnessConfig
from testharness.core.aggregator import FATAL_EXIT_CODE, aggregate, exit_code_for, report
from testharness.core.discovery import discover_test_modules
from testharness.core.executor import run_tests
from testharness.errors import CoverageError, DiscoveryError, FatalExecutionError
from testharness.profiling.base import CoverageProvider, NullCoverageProvider
from testharness.profiling.coveragepy import CoveragePyProvider
from testharness.profiling.recorder import CoverageRecorder
from testharness.report.console import TestLogger


class HarnessRunner:
    """Discovers, runs and reports test modules for one configuration."""

    def __init__(
        self,
        config: HarnessConfig,
        base_dir: Path,
        logger: TestLogger,
        coverage_provider: Optional[CoverageProvider] = None,
    ):
        """Initialize the runner.

        Args:
            config: Harness configuration
            base_dir: Directory relative config paths are resolved against
            logger: Reporter for messages and results
            coverage_provider: Provider used when coverage is enabled
                (default: coverage.py)
        """
        self.config = config
        self.base_dir = Path(base_dir)
        self.logger = logger
        self.coverage_provider = coverage_provider

    async def run(self) -> int:
        """Run the whole pipeline and return the process exit code."""
        paths = self.config.get_absolute_paths(self.base_dir)

        try:
            modules = await discover_test_modules(
                paths["test_dirs"],
                paths["exclude_dirs"],
                self.logger,
            )
        except DiscoveryError as e:
            self.logger.error(e)
            return FATAL_EXIT_CODE

        recorder = self._create_recorder(paths["coverage_dir"])
        recording = False
        try:
            if recorder is not None:
                try:
                    recorder.start()
                    recording = True
                except CoverageError as e:
                    self.logger.error(e)

            try:
                results, elapsed_ms = await run_tests(
                    modules,
                    self.logger,
                    dry_run=self.config.dry_run,
                )
            except FatalExecutionError as e:
                self.logger.error(e)
                return FATAL_EXIT_CODE

            if recording:
                recorder.finish()
        finally:
            if recorder is not None:
                recorder.close()

        summaries, failed_modules = aggregate(results)
        report(summaries, self.logger, elapsed_ms, failed_modules, len(modules))
        return exit_code_for(failed_modules)

    def run_sync(self) -> int:
        """Run the pipeline on a fresh event loop."""
        return asyncio.run(self.run())

    def _create_recorder(self, coverage_dir: Path) -> Optional[CoverageRecorder]:
        if not self.config.coverage.enabled:
            return None

        provider = self.coverage_provider
        if provider is None:
            if self.config.coverage.source == []:
                # An empty source list measures nothing
                provider = NullCoverageProvider()
            else:
                provider = CoveragePyProvider(
                    source=self.config.coverage.source,
                    branch=self.config.coverage.branch,
                )
        return CoverageRecorder(
            provider,
            coverage_dir,
            self.logger,
            clear=self.config.coverage.clear,
        )
