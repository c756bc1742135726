"""Concurrent assertion executor.

Every assertion of every module is launched as its own asyncio task on the
running event loop. Tasks interleave only where assertion bodies await; no
threads are involved.
"""

import asyncio
import inspect
import time
from collections.abc import Sequence

from testharness.core.models import AssertionDef, AssertionResult, TestModule
from testharness.errors import FatalExecutionError
from testharness.report.console import TestLogger

# SystemExit raised by user code ends the run like any other crash;
# KeyboardInterrupt and CancelledError still propagate untouched.
FATAL_ERRORS = (Exception, SystemExit)


class TestExecutor:
    """Executes the assertions of discovered test modules."""

    __test__ = False

    def __init__(self, logger: TestLogger, dry_run: bool = False):
        """Initialize test executor.

        Args:
            logger: Reporter receiving assertion violations
            dry_run: Report every assertion as skipped without running it
        """
        self.logger = logger
        self.dry_run = dry_run

    async def execute(self, modules: Sequence[TestModule]) -> tuple[list[AssertionResult], float]:
        """Run all assertions of all modules concurrently.

        Returns:
            Results in launch order and the elapsed time in milliseconds

        Raises:
            FatalExecutionError: As soon as the first assertion fails with an
                error other than AssertionError. Remaining tasks keep running
                but their results are discarded.
        """
        start_time = time.perf_counter()

        tasks = [
            asyncio.create_task(self._run_assertion(module, assertion_id, definition))
            for module in modules
            for assertion_id, definition in module.assertions.items()
        ]
        results = await asyncio.gather(*tasks)

        duration_ms = (time.perf_counter() - start_time) * 1000
        return list(results), duration_ms

    def is_skipped(self, definition: AssertionDef) -> bool:
        return self.dry_run or definition.skip

    async def _run_assertion(
        self,
        module: TestModule,
        assertion_id: str,
        definition: AssertionDef,
    ) -> AssertionResult:
        try:
            module.set_up()
        except FATAL_ERRORS as e:
            raise FatalExecutionError(module.id, assertion_id, e) from e

        skipped = self.is_skipped(definition)
        result = True
        failing = False

        try:
            if not skipped:
                try:
                    outcome = definition.function()
                    if inspect.isawaitable(outcome):
                        await outcome
                except AssertionError as e:
                    result = False
                    self.logger.error(e)
                except FATAL_ERRORS as e:
                    failing = True
                    raise FatalExecutionError(module.id, assertion_id, e) from e
        finally:
            self._tear_down(module, assertion_id, failing)

        return AssertionResult(
            test_module_id=module.id,
            assertion_id=assertion_id,
            result=result,
            skipped=skipped,
        )

    def _tear_down(self, module: TestModule, assertion_id: str, failing: bool) -> None:
        """Run tearDown; while a fatal error propagates, only log its errors."""
        try:
            module.tear_down()
        except FATAL_ERRORS as e:
            error = FatalExecutionError(module.id, assertion_id, e)
            if failing:
                self.logger.error(error)
                return
            raise error from e


async def run_tests(
    modules: Sequence[TestModule],
    logger: TestLogger,
    dry_run: bool = False,
) -> tuple[list[AssertionResult], float]:
    """Run all assertions of ``modules`` and return (results, elapsed ms)."""
    return await TestExecutor(logger, dry_run=dry_run).execute(modules)
