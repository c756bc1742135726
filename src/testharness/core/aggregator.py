"""Grouping of assertion results and derivation of the exit code."""

from collections.abc import Iterable

from testharness.core.models import AssertionResult, ModuleSummary
from testharness.report.console import TestLogger

# Exit statuses are truncated to 0-255 by the operating system; 255 is
# reserved for fatal runs.
FATAL_EXIT_CODE = 255
MAX_FAILURE_EXIT_CODE = 254


def aggregate(results: Iterable[AssertionResult]) -> tuple[dict[str, ModuleSummary], int]:
    """Group results by module in first-seen order.

    Returns:
        Summaries keyed by module id and the number of failed modules
    """
    summaries: dict[str, ModuleSummary] = {}
    for result in results:
        if result.test_module_id not in summaries:
            summaries[result.test_module_id] = ModuleSummary(module_id=result.test_module_id)
        summaries[result.test_module_id].results.append(result)

    failed_modules = sum(1 for summary in summaries.values() if not summary.passed)
    return summaries, failed_modules


def report(
    summaries: dict[str, ModuleSummary],
    logger: TestLogger,
    elapsed_ms: float,
    failed_modules: int,
    total_modules: int,
) -> None:
    """Write the per-module report followed by the overall summary.

    ``failed_modules`` is the count returned by :func:`aggregate`.
    """
    for module_id, summary in summaries.items():
        logger.write_module_head(module_id)
        for result in summary.results:
            logger.write_assertion_result(result.result, result.assertion_id, result.skipped)
        logger.write_module_summary(module_id, summary.total, summary.failed)

    logger.write_testing_summary(elapsed_ms, failed_modules, total_modules)


def exit_code_for(failed_modules: int) -> int:
    """Map a failed-module count to a process exit status."""
    return min(failed_modules, MAX_FAILURE_EXIT_CODE)
