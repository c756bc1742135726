"""Coverage recording around a test run."""

from testharness.profiling.base import CoverageProvider, NullCoverageProvider
from testharness.profiling.coveragepy import CoveragePyProvider
from testharness.profiling.recorder import CoverageRecorder, prepare_directory

__all__ = [
    "CoverageProvider",
    "NullCoverageProvider",
    "CoveragePyProvider",
    "CoverageRecorder",
    "prepare_directory",
]
