"""Exception types raised by the harness."""

from pathlib import Path
from typing import Optional


class HarnessError(Exception):
    """Base class for harness errors."""

    pass


class DiscoveryError(HarnessError):
    """Raised when a test module or test directory cannot be loaded."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class FatalExecutionError(HarnessError):
    """Raised when an assertion fails with something other than AssertionError."""

    def __init__(self, module_id: str, assertion_id: str, error: BaseException):
        super().__init__(
            f"{module_id} > {assertion_id}: {type(error).__name__}: {error}"
        )
        self.module_id = module_id
        self.assertion_id = assertion_id
        self.error = error


class CoverageError(HarnessError):
    """Raised when coverage recording cannot be started."""

    pass
