"""Base coverage provider interface."""

from abc import ABC, abstractmethod
from typing import Any


class CoverageProvider(ABC):
    """Abstract base class for coverage providers.

    A provider is a process-wide profiling channel. It is started once
    before the first assertion runs, asked for a snapshot once every
    assertion has settled, and stopped once at the end of the run.
    """

    @abstractmethod
    def start(self) -> None:
        """Start recording coverage for the whole process."""
        pass

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """Return the coverage collected so far.

        Returns:
            JSON-serializable snapshot with a ``result`` list of per-file entries
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop recording and release the channel. Safe to call twice."""
        pass


class NullCoverageProvider(CoverageProvider):
    """Provider that measures nothing, used when no source is selected."""

    def start(self) -> None:
        pass

    def snapshot(self) -> dict[str, Any]:
        return {"result": []}

    def stop(self) -> None:
        pass
