"""Test module discovery."""

import asyncio
import os
import stat
from collections.abc import Iterable
from pathlib import Path
from typing import Union

from testharness.core.models import TestModule
from testharness.core.registry import is_source_file, load_test_module
from testharness.errors import DiscoveryError
from testharness.report.console import TestLogger

PathLike = Union[str, Path]


class TestDiscovery:
    """Discovers test modules below a set of root directories."""

    __test__ = False

    def __init__(self, logger: TestLogger, exclude_dirs: Iterable[PathLike] = ()):
        """Initialize test discovery.

        Args:
            logger: Reporter receiving debug and error messages
            exclude_dirs: Directories skipped together with everything below them
        """
        self.logger = logger
        self.exclude_dirs = {Path(d).resolve() for d in exclude_dirs}

    async def discover(self, root_dirs: Iterable[PathLike]) -> list[TestModule]:
        """Discover all test modules below the given root directories.

        Roots are scanned one after another and their modules merged in
        order.

        Raises:
            DiscoveryError: If a root directory cannot be listed
        """
        modules: list[TestModule] = []
        for root in root_dirs:
            root = Path(root)
            try:
                entries = self._list_entries(root)
            except OSError as e:
                raise DiscoveryError(f"Cannot read test directory {root}: {e}", root) from e
            modules.extend(await self._scan(root, entries))
        return modules

    def is_excluded(self, path: Path) -> bool:
        """Check whether a directory is excluded from discovery."""
        return path.resolve() in self.exclude_dirs

    def _list_entries(self, directory: Path) -> list[str]:
        self.logger.debug(f"Looking in: {directory}")
        return sorted(os.listdir(directory))

    async def _discover_directory(self, directory: Path) -> tuple[TestModule, ...]:
        try:
            entries = self._list_entries(directory)
        except OSError as e:
            self.logger.error(DiscoveryError(f"Cannot read directory {directory}: {e}", directory))
            return ()
        return await self._scan(directory, entries)

    async def _scan(self, directory: Path, entries: list[str]) -> tuple[TestModule, ...]:
        """Scan one directory level and recurse into its subdirectories.

        Entries are gathered as coroutines, but listing, stat and import are
        all synchronous, so siblings still complete one after another in
        entry order. Each entry contributes its own tuple of modules; they
        are merged in that same order.
        """
        pending = []
        for entry in entries:
            full_path = directory / entry
            try:
                mode = full_path.stat().st_mode
            except OSError as e:
                self.logger.error(DiscoveryError(f"Cannot stat {full_path}: {e}", full_path))
                continue

            if stat.S_ISDIR(mode):
                if self.is_excluded(full_path):
                    self.logger.debug(f"{full_path} is excluded. Skipping...")
                    continue
                pending.append(self._discover_directory(full_path))
            elif stat.S_ISREG(mode) and is_source_file(full_path):
                pending.append(self._load_file(full_path))

        found = await asyncio.gather(*pending)
        return tuple(module for modules in found for module in modules)

    async def _load_file(self, path: Path) -> tuple[TestModule, ...]:
        self.logger.debug(f"Found file: {path}")
        try:
            module = load_test_module(path)
        except DiscoveryError as e:
            self.logger.error(e)
            self.logger.debug("Skipping...")
            return ()

        if module is None:
            return ()

        self.logger.debug(f"Found module: {module.id}")
        return (module,)


async def discover_test_modules(
    root_dirs: Iterable[PathLike],
    exclude_dirs: Iterable[PathLike],
    logger: TestLogger,
) -> list[TestModule]:
    """Discover test modules below ``root_dirs``, skipping ``exclude_dirs``."""
    return await TestDiscovery(logger, exclude_dirs).discover(root_dirs)
