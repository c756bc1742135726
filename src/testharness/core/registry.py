"""Loading and validation of individual test module files."""

import hashlib
import importlib.util
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Optional

from pydantic import ValidationError

from testharness.core.models import TestModule
from testharness.errors import DiscoveryError

SOURCE_SUFFIXES = (".py",)
MODULE_ATTRIBUTES = ("id", "setUp", "tearDown")


def is_source_file(path: Path) -> bool:
    """Check whether a file's extension marks it as loadable source."""
    return path.suffix in SOURCE_SUFFIXES


def _module_name_for(path: Path) -> str:
    """Build a unique import name so equally named files never collide."""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"testharness_modules.{path.stem}_{digest}"


def import_source_file(path: Path) -> ModuleType:
    """Import a source file by path.

    Raises:
        DiscoveryError: If the file cannot be imported for any reason
    """
    name = _module_name_for(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(f"Cannot create an import spec for {path}", path)

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except (Exception, SystemExit) as e:
        # Scripts calling sys.exit() at import time are load failures too
        sys.modules.pop(name, None)
        raise DiscoveryError(f"Error importing {path}: {type(e).__name__}: {e}", path) from e

    return module


def build_test_module(module: ModuleType, path: Path) -> Optional[TestModule]:
    """Validate an imported module against the test module contract.

    Returns:
        The TestModule record, or None if the module exposes no assertions

    Raises:
        DiscoveryError: If the module declares assertions in an invalid shape
    """
    assertions = getattr(module, "assertions", None)
    if not isinstance(assertions, Mapping) or not assertions:
        return None

    data = {"path": path, "assertions": dict(assertions), "id": path.name}
    for attribute in MODULE_ATTRIBUTES:
        value = getattr(module, attribute, None)
        if value is not None:
            data[attribute] = value

    try:
        return TestModule.model_validate(data)
    except ValidationError as e:
        raise DiscoveryError(f"Invalid test module {path}: {e}", path) from e


def load_test_module(path: Path) -> Optional[TestModule]:
    """Import a file and return its TestModule record, if it is one."""
    module = import_source_file(path)
    return build_test_module(module, path)
