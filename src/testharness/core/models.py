"""Data models for test modules and assertion results."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _noop() -> None:
    """Default lifecycle hook."""
    return None


class AssertionDef(BaseModel):
    """A single named assertion declared by a test module."""

    model_config = ConfigDict(frozen=True)

    function: Callable[..., Any] = Field(description="Assertion body, sync or async")
    skip: bool = Field(default=False, description="Report as skipped without running")


class TestModule(BaseModel):
    """A validated test module record.

    Built once at discovery time from the attributes a test file exports.
    ``assertions`` keeps the declaration order of the source file, which is
    also the launch and report order.
    """

    __test__ = False

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Display and grouping identifier")
    path: Optional[Path] = Field(default=None, description="Source file the module was loaded from")
    assertions: dict[str, AssertionDef] = Field(description="Assertions keyed by name")
    set_up: Callable[[], Any] = Field(default=_noop, alias="setUp")
    tear_down: Callable[[], Any] = Field(default=_noop, alias="tearDown")

    @field_validator("assertions", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        """Accept bare callables as ``{"function": callable}``."""
        if not isinstance(v, Mapping):
            return v
        return {
            name: {"function": definition} if callable(definition) else definition
            for name, definition in v.items()
        }

    @field_validator("assertions")
    @classmethod
    def validate_not_empty(cls, v: dict[str, AssertionDef]) -> dict[str, AssertionDef]:
        if not v:
            raise ValueError("A test module must declare at least one assertion")
        return v


@dataclass(frozen=True)
class AssertionResult:
    """Outcome of one (module, assertion) pair in a run."""

    test_module_id: str
    assertion_id: str
    result: bool
    skipped: bool


@dataclass
class ModuleSummary:
    """Assertion results of one module, grouped for reporting."""

    module_id: str
    results: list[AssertionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        """Number of assertions that ran and failed."""
        return sum(1 for r in self.results if not r.result)

    @property
    def passed(self) -> bool:
        return self.failed == 0