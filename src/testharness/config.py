"""Configuration management for TestHarness."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ["testharness.json", ".testharness.json"]


class CoverageConfig(BaseModel):
    """Coverage recording configuration."""

    enabled: bool = Field(default=False, description="Record coverage during the run")
    directory: str = Field(default="coverage", description="Directory for coverage snapshot files")
    clear: bool = Field(default=False, description="Remove previous snapshots before writing a new one")
    source: Optional[list[str]] = Field(
        default=None, description="Packages or directories to measure (default: all project code)"
    )
    branch: bool = Field(default=True, description="Record branch arcs as well as lines")

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Coverage directory cannot be empty")
        return v


class HarnessConfig(BaseModel):
    """Main configuration for TestHarness."""

    test_dirs: list[str] = Field(default_factory=lambda: ["tests"], description="Directories to search for test modules")
    exclude_dirs: list[str] = Field(default_factory=list, description="Directories skipped during discovery")
    dry_run: bool = Field(default=False, description="Report every assertion as skipped without running it")
    verbose: bool = Field(default=False, description="Show debug output")
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)

    @field_validator("test_dirs")
    @classmethod
    def validate_test_dirs(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one test directory is required")
        return v

    @classmethod
    def from_file(cls, path: Path | str) -> "HarnessConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_config_file(cls, start_dir: Path | str | None = None) -> Optional[Path]:
        """Find a configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        while True:
            for name in CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return config_path
            if current == current.parent:
                return None
            current = current.parent

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_absolute_paths(self, base_dir: Path | str | None = None) -> dict[str, list[Path] | Path]:
        """Get absolute paths for the directories named in the config."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        return {
            "test_dirs": [(base_dir / d).resolve() for d in self.test_dirs],
            "exclude_dirs": [(base_dir / d).resolve() for d in self.exclude_dirs],
            "coverage_dir": (base_dir / self.coverage.directory).resolve(),
        }


def get_default_config(coverage: bool = False) -> HarnessConfig:
    """Return a default configuration, optionally with coverage enabled."""
    return HarnessConfig(
        test_dirs=["tests"],
        exclude_dirs=["tests/fixtures"],
        coverage=CoverageConfig(enabled=coverage, directory="coverage"),
    )


def create_example_config(output_path: Path | str, coverage: bool = False) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config(coverage)
    config.to_file(output_path)
    return output_path
