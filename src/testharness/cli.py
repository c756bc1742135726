"""Command-line interface for TestHarness."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from testharness import __version__
from testharness.config import HarnessConfig, create_example_config


console = Console()


def print_banner() -> None:
    """Print the TestHarness banner."""
    console.print(
        Panel.fit(
            "[bold blue]TestHarness[/bold blue] - Concurrent Test Harness",
            subtitle=f"v{__version__}",
        )
    )


def load_config(config_path: Optional[str]) -> tuple[HarnessConfig, Path]:
    """Load the configuration and return it with its base directory.

    Falls back to the default configuration rooted at the current
    directory when no file is given or found.
    """
    if config_path:
        path = Path(config_path)
        return HarnessConfig.from_file(path), path.resolve().parent

    found = HarnessConfig.find_config_file()
    if found is None:
        console.print("[dim]No configuration file found, using defaults[/dim]")
        return HarnessConfig(), Path.cwd()

    return HarnessConfig.from_file(found), found.parent


@click.group()
@click.version_option(version=__version__, prog_name="testharness")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: testharness.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """TestHarness - discover and run test modules concurrently.

    Runs every assertion declared by the test modules found below the
    configured directories and exits with the number of failed modules.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="testharness.json",
    help="Output path for configuration file",
)
@click.option(
    "--coverage/--no-coverage",
    default=False,
    help="Enable coverage recording and create its snapshot directory",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
@click.pass_context
def init(ctx: click.Context, output: str, coverage: bool, force: bool) -> None:
    """Set up a project: configuration file, test directories and coverage directory."""
    from testharness.profiling.recorder import prepare_directory

    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path, coverage=coverage)
        config = HarnessConfig.from_file(output_path)
        paths = config.get_absolute_paths(output_path.resolve().parent)

        # Fixtures live under the excluded directories, so create those too
        for directory in [*paths["test_dirs"], *paths["exclude_dirs"]]:
            directory.mkdir(parents=True, exist_ok=True)
        if coverage:
            sentinel = prepare_directory(paths["coverage_dir"])
            console.print(f"[green]Created coverage directory:[/green] {sentinel.parent}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Created configuration file:[/green] {output_path}")
    console.print("\nNext steps:")
    console.print(f"  1. Add test modules exporting [bold]assertions[/bold] under {', '.join(config.test_dirs)}")
    console.print(f"  2. Keep helper files in {', '.join(config.exclude_dirs)} so they are never run")
    console.print("  3. Run [bold]testharness run[/bold] to execute tests")


@main.command()
@click.argument("test_dirs", nargs=-1, type=click.Path())
@click.option(
    "--exclude",
    "-e",
    "exclude_dirs",
    multiple=True,
    type=click.Path(),
    help="Directory to skip during discovery (repeatable)",
)
@click.option("--dry-run", is_flag=True, help="Report every assertion as skipped without running it")
@click.option(
    "--coverage/--no-coverage",
    default=None,
    help="Record coverage during the run",
)
@click.option("--coverage-dir", type=click.Path(), help="Directory for coverage snapshots")
@click.option("--clear-coverage", is_flag=True, help="Remove previous coverage snapshots")
@click.pass_context
def run(
    ctx: click.Context,
    test_dirs: tuple[str, ...],
    exclude_dirs: tuple[str, ...],
    dry_run: bool,
    coverage: Optional[bool],
    coverage_dir: Optional[str],
    clear_coverage: bool,
) -> None:
    """Discover and run test modules."""
    from testharness.core.runner import HarnessRunner
    from testharness.report.console import ConsoleReporter

    print_banner()

    try:
        config, base_dir = load_config(ctx.obj.get("config_path"))
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("Run [bold]testharness init[/bold] to create a configuration file")
        sys.exit(1)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)

    # Command-line values override the configuration file
    if test_dirs:
        config.test_dirs = list(test_dirs)
    if exclude_dirs:
        config.exclude_dirs = list(exclude_dirs)
    if dry_run:
        config.dry_run = True
    if coverage is not None:
        config.coverage.enabled = coverage
    if coverage_dir:
        config.coverage.directory = coverage_dir
    if clear_coverage:
        config.coverage.clear = True
    if ctx.obj.get("verbose"):
        config.verbose = True

    # Test modules import project code relative to the project root
    if str(base_dir) not in sys.path:
        sys.path.insert(0, str(base_dir))

    reporter = ConsoleReporter(console, verbose=config.verbose)
    runner = HarnessRunner(config, base_dir, reporter)
    sys.exit(runner.run_sync())


if __name__ == "__main__":
    main()
