"""Console reporting of harness activity and results."""

import traceback
from abc import ABC, abstractmethod
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class TestLogger(ABC):
    """Interface the harness reports through.

    Implementations decide how messages and results are rendered; the
    harness only calls these methods.
    """

    __test__ = False

    @abstractmethod
    def debug(self, message: str) -> None:
        """Report a diagnostic message."""
        pass

    @abstractmethod
    def error(self, error: Union[BaseException, str]) -> None:
        """Report an error or an assertion violation."""
        pass

    @abstractmethod
    def write_module_head(self, module_id: str) -> None:
        """Start the report section of a test module."""
        pass

    @abstractmethod
    def write_assertion_result(self, passed: bool, assertion_id: str, skipped: bool) -> None:
        """Report the outcome of a single assertion."""
        pass

    @abstractmethod
    def write_module_summary(self, module_id: str, total_assertions: int, failed_assertions: int) -> None:
        """Close the report section of a test module."""
        pass

    @abstractmethod
    def write_testing_summary(self, elapsed_ms: float, failed_modules: int, total_modules: int) -> None:
        """Report the overall outcome of the run."""
        pass


class ConsoleReporter(TestLogger):
    """Renders harness output to the terminal with rich."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize the reporter.

        Args:
            console: Console to write to (default: stdout console)
            verbose: Show debug messages
        """
        self.console = console or Console()
        self.verbose = verbose

    def debug(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]", highlight=False)

    def error(self, error: Union[BaseException, str]) -> None:
        if isinstance(error, AssertionError):
            message = str(error) or "Assertion failed"
            self.console.print(f"[red]AssertionError:[/red] {escape(message)}", highlight=False)
        elif isinstance(error, BaseException):
            self.console.print(f"[red]{type(error).__name__}:[/red] {escape(str(error))}", highlight=False)
            cause = error.__cause__
            if self.verbose and cause is not None:
                self._print_traceback(cause)
        else:
            self.console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)

    def _print_traceback(self, error: BaseException) -> None:
        text = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.console.print(text, style="dim", highlight=False, markup=False)

    def write_module_head(self, module_id: str) -> None:
        self.console.print(f"\n[bold]{escape(module_id)}[/bold]", highlight=False)

    def write_assertion_result(self, passed: bool, assertion_id: str, skipped: bool) -> None:
        if skipped:
            self.console.print(f"  [yellow]-[/yellow] {escape(assertion_id)} [dim](skipped)[/dim]", highlight=False)
        elif passed:
            self.console.print(f"  [green]✓[/green] {escape(assertion_id)}", highlight=False)
        else:
            self.console.print(f"  [red]✗[/red] {escape(assertion_id)}", highlight=False)

    def write_module_summary(self, module_id: str, total_assertions: int, failed_assertions: int) -> None:
        if failed_assertions > 0:
            self.console.print(
                f"  [red]{failed_assertions} of {total_assertions} assertions failed[/red]",
                highlight=False,
            )
        else:
            self.console.print(f"  [green]{total_assertions} assertions passed[/green]", highlight=False)

    def write_testing_summary(self, elapsed_ms: float, failed_modules: int, total_modules: int) -> None:
        self.console.print("\n" + "=" * 50)
        self.console.print("[bold]Test Results Summary[/bold]")
        self.console.print("=" * 50)

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Modules", str(total_modules))
        table.add_row("Passed", f"[green]{total_modules - failed_modules}[/green]")
        table.add_row("Failed", f"[red]{failed_modules}[/red]")
        table.add_row("Duration", format_duration(elapsed_ms))

        self.console.print(table)

        if failed_modules > 0:
            self.console.print("\n[red]Some test modules failed![/red]")
        else:
            self.console.print("\n[green]All test modules passed![/green]")


def format_duration(ms: float) -> str:
    """Format duration in milliseconds to human-readable string."""
    if ms < 1000:
        return f"{ms:.0f}ms"
    elif ms < 60000:
        return f"{ms / 1000:.2f}s"
    else:
        minutes = int(ms // 60000)
        seconds = (ms % 60000) / 1000
        return f"{minutes}m {seconds:.1f}s"
