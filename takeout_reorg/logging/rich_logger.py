"""Terminal output for takeout-reorg commands, built on Rich."""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text


# Failure details shown under the stats table before truncating
MAX_LISTED_FAILURES = 20


class SupportsSummary(Protocol):
    elapsed_seconds: float

    def summary(self) -> dict[str, int]:
        ...


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route library loggers (smbclient and exiftool calls) through Rich.

    Only warnings show by default; ``verbose`` lowers the level to DEBUG so
    every remote command and exiftool request is visible.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if value is None or value == "":
        return "-"
    return str(value)


class RichProgressReporter:
    """ProgressReporter printing to a Rich console (stderr by default).

    ``quiet`` keeps warnings and errors only; ``verbose`` adds the per-file
    debug lines (created folders, skipped sidecars, uploads).
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None
        self._phase_name = ""

    @property
    def console(self) -> Console:
        return self._console

    def _emit(self, symbol: str, message: str, style: str = "", essential: bool = False) -> None:
        if self._quiet and not essential:
            return
        self._console.print(f"{symbol} {escape(message)}", style=style or None, highlight=False)

    # --- Phases ---

    def start_phase(self, name: str, total: int) -> None:
        """Show a progress bar over ``total`` Takeout folders."""
        if self._quiet:
            return

        self._phase_name = name
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("[cyan]folders"),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(name, total=total)

    def describe_phase(self, detail: str) -> None:
        """Name the item currently being worked on next to the phase title."""
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, description=f"{self._phase_name}: {escape(detail)}")

    def advance_phase(self, amount: int = 1) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.advance(self._task_id, amount)

    def end_phase(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None
        self._phase_name = ""

    # --- Messages ---

    def info(self, message: str) -> None:
        self._emit("[blue]ℹ[/blue]", message)

    def success(self, message: str) -> None:
        self._emit("[green]✓[/green]", message)

    def warning(self, message: str) -> None:
        self._emit("[yellow]⚠[/yellow]", message, essential=True)

    def error(self, message: str) -> None:
        self._emit("[red]✗[/red]", message, style="red", essential=True)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(" ", message, style="dim")

    # --- Summaries ---

    def print_header(self, title: str) -> None:
        if not self._quiet:
            self._console.print(Panel(Text(title, style="bold cyan"), border_style="cyan"))

    def print_config(self, config_items: dict) -> None:
        """Print the effective settings of a run, one row each."""
        if self._quiet:
            return

        table = Table(title="Run settings", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in config_items.items():
            table.add_row(key, _format_value(value))
        self._console.print(table)

    def print_stats(self, stats: SupportsSummary, title: str = "Processing Complete") -> None:
        """Print counters from ``stats.summary()`` and any recorded failures.

        Counter names become labels: ``skipped_existing`` -> "Skipped existing".
        """
        if self._quiet:
            return

        table = Table(title=title, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")
        for key, value in stats.summary().items():
            table.add_row(key.replace("_", " ").capitalize(), str(value))
        if stats.elapsed_seconds > 0:
            table.add_row("Time elapsed", f"{stats.elapsed_seconds:.1f}s")
        self._console.print(table)

        failures = getattr(stats, "failures", None) or []
        for failure in failures[:MAX_LISTED_FAILURES]:
            self._console.print(f"  [red]•[/red] {escape(failure)}", highlight=False)
        if len(failures) > MAX_LISTED_FAILURES:
            self._console.print(f"  … and {len(failures) - MAX_LISTED_FAILURES} more", style="dim")

    def __enter__(self) -> "RichProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        self.end_phase()


class QuietProgressReporter:
    """Plain-text reporter for ``-q``: warnings and errors on stderr, nothing else."""

    def _problem(self, label: str, message: str) -> None:
        print(f"{label}: {message}", file=sys.stderr)

    def warning(self, message: str) -> None:
        self._problem("WARNING", message)

    def error(self, message: str) -> None:
        self._problem("ERROR", message)

    def start_phase(self, name: str, total: int) -> None:
        pass

    def describe_phase(self, detail: str) -> None:
        pass

    def advance_phase(self, amount: int = 1) -> None:
        pass

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_stats(self, stats: SupportsSummary, title: str = "Processing Complete") -> None:
        pass

    def __enter__(self) -> "QuietProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        pass
