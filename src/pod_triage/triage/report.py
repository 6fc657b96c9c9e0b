"""Human-readable progress and summary output for a sweep."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pod_triage.triage.models import LogsCaptured, LogsCaptureFailed, SweepEntry, SweepResult

PHASE_STYLES = {
    "Running": "green",
    "Pending": "yellow",
    "Succeeded": "cyan",
    "Failed": "red",
    "Unknown": "magenta",
}


def describe_outcome(entry: SweepEntry) -> str:
    """Plain-text description of an entry's outcome."""
    outcome = entry.outcome
    if isinstance(outcome, LogsCaptured):
        return f"logs captured -> {outcome.path}"
    if isinstance(outcome, LogsCaptureFailed):
        return f"log capture failed: {outcome.reason}"
    return "no action needed"


def print_entry(entry: SweepEntry, console: Console | None = None) -> None:
    """Print one progress line for a classified pod."""
    c = console or Console()
    phase = entry.pod.phase.value
    style = PHASE_STYLES.get(phase, "white")
    marker = "[red]✗[/red]" if isinstance(entry.outcome, LogsCaptureFailed) else "[green]✓[/green]"
    c.print(
        f"{marker} [bold]{escape(entry.pod.name)}[/bold] "
        f"[{style}]{phase}[/{style}] {escape(describe_outcome(entry))}"
    )


def print_result(result: SweepResult, console: Console | None = None) -> None:
    """Print a summary table of the sweep using Rich."""
    c = console or Console()
    table = Table(title=f"Pod triage: namespace {escape(result.namespace)}")
    table.add_column("Pod")
    table.add_column("Phase")
    table.add_column("Outcome")
    for entry in result.entries:
        phase = entry.pod.phase.value
        style = PHASE_STYLES.get(phase, "white")
        table.add_row(escape(entry.pod.name), f"[{style}]{phase}[/{style}]", escape(describe_outcome(entry)))
    c.print(table)
    c.print(
        f"\n[bold]{len(result.entries)}[/bold] pods, "
        f"[bold]{len(result.abnormal)}[/bold] not running, "
        f"[bold]{len(result.captured)}[/bold] logs captured, "
        f"[bold]{len(result.failed)}[/bold] failed"
    )
