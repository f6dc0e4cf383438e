"""
Rich formatting utilities for CLI output.
"""

from typing import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from devprep.core.detector import MissingTool, SystemInfo
from devprep.core.errors import ProcessFailure, ProvisionError
from devprep.provision.steps import ProvisionRecipe, RecipeReport, StepOutcome


def print_header(console: Console) -> None:
    """Print application header."""
    from devprep import __version__

    console.print(f"[bold cyan]devprep {__version__}[/bold cyan] - native dependency provisioning")


def print_system_info(system_info: SystemInfo, console: Console) -> None:
    """Print detected system information."""
    table = Table(title="System Information", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Operating System", system_info.os_type)
    table.add_row("Platform", system_info.platform)
    table.add_row("CPU Cores", str(system_info.cpu_count))
    table.add_row("Shell", f"{system_info.shell().name} {system_info.shell().flag}")

    console.print()
    console.print(table)
    console.print()


def print_missing_tools(missing: Sequence[MissingTool], console: Console) -> None:
    if not missing:
        console.print("[bold green]✓ All required tools available[/bold green]")
        return

    console.print("\n[bold yellow]⚠️  Missing Tools:[/bold yellow]")
    for tool in missing:
        console.print(f"  • {tool.name}: {tool.suggestion}")


def _status_icon_and_color(status: str) -> tuple[str, str]:
    """Map a step status to icon and color."""
    if status == "done":
        return "✓", "green"
    if status == "skipped":
        return "-", "yellow"
    return "•", "cyan"


def _steps_table(title: str, outcomes: Iterable[StepOutcome], show_duration: bool) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="white")
    table.add_column("Status")
    if show_duration:
        table.add_column("Duration", justify="right")

    for outcome in outcomes:
        icon, color = _status_icon_and_color(outcome.status)
        row = [str(outcome.index), escape(outcome.description), f"[{color}]{icon} {outcome.status}[/{color}]"]
        if show_duration:
            row.append(f"{outcome.duration:.1f}s" if outcome.status == "done" else "")
        table.add_row(*row)
    return table


def format_plan(recipe: ProvisionRecipe, outcomes: Sequence[StepOutcome], console: Console) -> None:
    """Show what a recipe would do with the current flags."""
    console.print(_steps_table(f"{recipe.name}: {recipe.description}", outcomes, show_duration=False))


def format_report(report: RecipeReport, console: Console) -> None:
    """Show the outcome of a finished recipe run."""
    console.print(_steps_table(f"Recipe {report.recipe}", report.steps, show_duration=True))
    console.print(
        Panel(
            f"[bold]Done:[/bold] {report.done_count}  "
            f"[bold]Skipped:[/bold] {report.skipped_count}  "
            f"[bold]Duration:[/bold] {report.duration:.1f}s",
            title="✓ Provisioning complete",
            border_style="green",
        )
    )


def format_error(error: ProvisionError, console: Console) -> None:
    """Print a provisioning failure so the step can be re-run by hand."""
    content = [f"[bold]{type(error).__name__}[/bold]"]
    if isinstance(error, ProcessFailure):
        content.append(f"[bold]Command:[/bold] {escape(error.command)}")
        content.append(f"[bold]Exit status:[/bold] {error.return_code}")
        if error.stderr:
            content.append(f"\n[bold]stderr:[/bold]\n{escape(error.stderr)}")
    else:
        content.append(escape(str(error)))

    console.print(Panel("\n".join(content), title="✗ Provisioning failed", border_style="red"))
