"""
Rich terminal reporter - colored progress and failure output
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from gitix.checks.engine import StepOutcome
from gitix.executor import ExecutionStatus
from gitix.repo.workspace import Workspace


class RichReporter:
    """Rich terminal reporter"""

    def __init__(self, console: Console | None = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self._count = 0

    def start(self, workspace: Workspace) -> None:
        changes = workspace.changes
        self.console.print(
            f"[dim]{len(changes.files)} files, {len(changes.dirs)} dirs, "
            f"{len(changes.packages)} packages changed[/dim]"
        )
        if workspace.delete_on_close:
            self.console.print(f"[dim]Workspace: {workspace.root_dir}[/dim]")
        self.console.print("Running checks...", style="yellow")

    def outcome(self, outcome: StepOutcome) -> None:
        self._count += 1
        result = outcome.result
        line = Text()
        if not outcome.ok:
            line.append("✗ ", style="bold red")
        elif result.status == ExecutionStatus.SKIPPED:
            line.append("- ", style="dim")
        else:
            line.append("✓ ", style="bold green")
        line.append(outcome.step.name)
        if outcome.step.description:
            line.append(f"  {outcome.step.description}", style="dim")
        if result.status != ExecutionStatus.SKIPPED:
            line.append(f"  ({result.duration_ms / 1000:.1f}s)", style="dim")
        self.console.print(line)

        if result.status == ExecutionStatus.SKIPPED or (self.verbose and result.output.strip()):
            self.console.print(Text(result.output.rstrip()), style="dim")

    def finish(self, failure: StepOutcome | None) -> None:
        if failure is None:
            self.console.print(f"[green]All {self._count} checks passed[/green]")
            return

        result = failure.result
        body = Text()
        body.append(f"$ {result.command.strip()}\n", style="bold")
        body.append(result.output.rstrip() or "(no output)")
        self.console.print(
            Panel(
                body,
                title=f"[red]{failure.step.name} failed (exit status {result.exit_code})[/red]",
                border_style="red",
            )
        )
