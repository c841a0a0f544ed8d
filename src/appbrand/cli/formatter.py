# src/appbrand/cli/formatter.py
import difflib
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from appbrand.core.models import StepReport, CREATED, MOVED, SKIPPED, UNCHANGED, UPDATED

# Initialize the Rich console for high-quality terminal output
console = Console()
error_console = Console(stderr=True)

STATUS_STYLES = {
    UPDATED: ("green", "✅"),
    CREATED: ("green", "✅"),
    MOVED: ("green", "✅"),
    UNCHANGED: ("dim", "➖"),
    SKIPPED: ("yellow", "⚠️"),
}


class BrandFormatter:
    """
    BrandFormatter: The visual heart of the CLI.
    Responsible for rendering step progress, diffs and the final report.
    """

    def print_header(self, subtitle: str, version: str):
        console.print(Panel.fit(
            f"[bold cyan]AppBrand v{version}[/bold cyan]\n"
            "══════════════════════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def show_step(self, report: StepReport):
        """One progress line per completed patcher."""
        color, icon = STATUS_STYLES.get(report.status, ("red", "❌"))
        where = f" [dim]{escape(report.path)}[/dim]" if report.path else ""
        console.print(f"{icon} [bold]{escape(report.artifact)}[/bold] [{color}]{report.status}[/{color}]{where}")

    def show_tool(self, command: str):
        console.print(f"🔧 [bold cyan]Running:[/bold cyan] [white]{escape(command)}[/white]")

    def display_diff(self, file_name: str, original_text: str, updated_text: str):
        """Renders a colorized unified diff for one staged artifact."""
        diff = difflib.unified_diff(
            original_text.splitlines(),
            updated_text.splitlines(),
            fromfile=f"a/{file_name}",
            tofile=f"b/{file_name}",
            lineterm=""
        )
        diff_list = list(diff)

        if not diff_list:
            console.print(f"[dim]ℹ No changes for {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        console.print(Panel(syntax, title=f"Proposed Changes: {file_name}", border_style="green"))

    def print_final_table(self, reports: List[StepReport]):
        """
        Builds the summary table shown at the very end of a run.
        """
        table = Table(title="AppBrand Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("Artifact", style="cyan")
        table.add_column("Path", style="dim")
        table.add_column("Status", style="bold")
        table.add_column("Details")

        for r in reports:
            color, _ = STATUS_STYLES.get(r.status, ("red", "❌"))
            table.add_row(
                escape(r.artifact),
                escape(r.path or "-"),
                f"[{color}]{r.status}[/{color}]",
                escape("\n".join(r.messages))
            )

        console.print(table)

    def print_summary(self, summary: Dict[str, Any], dry_run: bool):
        mode = "[yellow]DRY RUN - nothing written[/yellow]" if dry_run else "[green]Changes committed[/green]"
        tools = ", ".join(summary["tools_run"]) or "none"
        console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Steps:          {summary['total_steps']}\n"
            f"Changed:        [green]{summary['changed']}[/green]\n"
            f"Skipped:        [yellow]{summary['skipped']}[/yellow]\n"
            f"Files staged:   {summary['files_staged']}\n"
            f"Tools run:      {tools}\n"
            f"{mode}",
            border_style="dim"
        ))

    def print_error(self, message: str):
        error_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
