"""Human-readable output for wtstate."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wtstate.executor import describe_action
from wtstate.models import ActionResult, Scenario, StateAnalysisReport
from wtstate.scenarios import scenario_message_level

MAX_COMMITS_SHOWN = 10


def _print_file_list(console: Console, title: str, files: list[str], color: str) -> None:
    console.print(f"[bold]{title}[/bold]")
    for path in files:
        console.print(f"  [{color}]{escape(path)}[/{color}]")
    console.print()


def render_report(report: StateAnalysisReport, console: Console, verbose: bool = False) -> None:
    """Pretty-print a state analysis report."""
    border = "yellow" if scenario_message_level(report.scenario) == "warning" else "blue"
    console.print(
        Panel.fit(
            f"[bold]Scenario: {report.scenario.value}[/bold]\n{escape(report.scenario_description)}",
            border_style=border,
        )
    )

    branch = escape(report.current_branch) if report.current_branch else "[dim](detached HEAD)[/dim]"
    console.print(f"  Branch: [cyan]{branch}[/cyan]")
    console.print(f"  Base: {escape(report.base_branch)}")
    console.print(f"  Worktree type: {report.worktree_type.value}")
    console.print()

    yes_no = {True: "[yellow]yes[/yellow]", False: "[dim]no[/dim]"}
    console.print("[bold]Changes[/bold]")
    console.print(f"  Staged: {yes_no[report.has_staged_changes]}")
    console.print(f"  Unstaged: {yes_no[report.has_unstaged_changes]}")
    console.print(f"  Local commits: {len(report.local_commits)}")
    console.print()

    if verbose:
        if report.staged_files:
            _print_file_list(console, "Staged files:", report.staged_files, "green")
        if report.unstaged_files:
            _print_file_list(console, "Unstaged files:", report.unstaged_files, "red")
        if report.local_commits:
            console.print("[bold]Local commits:[/bold]")
            for commit in report.local_commits[:MAX_COMMITS_SHOWN]:
                console.print(f"  {escape(commit)}")
            hidden = len(report.local_commits) - MAX_COMMITS_SHOWN
            if hidden > 0:
                console.print(f"  [dim]... and {hidden} more[/dim]")
            console.print()

    if report.scenario == Scenario.PR_WORKTREE:
        console.print(
            "[dim]Run wtstate from the main worktree to get actions for new work, "
            "or use this worktree's branch directly.[/dim]"
        )
        return

    if report.available_actions:
        table = Table(title="Available actions")
        table.add_column("Action", style="cyan", no_wrap=True)
        table.add_column("Description", style="white")
        for action in report.available_actions:
            label = escape(action.label)
            if action.key == report.recommended_action:
                label += " [green](recommended)[/green]"
            table.add_row(action.key.value, label)
        console.print(table)

    if report.recommended_action:
        console.print(f"\nRecommended: [bold green]{report.recommended_action.value}[/bold green]")


def render_action_result(result: ActionResult, console: Console) -> None:
    """Print what preparing an action did."""
    if not result.success:
        console.print(f"[red]✗[/red] {describe_action(result.action)} failed: {escape(result.message or '')}")
        return

    console.print(f"[green]✓[/green] {describe_action(result.action)}")
    console.print(f"  Branch from: [cyan]{escape(result.branch_point)}[/cyan]")
    if result.uses_current_branch:
        console.print("  PR will be opened for the current branch")
    if result.stash_ref:
        console.print(f"  Stashed changes: [yellow]{result.stash_ref}[/yellow]")
