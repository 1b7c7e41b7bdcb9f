"""CLI commands for wtstate."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from wtstate.analyze import AnalyzeOptions, analyze_state, build_report, find_state_action
from wtstate.config import load_config
from wtstate.executor import execute_state_action, involves_stashing
from wtstate.git_ops import get_repo, get_repo_root
from wtstate.json_output import (
    ErrorCode,
    create_error_result,
    create_success_result,
    error_code_for,
    format_json_result,
)
from wtstate.log import configure_logging
from wtstate.models import ActionType, Scenario
from wtstate.render import render_action_result, render_report
from wtstate.state_detection import probe_git_state

app = typer.Typer(
    name="wtstate",
    help="Inspect git worktree state and get the next recommended action",
    no_args_is_help=True,
)
console = Console()


def _print_error(message: str) -> None:
    """Print an error message and exit."""
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(1)


def _fail(command: str, code: ErrorCode, message: str, json_output: bool, details: dict | None = None) -> None:
    """Report a failure in the requested output format and exit."""
    if json_output:
        print(format_json_result(create_error_result(command, code, message, details)))
        raise typer.Exit(1)
    _print_error(message)


def _resolve_options(base: str | None, remote: str | None, verbose: bool) -> AnalyzeOptions:
    """Merge command-line flags over the loaded configuration."""
    repo_root = get_repo_root(get_repo())
    config = load_config(repo_root)
    return AnalyzeOptions(
        base_branch=base or config.base_branch,
        remote=remote or config.remote,
        verbose=verbose,
        path=repo_root,
    )


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Log git queries and decisions to stderr"),
) -> None:
    configure_logging(debug)


@app.command()
def state(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Include file lists in output"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base branch for comparison"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote holding the base branch"),
) -> None:
    """Show the current git scenario and the actions available for it."""
    try:
        options = _resolve_options(base, remote, verbose)
        report = analyze_state(options)
    except Exception as e:
        _fail("state", error_code_for(e), str(e), json_output)
        return

    if json_output:
        data = report.to_json_data(include_files=options.verbose)
        print(format_json_result(create_success_result("state", data)))
    else:
        render_report(report, console, verbose=options.verbose)


@app.command()
def prepare(
    action: str = typer.Argument(..., help="Action key, as listed by 'wtstate state'"),
    branch: str = typer.Option(..., "--branch", help="Name of the branch that will be created"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base branch for comparison"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote holding the base branch"),
) -> None:
    """Run the git steps an action needs before its branch is created."""
    try:
        action_type = ActionType(action)
    except ValueError:
        valid = ", ".join(a.value for a in ActionType)
        _fail("prepare", ErrorCode.INVALID_ACTION, f"Unknown action: {action}. Valid actions: {valid}", json_output)
        return

    try:
        options = _resolve_options(base, remote, verbose=False)
        git_state = probe_git_state(options.base_branch, options.remote, options.path)
    except Exception as e:
        _fail("prepare", error_code_for(e), str(e), json_output)
        return

    report = build_report(git_state)
    state_action = find_state_action(git_state, action_type)
    if state_action is None:
        if report.scenario == Scenario.PR_WORKTREE:
            message = "No actions are available from a PR worktree; run this from the main worktree"
        else:
            available = ", ".join(k.value for k in report.action_keys())
            message = (
                f"Action '{action}' is not available in scenario {report.scenario.value}. "
                f"Available: {available}"
            )
        _fail(
            "prepare",
            ErrorCode.INVALID_ACTION,
            message,
            json_output,
            details={"scenario": report.scenario.value, "availableActions": [k.value for k in report.action_keys()]},
        )
        return

    result = execute_state_action(
        get_repo(options.path), state_action, branch, options.base_branch, options.remote
    )

    if not result.success:
        code = ErrorCode.STASH_FAILED if involves_stashing(state_action) else ErrorCode.OPERATION_FAILED
        if json_output:
            _fail("prepare", code, result.message or "Action failed", json_output)
            return
        render_action_result(result, console)
        raise typer.Exit(1)

    if json_output:
        data = {"scenario": report.scenario.value, **result.model_dump(mode="json", by_alias=True)}
        print(format_json_result(create_success_result("prepare", data)))
    else:
        render_action_result(result, console)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
