"""Build the state analysis report consumed by the CLI and automation."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from loguru import logger
from pydantic import BaseModel, Field

from wtstate.models import (
    ActionType,
    AvailableAction,
    GitState,
    ScenarioChoices,
    ScenarioContext,
    StateAction,
    StateAnalysisReport,
)
from wtstate.scenarios import get_choices
from wtstate.state_detection import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_REMOTE,
    classify,
    describe_scenario,
    probe_git_state,
)

Probe = Callable[..., GitState]


class AnalyzeOptions(BaseModel):
    """Options for a single analysis run."""

    base_branch: str = Field(default=DEFAULT_BASE_BRANCH, description="Branch to compare against")
    remote: str = Field(default=DEFAULT_REMOTE, description="Remote holding the base branch")
    verbose: bool = Field(default=False, description="Renderers include file lists")
    path: Path = Field(default=Path("."), description="Directory inside the repository")


def available_actions(context: ScenarioContext) -> list[AvailableAction]:
    """Non-cancel choices as {key, label}, in catalog order."""
    if not isinstance(context, ScenarioChoices):
        return []
    return [
        AvailableAction(key=choice.action.action, label=choice.label)
        for choice in context.choices
        if choice.action is not None
    ]


def build_report(state: GitState) -> StateAnalysisReport:
    """Classify a snapshot and attach its actions and recommendation."""
    scenario = classify(state)
    actions = available_actions(get_choices(scenario, state))

    return StateAnalysisReport(
        scenario=scenario,
        scenario_description=describe_scenario(scenario, state.base_branch, state.remote),
        current_branch=state.current_branch,
        base_branch=state.base_branch,
        worktree_type=state.worktree_type,
        has_changes=state.has_changes,
        has_staged_changes=state.has_staged,
        has_unstaged_changes=state.has_unstaged,
        local_commits=list(state.local_commits),
        staged_files=list(state.staged_files),
        unstaged_files=list(state.unstaged_files),
        available_actions=actions,
        recommended_action=actions[0].key if actions else None,
    )


def analyze_state(options: AnalyzeOptions, probe: Probe = probe_git_state) -> StateAnalysisReport:
    """Probe the repository and build its report.

    Errors raised by the probe (not a repository, git missing, ...) are not
    caught here: a failed probe must never be mistaken for a clean scenario.
    """
    state = probe(base_branch=options.base_branch, remote=options.remote, path=options.path)
    report = build_report(state)
    logger.debug(
        f"Scenario {report.scenario.value}, recommended "
        f"{report.recommended_action.value if report.recommended_action else None}"
    )
    return report


def find_state_action(state: GitState, action_type: ActionType) -> StateAction | None:
    """The catalog's StateAction for `action_type` in this state's scenario.

    Returns None when the scenario does not offer that action, including
    every action for a delegated scenario.
    """
    context = get_choices(classify(state), state)
    if not isinstance(context, ScenarioChoices):
        return None
    for choice in context.choices:
        if choice.action is not None and choice.action.action == action_type:
            return choice.action
    return None
