"""Choices offered for each scenario.

Pure functions only: this module decides what to offer, the CLI and the
executor decide what to do with it.
"""

from __future__ import annotations

from typing import Callable, Literal

from wtstate.models import (
    ActionType,
    BranchFrom,
    GitState,
    Scenario,
    ScenarioChoice,
    ScenarioChoices,
    ScenarioContext,
    ScenarioDelegate,
    StateAction,
)

MessageLevel = Literal["info", "warning"]

_WARNING_SCENARIOS = {
    Scenario.MAIN_CLEAN_SAME,
    Scenario.BRANCH_SAME_AS_MAIN,
    Scenario.BRANCH_ANCESTOR,
    Scenario.DETACHED_HEAD,
    Scenario.PR_WORKTREE,
}


def _action(
    action_type: ActionType,
    branch_from: BranchFrom = BranchFrom.ORIGIN_MAIN,
    stash_unstaged: bool = False,
) -> StateAction:
    return StateAction(action=action_type, branch_from=branch_from, stash_unstaged=stash_unstaged)


def _choice(label: str, action: StateAction | None = None) -> ScenarioChoice:
    return ScenarioChoice(label=label, action=action)


def _branch(state: GitState) -> str:
    return state.current_branch or "unknown"


def _main_clean_same(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message=f"No changes detected from {state.base_branch} branch.",
        sub_message=(
            f"You are on '{state.base_branch}' with no local commits or uncommitted changes.\n"
            "A PR requires at least one commit difference from the base branch."
        ),
        choices=[
            _choice("Continue with empty initial commit", _action(ActionType.EMPTY_COMMIT)),
            _choice("Cancel - I'll make some changes first"),
        ],
    )


def _main_staged_same(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="You have staged changes ready to commit.",
        choices=[
            _choice(
                "Commit staged changes to the new PR branch",
                _action(ActionType.COMMIT_STAGED, BranchFrom.HEAD),
            ),
            _choice(
                "Leave changes here and continue with empty initial commit",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel"),
        ],
    )


def _main_unstaged_same(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="You have unstaged changes.",
        choices=[
            _choice(
                "Stage all and commit to the new PR branch",
                _action(ActionType.COMMIT_ALL, BranchFrom.HEAD),
            ),
            _choice(
                "Leave changes here and continue with empty initial commit",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Stash changes (will restore after)", _action(ActionType.STASH_AND_EMPTY)),
            _choice("Cancel"),
        ],
    )


def _main_both_same(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="You have both staged and unstaged changes.",
        choices=[
            _choice(
                "Commit staged to PR branch, move unstaged to new worktree",
                _action(ActionType.COMMIT_STAGED, BranchFrom.HEAD, stash_unstaged=True),
            ),
            _choice(
                "Stage all and commit everything to the new PR branch",
                _action(ActionType.COMMIT_ALL, BranchFrom.HEAD),
            ),
            _choice(
                "Leave all changes here and continue with empty initial commit",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Stash all changes (will restore after)", _action(ActionType.STASH_AND_EMPTY)),
            _choice("Cancel"),
        ],
    )


def _main_clean_ahead(state: GitState) -> ScenarioChoices:
    base = state.base_branch
    return ScenarioChoices(
        message=f"You have local commits on '{base}' not yet pushed.",
        sub_message="These commits will NOT be included in the new PR branch by default.",
        choices=[
            _choice(
                "Use these commits for the PR (create branch from HEAD)",
                _action(ActionType.USE_COMMITS, BranchFrom.HEAD),
            ),
            _choice(
                f"Push commits to {state.remote}/{base} first, then create PR branch",
                _action(ActionType.PUSH_THEN_BRANCH),
            ),
            _choice(
                f"Start fresh from {state.remote}/{base} (ignore local commits)",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel"),
        ],
    )


def _main_changes_ahead(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="You have local commits AND uncommitted changes.",
        choices=[
            _choice(
                "Include commits + commit uncommitted changes to PR branch",
                _action(ActionType.USE_COMMITS_AND_COMMIT_ALL, BranchFrom.HEAD),
            ),
            _choice(
                "Include commits only, stash uncommitted changes",
                _action(ActionType.USE_COMMITS_AND_STASH, BranchFrom.HEAD),
            ),
            _choice(
                f"Start fresh from {state.remote}/{state.base_branch} (ignore all local work)",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel"),
        ],
    )


def _branch_same_as_main(state: GitState) -> ScenarioChoices:
    base = state.base_branch
    return ScenarioChoices(
        message=f"Branch '{_branch(state)}' is at the same commit as {base}.",
        sub_message="No divergent commits detected. A PR requires at least one commit difference.",
        choices=[
            _choice(
                f"Continue with empty initial commit (new branch from {base})",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel"),
        ],
    )


def _branch_ancestor(state: GitState) -> ScenarioChoices:
    base = state.base_branch
    return ScenarioChoices(
        message=f"Branch '{_branch(state)}' appears to be already merged into {base}.",
        sub_message="Creating a PR would result in no changes.",
        choices=[
            _choice(
                f"Continue with empty initial commit (new branch from {base})",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel - I'll check the branch status first"),
        ],
    )


def _branch_divergent(state: GitState) -> ScenarioChoices:
    branch = _branch(state)
    base = state.base_branch
    return ScenarioChoices(
        message=f"You are on branch '{branch}' with commits not in {base}.",
        choices=[
            _choice(
                f"Create PR for THIS branch ({branch} → {base})",
                _action(ActionType.CREATE_PR_FOR_BRANCH, BranchFrom.HEAD),
            ),
            _choice(
                f"Create NEW branch from {base} (ignore current branch's commits)",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Cancel"),
        ],
    )


def _branch_with_changes(state: GitState) -> ScenarioChoices:
    branch = _branch(state)
    message = f"You are on branch '{branch}' with uncommitted changes."

    if state.local_commits:
        return ScenarioChoices(
            message=message,
            sub_message=f"Branch also has commits not in {state.base_branch}.",
            choices=[
                _choice(
                    "Create PR for THIS branch, commit changes first",
                    _action(ActionType.PR_FOR_BRANCH_COMMIT_ALL, BranchFrom.HEAD),
                ),
                _choice(
                    "Create PR for THIS branch, stash uncommitted changes",
                    _action(ActionType.PR_FOR_BRANCH_STASH, BranchFrom.HEAD),
                ),
                _choice(
                    f"Create NEW branch from {state.base_branch} (ignore current branch)",
                    _action(ActionType.EMPTY_COMMIT),
                ),
                _choice("Cancel"),
            ],
        )

    return ScenarioChoices(
        message=message,
        choices=[
            _choice(
                "Stage all and commit to a new PR branch",
                _action(ActionType.COMMIT_ALL, BranchFrom.HEAD),
            ),
            _choice(
                "Leave changes and continue with empty initial commit",
                _action(ActionType.EMPTY_COMMIT),
            ),
            _choice("Stash changes (will restore after)", _action(ActionType.STASH_AND_EMPTY)),
            _choice("Cancel"),
        ],
    )


def _detached_head(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="You are in detached HEAD state.",
        choices=[
            _choice(
                "Create branch from this commit",
                _action(ActionType.BRANCH_FROM_DETACHED, BranchFrom.HEAD),
            ),
            _choice(f"Create branch from {state.remote}/{state.base_branch}", _action(ActionType.EMPTY_COMMIT)),
            _choice("Cancel"),
        ],
    )


def _default(state: GitState) -> ScenarioChoices:
    return ScenarioChoices(
        message="Ready to create PR.",
        choices=[
            _choice("Continue with empty initial commit", _action(ActionType.EMPTY_COMMIT)),
            _choice("Cancel"),
        ],
    )


_CATALOG: dict[Scenario, Callable[[GitState], ScenarioChoices]] = {
    Scenario.MAIN_CLEAN_SAME: _main_clean_same,
    Scenario.MAIN_STAGED_SAME: _main_staged_same,
    Scenario.MAIN_UNSTAGED_SAME: _main_unstaged_same,
    Scenario.MAIN_BOTH_SAME: _main_both_same,
    Scenario.MAIN_CLEAN_AHEAD: _main_clean_ahead,
    Scenario.MAIN_CHANGES_AHEAD: _main_changes_ahead,
    Scenario.BRANCH_SAME_AS_MAIN: _branch_same_as_main,
    Scenario.BRANCH_ANCESTOR: _branch_ancestor,
    Scenario.BRANCH_DIVERGENT: _branch_divergent,
    Scenario.BRANCH_WITH_CHANGES: _branch_with_changes,
    Scenario.DETACHED_HEAD: _detached_head,
}


def get_choices(scenario: Scenario, state: GitState) -> ScenarioContext:
    """Get the message and choices for a scenario.

    Returns a ScenarioDelegate for PR worktrees: the caller has to re-run
    the analysis in the worktree that owns the work instead of picking an
    action here. Every other scenario gets a ScenarioChoices whose last
    choice is a cancel.
    """
    if scenario == Scenario.PR_WORKTREE:
        return ScenarioDelegate(scenario=scenario)
    return _CATALOG.get(scenario, _default)(state)


def scenario_message_level(scenario: Scenario) -> MessageLevel:
    if scenario in _WARNING_SCENARIOS:
        return "warning"
    return "info"
