"""Git state snapshot and scenario classification."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from wtstate.git_ops import (
    detect_worktree_type,
    get_changed_files,
    get_commit_relation,
    get_commits_ahead,
    get_current_branch,
    get_repo,
    get_repo_name,
    get_repo_root,
)
from wtstate.models import CommitRelation, GitState, Scenario, WorktreeType

DEFAULT_BASE_BRANCH = "main"
DEFAULT_REMOTE = "origin"

SCENARIO_DESCRIPTIONS: dict[Scenario, str] = {
    Scenario.MAIN_CLEAN_SAME: "On {base} branch, same as {remote}/{base}, no changes",
    Scenario.MAIN_STAGED_SAME: "On {base} branch, same as {remote}/{base}, staged changes only",
    Scenario.MAIN_UNSTAGED_SAME: "On {base} branch, same as {remote}/{base}, unstaged changes only",
    Scenario.MAIN_BOTH_SAME: "On {base} branch, same as {remote}/{base}, both staged and unstaged changes",
    Scenario.MAIN_CLEAN_AHEAD: "On {base} branch, ahead of {remote}/{base}, no uncommitted changes",
    Scenario.MAIN_CHANGES_AHEAD: "On {base} branch, ahead of {remote}/{base}, with uncommitted changes",
    Scenario.BRANCH_SAME_AS_MAIN: "On feature branch at same commit as {base} (no divergent commits)",
    Scenario.BRANCH_ANCESTOR: "On feature branch that is an ancestor of {base} (already merged)",
    Scenario.BRANCH_DIVERGENT: "On feature branch with commits not in {base}",
    Scenario.BRANCH_WITH_CHANGES: "On feature branch with uncommitted changes",
    Scenario.DETACHED_HEAD: "In detached HEAD state",
    Scenario.PR_WORKTREE: "In a PR worktree (not the main worktree)",
}


def probe_git_state(
    base_branch: str = DEFAULT_BASE_BRANCH,
    remote: str = DEFAULT_REMOTE,
    path: str | Path = ".",
) -> GitState:
    """Take a snapshot of the repository containing `path`.

    Raises:
        NotAGitRepositoryError: If `path` is not inside a repository.
        GitError: If any git query fails.
    """
    repo = get_repo(path)
    current_branch = get_current_branch(repo)
    staged, unstaged = get_changed_files(repo)

    state = GitState(
        current_branch=current_branch,
        base_branch=base_branch,
        remote=remote,
        is_base_branch=current_branch == base_branch,
        commit_relation=get_commit_relation(repo, base_branch, remote),
        staged_files=staged,
        unstaged_files=unstaged,
        local_commits=get_commits_ahead(repo, base_branch, remote),
        worktree_type=detect_worktree_type(repo),
        repo_root=str(get_repo_root(repo)),
        repo_name=get_repo_name(repo, remote),
    )
    logger.debug(
        f"Probed {state.repo_root}: branch={state.current_branch} "
        f"relation={state.commit_relation.value} staged={len(staged)} "
        f"unstaged={len(unstaged)} commits={len(state.local_commits)} "
        f"worktree={state.worktree_type.value}"
    )
    return state


def classify(state: GitState) -> Scenario:
    """Map a snapshot to exactly one scenario.

    Rules are evaluated in priority order and the first match wins. Every
    input yields a scenario; nothing here raises.
    """
    if state.worktree_type == WorktreeType.PR_WORKTREE:
        return Scenario.PR_WORKTREE

    if state.current_branch is None:
        return Scenario.DETACHED_HEAD

    relation = state.commit_relation

    if state.is_base_branch:
        # Behind can still branch from the remote tip, so it reads like same.
        if relation in (CommitRelation.SAME, CommitRelation.BEHIND):
            if state.has_staged and state.has_unstaged:
                return Scenario.MAIN_BOTH_SAME
            if state.has_staged:
                return Scenario.MAIN_STAGED_SAME
            if state.has_unstaged:
                return Scenario.MAIN_UNSTAGED_SAME
            return Scenario.MAIN_CLEAN_SAME
        if relation in (CommitRelation.AHEAD, CommitRelation.DIVERGED):
            if state.has_changes:
                return Scenario.MAIN_CHANGES_AHEAD
            return Scenario.MAIN_CLEAN_AHEAD
        return Scenario.MAIN_CLEAN_SAME

    if state.has_changes:
        return Scenario.BRANCH_WITH_CHANGES
    if relation == CommitRelation.SAME:
        return Scenario.BRANCH_SAME_AS_MAIN
    if relation == CommitRelation.ANCESTOR:
        return Scenario.BRANCH_ANCESTOR
    if state.local_commits or relation in (CommitRelation.AHEAD, CommitRelation.DIVERGED):
        return Scenario.BRANCH_DIVERGENT

    # Clean, behind, nothing of its own: offer the no-commits change table.
    return Scenario.BRANCH_WITH_CHANGES


def describe_scenario(
    scenario: Scenario, base_branch: str = DEFAULT_BASE_BRANCH, remote: str = DEFAULT_REMOTE
) -> str:
    template = SCENARIO_DESCRIPTIONS.get(scenario, "Unknown scenario")
    return template.format(base=base_branch, remote=remote)
