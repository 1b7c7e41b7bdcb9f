"""Execute the git steps a StateAction needs before its branch is created."""

from __future__ import annotations

from git import Repo
from loguru import logger

from wtstate.git_ops import GitError, create_commit, push_branch, stage_all, stash_changes
from wtstate.models import ActionResult, ActionType, BranchFrom, StateAction

WIP_COMMIT_MESSAGE = "chore: work in progress"

_STAGE_ALL = {ActionType.COMMIT_ALL, ActionType.USE_COMMITS_AND_COMMIT_ALL}
_STASH = {ActionType.STASH_AND_EMPTY, ActionType.USE_COMMITS_AND_STASH, ActionType.PR_FOR_BRANCH_STASH}
_EXISTING_BRANCH = {
    ActionType.CREATE_PR_FOR_BRANCH,
    ActionType.PR_FOR_BRANCH_COMMIT_ALL,
    ActionType.PR_FOR_BRANCH_STASH,
}

ACTION_DESCRIPTIONS: dict[ActionType, str] = {
    ActionType.EMPTY_COMMIT: "Creating empty initial commit",
    ActionType.COMMIT_STAGED: "Committing staged changes",
    ActionType.COMMIT_ALL: "Staging and committing all changes",
    ActionType.STASH_AND_EMPTY: "Stashing changes and creating empty commit",
    ActionType.USE_COMMITS: "Using existing commits for PR",
    ActionType.PUSH_THEN_BRANCH: "Pushing to base branch before creating branch",
    ActionType.USE_COMMITS_AND_COMMIT_ALL: "Using commits and staging all changes",
    ActionType.USE_COMMITS_AND_STASH: "Using commits and stashing uncommitted changes",
    ActionType.CREATE_PR_FOR_BRANCH: "Creating PR for current branch",
    ActionType.PR_FOR_BRANCH_COMMIT_ALL: "Committing changes to current branch for PR",
    ActionType.PR_FOR_BRANCH_STASH: "Stashing changes before creating PR",
    ActionType.BRANCH_FROM_DETACHED: "Creating branch from detached HEAD",
}


def describe_action(action_type: ActionType) -> str:
    return ACTION_DESCRIPTIONS.get(action_type, "Executing action")


def get_branch_point(action: StateAction, base_branch: str = "main", remote: str = "origin") -> str:
    """Ref the new branch should be created from."""
    if action.branch_from == BranchFrom.HEAD:
        return "HEAD"
    return f"{remote}/{base_branch}"


def is_existing_branch_action(action: StateAction) -> bool:
    """True when the PR is opened for the current branch rather than a new one."""
    return action.action in _EXISTING_BRANCH


def involves_stashing(action: StateAction) -> bool:
    return action.action in _STASH or action.stash_unstaged


def execute_state_action(
    repo: Repo,
    action: StateAction,
    branch_name: str,
    base_branch: str = "main",
    remote: str = "origin",
) -> ActionResult:
    """Run the pre-branch steps for an action.

    Git failures do not propagate; they come back as an unsuccessful result
    carrying the error message and any stash that was already created.

    Args:
        repo: Repository to operate on.
        action: The chosen action.
        branch_name: Name of the branch that will be created, used in stash messages.
        base_branch: Base branch name.
        remote: Remote holding the base branch.
    """
    stash_ref: str | None = None
    action_type = action.action
    branch_point = get_branch_point(action, base_branch, remote)
    logger.debug(f"{describe_action(action_type)} ({action_type.value}, from {branch_point})")

    try:
        if action_type in _STAGE_ALL:
            stage_all(repo)
        elif action_type in _STASH:
            target = branch_name if action_type != ActionType.PR_FOR_BRANCH_STASH else "PR"
            stash_ref = stash_changes(repo, f"wtstate: auto-stash before creating {target}")
        elif action_type == ActionType.PUSH_THEN_BRANCH:
            push_branch(repo, remote, base_branch)
        elif action_type == ActionType.PR_FOR_BRANCH_COMMIT_ALL:
            stage_all(repo)
            create_commit(repo, WIP_COMMIT_MESSAGE)
        elif action.stash_unstaged:
            # Staged work goes to the new branch; the rest waits in the stash.
            stash_ref = stash_changes(
                repo, f"wtstate: unstaged changes before creating {branch_name}", keep_index=True
            )
    except GitError as e:
        logger.debug(f"{action_type.value} failed: {e}")
        return ActionResult(
            success=False,
            action=action_type,
            branch_point=branch_point,
            uses_current_branch=is_existing_branch_action(action),
            stash_ref=stash_ref,
            message=str(e),
        )

    return ActionResult(
        success=True,
        action=action_type,
        branch_point=branch_point,
        uses_current_branch=is_existing_branch_action(action),
        stash_ref=stash_ref,
    )
