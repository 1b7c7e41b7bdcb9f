"""Tests for executing an action's pre-branch git steps."""

from pathlib import Path

import pytest

from wtstate.executor import (
    ACTION_DESCRIPTIONS,
    WIP_COMMIT_MESSAGE,
    describe_action,
    execute_state_action,
    get_branch_point,
    involves_stashing,
    is_existing_branch_action,
)
from wtstate.git_ops import get_changed_files
from wtstate.models import ActionType, BranchFrom, StateAction


def _action(action_type, branch_from=BranchFrom.ORIGIN_MAIN, stash_unstaged=False):
    return StateAction(action=action_type, branch_from=branch_from, stash_unstaged=stash_unstaged)


class TestHelpers:
    def test_every_action_described(self):
        assert set(ACTION_DESCRIPTIONS) == set(ActionType)
        assert describe_action(ActionType.EMPTY_COMMIT) == "Creating empty initial commit"

    def test_branch_point_head(self):
        assert get_branch_point(_action(ActionType.USE_COMMITS, BranchFrom.HEAD)) == "HEAD"

    def test_branch_point_remote(self):
        action = _action(ActionType.EMPTY_COMMIT)
        assert get_branch_point(action) == "origin/main"
        assert get_branch_point(action, "develop", "upstream") == "upstream/develop"

    @pytest.mark.parametrize(
        "action_type, expected",
        [
            (ActionType.CREATE_PR_FOR_BRANCH, True),
            (ActionType.PR_FOR_BRANCH_COMMIT_ALL, True),
            (ActionType.PR_FOR_BRANCH_STASH, True),
            (ActionType.USE_COMMITS, False),
            (ActionType.EMPTY_COMMIT, False),
        ],
    )
    def test_existing_branch_actions(self, action_type, expected):
        assert is_existing_branch_action(_action(action_type)) is expected

    def test_involves_stashing(self):
        assert involves_stashing(_action(ActionType.STASH_AND_EMPTY))
        assert involves_stashing(_action(ActionType.COMMIT_STAGED, stash_unstaged=True))
        assert not involves_stashing(_action(ActionType.COMMIT_ALL))


class TestExecuteStateAction:
    """Running actions against real repositories."""

    def test_empty_commit_touches_nothing(self, repo_with_origin):
        head = repo_with_origin.head.commit
        (Path(repo_with_origin.working_tree_dir) / "notes.txt").write_text("keep")

        result = execute_state_action(repo_with_origin, _action(ActionType.EMPTY_COMMIT), "feat/x")

        assert result.success
        assert result.branch_point == "origin/main"
        assert result.stash_ref is None
        assert repo_with_origin.head.commit == head
        assert get_changed_files(repo_with_origin) == ([], ["notes.txt"])

    def test_commit_all_stages_everything(self, repo_with_origin):
        work_dir = Path(repo_with_origin.working_tree_dir)
        (work_dir / "initial.txt").write_text("changed")
        (work_dir / "new.txt").write_text("new")

        result = execute_state_action(
            repo_with_origin, _action(ActionType.COMMIT_ALL, BranchFrom.HEAD), "feat/x"
        )

        assert result.success
        assert result.branch_point == "HEAD"
        staged, unstaged = get_changed_files(repo_with_origin)
        assert sorted(staged) == ["initial.txt", "new.txt"]
        assert unstaged == []

    def test_stash_and_empty(self, repo_with_origin):
        (Path(repo_with_origin.working_tree_dir) / "initial.txt").write_text("changed")

        result = execute_state_action(
            repo_with_origin, _action(ActionType.STASH_AND_EMPTY), "feat/login"
        )

        assert result.success
        assert result.stash_ref == "stash@{0}"
        assert get_changed_files(repo_with_origin) == ([], [])
        assert "before creating feat/login" in repo_with_origin.git.stash("list")

    def test_stash_with_clean_tree(self, repo_with_origin):
        result = execute_state_action(repo_with_origin, _action(ActionType.STASH_AND_EMPTY), "feat/x")

        assert result.success
        assert result.stash_ref is None

    def test_commit_staged_stashes_unstaged(self, repo_with_origin):
        """Staged work stays for the new branch; the rest is stashed."""
        work_dir = Path(repo_with_origin.working_tree_dir)
        (work_dir / "staged.txt").write_text("mine")
        repo_with_origin.index.add(["staged.txt"])
        (work_dir / "initial.txt").write_text("later")

        action = _action(ActionType.COMMIT_STAGED, BranchFrom.HEAD, stash_unstaged=True)
        result = execute_state_action(repo_with_origin, action, "feat/x")

        assert result.success
        assert result.stash_ref == "stash@{0}"
        assert get_changed_files(repo_with_origin) == (["staged.txt"], [])

    def test_push_then_branch(self, repo_with_origin, commit_file):
        commit_file(repo_with_origin, "a.txt", "a", "Unpushed")

        result = execute_state_action(repo_with_origin, _action(ActionType.PUSH_THEN_BRANCH), "feat/x")

        assert result.success
        assert repo_with_origin.commit("origin/main") == repo_with_origin.head.commit

    def test_push_failure_is_reported(self, repo_with_commit):
        result = execute_state_action(repo_with_commit, _action(ActionType.PUSH_THEN_BRANCH), "feat/x")

        assert not result.success
        assert "Failed to push" in result.message

    def test_pr_for_branch_commit_all(self, repo_with_origin):
        repo_with_origin.git.checkout("-b", "feat/x")
        (Path(repo_with_origin.working_tree_dir) / "wip.txt").write_text("wip")

        action = _action(ActionType.PR_FOR_BRANCH_COMMIT_ALL, BranchFrom.HEAD)
        result = execute_state_action(repo_with_origin, action, "feat/x")

        assert result.success
        assert result.uses_current_branch
        assert repo_with_origin.head.commit.message.strip() == WIP_COMMIT_MESSAGE
        assert get_changed_files(repo_with_origin) == ([], [])

    def test_pr_for_branch_stash(self, repo_with_origin):
        repo_with_origin.git.checkout("-b", "feat/x")
        (Path(repo_with_origin.working_tree_dir) / "wip.txt").write_text("wip")

        action = _action(ActionType.PR_FOR_BRANCH_STASH, BranchFrom.HEAD)
        result = execute_state_action(repo_with_origin, action, "ignored")

        assert result.success
        assert result.uses_current_branch
        assert "before creating PR" in repo_with_origin.git.stash("list")

    def test_use_commits_is_a_no_op(self, repo_with_origin, commit_file):
        commit_file(repo_with_origin, "a.txt", "a", "Unpushed")
        head = repo_with_origin.head.commit

        action = _action(ActionType.USE_COMMITS, BranchFrom.HEAD)
        result = execute_state_action(repo_with_origin, action, "feat/x")

        assert result.success
        assert not result.uses_current_branch
        assert repo_with_origin.head.commit == head
