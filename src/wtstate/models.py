"""Data models for wtstate."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommitRelation(str, Enum):
    """Relationship of HEAD to the base branch's remote tip."""

    SAME = "same"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    ANCESTOR = "ancestor"


class WorktreeType(str, Enum):
    """Kind of worktree the analysis runs in."""

    MAIN_WORKTREE = "main_worktree"
    PR_WORKTREE = "pr_worktree"
    OTHER = "other"


class Scenario(str, Enum):
    """Closed set of git state shapes."""

    MAIN_CLEAN_SAME = "main_clean_same"
    MAIN_STAGED_SAME = "main_staged_same"
    MAIN_UNSTAGED_SAME = "main_unstaged_same"
    MAIN_BOTH_SAME = "main_both_same"
    MAIN_CLEAN_AHEAD = "main_clean_ahead"
    MAIN_CHANGES_AHEAD = "main_changes_ahead"
    BRANCH_SAME_AS_MAIN = "branch_same_as_main"
    BRANCH_ANCESTOR = "branch_ancestor"
    BRANCH_DIVERGENT = "branch_divergent"
    BRANCH_WITH_CHANGES = "branch_with_changes"
    DETACHED_HEAD = "detached_head"
    PR_WORKTREE = "pr_worktree"


class ActionType(str, Enum):
    """Action keys offered to users and automation.

    These strings are a public contract: scripts pin them, so keys may be
    added but never renamed or reused.
    """

    EMPTY_COMMIT = "empty_commit"
    COMMIT_STAGED = "commit_staged"
    COMMIT_ALL = "commit_all"
    STASH_AND_EMPTY = "stash_and_empty"
    USE_COMMITS = "use_commits"
    PUSH_THEN_BRANCH = "push_then_branch"
    USE_COMMITS_AND_COMMIT_ALL = "use_commits_and_commit_all"
    USE_COMMITS_AND_STASH = "use_commits_and_stash"
    CREATE_PR_FOR_BRANCH = "create_pr_for_branch"
    PR_FOR_BRANCH_COMMIT_ALL = "pr_for_branch_commit_all"
    PR_FOR_BRANCH_STASH = "pr_for_branch_stash"
    BRANCH_FROM_DETACHED = "branch_from_detached"


class BranchFrom(str, Enum):
    """Where a new branch is rooted."""

    ORIGIN_MAIN = "origin_main"
    HEAD = "head"


class Worktree(BaseModel):
    """One entry of `git worktree list --porcelain`."""

    path: str = Field(description="Absolute path of the worktree")
    branch: str | None = Field(default=None, description="Checked-out branch, None if detached")
    commit: str = Field(default="", description="HEAD commit sha")
    is_main: bool = False
    is_bare: bool = False
    is_locked: bool = False
    is_prunable: bool = False


class GitState(BaseModel):
    """Snapshot of the working tree taken once per analysis."""

    model_config = ConfigDict(frozen=True)

    current_branch: str | None = Field(description="Checked-out branch, None for detached HEAD")
    base_branch: str = Field(description="Branch new work is compared against")
    remote: str = Field(default="origin", description="Remote holding the base branch")
    is_base_branch: bool = Field(description="Whether the current branch is the base branch")
    commit_relation: CommitRelation = Field(description="HEAD relative to the remote base tip")
    staged_files: list[str] = Field(default_factory=list, description="Paths staged in the index")
    unstaged_files: list[str] = Field(
        default_factory=list, description="Modified or untracked paths not staged"
    )
    local_commits: list[str] = Field(
        default_factory=list, description="'<sha> <summary>' of commits not in the remote base"
    )
    worktree_type: WorktreeType = Field(default=WorktreeType.MAIN_WORKTREE)
    repo_root: str | None = Field(default=None, description="Top-level directory of the worktree")
    repo_name: str | None = Field(default=None, description="Name of the repository")

    @property
    def has_staged(self) -> bool:
        return bool(self.staged_files)

    @property
    def has_unstaged(self) -> bool:
        return bool(self.unstaged_files)

    @property
    def has_changes(self) -> bool:
        return self.has_staged or self.has_unstaged


class StateAction(BaseModel):
    """A concrete recipe for resolving a scenario."""

    model_config = ConfigDict(frozen=True)

    action: ActionType
    branch_from: BranchFrom = BranchFrom.ORIGIN_MAIN
    stash_unstaged: bool = False


class ScenarioChoice(BaseModel):
    """One option presented for a scenario. A None action means cancel."""

    label: str
    action: StateAction | None = None


class ScenarioChoices(BaseModel):
    """The catalog's answer for scenarios that can be resolved directly."""

    kind: Literal["choices"] = "choices"
    message: str
    sub_message: str | None = None
    choices: list[ScenarioChoice]


class ScenarioDelegate(BaseModel):
    """The catalog's answer when analysis must be repeated in another worktree."""

    kind: Literal["delegate"] = "delegate"
    scenario: Scenario


ScenarioContext = Union[ScenarioChoices, ScenarioDelegate]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AvailableAction(_CamelModel):
    """A non-cancel choice reduced to its machine-usable key."""

    key: ActionType
    label: str


class StateAnalysisReport(_CamelModel):
    """Result of analyzing the current git state."""

    scenario: Scenario
    scenario_description: str
    current_branch: str | None
    base_branch: str
    worktree_type: WorktreeType
    has_changes: bool
    has_staged_changes: bool
    has_unstaged_changes: bool
    local_commits: list[str] = Field(default_factory=list)
    staged_files: list[str] = Field(default_factory=list)
    unstaged_files: list[str] = Field(default_factory=list)
    available_actions: list[AvailableAction] = Field(default_factory=list)
    recommended_action: ActionType | None = None

    def action_keys(self) -> list[ActionType]:
        return [a.key for a in self.available_actions]

    def to_json_data(self, include_files: bool = True) -> dict:
        """Serialize with camelCase keys, optionally dropping the file lists."""
        data = self.model_dump(mode="json", by_alias=True)
        if not include_files:
            data["stagedFiles"] = []
            data["unstagedFiles"] = []
        return data


class ActionResult(_CamelModel):
    """Outcome of executing the pre-branch steps of a StateAction."""

    success: bool
    action: ActionType
    branch_point: str = Field(description="Ref the new branch should start from")
    uses_current_branch: bool = Field(default=False, description="PR targets the current branch")
    stash_ref: str | None = None
    message: str | None = None
