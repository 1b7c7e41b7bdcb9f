"""Git operations layer for wtstate."""

from __future__ import annotations

import re
from pathlib import Path

from git import Repo
from git.exc import BadName, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from wtstate.models import CommitRelation, Worktree, WorktreeType

PR_WORKTREE_RE = re.compile(r"\.pr\d+")


class GitError(Exception):
    """Custom exception for git operation errors."""
    pass


class NotAGitRepositoryError(GitError):
    """Raised when the working directory is not inside a git repository."""
    pass


def get_repo(path: str | Path = ".") -> Repo:
    """Get the git repository at the given path.

    Args:
        path: Any directory inside the repository. Defaults to current directory.

    Returns:
        The git Repo object.

    Raises:
        NotAGitRepositoryError: If the path is not inside a git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise NotAGitRepositoryError(f"Not a git repository: {path}")


def get_repo_root(repo: Repo) -> Path:
    """Get the top-level directory of the worktree.

    Raises:
        GitError: For bare repositories, which have no working tree.
    """
    if repo.working_tree_dir is None:
        raise GitError("Repository has no working tree")
    return Path(repo.working_tree_dir)


def get_repo_name(repo: Repo, remote: str = "origin") -> str:
    """Name of the repository, taken from the remote URL when there is one."""
    try:
        url = repo.remote(remote).url
    except ValueError:
        return get_repo_root(repo).name
    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return name[:-4] if name.endswith(".git") else name


def get_current_branch(repo: Repo) -> str | None:
    """Current branch name, or None when HEAD is detached."""
    if repo.head.is_detached:
        return None
    return repo.active_branch.name


def get_head_commit(repo: Repo) -> str:
    """Full sha of HEAD.

    Raises:
        GitError: If the repository has no commits yet.
    """
    try:
        return repo.head.commit.hexsha
    except ValueError:
        raise GitError("Repository has no commits yet")


def _resolve_ref(repo: Repo, ref: str) -> str | None:
    try:
        return repo.commit(ref).hexsha
    except (BadName, ValueError):
        return None


def get_commit_relation(repo: Repo, base_branch: str = "main", remote: str = "origin") -> CommitRelation:
    """Determine how HEAD relates to the remote tip of the base branch.

    A missing remote ref is reported as diverged, since nothing can be
    assumed about the shared history. A HEAD strictly behind the remote tip
    is an ancestor of it and is reported as ANCESTOR; BEHIND is never
    produced here.
    """
    base_ref = f"{remote}/{base_branch}"
    head_commit = get_head_commit(repo)
    base_commit = _resolve_ref(repo, base_ref)

    if base_commit is None:
        logger.debug(f"{base_ref} not found, treating HEAD as diverged")
        return CommitRelation.DIVERGED
    if head_commit == base_commit:
        return CommitRelation.SAME

    try:
        if repo.is_ancestor(head_commit, base_commit):
            return CommitRelation.ANCESTOR
        if repo.is_ancestor(base_commit, head_commit):
            return CommitRelation.AHEAD
    except GitCommandError as e:
        raise GitError(f"Failed to compare HEAD with {base_ref}: {e}")

    return CommitRelation.DIVERGED


def get_commits_ahead(repo: Repo, base_branch: str = "main", remote: str = "origin") -> list[str]:
    """List commits on HEAD that are not in the remote base branch.

    Returns:
        '<short sha> <summary>' strings, newest first. Empty when the remote
        base branch does not exist.
    """
    base_ref = f"{remote}/{base_branch}"
    if _resolve_ref(repo, base_ref) is None:
        return []

    try:
        return [
            f"{commit.hexsha[:7]} {commit.summary}"
            for commit in repo.iter_commits(f"{base_ref}..HEAD")
        ]
    except GitCommandError as e:
        raise GitError(f"Failed to list commits ahead of {base_ref}: {e}")


def get_changed_files(repo: Repo) -> tuple[list[str], list[str]]:
    """Split working tree changes into staged and unstaged paths.

    Untracked files count as unstaged. A path modified both in the index
    and in the working tree appears in both lists.

    Returns:
        (staged_files, unstaged_files)
    """
    try:
        output = repo.git.status("--porcelain=v2", "-z", "--untracked-files=all")
    except GitCommandError as e:
        raise GitError(f"Failed to read git status: {e}")

    staged: list[str] = []
    unstaged: list[str] = []

    # With -z paths are unquoted and every record ends in NUL; a rename
    # record is followed by one extra NUL-terminated origPath.
    records = iter(output.split("\0"))
    for record in records:
        if record.startswith("1 ") or record.startswith("2 "):
            # "1 XY sub mH mI mW hH hI path"
            # "2 XY sub mH mI mW hH hI Xscore path"
            is_rename = record.startswith("2 ")
            max_split = 9 if is_rename else 8
            if is_rename:
                next(records, None)
            parts = record.split(" ", max_split)
            if len(parts) < max_split + 1:
                continue
            xy = parts[1]
            path = parts[max_split]
            if xy[0] != ".":
                staged.append(path)
            if xy[1] != ".":
                unstaged.append(path)
        elif record.startswith("u "):
            parts = record.split(" ", 10)
            if len(parts) == 11:
                staged.append(parts[10])
        elif record.startswith("? "):
            unstaged.append(record[2:])

    return staged, unstaged


def list_worktrees(repo: Repo) -> list[Worktree]:
    """Parse `git worktree list --porcelain`.

    The first non-bare entry is the main worktree.
    """
    try:
        output = repo.git.worktree("list", "--porcelain")
    except GitCommandError as e:
        raise GitError(f"Failed to list worktrees: {e}")

    worktrees: list[Worktree] = []
    current: dict | None = None

    for line in output.splitlines():
        if line.startswith("worktree "):
            if current is not None:
                worktrees.append(Worktree(**current))
            current = {"path": line[len("worktree "):]}
        elif current is None:
            continue
        elif line.startswith("HEAD "):
            current["commit"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            current["branch"] = line[len("branch "):].removeprefix("refs/heads/")
        elif line == "bare":
            current["is_bare"] = True
            current["is_main"] = True
        elif line.startswith("locked"):
            current["is_locked"] = True
        elif line.startswith("prunable"):
            current["is_prunable"] = True

    if current is not None:
        worktrees.append(Worktree(**current))

    for worktree in worktrees:
        if not worktree.is_bare:
            worktree.is_main = True
            break

    return worktrees


def detect_worktree_type(repo: Repo) -> WorktreeType:
    """Classify the worktree the repo object was opened in.

    Directories named like '<repo>.pr<number>' and linked worktrees are PR
    worktrees; a directory missing from the inventory is 'other'.
    """
    root = get_repo_root(repo).resolve()
    if PR_WORKTREE_RE.search(root.name):
        return WorktreeType.PR_WORKTREE

    for worktree in list_worktrees(repo):
        if Path(worktree.path).resolve() == root:
            return WorktreeType.MAIN_WORKTREE if worktree.is_main else WorktreeType.PR_WORKTREE

    return WorktreeType.OTHER


def stage_all(repo: Repo) -> None:
    """Stage every change, including untracked files.

    Raises:
        GitError: If staging fails.
    """
    try:
        repo.git.add("-A")
    except GitCommandError as e:
        raise GitError(f"Failed to stage files: {e}")


def stash_changes(repo: Repo, message: str, keep_index: bool = False) -> str | None:
    """Stash tracked and untracked changes.

    Args:
        repo: The git Repo object.
        message: Stash message.
        keep_index: Leave staged changes in the index.

    Returns:
        The stash ref, or None when there was nothing to stash.

    Raises:
        GitError: If the stash fails.
    """
    if not repo.is_dirty(index=not keep_index, untracked_files=True):
        return None

    args = ["push", "--include-untracked", "-m", message]
    if keep_index:
        args.insert(1, "--keep-index")
    try:
        repo.git.stash(*args)
    except GitCommandError as e:
        raise GitError(f"Failed to stash changes: {e}")
    return "stash@{0}"


def push_branch(repo: Repo, remote: str, branch: str) -> None:
    """Push a local branch to the remote.

    Raises:
        GitError: If the push fails.
    """
    try:
        repo.git.push(remote, branch)
    except GitCommandError as e:
        raise GitError(f"Failed to push {branch} to {remote}: {e}")


def create_commit(repo: Repo, message: str, allow_empty: bool = False) -> str:
    """Create a commit with the staged changes.

    Args:
        repo: The git Repo object.
        message: The commit message.
        allow_empty: Permit a commit without changes.

    Returns:
        The short hash of the new commit.

    Raises:
        GitError: If the commit fails.
    """
    args = ["-m", message]
    if allow_empty:
        args.append("--allow-empty")
    try:
        repo.git.commit(*args)
        return repo.git.rev_parse("HEAD", short=7)
    except GitCommandError as e:
        raise GitError(f"Failed to create commit: {e}")
