"""Shared fixtures: throwaway git repositories built with GitPython."""

from pathlib import Path

import pytest
from git import Repo
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Keep loguru sinks from leaking between tests (the CLI installs its own)."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def caplog(caplog):
    """Route loguru records into pytest's caplog."""
    handler_id = logger.add(caplog.handler, format="{message}", level=0)
    yield caplog
    logger.remove(handler_id)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the user config at an empty directory and clear env overrides."""
    xdg = tmp_path / "xdg"
    xdg.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("WTSTATE_BASE_BRANCH", raising=False)
    monkeypatch.delenv("WTSTATE_REMOTE", raising=False)
    monkeypatch.delenv("WTSTATE_DEBUG", raising=False)
    return xdg


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo_dir = tmp_path / "project"
    repo_dir.mkdir()
    repo = Repo.init(repo_dir)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    return repo


@pytest.fixture
def commit_file():
    """Return a helper that writes a file and commits it."""

    def _commit(repo: Repo, name: str, content: str, message: str) -> str:
        path = Path(repo.working_tree_dir) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        repo.index.add([name])
        return repo.index.commit(message).hexsha

    return _commit


@pytest.fixture
def repo_with_commit(temp_repo, commit_file):
    """Create a repo on 'main' with an initial commit."""
    commit_file(temp_repo, "initial.txt", "initial content", "Initial commit")
    temp_repo.git.branch("-M", "main")
    return temp_repo


@pytest.fixture
def repo_with_origin(repo_with_commit, tmp_path):
    """A repo whose 'main' is pushed to a bare 'origin' remote."""
    origin_path = tmp_path / "origin.git"
    Repo.init(origin_path, bare=True)
    repo_with_commit.create_remote("origin", str(origin_path))
    repo_with_commit.git.push("-u", "origin", "main")
    return repo_with_commit


@pytest.fixture
def repo_dir(repo_with_origin) -> Path:
    return Path(repo_with_origin.working_tree_dir)
