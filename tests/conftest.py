"""Pytest fixtures for git-worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.models.worktree import WorktreeRecord


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture(autouse=True)
def isolated_git_config(temp_dir, monkeypatch):
    """Point global and system git config at empty files and clear WTK_* variables."""
    global_config = temp_dir / "gitconfig-global"
    system_config = temp_dir / "gitconfig-system"
    global_config.write_text("")
    system_config.write_text("")

    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_SYSTEM", str(system_config))
    monkeypatch.setenv("HOME", str(temp_dir / "home"))
    for name in list(os.environ):
        if name.startswith("WTK_"):
            monkeypatch.delenv(name)

    return {"global": global_config, "system": system_config}


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with a GitHub origin remote."""
    repo_path = temp_dir / "widgets"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Widgets\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    repo.create_remote('origin', 'git@github.com:acme/widgets.git')

    yield repo

    repo.close()


@pytest.fixture
def context(git_repo):
    """Execution context for the test repository."""
    return ExecutionContext(repo_root=Path(git_repo.working_dir))


@pytest.fixture
def context_factory(git_repo):
    """Build execution contexts for the test repository with extra environment variables."""
    def factory(**env):
        return ExecutionContext(repo_root=Path(git_repo.working_dir), env={**os.environ, **env})
    return factory


@pytest.fixture
def records():
    """Worktree records: the main checkout plus three worktrees."""
    return [
        WorktreeRecord(is_main=True, path="/work/widgets", branch="main"),
        WorktreeRecord(is_main=False, path="/work/widgets-worktrees/feature-user-auth", branch="feature/user-auth"),
        WorktreeRecord(is_main=False, path="/work/widgets-worktrees/bugfix", branch="bugfix"),
        WorktreeRecord(is_main=False, path="/elsewhere/hotfix-checkout", branch="hotfix"),
    ]


@pytest.fixture
def mock_worktree_service(records):
    """Create a mock WorktreeService listing ``records``."""
    from git_worktree_keeper.services.git.worktrees import WorktreeService

    service = Mock(spec=WorktreeService)
    service.list_worktrees = Mock(return_value=records)
    return service
