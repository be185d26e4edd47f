"""Tests for WorktreeService"""
from pathlib import Path

import pytest

from git_worktree_keeper.exceptions import WorktreeOperationError
from git_worktree_keeper.models.worktree import BranchSource, BranchSourceMode, WorktreeRecord
from git_worktree_keeper.services.git.worktrees import WorktreeService


PORCELAIN = """worktree /work/widgets
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /work/widgets-worktrees/feature-x
HEAD 2222222222222222222222222222222222222222
branch refs/heads/feature/x

worktree /work/widgets-worktrees/review
HEAD 3333333333333333333333333333333333333333
detached
"""


class TestParsePorcelain:
    """Test parsing of `git worktree list --porcelain`."""

    def test_parse_entries(self):
        records = WorktreeService.parse_porcelain(PORCELAIN)

        assert records == [
            WorktreeRecord(is_main=True, path="/work/widgets", branch="main"),
            WorktreeRecord(is_main=False, path="/work/widgets-worktrees/feature-x", branch="feature/x"),
            WorktreeRecord(is_main=False, path="/work/widgets-worktrees/review", branch=""),
        ]

    def test_parse_without_trailing_blank_line(self):
        records = WorktreeService.parse_porcelain(PORCELAIN.rstrip("\n"))
        assert len(records) == 3

    def test_parse_empty_output(self):
        assert WorktreeService.parse_porcelain("") == []

    def test_porcelain_line(self):
        record = WorktreeRecord(is_main=False, path="/a/b", branch="feature/x")
        assert record.to_porcelain() == "0\t/a/b\tfeature/x"


class TestListWorktrees:
    """Test listing against a real repository."""

    def test_main_only(self, git_repo, context):
        records = WorktreeService(context).list_worktrees()

        assert len(records) == 1
        assert records[0].is_main is True
        assert records[0].branch == "main"
        assert Path(records[0].path).resolve() == Path(git_repo.working_dir).resolve()

    def test_main_worktree(self, context):
        assert WorktreeService(context).main_worktree().branch == "main"


class TestDetermineBranchSource:
    """Test remote > local > new ordering."""

    def test_new_branch(self, context):
        source = WorktreeService(context).determine_branch_source("feature/fresh")
        assert source == BranchSource(BranchSourceMode.NEW, "HEAD")

    def test_new_branch_from_ref(self, context):
        source = WorktreeService(context).determine_branch_source("feature/fresh", "main")
        assert source == BranchSource(BranchSourceMode.NEW, "main")

    def test_local_branch(self, git_repo, context):
        git_repo.git.branch("feature/local")

        source = WorktreeService(context).determine_branch_source("feature/local")
        assert source == BranchSource(BranchSourceMode.LOCAL, "feature/local")

    def test_remote_branch(self, git_repo, context):
        git_repo.git.update_ref("refs/remotes/origin/feature/remote", "HEAD")

        source = WorktreeService(context).determine_branch_source("feature/remote")
        assert source == BranchSource(BranchSourceMode.REMOTE, "origin/feature/remote")

    def test_remote_wins_over_local(self, git_repo, context):
        git_repo.git.branch("feature/both")
        git_repo.git.update_ref("refs/remotes/origin/feature/both", "HEAD")

        source = WorktreeService(context).determine_branch_source("feature/both")
        assert source.mode == BranchSourceMode.REMOTE


class TestWorktreeLifecycle:
    """Test add, remove, prune and dirty checks."""

    def test_add_new_branch(self, git_repo, context, temp_dir):
        service = WorktreeService(context)
        path = str(temp_dir / "trees" / "feature-new")

        service.add_worktree(path, "feature/new", BranchSource(BranchSourceMode.NEW, "HEAD"))

        branches = [r.branch for r in service.list_worktrees()]
        assert "feature/new" in branches
        assert "feature/new" in [h.name for h in git_repo.heads]

    def test_add_local_branch(self, git_repo, context, temp_dir):
        git_repo.git.branch("feature/local")
        service = WorktreeService(context)
        path = str(temp_dir / "trees" / "feature-local")

        service.add_worktree(path, "feature/local", BranchSource(BranchSourceMode.LOCAL, "feature/local"))

        assert Path(path, "README.md").exists()

    def test_add_remote_branch_tracks_it(self, git_repo, context, temp_dir):
        git_repo.git.update_ref("refs/remotes/origin/feature/remote", "HEAD")
        service = WorktreeService(context)
        path = str(temp_dir / "trees" / "feature-remote")

        service.add_worktree(path, "feature/remote", BranchSource(BranchSourceMode.REMOTE, "origin/feature/remote"))

        upstream = git_repo.git.rev_parse("--abbrev-ref", "feature/remote@{upstream}")
        assert upstream == "origin/feature/remote"

    def test_add_existing_path_fails(self, context, git_repo):
        service = WorktreeService(context)

        with pytest.raises(WorktreeOperationError, match="worktree add"):
            service.add_worktree(git_repo.working_dir, "main", BranchSource(BranchSourceMode.LOCAL, "main"))

    def test_remove_worktree(self, context, temp_dir):
        service = WorktreeService(context)
        path = str(temp_dir / "trees" / "gone")
        service.add_worktree(path, "gone", BranchSource(BranchSourceMode.NEW, "HEAD"))

        service.remove_worktree(path)

        assert not Path(path).exists()
        assert len(service.list_worktrees()) == 1

    def test_remove_dirty_worktree_needs_force(self, context, temp_dir):
        service = WorktreeService(context)
        path = temp_dir / "trees" / "dirty"
        service.add_worktree(str(path), "dirty", BranchSource(BranchSourceMode.NEW, "HEAD"))
        (path / "README.md").write_text("changed\n")

        with pytest.raises(WorktreeOperationError):
            service.remove_worktree(str(path))

        service.remove_worktree(str(path), force=True)
        assert not path.exists()

    def test_is_dirty(self, context, temp_dir):
        service = WorktreeService(context)
        path = temp_dir / "trees" / "wip"
        service.add_worktree(str(path), "wip", BranchSource(BranchSourceMode.NEW, "HEAD"))

        assert service.is_dirty(str(path)) is False
        (path / "notes.txt").write_text("untracked\n")
        assert service.is_dirty(str(path)) is True

    def test_is_dirty_missing_path(self, context, temp_dir):
        assert WorktreeService(context).is_dirty(str(temp_dir / "nowhere")) is False

    def test_prune_orphaned_worktree(self, context, temp_dir):
        import shutil

        service = WorktreeService(context)
        path = temp_dir / "trees" / "orphan"
        service.add_worktree(str(path), "orphan", BranchSource(BranchSourceMode.NEW, "HEAD"))
        shutil.rmtree(path)

        service.prune_worktrees()

        assert [r.branch for r in service.list_worktrees()] == ["main"]
