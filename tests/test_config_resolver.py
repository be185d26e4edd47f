"""Tests for ConfigResolver"""
import logging
from unittest.mock import patch

from git_worktree_keeper.services.config_resolver import ConfigResolver


def set_local(repo, key, *values):
    for value in values:
        repo.git.config("--local", "--add", key, value)


def set_team(repo, key, *values):
    path = f"{repo.working_dir}/.wtkconfig"
    for value in values:
        repo.git.config("-f", path, "--add", key, value)


def set_global(repo, key, *values):
    for value in values:
        repo.git.config("--global", "--add", key, value)


class TestResolveScalar:
    """Test single-valued key precedence."""

    def test_local_beats_every_other_source(self, git_repo, context_factory):
        set_local(git_repo, "wtk.worktrees.dir", "local-dir")
        set_team(git_repo, "wtk.worktrees.dir", "team-dir")
        set_global(git_repo, "wtk.worktrees.dir", "global-dir")
        resolver = ConfigResolver(context_factory(WTK_WORKTREES_DIR="env-dir"))

        assert resolver.resolve_scalar("wtk.worktrees.dir", "WTK_WORKTREES_DIR", "fallback") == "local-dir"

    def test_team_file_beats_global(self, git_repo, context):
        set_team(git_repo, "wtk.worktrees.dir", "team-dir")
        set_global(git_repo, "wtk.worktrees.dir", "global-dir")

        assert ConfigResolver(context).resolve_scalar("wtk.worktrees.dir") == "team-dir"

    def test_global_beats_environment(self, git_repo, context_factory):
        set_global(git_repo, "wtk.worktrees.dir", "global-dir")
        resolver = ConfigResolver(context_factory(WTK_WORKTREES_DIR="env-dir"))

        assert resolver.resolve_scalar("wtk.worktrees.dir", "WTK_WORKTREES_DIR") == "global-dir"

    def test_system_config_is_read(self, git_repo, context, isolated_git_config):
        git_repo.git.config("-f", str(isolated_git_config["system"]), "wtk.worktrees.prefix", "wt-")

        assert ConfigResolver(context).resolve_scalar("wtk.worktrees.prefix") == "wt-"

    def test_environment_beats_fallback(self, context_factory):
        resolver = ConfigResolver(context_factory(WTK_PROVIDER="gitlab"))

        assert resolver.resolve_scalar("wtk.provider", "WTK_PROVIDER", "github") == "gitlab"

    def test_fallback_when_nothing_is_set(self, context):
        resolver = ConfigResolver(context)

        assert resolver.resolve_scalar("wtk.provider", "WTK_PROVIDER", "github") == "github"
        assert resolver.resolve_scalar("wtk.provider") is None

    def test_empty_local_value_counts_as_set(self, git_repo, context):
        git_repo.git.config("--local", "wtk.worktrees.prefix", "")
        set_global(git_repo, "wtk.worktrees.prefix", "global-")

        assert ConfigResolver(context).resolve_scalar("wtk.worktrees.prefix", fallback="x") == ""

    def test_stops_at_first_source_with_a_value(self, context):
        resolver = ConfigResolver(context)

        with patch.object(resolver, "_query", return_value="local-value") as mock_query:
            value = resolver.resolve_scalar("wtk.provider", "WTK_PROVIDER")

        assert value == "local-value"
        assert mock_query.call_count == 1

    def test_malformed_team_file_is_skipped(self, git_repo, context):
        (context.repo_root / ".wtkconfig").write_text("[wtk\nthis is not config\n")
        set_global(git_repo, "wtk.worktrees.dir", "global-dir")

        assert ConfigResolver(context).resolve_scalar("wtk.worktrees.dir") == "global-dir"

    def test_key_without_section_is_unset(self, context, caplog):
        with caplog.at_level(logging.WARNING):
            value = ConfigResolver(context).resolve_scalar("foo", fallback="default")

        assert value == "default"
        assert caplog.records == []


class TestResolveMultiValue:
    """Test multi-valued key merging."""

    def test_merges_sources_in_order_without_duplicates(self, git_repo, context):
        set_local(git_repo, "wtk.copy.include", "a", "b")
        set_team(git_repo, "wtk.copy.include", "b", "c")

        assert ConfigResolver(context).resolve_multi_value("wtk.copy.include") == ["a", "b", "c"]

    def test_keeps_within_source_order(self, git_repo, context):
        set_local(git_repo, "wtk.hook.postCreate", "npm install", "make setup")
        set_global(git_repo, "wtk.hook.postCreate", "echo done", "npm install")

        assert ConfigResolver(context).resolve_multi_value("wtk.hook.postCreate") == [
            "npm install",
            "make setup",
            "echo done",
        ]

    def test_unset_key_is_empty(self, context):
        assert ConfigResolver(context).resolve_multi_value("wtk.copy.exclude") == []

    def test_malformed_team_file_is_treated_as_empty(self, git_repo, context):
        set_local(git_repo, "wtk.copy.include", "*.env")
        (context.repo_root / ".wtkconfig").write_text("[wtk\nbroken\n")
        set_global(git_repo, "wtk.copy.include", ".envrc")

        assert ConfigResolver(context).resolve_multi_value("wtk.copy.include") == ["*.env", ".envrc"]

    def test_ignores_environment(self, context_factory):
        resolver = ConfigResolver(context_factory(WTK_COPY_INCLUDE="a"))

        assert resolver.resolve_multi_value("wtk.copy.include") == []

    def test_key_without_section_is_empty(self, context, caplog):
        with caplog.at_level(logging.WARNING):
            assert ConfigResolver(context).resolve_multi_value("foo") == []

        assert caplog.records == []

    def test_value_with_newline_stays_whole(self, git_repo, context):
        set_local(git_repo, "wtk.hook.postCreate", "echo one\necho two", "make")

        assert ConfigResolver(context).resolve_multi_value("wtk.hook.postCreate") == [
            "echo one\necho two",
            "make",
        ]

    def test_empty_value_is_kept(self, git_repo, context):
        set_local(git_repo, "wtk.copy.exclude", "")

        assert ConfigResolver(context).resolve_multi_value("wtk.copy.exclude") == [""]
