"""CLI tests for the branch workflow commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from gitflow.cli.app import app
from gitflow.cli.context import CLIContext, GlobalFlags, UIOptions
from gitflow.core.config import CONFIG_FILENAME, Config
from gitflow.core.errors import ErrorCode
from gitflow.git.models import BranchSummary
from gitflow.output.console import MockConsole

if TYPE_CHECKING:
    from conftest import FakeGitAdapter

runner = CliRunner()


def _install(
    monkeypatch: pytest.MonkeyPatch,
    module_name: str,
    fake_git: FakeGitAdapter,
    console: MockConsole,
    config: Config | None = None,
) -> list[GlobalFlags | None]:
    """Point ``module_name``'s build_context at the fake; returns the flags it received."""
    import importlib

    module = importlib.import_module(module_name)
    seen: list[GlobalFlags | None] = []

    def build(flags: GlobalFlags | None = None) -> CLIContext:
        seen.append(flags)
        return CLIContext(
            root=fake_git.root,
            repo=fake_git,  # type: ignore[arg-type]
            config=config or Config(),
            config_path=None,
            console=console,
            ui=UIOptions(),
        )

    monkeypatch.setattr(module, "build_context", build)
    return seen


class TestStatus:
    def test_clean(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.status", fake_git, console)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Branch: feature/login" in console.messages
        assert "OK Working tree: clean" in console.messages

    def test_global_flags_reach_context(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        seen = _install(monkeypatch, "gitflow.cli.commands.status", fake_git, console)
        result = runner.invoke(app, ["--no-color", "--verbose", "status"])
        assert result.exit_code == 0
        assert seen == [GlobalFlags(no_color=True, verbose=True)]


class TestStart:
    def test_joins_name_words(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.start", fake_git, console)
        result = runner.invoke(app, ["start", "Add", "login", "page", "--no-push"])
        assert result.exit_code == 0
        assert "New branch: feature/add-login-page" in console.messages
        assert "push_set_upstream" not in fake_git.names()

    def test_hotfix(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.start", fake_git, console)
        result = runner.invoke(app, ["start", "crash", "--hotfix"])
        assert result.exit_code == 0
        assert ("checkout_new", "hotfix/crash") in fake_git.calls

    def test_bugfix_and_hotfix_conflict(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.start", fake_git, console)
        result = runner.invoke(app, ["start", "x", "--bugfix", "--hotfix"])
        assert result.exit_code == int(ErrorCode.USER_ERROR)
        assert fake_git.calls == []


class TestSync:
    def test_merge(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.sync", fake_git, console)
        result = runner.invoke(app, ["sync", "--merge"])
        assert result.exit_code == 0
        assert "Strategy: merge" in console.messages
        assert "OK Remote: pushed" in console.messages

    def test_conflicting_strategies(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.sync", fake_git, console)
        result = runner.invoke(app, ["sync", "--merge", "--rebase"])
        assert result.exit_code == int(ErrorCode.USER_ERROR)

    def test_dirty_tree_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        fake_git.dirty = True
        _install(monkeypatch, "gitflow.cli.commands.sync", fake_git, console)
        result = runner.invoke(app, ["sync"])
        assert result.exit_code == int(ErrorCode.USER_ERROR)
        assert "error: working tree is not clean" in console.messages

    def test_conflict_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        fake_git.fail["rebase"] = "CONFLICT"
        _install(monkeypatch, "gitflow.cli.commands.sync", fake_git, console)
        result = runner.invoke(app, ["sync", "--no-push"])
        assert result.exit_code == int(ErrorCode.GIT_ERROR)


def _seed_cleanup(fake_git: FakeGitAdapter) -> None:
    fake_git.branches = [
        BranchSummary(name="main", age_days=1),
        BranchSummary(name="feature/login", is_current=True, age_days=1),
        BranchSummary(name="feature/done", age_days=5),
        BranchSummary(name="feature/other", age_days=8),
    ]
    fake_git.merged = ["feature/done", "feature/other"]


class TestCleanup:
    def test_yes(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup", "--yes"])
        assert result.exit_code == 0
        assert "OK deleted 2 branch(es)" in console.messages

    def test_declined_prompt(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup"], input="no\n")
        assert result.exit_code == 0
        assert "warning: cleanup aborted" in console.messages
        assert "delete_branch" not in fake_git.names()

    def test_confirmed_prompt(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup", "--remote"], input="yes\n")
        assert result.exit_code == 0
        assert "delete_remote_branch" in fake_git.names()

    def test_select(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup", "--select", "--yes"], input="2\n")
        assert result.exit_code == 0
        assert fake_git.calls == [("delete_branch", "feature/done", "safe")]

    def test_dry_run(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup", "--dry-run"])
        assert result.exit_code == 0
        assert "info: dry run: 2 branch(es) would be deleted" in console.messages
        assert fake_git.calls == []

    def test_deletes_the_branches_shown(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _seed_cleanup(fake_git)
        listed: list[str] = []
        merged_branches = fake_git.merged_branches

        def list_once(base: str):  # type: ignore[no-untyped-def]
            listed.append(base)
            result = merged_branches(base)
            fake_git.merged = []
            return result

        monkeypatch.setattr(fake_git, "merged_branches", list_once)
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup"], input="yes\n")
        assert result.exit_code == 0
        assert listed == ["main"]
        assert [c[1] for c in fake_git.calls] == ["feature/other", "feature/done"]

    def test_nothing_to_do(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.cleanup", fake_git, console)
        result = runner.invoke(app, ["cleanup"])
        assert result.exit_code == 0
        assert "OK nothing to clean up" in console.messages


class TestCommit:
    def test_conventional(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        config = Config.from_dict({"commits": {"conventional": True}})
        _install(monkeypatch, "gitflow.cli.commands.commit", fake_git, console, config)
        result = runner.invoke(app, ["commit", "-t", "feat", "-s", "api", "-m", "add login"])
        assert result.exit_code == 0
        assert fake_git.calls == [("commit", "feat(api): add login")]

    def test_policy_violation(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        config = Config.from_dict({"commits": {"conventional": True}})
        _install(monkeypatch, "gitflow.cli.commands.commit", fake_git, console, config)
        result = runner.invoke(app, ["commit", "-m", "no type"])
        assert result.exit_code == int(ErrorCode.USER_ERROR)


class TestBranchList:
    def test_table(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        fake_git.branches = [
            BranchSummary(name="feature/login", is_current=True, age_days=2, ahead=3, author="ann"),
            BranchSummary(name="old", age_days=None),
        ]
        _install(monkeypatch, "gitflow.cli.commands.branch", fake_git, console)
        result = runner.invoke(app, ["branch", "list", "--base", "develop"])
        assert result.exit_code == 0
        assert "Branches relative to develop" in console.messages
        assert "* feature/login | 2 | 3 | 0 | ann | " in console.messages
        assert "  old | ? | 0 | 0 |  | " in console.messages


class TestConfigCommands:
    def test_show(
        self, monkeypatch: pytest.MonkeyPatch, fake_git: FakeGitAdapter, console: MockConsole
    ) -> None:
        _install(monkeypatch, "gitflow.cli.commands.config_cmd", fake_git, console)
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "# source: built-in defaults" in console.messages
        assert "[release]" in console.text

    def test_validate_reports_problems(
        self,
        monkeypatch: pytest.MonkeyPatch,
        fake_git: FakeGitAdapter,
        console: MockConsole,
        tmp_path: Path,
    ) -> None:
        import gitflow.cli.commands.config_cmd as config_cmd

        config = Config.from_dict({"provider": {"type": "github"}})
        path = tmp_path / CONFIG_FILENAME

        def build(flags: GlobalFlags | None = None) -> CLIContext:
            return CLIContext(
                root=tmp_path,
                repo=fake_git,  # type: ignore[arg-type]
                config=config,
                config_path=path,
                console=console,
                ui=UIOptions(),
            )

        monkeypatch.setattr(config_cmd, "build_context", build)
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == int(ErrorCode.CONFIG_ERROR)
        assert console.has_error()


class TestInit:
    def test_writes_and_refuses_twice(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        import gitflow.cli.commands.init_cmd as init_cmd

        monkeypatch.setattr(init_cmd, "resolve_repo_root", lambda cwd: tmp_path)

        first = runner.invoke(app, ["init"])
        assert first.exit_code == 0
        assert (tmp_path / CONFIG_FILENAME).is_file()

        second = runner.invoke(app, ["init"])
        assert second.exit_code == int(ErrorCode.USER_ERROR)

        forced = runner.invoke(app, ["init", "--force"])
        assert forced.exit_code == 0
