"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock, patch

from gitflow.core.result import Err, Ok
from gitflow.git.models import GitError
from gitflow.git.repository import Repository

_DAY = 24 * 60 * 60
_NOW = 1_700_000_000.0


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.stdout = stdout
    proc.stderr = stderr
    return proc


class FakeGit:
    """Routes ``git -C <path> <args>`` calls by their leading arguments."""

    def __init__(self, responses: dict[tuple[str, ...], MagicMock]) -> None:
        self.responses = responses
        self.commands: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def __call__(self, cmd: Sequence[str], **kwargs: object) -> MagicMock:
        args = list(cmd[3:])
        self.commands.append(args)
        timeout = kwargs.get("timeout")
        self.timeouts.append(timeout if isinstance(timeout, float) else None)
        best: tuple[str, ...] = ()
        for prefix in self.responses:
            if tuple(args[: len(prefix)]) == prefix and len(prefix) > len(best):
                best = prefix
        if not best:
            return _completed(128, stderr=f"unexpected: {' '.join(args)}")
        return self.responses[best]


def _repo(tmp_path: Path) -> Repository:
    return Repository(tmp_path, clock=lambda: _NOW)


def _patch(fake: FakeGit):  # type: ignore[no-untyped-def]
    return patch("gitflow.platform.process.subprocess.run", side_effect=fake)


# =============================================================================
# Inspection
# =============================================================================


class TestInspection:
    def test_current_branch(self, tmp_path: Path) -> None:
        fake = FakeGit({("symbolic-ref",): _completed(stdout="feature/x\n")})
        with _patch(fake):
            result = _repo(tmp_path).current_branch()
        assert isinstance(result, Ok)
        assert result.value == "feature/x"

    def test_current_branch_detached_falls_back(self, tmp_path: Path) -> None:
        fake = FakeGit(
            {
                ("symbolic-ref",): _completed(128, stderr="fatal: ref HEAD is not a symbolic ref"),
                ("rev-parse", "--abbrev-ref"): _completed(stdout="HEAD\n"),
            }
        )
        with _patch(fake):
            result = _repo(tmp_path).current_branch()
        assert isinstance(result, Ok)
        assert result.value == "HEAD"

    def test_is_dirty(self, tmp_path: Path) -> None:
        fake = FakeGit({("status",): _completed(stdout=" M file.py\n")})
        with _patch(fake):
            assert _repo(tmp_path).is_dirty() == Ok(True)

    def test_is_clean(self, tmp_path: Path) -> None:
        fake = FakeGit({("status",): _completed(stdout="")})
        with _patch(fake):
            assert _repo(tmp_path).is_dirty() == Ok(False)

    def test_has_remote(self, tmp_path: Path) -> None:
        fake = FakeGit({("remote",): _completed(stdout="origin\nupstream\n")})
        with _patch(fake):
            repo = _repo(tmp_path)
            assert repo.has_remote("origin") == Ok(True)
            assert repo.has_remote("fork") == Ok(False)

    def test_has_staged_changes_uses_exit_code(self, tmp_path: Path) -> None:
        with _patch(FakeGit({("diff", "--cached"): _completed(1)})):
            assert _repo(tmp_path).has_staged_changes() == Ok(True)
        with _patch(FakeGit({("diff", "--cached"): _completed(0)})):
            assert _repo(tmp_path).has_staged_changes() == Ok(False)

    def test_failure_maps_to_git_error(self, tmp_path: Path) -> None:
        fake = FakeGit({("status",): _completed(128, stderr="fatal: not a git repository\n")})
        with _patch(fake):
            result = _repo(tmp_path).is_dirty()
        assert isinstance(result, Err)
        assert isinstance(result.error, GitError)
        assert result.error.message == "fatal: not a git repository"
        assert result.error.returncode == 128

    def test_toplevel(self, tmp_path: Path) -> None:
        fake = FakeGit({("rev-parse", "--show-toplevel"): _completed(stdout="/work/repo\n")})
        with _patch(fake):
            assert _repo(tmp_path).toplevel() == Ok(Path("/work/repo"))


# =============================================================================
# Branches
# =============================================================================


class TestBranches:
    def test_branch_age_days(self, tmp_path: Path) -> None:
        committed = int(_NOW - 30 * _DAY - 60)
        fake = FakeGit({("log", "-1"): _completed(stdout=f"{committed}\n")})
        with _patch(fake):
            assert _repo(tmp_path).branch_age_days("old") == Ok(30)

    def test_branch_age_never_negative(self, tmp_path: Path) -> None:
        fake = FakeGit({("log", "-1"): _completed(stdout=f"{int(_NOW + 5000)}\n")})
        with _patch(fake):
            assert _repo(tmp_path).branch_age_days("future") == Ok(0)

    def test_branch_age_bad_timestamp(self, tmp_path: Path) -> None:
        fake = FakeGit({("log", "-1"): _completed(stdout="garbage\n")})
        with _patch(fake):
            assert isinstance(_repo(tmp_path).branch_age_days("x"), Err)

    def test_merged_branches_excludes_base(self, tmp_path: Path) -> None:
        fake = FakeGit({("branch", "--merged"): _completed(stdout="main\nfeature/a\n\nfix/b\n")})
        with _patch(fake):
            result = _repo(tmp_path).merged_branches("main")
        assert result == Ok(["feature/a", "fix/b"])

    def test_list_local_branches(self, tmp_path: Path) -> None:
        sep = "\x1f"
        refs = f"main{sep}Ann{sep}init\nfeature/a{sep}Bob{sep}add a\n"
        fake = FakeGit(
            {
                ("symbolic-ref",): _completed(stdout="feature/a\n"),
                ("for-each-ref",): _completed(stdout=refs),
                ("log", "-1"): _completed(stdout=f"{int(_NOW - 3 * _DAY)}\n"),
                ("rev-list",): _completed(stdout="2\t5\n"),
            }
        )
        with _patch(fake):
            result = _repo(tmp_path).list_local_branches("main")

        assert isinstance(result, Ok)
        main, feature = result.value
        assert main.name == "main"
        assert main.ahead == 0 and main.behind == 0
        assert feature.is_current is True
        assert feature.author == "Bob"
        assert feature.last_commit_subject == "add a"
        assert feature.age_days == 3
        assert feature.ahead == 5
        assert feature.behind == 2

    def test_list_local_branches_age_failure_is_none(self, tmp_path: Path) -> None:
        sep = "\x1f"
        fake = FakeGit(
            {
                ("symbolic-ref",): _completed(stdout="main\n"),
                ("for-each-ref",): _completed(stdout=f"topic{sep}Ann{sep}wip\n"),
                ("log", "-1"): _completed(128, stderr="fatal: bad revision"),
                ("rev-list",): _completed(stdout="0\t1\n"),
            }
        )
        with _patch(fake):
            result = _repo(tmp_path).list_local_branches("main")
        assert isinstance(result, Ok)
        assert result.value[0].age_days is None

    def test_delete_branch_flags(self, tmp_path: Path) -> None:
        fake = FakeGit({("branch",): _completed()})
        with _patch(fake):
            _repo(tmp_path).delete_branch("a", False)
            _repo(tmp_path).delete_branch("b", True)
        assert fake.commands == [["branch", "-d", "a"], ["branch", "-D", "b"]]


# =============================================================================
# Remote and history
# =============================================================================


class TestRemote:
    def test_push_force_with_lease(self, tmp_path: Path) -> None:
        fake = FakeGit({("push",): _completed()})
        with _patch(fake):
            _repo(tmp_path).push("origin", "feature/x", True)
            _repo(tmp_path).push("origin", "feature/x", False)
        assert fake.commands == [
            ["push", "--force-with-lease", "origin", "feature/x"],
            ["push", "origin", "feature/x"],
        ]

    def test_network_commands_get_longer_timeout(self, tmp_path: Path) -> None:
        fake = FakeGit({("fetch",): _completed(), ("status",): _completed()})
        with _patch(fake):
            _repo(tmp_path).fetch("origin")
            _repo(tmp_path).is_dirty()
        assert fake.timeouts == [180.0, 30.0]

    def test_delete_remote_branch(self, tmp_path: Path) -> None:
        fake = FakeGit({("push",): _completed()})
        with _patch(fake):
            _repo(tmp_path).delete_remote_branch("origin", "old")
        assert fake.commands == [["push", "origin", "--delete", "old"]]

    def test_timeout_becomes_git_error(self, tmp_path: Path) -> None:
        def boom(cmd: Sequence[str], **kwargs: object) -> MagicMock:
            raise subprocess.TimeoutExpired(cmd=list(cmd), timeout=180.0)

        with patch("gitflow.platform.process.subprocess.run", side_effect=boom):
            result = _repo(tmp_path).pull("origin", "main")
        assert isinstance(result, Err)
        assert "timed out" in result.error.message


class TestHistory:
    def test_commits_between_parses_records(self, tmp_path: Path) -> None:
        us, rs = "\x1f", "\x1e"
        log = (
            f"aaaa1111{us}feat: add login{us}{us}2024-03-01{rs}\n"
            f"bbbb2222{us}fix: typo{us}BREAKING CHANGE: api{us}2024-02-28{rs}"
        )
        fake = FakeGit({("log",): _completed(stdout=log)})
        with _patch(fake):
            result = _repo(tmp_path).commits_between("v0.1.0", "HEAD")

        assert isinstance(result, Ok)
        assert [c.subject for c in result.value] == ["feat: add login", "fix: typo"]
        assert result.value[0].date == "2024-03-01"
        assert result.value[1].body == "BREAKING CHANGE: api"
        assert fake.commands[0][-1] == "v0.1.0..HEAD"

    def test_commits_between_without_base_uses_whole_history(self, tmp_path: Path) -> None:
        fake = FakeGit({("log",): _completed(stdout="")})
        with _patch(fake):
            result = _repo(tmp_path).commits_between("", "HEAD")
        assert result == Ok([])
        assert fake.commands[0][-1] == "HEAD"

    def test_list_tags(self, tmp_path: Path) -> None:
        fake = FakeGit({("tag", "--list"): _completed(stdout="v0.1.0\n\nv1.0.0\n")})
        with _patch(fake):
            assert _repo(tmp_path).list_tags() == Ok(["v0.1.0", "v1.0.0"])

    def test_create_annotated_tag_refuses_existing(self, tmp_path: Path) -> None:
        fake = FakeGit({("show-ref",): _completed(0)})
        with _patch(fake):
            result = _repo(tmp_path).create_annotated_tag("v1.0.0", "notes")
        assert isinstance(result, Err)
        assert "already exists" in result.error.message
        assert all(c[0] != "tag" for c in fake.commands)

    def test_create_annotated_tag(self, tmp_path: Path) -> None:
        fake = FakeGit({("show-ref",): _completed(1), ("tag", "-a"): _completed()})
        with _patch(fake):
            result = _repo(tmp_path).create_annotated_tag("v1.0.0", "notes")
        assert result == Ok(None)
        assert fake.commands[-1] == ["tag", "-a", "v1.0.0", "-m", "notes"]
