"""Shared fakes for the external collaborators used during generation."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from pkgsmith.errors import ExternalToolError
from pkgsmith.git.repository import GitError, GitRepository
from pkgsmith.system import CommandRunner, DependencyResolver, System


class FakeRepository(GitRepository):
    """In-memory repository recording every operation."""

    def __init__(self, path: Path, log: list[tuple[str, ...]], branch: str) -> None:
        super().__init__(path)
        self.log = log
        self.branch = branch
        self.branches = {branch}
        self.config: dict[str, str] = {}
        self.remotes: dict[str, str] = {}
        self.commits: list[str] = []
        self.staged = False

    def _record(self, *entry: str) -> None:
        if self.closed:
            raise AssertionError(f"Used closed repository for {entry}")
        self.log.append(entry)

    def set_config(self, key: str, value: str) -> None:
        self._record("set_config", key, value)
        self.config[key] = value

    def current_branch(self) -> str:
        return self.branch

    def create_branch(self, name: str) -> None:
        self._record("create_branch", name)
        self.branches.add(name)
        self.branch = name

    def delete_branch(self, name: str) -> None:
        self._record("delete_branch", name)
        self.branches.discard(name)

    def add_remote(self, name: str, url: str) -> None:
        self._record("add_remote", name, url)
        self.remotes[name] = url

    def add_all(self) -> None:
        self._record("add_all")
        self.staged = True

    def commit(self, message: str) -> None:
        self._record("commit", message)
        self.commits.append(message)

    def close(self) -> None:
        if not self.closed:
            self.log.append(("close",))
        super().close()


class FakeGitBackend:
    """GitBackend stand-in keeping repositories in memory."""

    def __init__(
        self,
        installed: bool = True,
        global_values: dict[str, str] | None = None,
        initial_branch: str = "master",
    ) -> None:
        self.installed = installed
        self.global_values = dict(global_values or {})
        self.initial_branch = initial_branch
        self.repos: dict[Path, FakeRepository] = {}
        self.log: list[tuple[str, ...]] = []

    def is_installed(self) -> bool:
        return self.installed

    def global_config(self, key: str) -> str | None:
        return self.global_values.get(key)

    def init(self, path: Path) -> FakeRepository:
        self.log.append(("init", str(path)))
        repo = FakeRepository(path, self.log, self.initial_branch)
        self.repos[path] = repo
        return repo

    def open(self, path: Path) -> FakeRepository:
        if path not in self.repos:
            raise GitError(["git", "-C", str(path)], 128, "not a repository")
        self.log.append(("open", str(path)))
        repo = self.repos[path]
        # Reopen the same state with a fresh handle.
        repo._closed = False
        return repo


class FakeRunner(CommandRunner):
    """CommandRunner that records commands instead of running them."""

    def __init__(
        self,
        programs: Sequence[str] = (),
        failing: Sequence[str] = (),
    ) -> None:
        self.programs = set(programs)
        self.failing = set(failing)
        self.calls: list[tuple[list[str], bool]] = []

    def which(self, program: str) -> str | None:
        return f"/usr/bin/{program}" if program in self.programs else None

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        quiet: bool = False,
    ) -> str:
        self.calls.append((list(args), quiet))
        if args[0] in self.failing:
            raise ExternalToolError(args, 1, "boom")
        return ""


class FakeResolver(DependencyResolver):
    """Records update requests and fills in the manifest."""

    def __init__(self) -> None:
        super().__init__(FakeRunner())
        self.updated: list[Path] = []

    def update(self, project_dir: Path) -> None:
        self.updated.append(project_dir)
        (project_dir / "Manifest.toml").write_text("# populated\n")


IDENTITY = {"user.name": "Global User", "user.email": "global@example.com"}


@pytest.fixture
def git_backend() -> FakeGitBackend:
    return FakeGitBackend(global_values=IDENTITY)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(programs=("git", "gpg"))


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def system(git_backend, runner, resolver) -> System:
    """System wired entirely to fakes, on a non-Windows platform."""
    return System(
        runner=runner,
        git=git_backend,
        resolver=resolver,
        version_lookup=lambda: "9.9.9",
        platform="linux",
    )
