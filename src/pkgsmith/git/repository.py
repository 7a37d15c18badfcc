"""Git repository access for package generation."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from types import TracebackType

from pkgsmith.errors import ExternalToolError

logger = logging.getLogger(__name__)


class GitError(ExternalToolError):
    """Raised when a git command fails."""


class RepositoryClosedError(RuntimeError):
    """Raised when a closed repository handle is used."""


def _run_git(args: list[str], cwd: Path | None = None) -> str:
    """Run a git command, returning stdout or raising GitError."""
    cmd = ["git", *args]
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise GitError(cmd) from e
    if result.returncode != 0:
        raise GitError(cmd, result.returncode, result.stderr or "")
    return result.stdout or ""


class GitRepository:
    """Handle on a git repository rooted at a package directory.

    Use as a context manager; the handle refuses further operations once
    closed.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> GitRepository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._closed = True

    def _git(self, *args: str) -> str:
        if self._closed:
            raise RepositoryClosedError(f"Repository handle is closed: {self._path}")
        return _run_git(list(args), cwd=self._path)

    def set_config(self, key: str, value: str) -> None:
        """Set a key in the repository-local config."""
        self._git("config", "--local", key, value)

    def current_branch(self) -> str:
        """Name of the checked-out branch."""
        return self._git("branch", "--show-current").strip()

    def create_branch(self, name: str) -> None:
        """Create branch `name` at HEAD and check it out."""
        self._git("checkout", "-q", "-b", name)

    def delete_branch(self, name: str) -> None:
        self._git("branch", "-D", name)

    def add_remote(self, name: str, url: str) -> None:
        self._git("remote", "add", name, url)

    def add_all(self) -> None:
        """Stage every change in the working tree."""
        self._git("add", "--all", ".")

    def commit(self, message: str) -> None:
        """Create an unsigned commit, allowing an empty tree."""
        self._git("commit", "-q", "--no-gpg-sign", "--allow-empty", "-m", message)


class GitBackend:
    """Entry point for repository operations.

    Injected into plugins through `System` so tests can substitute a fake.
    """

    def is_installed(self) -> bool:
        """Check if the git CLI is available in PATH."""
        return shutil.which("git") is not None

    def global_config(self, key: str) -> str | None:
        """Read a value from the user's global git config, or None."""
        try:
            value = _run_git(["config", "--global", "--get", key]).strip()
        except GitError:
            return None
        return value or None

    def init(self, path: Path) -> GitRepository:
        """Initialize a repository at `path` and return a handle on it."""
        logger.debug("Initializing git repository at %s", path)
        _run_git(["init", "-q", str(path)])
        return GitRepository(path)

    def open(self, path: Path) -> GitRepository:
        """Open the existing repository at `path`."""
        if not (path / ".git").exists():
            raise GitError(
                ["git", "-C", str(path), "rev-parse"],
                128,
                f"Not a git repository: {path}",
            )
        return GitRepository(path)
