"""External collaborators: command execution, dependency resolution, versions.

Everything that reaches outside the process is bundled in `System` and
handed to plugins through the Template, so tests can swap in fakes.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from importlib import metadata
from pathlib import Path

from pkgsmith.errors import ExternalToolError
from pkgsmith.git.repository import GitBackend

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "pkgsmith"


class CommandRunner:
    """Runs external commands synchronously."""

    def which(self, program: str) -> str | None:
        """Return the full path of `program` if it is on PATH."""
        return shutil.which(program)

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        quiet: bool = False,
    ) -> str:
        """Run a command and return its stdout.

        Args:
            args: Command and arguments.
            cwd: Working directory.
            quiet: Discard stdout instead of capturing it.

        Raises:
            ExternalToolError: If the program is missing or exits non-zero.
        """
        logger.debug("Running: %s", " ".join(args))
        try:
            result = subprocess.run(
                list(args),
                cwd=cwd,
                stdout=subprocess.DEVNULL if quiet else subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(args) from e
        if result.returncode != 0:
            raise ExternalToolError(args, result.returncode, result.stderr or "")
        return result.stdout or ""


class DependencyResolver:
    """Updates a Julia project's dependencies so its manifest is populated."""

    def __init__(
        self, runner: CommandRunner | None = None, julia: str = "julia"
    ) -> None:
        self._runner = runner or CommandRunner()
        self._julia = julia

    def is_available(self) -> bool:
        return self._runner.which(self._julia) is not None

    def update(self, project_dir: Path) -> None:
        """Run `Pkg.update()` for the project at `project_dir`."""
        self._runner.run(
            [self._julia, f"--project={project_dir}", "-e", "using Pkg; Pkg.update()"],
            cwd=project_dir,
            quiet=True,
        )


def tool_version() -> str | None:
    """Best-effort lookup of the installed pkgsmith version."""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        logger.debug("Could not determine %s version", DISTRIBUTION_NAME)
        return None


@dataclass
class System:
    """Bundle of external collaborators used during generation."""

    runner: CommandRunner = field(default_factory=CommandRunner)
    git: GitBackend = field(default_factory=GitBackend)
    resolver: DependencyResolver = field(default_factory=DependencyResolver)
    version_lookup: Callable[[], str | None] = tool_version
    platform: str = sys.platform

    def version(self) -> str | None:
        """Version string for commit messages; never raises."""
        try:
            return self.version_lookup()
        except Exception:
            logger.warning("Failed to determine pkgsmith version", exc_info=True)
            return None

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")
