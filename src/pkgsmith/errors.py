"""Exception hierarchy for pkgsmith."""

from __future__ import annotations

from collections.abc import Sequence


class PkgsmithError(Exception):
    """Base exception for pkgsmith."""


class ConfigurationError(PkgsmithError):
    """Raised when a precondition is unmet before generation starts.

    Always raised during validation, so nothing has been written to disk
    when it propagates.
    """

    def __init__(self, message: str, plugin: str | None = None) -> None:
        self.plugin = plugin
        self.phase = "validate"
        self.message = message
        super().__init__(f"{plugin}: {message}" if plugin else message)


class ExternalToolError(PkgsmithError):
    """Raised when an external command (git, gpg, julia) fails."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        cmd = " ".join(self.command)
        if returncode is None:
            detail = f"Command not found: {cmd}"
        else:
            detail = f"Command failed with exit code {returncode}: {cmd}"
        if self.stderr:
            detail += f"\n{self.stderr}"
        super().__init__(detail)


class GenerationError(PkgsmithError):
    """Raised when a plugin hook fails after generation has started.

    Files and commits produced before the failure are left in place.
    """

    def __init__(self, plugin: str, phase: str, cause: BaseException) -> None:
        self.plugin = plugin
        self.phase = phase
        self.cause = cause
        super().__init__(f"{plugin} failed during {phase}: {cause}")
