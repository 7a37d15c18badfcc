"""Git plugin: repository setup, .gitignore and the framing commits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from pkgsmith.errors import ConfigurationError
from pkgsmith.git.repository import GitRepository
from pkgsmith.plugins.base import Plugin, gen_file

if TYPE_CHECKING:
    from pkgsmith.template import Template

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
MANIFEST = "Manifest.toml"
# Only ignore the manifest at the repository root.
MANIFEST_IGNORE = f"/{MANIFEST}"
INITIAL_COMMIT_MESSAGE = "Initial commit"
FILES_COMMIT_MESSAGE = "Files generated by pkgsmith"
# Lock files libgit2 can leave behind on Windows.
STRAY_LOCK_PREFIX = "_git2_"


@dataclass(frozen=True)
class Git(Plugin):
    """Creates a git repository and a .gitignore file.

    Attributes:
        ignore: Extra patterns for the .gitignore.
        name: Committer name, if `user.name` is not set globally.
        email: Committer email, if `user.email` is not set globally.
        branch: Default branch name. Falls back to the global
            `init.defaultBranch`, then "main".
        ssh: Use an SSH remote URL instead of HTTPS.
        jl: Add a `.jl` suffix to the remote repository name.
        manifest: Commit Manifest.toml instead of ignoring it.
        gpgsign: Sign commits with GPG. Requires the git CLI and a signing
            tool, plus a key for the committer identity.
    """

    ignore: tuple[str, ...] = ()
    name: str | None = None
    email: str | None = None
    branch: str | None = None
    ssh: bool = False
    jl: bool = True
    manifest: bool = False
    gpgsign: bool = False

    needs_username: ClassVar[bool] = True

    def gitignore(self) -> tuple[str, ...]:
        return tuple(self.ignore)

    def validate(self, template: Template) -> None:
        git = template.system.git
        if not git.is_installed():
            raise ConfigurationError(
                "The git CLI is not installed", plugin=self.plugin_name
            )

        if self.gpgsign and not self._signing_tool_available(template):
            raise ConfigurationError(
                "gpgsign is set but no signing tool is installed",
                plugin=self.plugin_name,
            )

        for key, override in (("name", self.name), ("email", self.email)):
            config_key = f"user.{key}"
            if override is None and not git.global_config(config_key):
                raise ConfigurationError(
                    f"Global git config is missing required value '{config_key}'",
                    plugin=self.plugin_name,
                )

    def _signing_tool_available(self, template: Template) -> bool:
        program = template.system.git.global_config("gpg.program") or "gpg"
        return template.system.runner.which(program) is not None

    def remote_url(self, template: Template) -> str:
        """URL of the `origin` remote for the generated package."""
        suffix = ".jl" if self.jl else ""
        repo_name = f"{template.package_name}{suffix}"
        if self.ssh:
            return f"git@{template.host}:{template.user}/{repo_name}.git"
        return f"https://{template.host}/{template.user}/{repo_name}"

    def resolve_branch(self, template: Template) -> str:
        if self.branch:
            return self.branch
        default = template.system.git.global_config("init.defaultBranch")
        return default or DEFAULT_BRANCH

    def prehook(self, template: Template, pkg_dir: Path) -> None:
        with template.system.git.init(pkg_dir) as repo:
            for key, value in (("name", self.name), ("email", self.email)):
                if value is not None:
                    repo.set_config(f"user.{key}", value)

            self.commit(template, repo, pkg_dir, INITIAL_COMMIT_MESSAGE)

            # The branch must be settled before the remote is attached.
            current = repo.current_branch()
            branch = self.resolve_branch(template)
            if branch != current:
                logger.info("Renaming branch %s to %s", current, branch)
                repo.create_branch(branch)
                repo.delete_branch(current)

            repo.add_remote("origin", self.remote_url(template))

    def ignore_patterns(self, template: Template) -> list[str]:
        """Sorted, de-duplicated .gitignore patterns from every plugin."""
        patterns: list[str] = []
        for plugin in template.plugins:
            patterns.extend(plugin.gitignore())
        if not self.manifest and not ({MANIFEST, MANIFEST_IGNORE} & set(patterns)):
            patterns.append(MANIFEST_IGNORE)
        return sorted(set(patterns))

    def hook(self, template: Template, pkg_dir: Path) -> None:
        gen_file(pkg_dir / ".gitignore", "\n".join(self.ignore_patterns(template)))

    def posthook(self, template: Template, pkg_dir: Path) -> None:
        system = template.system
        if system.is_windows:
            for stray in pkg_dir.iterdir():
                if stray.name.startswith(STRAY_LOCK_PREFIX):
                    stray.unlink()

        manifest = pkg_dir / MANIFEST
        if self.manifest and not manifest.is_file():
            manifest.touch()
            system.resolver.update(pkg_dir)

        with system.git.open(pkg_dir) as repo:
            repo.add_all()
            message = FILES_COMMIT_MESSAGE
            version = system.version()
            if version is not None:
                message += f"\n\npkgsmith version: {version}"
            self.commit(template, repo, pkg_dir, message)

    def commit(
        self,
        template: Template,
        repo: GitRepository,
        pkg_dir: Path,
        message: str,
    ) -> None:
        """Commit through the repository handle, or the git CLI when signing."""
        if self.gpgsign:
            template.system.runner.run(
                [
                    "git", "-C", str(pkg_dir),
                    "commit", "-S", "--allow-empty", "-m", message,
                ],
                quiet=True,
            )
        else:
            repo.commit(message)
