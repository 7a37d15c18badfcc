"""Base plugin definition."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pkgsmith.template import Template


class Plugin:
    """A unit of scaffolding behaviour.

    Subclasses are frozen dataclasses holding only their own options. Which
    hooks a plugin takes part in is declared when its type is registered
    with a `HookRegistry`, not inferred from the methods it overrides.
    """

    # Whether the plugin needs the template's `user` to be set.
    needs_username: ClassVar[bool] = False

    @property
    def plugin_name(self) -> str:
        return type(self).__name__

    def gitignore(self) -> tuple[str, ...]:
        """Patterns this plugin wants in the package's .gitignore."""
        return ()

    def validate(self, template: Template) -> None:
        """Check preconditions; raise ConfigurationError if unmet."""

    def prehook(self, template: Template, pkg_dir: Path) -> None:
        """Run before any file generation."""

    def hook(self, template: Template, pkg_dir: Path) -> None:
        """Generate files."""

    def posthook(self, template: Template, pkg_dir: Path) -> None:
        """Finalize once every plugin has generated its files."""


def gen_file(path: Path, text: str) -> None:
    """Write `text` to `path`, creating parent directories.

    The file always ends with exactly one newline.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text.rstrip("\n") + "\n", encoding="utf-8")
