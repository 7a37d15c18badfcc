"""ProjectFile plugin: writes Project.toml."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pkgsmith.errors import ConfigurationError
from pkgsmith.plugins.base import Plugin, gen_file
from pkgsmith.plugins.render import render

if TYPE_CHECKING:
    from pkgsmith.template import Template

PROJECT_FILE = "Project.toml"


@dataclass(frozen=True)
class ProjectFile(Plugin):
    """Creates the package's Project.toml.

    Runs ahead of the other file-generating plugins so the project file is
    present for anything that inspects it.
    """

    version: str = "0.1.0"

    def validate(self, template: Template) -> None:
        parts = self.version.split(".")
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            raise ConfigurationError(
                f"Invalid package version '{self.version}', expected MAJOR.MINOR.PATCH",
                plugin=self.plugin_name,
            )

    def hook(self, template: Template, pkg_dir: Path) -> None:
        text = render(
            "Project.toml.j2",
            pkg=template.package_name,
            uuid=str(uuid.uuid4()),
            authors=template.authors,
            version=self.version,
            julia=template.julia,
        )
        gen_file(pkg_dir / PROJECT_FILE, text)
