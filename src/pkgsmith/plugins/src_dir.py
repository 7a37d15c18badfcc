"""SrcDir plugin: writes the package's entry-point module."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pkgsmith.plugins.base import Plugin, gen_file
from pkgsmith.plugins.render import render

if TYPE_CHECKING:
    from pkgsmith.template import Template


@dataclass(frozen=True)
class SrcDir(Plugin):
    """Creates src/<pkg>.jl with an empty module."""

    def hook(self, template: Template, pkg_dir: Path) -> None:
        pkg = template.package_name
        gen_file(pkg_dir / "src" / f"{pkg}.jl", render("src.jl.j2", pkg=pkg))
