"""Documenter plugin: documentation skeleton built with Documenter.jl."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from pkgsmith.errors import ConfigurationError
from pkgsmith.plugins.base import Plugin, gen_file
from pkgsmith.plugins.git import Git
from pkgsmith.plugins.render import render

if TYPE_CHECKING:
    from pkgsmith.template import Template

DOCS_BUILD_IGNORE = "/docs/build/"


@dataclass(frozen=True)
class Documenter(Plugin):
    """Sets up documentation under docs/.

    Attributes:
        assets: Extra files (CSS, JS, ...) copied into docs/src/assets/.
        canonical_url: Canonical URL of the hosted docs. Defaults to the
            GitHub Pages URL when `deploy` is set.
        makedocs_kwargs: Extra `makedocs` keyword arguments as
            (name, Julia expression) pairs.
        deploy: Add a `deploydocs` call to docs/make.jl.
    """

    assets: tuple[str, ...] = ()
    canonical_url: str | None = None
    makedocs_kwargs: tuple[tuple[str, str], ...] = ()
    deploy: bool = False

    needs_username: ClassVar[bool] = True

    def gitignore(self) -> tuple[str, ...]:
        return (DOCS_BUILD_IGNORE,)

    def validate(self, template: Template) -> None:
        for asset in self.assets:
            if not Path(asset).expanduser().is_file():
                raise ConfigurationError(
                    f"Asset file '{asset}' does not exist", plugin=self.plugin_name
                )

    def repo_name(self, template: Template) -> str:
        """Repository name, following the Git plugin's `.jl` suffix setting."""
        git = template.get_plugin(Git)
        if isinstance(git, Git) and not git.jl:
            return template.package_name
        return f"{template.package_name}.jl"

    def canonical(self, template: Template) -> str:
        if self.canonical_url is not None:
            return self.canonical_url
        if self.deploy:
            return f"https://{template.user}.github.io/{self.repo_name(template)}"
        return ""

    def hook(self, template: Template, pkg_dir: Path) -> None:
        pkg = template.package_name
        repo = f"{template.host}/{template.user}/{self.repo_name(template)}"
        docs_dir = pkg_dir / "docs"

        asset_paths: list[str] = []
        for asset in self.assets:
            source = Path(asset).expanduser()
            dest = docs_dir / "src" / "assets" / source.name
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(source, dest)
            asset_paths.append(f"assets/{source.name}")

        make_jl = render(
            "make.jl.j2",
            pkg=pkg,
            authors=", ".join(template.authors),
            repo=repo,
            canonical=self.canonical(template),
            assets=asset_paths,
            makedocs_kwargs=self.makedocs_kwargs,
            deploy=self.deploy,
        )
        gen_file(docs_dir / "make.jl", make_jl)
        index_md = render("index.md.j2", pkg=pkg, repo=repo)
        gen_file(docs_dir / "src" / "index.md", index_md)
