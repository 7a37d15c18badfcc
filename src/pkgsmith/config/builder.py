"""Turn merged configuration into a Template."""

from __future__ import annotations

from pathlib import Path

from pkgsmith.config.schema import DEFAULT_CONFIG, PkgsmithConfig
from pkgsmith.plugins import Documenter, Git, Plugin, ProjectFile, SrcDir
from pkgsmith.system import System
from pkgsmith.template import Template


def resolve_authors(config: PkgsmithConfig, system: System) -> tuple[str, ...]:
    """Resolve package authors.

    Precedence (highest to lowest):
    1. `authors` from config
    2. The Git plugin's identity override
    3. The global git identity
    """
    if config.authors:
        return config.authors

    name = config.git.name or system.git.global_config("user.name")
    email = config.git.email or system.git.global_config("user.email")
    if not name:
        return ()
    return (f"{name} <{email}>",) if email else (name,)


def build_plugins(config: PkgsmithConfig) -> tuple[Plugin, ...]:
    """Instantiate the plugins selected by `config`, in declaration order."""
    plugins: list[Plugin] = [ProjectFile(), SrcDir()]

    git = config.git
    if git.enabled is not False:
        plugins.append(
            Git(
                ignore=git.ignore or (),
                name=git.name,
                email=git.email,
                branch=git.branch,
                ssh=bool(git.ssh),
                jl=git.jl is not False,
                manifest=bool(git.manifest),
                gpgsign=bool(git.gpgsign),
            )
        )

    docs = config.docs
    if docs.enabled:
        plugins.append(
            Documenter(
                assets=docs.assets or (),
                canonical_url=docs.canonical_url,
                deploy=bool(docs.deploy),
            )
        )

    return tuple(plugins)


def build_template(
    package_name: str,
    config: PkgsmithConfig,
    system: System | None = None,
) -> Template:
    """Create a Template for `package_name` from merged configuration."""
    system = system or System()
    return Template(
        package_name=package_name,
        user=config.user or "",
        host=config.host or DEFAULT_CONFIG.host or "github.com",
        plugins=build_plugins(config),
        directory_root=Path(config.dir or "."),
        authors=resolve_authors(config, system),
        julia=config.julia or DEFAULT_CONFIG.julia or "1.10",
        system=system,
    )
