"""Command-line interface for pkgsmith."""

import logging

import click
from rich.logging import RichHandler

from pkgsmith import __version__
from pkgsmith.config.builder import build_template
from pkgsmith.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    save_config,
)
from pkgsmith.config.preflight import run_all_checks
from pkgsmith.config.schema import DocsConfig, GitConfig, PkgsmithConfig
from pkgsmith.console import console
from pkgsmith.errors import ConfigurationError, GenerationError
from pkgsmith.system import System

logger = logging.getLogger(__name__)


def setup_logging(verbosity: int) -> None:
    """Route log records through rich; -v for INFO, -vv for DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"pkgsmith [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity.")
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """pkgsmith - scaffold Julia packages from composable plugins."""
    setup_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]pkgsmith[/bold] - plugin-driven package scaffolding")
        console.print("\nRun [cyan]pkgsmith --help[/cyan] for available commands.")


@main.command()
@click.argument("package")
@click.option("--user", "-u", help="Owner of the remote repository.")
@click.option("--host", help="Git hosting domain (default: github.com).")
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False),
    help="Directory the package is created in.",
)
@click.option("--author", "authors", multiple=True, help="Package author (repeatable).")
@click.option("--julia", help="Minimum supported Julia version.")
@click.option("--ssh/--https", default=None, help="Remote URL scheme.")
@click.option("--branch", help="Default branch name.")
@click.option(
    "--manifest/--no-manifest",
    default=None,
    help="Commit Manifest.toml instead of ignoring it.",
)
@click.option("--gpgsign/--no-gpgsign", default=None, help="Sign commits with GPG.")
@click.option("--git/--no-git", default=None, help="Create a git repository.")
@click.option("--docs/--no-docs", default=None, help="Add a Documenter setup.")
@click.option(
    "--ignore",
    multiple=True,
    help="Extra .gitignore pattern (repeatable).",
)
def generate(
    package: str,
    user: str | None,
    host: str | None,
    directory: str | None,
    authors: tuple[str, ...],
    julia: str | None,
    ssh: bool | None,
    branch: str | None,
    manifest: bool | None,
    gpgsign: bool | None,
    git: bool | None,
    docs: bool | None,
    ignore: tuple[str, ...],
) -> None:
    """Generate a new package.

    Options given here override the global (~/.pkgsmith/config.yaml) and
    local (./.pkgsmith/config.yaml) configuration.
    """
    overrides = PkgsmithConfig(
        user=user,
        host=host,
        dir=directory,
        authors=authors or None,
        julia=julia,
        git=GitConfig(
            enabled=git,
            branch=branch,
            ssh=ssh,
            manifest=manifest,
            gpgsign=gpgsign,
            ignore=ignore or None,
        ),
        docs=DocsConfig(enabled=docs),
    )
    config = load_config().merge(overrides)
    logger.debug("Effective configuration: %s", config.to_dict())
    template = build_template(package, config, System())

    name = template.package_name
    console.print(f"\n[bold blue]Creating package:[/bold blue] {name}")
    console.print(f"[dim]Directory: {template.package_dir}[/dim]")
    plugin_names = ", ".join(p.plugin_name for p in template.plugins)
    console.print(f"[dim]Plugins: {plugin_names}[/dim]\n")

    try:
        run = template.generate()
    except ConfigurationError as e:
        source = e.plugin or "pkgsmith"
        console.print(f"[red]Configuration error ({source}):[/red] {e.message}")
        raise SystemExit(1) from e
    except GenerationError as e:
        console.print(f"[red]{e.plugin} failed during {e.phase}:[/red] {e.cause}")
        console.print(
            f"[yellow]Partial output left in {template.package_dir}; "
            "remove it before retrying.[/yellow]"
        )
        raise SystemExit(1) from e

    console.print(f"[bold green]Package created at {run.pkg_dir}[/bold green]")


@main.command()
def preflight() -> None:
    """Validate environment is ready (git, identity, signing, julia)."""
    if not run_all_checks():
        raise SystemExit(1)


@main.command()
@click.option(
    "--save-global",
    is_flag=True,
    help="Write the effective configuration to ~/.pkgsmith/config.yaml.",
)
@click.option(
    "--save-local",
    is_flag=True,
    help="Write the effective configuration to ./.pkgsmith/config.yaml.",
)
def config(save_global: bool, save_local: bool) -> None:
    """Show or save the effective configuration."""
    effective = load_config()

    if save_global or save_local:
        path = get_home_config_path() if save_global else get_local_config_path()
        save_config(effective, path)
        console.print(f"[green]Saved configuration to {path}[/green]")
        return

    console.print("[bold]Current Effective Configuration[/bold]\n")
    _print_config(effective.to_dict())


def _print_config(data: dict[str, object], indent: int = 0) -> None:
    pad = "  " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            console.print(f"{pad}[cyan]{key}[/cyan]:")
            _print_config(value, indent + 1)
        else:
            console.print(f"{pad}[cyan]{key}[/cyan]: {value}")
