"""Preflight checks to validate the environment."""

from pkgsmith.console import console
from pkgsmith.system import System


def check_git(system: System) -> bool:
    """Validate the git CLI is installed."""
    if system.git.is_installed():
        console.print("[green]✓[/green] git is installed")
        return True
    console.print("[red]✗[/red] git is not installed")
    return False


def check_identity(system: System) -> bool:
    """Validate a global git identity exists for commits."""
    ok = True
    for key in ("user.name", "user.email"):
        value = system.git.global_config(key)
        if value:
            console.print(f"[green]✓[/green] {key}: [cyan]{value}[/cyan]")
        else:
            console.print(
                f"[yellow]⚠[/yellow] {key} is not set globally "
                "[dim](pass it in the git section of your config)[/dim]"
            )
            ok = False
    return ok


def check_signing(system: System) -> bool:
    """Report whether a GPG signing tool is available (optional)."""
    program = system.git.global_config("gpg.program") or "gpg"
    if system.runner.which(program):
        console.print(
            f"[green]✓[/green] Signing tool available ([cyan]{program}[/cyan])"
        )
    else:
        console.print(
            f"[dim]✗ {program} not found - gpgsign will be unavailable[/dim]"
        )
    return True


def check_julia(system: System) -> bool:
    """Report whether Julia is available (needed to commit manifests)."""
    if system.resolver.is_available():
        console.print("[green]✓[/green] julia is installed")
    else:
        console.print(
            "[dim]✗ julia not found - git.manifest will be unavailable[/dim]"
        )
    return True


CHECKS = [
    check_git,
    check_identity,
    check_signing,
    check_julia,
]


def run_all_checks(system: System | None = None) -> bool:
    """Run all preflight checks."""
    system = system or System()
    console.print("[bold]Running preflight checks...[/bold]\n")

    results = [check(system) for check in CHECKS]
    all_passed = all(results)

    if all_passed:
        console.print("\n[bold green]All preflight checks passed![/bold green]")
    else:
        console.print("\n[bold red]Some preflight checks failed.[/bold red]")

    return all_passed
