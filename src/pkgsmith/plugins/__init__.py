"""Built-in plugins and the default hook registry."""

from pkgsmith.hooks import Hook, HookRegistry
from pkgsmith.plugins.base import Plugin
from pkgsmith.plugins.documenter import Documenter
from pkgsmith.plugins.git import Git
from pkgsmith.plugins.project_file import ProjectFile
from pkgsmith.plugins.src_dir import SrcDir

__all__ = [
    "DEFAULT_REGISTRY",
    "Documenter",
    "Git",
    "Plugin",
    "ProjectFile",
    "SrcDir",
    "default_plugins",
]

DEFAULT_REGISTRY = HookRegistry()
DEFAULT_REGISTRY.register(
    ProjectFile,
    hooks=(Hook.VALIDATE, Hook.HOOK),
    priorities={Hook.HOOK: -10},
)
DEFAULT_REGISTRY.register(SrcDir, hooks=(Hook.HOOK,))
DEFAULT_REGISTRY.register(
    Git,
    hooks=(Hook.VALIDATE, Hook.PREHOOK, Hook.HOOK, Hook.POSTHOOK),
    # Commit only after every other plugin has written its files.
    priorities={Hook.POSTHOOK: 5},
)
DEFAULT_REGISTRY.register(Documenter, hooks=(Hook.VALIDATE, Hook.HOOK))


def default_plugins() -> tuple[Plugin, ...]:
    """Plugins used when a template does not list its own."""
    return (ProjectFile(), SrcDir(), Git())
