"""Configuration, template building and preflight checks."""

from pkgsmith.config.builder import build_plugins, build_template, resolve_authors
from pkgsmith.config.loader import load_config, save_config
from pkgsmith.config.schema import (
    DEFAULT_CONFIG,
    DocsConfig,
    GitConfig,
    PkgsmithConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DocsConfig",
    "GitConfig",
    "PkgsmithConfig",
    "build_plugins",
    "build_template",
    "load_config",
    "resolve_authors",
    "save_config",
]
