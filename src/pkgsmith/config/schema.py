"""Configuration schema for pkgsmith."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


def _opt_bool(value: Any) -> bool | None:
    return bool(value) if value is not None else None


def _opt_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def _opt_str_tuple(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


@dataclass(frozen=True)
class GitConfig:
    """Options for the Git plugin.

    None means "not set" so that a higher-precedence layer can leave a
    lower layer's value alone.
    """

    enabled: bool | None = None
    name: str | None = None
    email: str | None = None
    branch: str | None = None
    ssh: bool | None = None
    jl: bool | None = None
    manifest: bool | None = None
    gpgsign: bool | None = None
    ignore: tuple[str, ...] | None = None

    def overlay(self, other: GitConfig) -> GitConfig:
        """Return a new config with non-None fields from `other` overlaid."""
        values = {
            f.name: (
                getattr(other, f.name)
                if getattr(other, f.name) is not None
                else getattr(self, f.name)
            )
            for f in fields(self)
        }
        return GitConfig(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitConfig:
        """Create from a dictionary. Unknown keys are ignored."""
        return cls(
            enabled=_opt_bool(data.get("enabled")),
            name=_opt_str(data.get("name")),
            email=_opt_str(data.get("email")),
            branch=_opt_str(data.get("branch")),
            ssh=_opt_bool(data.get("ssh")),
            jl=_opt_bool(data.get("jl")),
            manifest=_opt_bool(data.get("manifest")),
            gpgsign=_opt_bool(data.get("gpgsign")),
            ignore=_opt_str_tuple(data.get("ignore")),
        )


@dataclass(frozen=True)
class DocsConfig:
    """Options for the Documenter plugin."""

    enabled: bool | None = None
    assets: tuple[str, ...] | None = None
    canonical_url: str | None = None
    deploy: bool | None = None

    def overlay(self, other: DocsConfig) -> DocsConfig:
        """Return a new config with non-None fields from `other` overlaid."""
        return DocsConfig(
            enabled=other.enabled if other.enabled is not None else self.enabled,
            assets=other.assets if other.assets is not None else self.assets,
            canonical_url=(
                other.canonical_url
                if other.canonical_url is not None
                else self.canonical_url
            ),
            deploy=other.deploy if other.deploy is not None else self.deploy,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.enabled is not None:
            result["enabled"] = self.enabled
        if self.assets is not None:
            result["assets"] = list(self.assets)
        if self.canonical_url is not None:
            result["canonical_url"] = self.canonical_url
        if self.deploy is not None:
            result["deploy"] = self.deploy
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocsConfig:
        return cls(
            enabled=_opt_bool(data.get("enabled")),
            assets=_opt_str_tuple(data.get("assets")),
            canonical_url=_opt_str(data.get("canonical_url")),
            deploy=_opt_bool(data.get("deploy")),
        )


@dataclass
class PkgsmithConfig:
    """pkgsmith configuration schema.

    Fields mirror the options of `pkgsmith generate`. None values indicate
    "not set" and are filled from lower-precedence layers.
    """

    # Template settings
    user: str | None = None
    host: str | None = None
    dir: str | None = None
    authors: tuple[str, ...] | None = None
    julia: str | None = None

    # Plugin settings
    git: GitConfig = GitConfig()
    docs: DocsConfig = DocsConfig()

    def merge(self, other: PkgsmithConfig) -> PkgsmithConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new PkgsmithConfig instance.
        """
        return PkgsmithConfig(
            user=other.user if other.user is not None else self.user,
            host=other.host if other.host is not None else self.host,
            dir=other.dir if other.dir is not None else self.dir,
            authors=other.authors if other.authors is not None else self.authors,
            julia=other.julia if other.julia is not None else self.julia,
            git=self.git.overlay(other.git),
            docs=self.docs.overlay(other.docs),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("git", "docs"):
                nested = value.to_dict()
                if nested:
                    result[f.name] = nested
            elif isinstance(value, tuple):
                result[f.name] = list(value)
            elif value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PkgsmithConfig:
        """Create a PkgsmithConfig from a dictionary.

        Unknown keys are ignored.
        """
        git_raw = data.get("git")
        docs_raw = data.get("docs")
        return cls(
            user=_opt_str(data.get("user")),
            host=_opt_str(data.get("host")),
            dir=_opt_str(data.get("dir")),
            authors=_opt_str_tuple(data.get("authors")),
            julia=_opt_str(data.get("julia")),
            git=(
                GitConfig.from_dict(git_raw)
                if isinstance(git_raw, dict)
                else GitConfig()
            ),
            docs=(
                DocsConfig.from_dict(docs_raw)
                if isinstance(docs_raw, dict)
                else DocsConfig()
            ),
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = PkgsmithConfig(
    host="github.com",
    dir=".",
    julia="1.10",
    git=GitConfig(enabled=True, ssh=False, jl=True, manifest=False, gpgsign=False),
    docs=DocsConfig(enabled=False, deploy=False),
)
