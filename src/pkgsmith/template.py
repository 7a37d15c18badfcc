"""Template definition and the generation pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pkgsmith.errors import ConfigurationError, GenerationError
from pkgsmith.hooks import Hook, HookRegistry
from pkgsmith.plugins import DEFAULT_REGISTRY, Plugin, default_plugins
from pkgsmith.system import System

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline states. FAILED is reachable from every other state."""

    PENDING = "pending"
    VALIDATING = "validating"
    CREATING = "creating"
    PREHOOKING = "prehooking"
    HOOKING = "hooking"
    POSTHOOKING = "posthooking"
    DONE = "done"
    FAILED = "failed"


# Plugin phases run after the package directory has been created.
HOOK_PHASES: tuple[tuple[Stage, Hook], ...] = (
    (Stage.PREHOOKING, Hook.PREHOOK),
    (Stage.HOOKING, Hook.HOOK),
    (Stage.POSTHOOKING, Hook.POSTHOOK),
)


def _collapse_duplicates(plugins: tuple[Plugin, ...]) -> tuple[Plugin, ...]:
    """Keep only the last declared instance of each plugin type."""
    last_index = {type(plugin): i for i, plugin in enumerate(plugins)}
    kept = tuple(p for i, p in enumerate(plugins) if last_index[type(p)] == i)
    dropped = [p.plugin_name for i, p in enumerate(plugins) if last_index[type(p)] != i]
    if dropped:
        logger.warning(
            "Plugin(s) %s declared more than once; the last declaration wins",
            ", ".join(sorted(set(dropped))),
        )
    return kept


@dataclass(frozen=True)
class Template:
    """Configuration for one package scaffold.

    Plugin order is declaration order, which breaks ties between plugins
    sharing a priority for a hook.
    """

    package_name: str
    user: str = ""
    host: str = "github.com"
    plugins: tuple[Plugin, ...] = field(default_factory=default_plugins)
    directory_root: Path = Path(".")
    authors: tuple[str, ...] = ()
    julia: str = "1.10"
    registry: HookRegistry = field(default=DEFAULT_REGISTRY, repr=False)
    system: System = field(default_factory=System, repr=False, compare=False)

    def __post_init__(self) -> None:
        name = self.package_name
        if name.endswith(".jl"):
            name = name[: -len(".jl")]
        object.__setattr__(self, "package_name", name)
        object.__setattr__(self, "directory_root", Path(self.directory_root))
        object.__setattr__(self, "authors", tuple(self.authors))
        object.__setattr__(self, "plugins", _collapse_duplicates(tuple(self.plugins)))

    @property
    def package_dir(self) -> Path:
        return self.directory_root.expanduser() / self.package_name

    def get_plugin(self, plugin_type: type[Plugin]) -> Plugin | None:
        """Return the template's instance of `plugin_type`, if any."""
        for plugin in self.plugins:
            if type(plugin) is plugin_type:
                return plugin
        return None

    def validate(self) -> None:
        """Check template and plugin preconditions without touching disk.

        Raises:
            ConfigurationError: On the first unmet precondition.
        """
        if not self.package_name.isidentifier():
            raise ConfigurationError(
                f"Invalid package name '{self.package_name}'", plugin="Template"
            )

        for plugin in self.plugins:
            if not self.registry.is_registered(type(plugin)):
                raise ConfigurationError(
                    "Plugin type is not registered", plugin=plugin.plugin_name
                )

        if not self.user:
            needy = [p.plugin_name for p in self.plugins if p.needs_username]
            if needy:
                raise ConfigurationError(
                    f"A user is required by plugin(s): {', '.join(needy)}",
                    plugin="Template",
                )

        if self.package_dir.exists():
            raise ConfigurationError(
                f"{self.package_dir} already exists", plugin="Template"
            )

        for plugin in self.registry.order(self.plugins, Hook.VALIDATE):
            try:
                plugin.validate(self)
            except ConfigurationError as e:
                if e.plugin is not None:
                    raise
                raise ConfigurationError(e.message, plugin=plugin.plugin_name) from e
            except Exception as e:
                raise GenerationError(plugin.plugin_name, Hook.VALIDATE.value, e) from e

    def generate(self) -> GenerationRun:
        """Scaffold the package.

        Validation failures leave the filesystem untouched. Failures in a
        later phase stop the run and leave everything produced so far on
        disk.

        Raises:
            ConfigurationError: If validation fails.
            GenerationError: If directory creation or a plugin hook fails.
        """
        run = GenerationRun(template=self, pkg_dir=self.package_dir)
        try:
            run.advance(Stage.VALIDATING)
            self.validate()

            run.advance(Stage.CREATING)
            try:
                run.pkg_dir.mkdir(parents=True)
            except OSError as e:
                raise GenerationError("Template", "create", e) from e

            for stage, hook in HOOK_PHASES:
                run.advance(stage)
                for plugin in self.registry.order(self.plugins, hook):
                    run.call(plugin, hook)

            run.advance(Stage.DONE)
        except Exception:
            run.fail()
            raise

        logger.info("Generated %s at %s", self.package_name, run.pkg_dir)
        return run


@dataclass
class GenerationRun:
    """Runtime state of one generation, kept apart from the Template."""

    template: Template
    pkg_dir: Path
    stage: Stage = Stage.PENDING
    failed_stage: Stage | None = None
    calls: list[tuple[str, Hook]] = field(default_factory=list)

    def advance(self, stage: Stage) -> None:
        logger.debug("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def fail(self) -> None:
        self.failed_stage = self.stage
        self.stage = Stage.FAILED

    def call(self, plugin: Plugin, hook: Hook) -> None:
        """Invoke one plugin hook, attributing any failure to it."""
        logger.debug("Running %s %s", plugin.plugin_name, hook.value)
        method = getattr(plugin, hook.value)
        try:
            method(self.template, self.pkg_dir)
        except Exception as e:
            raise GenerationError(plugin.plugin_name, hook.value, e) from e
        self.calls.append((plugin.plugin_name, hook))
