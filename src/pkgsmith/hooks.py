"""Hook registry and priority resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgsmith.plugins.base import Plugin

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 0


class Hook(str, Enum):
    """Extension points, in the order the pipeline visits them."""

    VALIDATE = "validate"
    PREHOOK = "prehook"
    HOOK = "hook"
    POSTHOOK = "posthook"


@dataclass(frozen=True)
class PluginRegistration:
    """Capabilities and priority overrides declared for one plugin type."""

    plugin_type: type[Plugin]
    hooks: frozenset[Hook]
    priorities: Mapping[Hook, int] = field(default_factory=dict)

    def implements(self, hook: Hook) -> bool:
        """Check whether this plugin type takes part in `hook`."""
        return hook in self.hooks

    def priority(self, hook: Hook) -> int:
        """Priority for `hook`; lower runs first."""
        return self.priorities.get(hook, DEFAULT_PRIORITY)


class HookRegistry:
    """Registry of plugin types and the hooks they implement.

    Ordering for a hook is a stable sort on (priority, declaration index),
    so the same plugin sequence always yields the same order and
    declaration order breaks ties between equal priorities.
    """

    def __init__(self) -> None:
        self._registrations: dict[type[Plugin], PluginRegistration] = {}

    def register(
        self,
        plugin_type: type[Plugin],
        hooks: Iterable[Hook],
        priorities: Mapping[Hook, int] | None = None,
    ) -> PluginRegistration:
        """Register a plugin type with its capabilities.

        Raises:
            ValueError: If the type is already registered, or a priority is
                given for a hook the type does not implement.
        """
        if plugin_type in self._registrations:
            raise ValueError(f"Plugin '{plugin_type.__name__}' is already registered")

        hook_set = frozenset(Hook(h) for h in hooks)
        priority_table = {Hook(h): int(p) for h, p in (priorities or {}).items()}
        stray = set(priority_table) - hook_set
        if stray:
            names = ", ".join(sorted(h.value for h in stray))
            raise ValueError(
                f"Plugin '{plugin_type.__name__}' sets a priority for hooks it "
                f"does not implement: {names}"
            )

        registration = PluginRegistration(
            plugin_type=plugin_type,
            hooks=hook_set,
            priorities=priority_table,
        )
        self._registrations[plugin_type] = registration
        logger.debug(
            "Registered plugin %s (hooks: %s)",
            plugin_type.__name__,
            ", ".join(sorted(h.value for h in hook_set)),
        )
        return registration

    def get(self, plugin_type: type[Plugin]) -> PluginRegistration | None:
        """Get the registration for a plugin type, or None."""
        return self._registrations.get(plugin_type)

    def is_registered(self, plugin_type: type[Plugin]) -> bool:
        return plugin_type in self._registrations

    @property
    def plugin_types(self) -> tuple[type[Plugin], ...]:
        """Registered plugin types in registration order."""
        return tuple(self._registrations)

    def priority(self, plugin: Plugin, hook: Hook) -> int:
        registration = self._registrations.get(type(plugin))
        if registration is None:
            return DEFAULT_PRIORITY
        return registration.priority(hook)

    def order(self, plugins: Sequence[Plugin], hook: Hook) -> list[Plugin]:
        """Return the plugins implementing `hook`, in execution order."""
        candidates = [
            (self.priority(plugin, hook), index, plugin)
            for index, plugin in enumerate(plugins)
            if self._implements(plugin, hook)
        ]
        candidates.sort(key=lambda item: (item[0], item[1]))
        return [plugin for _, _, plugin in candidates]

    def _implements(self, plugin: Plugin, hook: Hook) -> bool:
        registration = self._registrations.get(type(plugin))
        return registration is not None and registration.implements(hook)
