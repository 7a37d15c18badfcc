"""Tests for the Template generation pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pkgsmith.errors import ConfigurationError, GenerationError
from pkgsmith.hooks import Hook, HookRegistry
from pkgsmith.plugins.base import Plugin
from pkgsmith.template import Stage, Template


@dataclass(frozen=True)
class Recorder(Plugin):
    """Appends (label, hook) to a shared event list for every hook call."""

    label: str = "recorder"
    events: list[tuple[str, str]] = field(default_factory=list, compare=False)
    fail_on: str | None = None

    def _record(self, hook: str, pkg_dir: Path | None = None) -> None:
        if pkg_dir is not None:
            assert pkg_dir.is_dir()
        self.events.append((self.label, hook))
        if self.fail_on == hook:
            if hook == "validate":
                raise ConfigurationError("precondition unmet", plugin=self.label)
            raise OSError(f"{self.label} could not write")

    def validate(self, template: Template) -> None:
        self._record("validate")

    def prehook(self, template: Template, pkg_dir: Path) -> None:
        self._record("prehook", pkg_dir)

    def hook(self, template: Template, pkg_dir: Path) -> None:
        (pkg_dir / f"{self.label}.txt").write_text(self.label)
        self._record("hook", pkg_dir)

    def posthook(self, template: Template, pkg_dir: Path) -> None:
        self._record("posthook", pkg_dir)


@dataclass(frozen=True)
class HookOnly(Recorder):
    pass


@dataclass(frozen=True)
class Finisher(Recorder):
    pass


@dataclass(frozen=True)
class NeedsUser(Plugin):
    needs_username = True


@dataclass(frozen=True)
class Strict(Plugin):
    def validate(self, template: Template) -> None:
        raise ConfigurationError("required tool absent")


ALL_HOOKS = (Hook.VALIDATE, Hook.PREHOOK, Hook.HOOK, Hook.POSTHOOK)


@pytest.fixture
def registry() -> HookRegistry:
    reg = HookRegistry()
    reg.register(Recorder, hooks=ALL_HOOKS)
    reg.register(HookOnly, hooks=(Hook.HOOK,))
    reg.register(Finisher, hooks=ALL_HOOKS, priorities={Hook.POSTHOOK: 5})
    reg.register(NeedsUser, hooks=())
    return reg


def _template(tmp_path: Path, registry: HookRegistry, plugins, **kwargs) -> Template:
    return Template(
        package_name=kwargs.pop("package_name", "Foo"),
        user=kwargs.pop("user", "bob"),
        plugins=tuple(plugins),
        directory_root=tmp_path,
        registry=registry,
        **kwargs,
    )


class TestPipeline:
    """Tests for phase sequencing."""

    def test_phases_run_in_order(self, tmp_path: Path, registry) -> None:
        events: list[tuple[str, str]] = []
        plugins = [
            Finisher(label="finisher", events=events),
            HookOnly(label="hook-only", events=events),
            Recorder(label="recorder", events=events),
        ]
        template = _template(tmp_path, registry, plugins)

        run = template.generate()

        assert run.stage is Stage.DONE
        assert events == [
            ("finisher", "validate"),
            ("recorder", "validate"),
            ("finisher", "prehook"),
            ("recorder", "prehook"),
            ("finisher", "hook"),
            ("hook-only", "hook"),
            ("recorder", "hook"),
            ("recorder", "posthook"),
            ("finisher", "posthook"),
        ]

    def test_hook_only_plugin_sees_completed_prehooks(
        self, tmp_path: Path, registry
    ) -> None:
        """A hook-only plugin runs after every prehook and before any posthook."""
        events: list[tuple[str, str]] = []
        plugins = [
            HookOnly(label="hook-only", events=events),
            Recorder(label="r1", events=events),
            Finisher(label="r2", events=events),
        ]
        _template(tmp_path, registry, plugins).generate()

        position = events.index(("hook-only", "hook"))
        before = [hook for _, hook in events[:position]]
        after = [hook for _, hook in events[position + 1 :]]
        assert "prehook" in before
        assert "posthook" not in before
        assert "prehook" not in after

    def test_run_records_calls(self, tmp_path: Path, registry) -> None:
        events: list[tuple[str, str]] = []
        template = _template(tmp_path, registry, [HookOnly(label="h", events=events)])

        run = template.generate()

        assert run.calls == [("HookOnly", Hook.HOOK)]
        assert run.pkg_dir == tmp_path / "Foo"
        assert (tmp_path / "Foo" / "h.txt").read_text() == "h"

    def test_validation_failure_creates_nothing(self, tmp_path: Path, registry) -> None:
        events: list[tuple[str, str]] = []
        plugins = [
            Recorder(label="ok", events=events),
            Finisher(label="bad", events=events, fail_on="validate"),
        ]
        template = _template(tmp_path, registry, plugins)

        with pytest.raises(ConfigurationError) as exc_info:
            template.generate()

        assert exc_info.value.plugin == "bad"
        assert exc_info.value.phase == "validate"
        assert not (tmp_path / "Foo").exists()
        assert list(tmp_path.iterdir()) == []
        assert all(hook == "validate" for _, hook in events)

    def test_hook_failure_aborts_and_keeps_files(
        self, tmp_path: Path, registry
    ) -> None:
        events: list[tuple[str, str]] = []
        plugins = [
            Recorder(label="first", events=events),
            HookOnly(label="broken", events=events, fail_on="hook"),
            Finisher(label="last", events=events),
        ]
        template = _template(tmp_path, registry, plugins)

        with pytest.raises(GenerationError) as exc_info:
            template.generate()

        error = exc_info.value
        assert error.plugin == "HookOnly"
        assert error.phase == "hook"
        assert isinstance(error.__cause__, OSError)
        # No rollback: files written before the failure remain.
        assert (tmp_path / "Foo" / "first.txt").exists()
        assert ("last", "hook") not in events
        assert not any(hook == "posthook" for _, hook in events)

    def test_posthook_failure_names_phase(self, tmp_path: Path, registry) -> None:
        events: list[tuple[str, str]] = []
        template = _template(
            tmp_path,
            registry,
            [Finisher(label="fin", events=events, fail_on="posthook")],
        )

        with pytest.raises(GenerationError) as exc_info:
            template.generate()

        assert exc_info.value.plugin == "Finisher"
        assert exc_info.value.phase == "posthook"
        assert "Finisher failed during posthook" in str(exc_info.value)


class TestValidation:
    """Tests for template-level preconditions."""

    def test_existing_directory_rejected(self, tmp_path: Path, registry) -> None:
        (tmp_path / "Foo").mkdir()
        template = _template(tmp_path, registry, [])

        with pytest.raises(ConfigurationError, match="already exists"):
            template.generate()

    def test_unattributed_error_names_plugin(self, tmp_path: Path) -> None:
        """A ConfigurationError raised without a plugin is attributed to it."""
        reg = HookRegistry()
        reg.register(Strict, hooks=(Hook.VALIDATE,))
        template = _template(tmp_path, reg, [Strict()])

        with pytest.raises(ConfigurationError) as exc_info:
            template.generate()

        assert exc_info.value.plugin == "Strict"
        assert exc_info.value.message == "required tool absent"
        assert str(exc_info.value) == "Strict: required tool absent"
        assert not (tmp_path / "Foo").exists()

    def test_user_required_by_plugin(self, tmp_path: Path, registry) -> None:
        template = _template(tmp_path, registry, [NeedsUser()], user="")

        with pytest.raises(ConfigurationError, match="NeedsUser"):
            template.validate()

    def test_unregistered_plugin_rejected(self, tmp_path: Path) -> None:
        template = _template(tmp_path, HookRegistry(), [HookOnly()])

        with pytest.raises(ConfigurationError, match="not registered"):
            template.generate()
        assert not (tmp_path / "Foo").exists()

    def test_invalid_package_name(self, tmp_path: Path, registry) -> None:
        template = _template(tmp_path, registry, [], package_name="my-package")

        with pytest.raises(ConfigurationError, match="Invalid package name"):
            template.validate()


class TestTemplate:
    """Tests for Template construction."""

    def test_jl_suffix_stripped(self, tmp_path: Path, registry) -> None:
        template = _template(tmp_path, registry, [], package_name="Foo.jl")
        assert template.package_name == "Foo"
        assert template.package_dir == tmp_path / "Foo"

    def test_duplicate_plugin_types_last_wins(
        self, tmp_path: Path, registry, caplog
    ) -> None:
        first = Recorder(label="first")
        other = HookOnly(label="other")
        second = Recorder(label="second")

        with caplog.at_level(logging.WARNING, logger="pkgsmith.template"):
            template = _template(tmp_path, registry, [first, other, second])

        assert template.plugins == (other, second)
        assert template.get_plugin(Recorder) is second
        assert "Recorder" in caplog.text

    def test_get_plugin_missing(self, tmp_path: Path, registry) -> None:
        template = _template(tmp_path, registry, [HookOnly()])
        assert template.get_plugin(Finisher) is None
