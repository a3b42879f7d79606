import asyncio
import logging
from types import SimpleNamespace

import pytest

from pagesmith.config import HookErrorPolicy, PluginSpec
from pagesmith.errors import PluginHookError, PluginLoadError
from pagesmith.plugins import PluginHookBus, implemented_hooks, load_plugin


class RecordingPlugin:
    version = "1.0.0"

    def __init__(self, name: str, events: list[str], delay: float = 0.0) -> None:
        self.name = name
        self.events = events
        self.delay = delay

    async def before_build(self, pipeline) -> None:
        self.events.append(f"{self.name}:start")
        await asyncio.sleep(self.delay)
        self.events.append(f"{self.name}:end")


class InitPlugin:
    version = "0.1.0"

    def __init__(self, events: list[str]) -> None:
        self.events = events

    def initialize(self, pipeline) -> None:
        self.events.append("initialize")


class Observer:
    version = "0.1.0"

    def __init__(self, events: list[str]) -> None:
        self.events = events

    def before_plugin_initialized(self, pipeline, plugin) -> None:
        self.events.append(f"before:{type(plugin).__name__}")

    def after_plugin_initialized(self, pipeline, plugin) -> None:
        self.events.append(f"after:{type(plugin).__name__}")


class FailingPlugin:
    version = "0.0.1"

    def before_build(self, pipeline) -> None:
        raise ValueError("nope")


async def test_hooks_run_in_registration_order_and_sequentially() -> None:
    events: list[str] = []
    bus = PluginHookBus(pipeline=object())
    await bus.use(RecordingPlugin("p1", events, delay=0.02))
    await bus.use(RecordingPlugin("p2", events))

    await bus.trigger_hook("before_build")

    assert events == ["p1:start", "p1:end", "p2:start", "p2:end"]


async def test_hooks_receive_pipeline_and_arguments() -> None:
    received: list[tuple[object, object]] = []
    pipeline = object()

    class Plugin:
        version = "1"

        def after_build(self, pipe, pages) -> None:
            received.append((pipe, pages))

    bus = PluginHookBus(pipeline)
    await bus.use(Plugin())
    await bus.trigger_hook("after_build", ["page"])
    await bus.trigger_hook("before_build")

    assert received == [(pipeline, ["page"])]


async def test_use_wraps_initialize_with_hooks() -> None:
    events: list[str] = []
    bus = PluginHookBus(pipeline=object())
    await bus.use(Observer(events))
    await bus.use(InitPlugin(events))

    assert events == ["before:InitPlugin", "initialize", "after:InitPlugin"]
    assert len(bus) == 2


async def test_hook_error_is_fatal_by_default() -> None:
    bus = PluginHookBus(pipeline=object())
    await bus.use(FailingPlugin())

    with pytest.raises(PluginHookError) as excinfo:
        await bus.trigger_hook("before_build")

    assert excinfo.value.hook == "before_build"
    assert isinstance(excinfo.value.__cause__, ValueError)


async def test_hook_error_can_be_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    events: list[str] = []
    bus = PluginHookBus(pipeline=object(), policy=HookErrorPolicy.LOG)
    await bus.use(FailingPlugin())
    await bus.use(RecordingPlugin("after", events))

    with caplog.at_level(logging.ERROR, logger="pagesmith.plugins"):
        await bus.trigger_hook("before_build")

    assert events == ["after:start", "after:end"]
    assert any("FailingPlugin" in message for message in caplog.messages)


def test_load_plugin_calls_factory_with_options() -> None:
    plugin = load_plugin(PluginSpec(path="types:SimpleNamespace", options={"version": "2.0"}))

    assert isinstance(plugin, SimpleNamespace)
    assert plugin.version == "2.0"


def test_load_plugin_reports_missing_module() -> None:
    with pytest.raises(PluginLoadError):
        load_plugin(PluginSpec(path="pagesmith_missing_module:Plugin"))


def test_plugin_spec_requires_attribute() -> None:
    with pytest.raises(ValueError):
        PluginSpec(path="just.a.module")


def test_implemented_hooks_lists_known_callables_only() -> None:
    plugin = SimpleNamespace(version="1.0", before_build=lambda pipeline: None, after_build="not callable")
    plugin.custom_hook = lambda pipeline: None

    assert implemented_hooks(plugin) == ["before_build"]
    assert implemented_hooks(InitPlugin([])) == ["initialize"]


async def test_use_warns_about_plugins_without_version(caplog: pytest.LogCaptureFixture) -> None:
    bus = PluginHookBus(pipeline=object())

    with caplog.at_level(logging.DEBUG, logger="pagesmith.plugins"):
        await bus.use(SimpleNamespace(before_build=lambda pipeline: None))
        await bus.use(RecordingPlugin("versioned", []))

    warnings = [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]
    assert warnings == ["Plugin SimpleNamespace has no version attribute"]
    assert any("with hooks: before_build" in message for message in caplog.messages)
    assert len(bus) == 2
