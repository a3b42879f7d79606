"""Plugin registry and ordered hook dispatch."""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any, Protocol, runtime_checkable

from .config import HookErrorPolicy, PluginSpec
from .errors import PluginHookError, PluginLoadError

logger = logging.getLogger(__name__)

HOOK_NAMES: tuple[str, ...] = (
    "initialize",
    "before_build",
    "after_build",
    "before_build_page",
    "after_build_page",
    "before_render_content",
    "after_render_content",
    "before_render_layout",
    "after_render_layout",
    "before_plugin_initialized",
    "after_plugin_initialized",
)


@runtime_checkable
class Plugin(Protocol):
    """Minimal plugin shape.

    Every hook listed in :data:`HOOK_NAMES` is optional. Hooks are called with
    the pipeline as the first argument and may be plain functions or
    coroutines.
    """

    version: str


def implemented_hooks(plugin: Any) -> list[str]:
    """Names from :data:`HOOK_NAMES` that ``plugin`` defines as callables."""
    return [name for name in HOOK_NAMES if callable(getattr(plugin, name, None))]


class PluginHookBus:
    """Hold plugins in registration order and dispatch hooks to them one at a time."""

    def __init__(self, pipeline: Any, *, policy: HookErrorPolicy = HookErrorPolicy.RAISE) -> None:
        self._pipeline = pipeline
        self._plugins: list[Any] = []
        self.policy = policy

    @property
    def plugins(self) -> tuple[Any, ...]:
        return tuple(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    async def use(self, plugin: Any) -> None:
        """Register ``plugin`` and run its initializer, if any."""
        if not isinstance(plugin, Plugin):
            logger.warning("Plugin %s has no version attribute", type(plugin).__name__)
        self._plugins.append(plugin)
        logger.debug(
            "Registered plugin %s (version %s) with hooks: %s",
            type(plugin).__name__,
            getattr(plugin, "version", "unknown"),
            ", ".join(implemented_hooks(plugin)) or "none",
        )
        initializer = getattr(plugin, "initialize", None)
        if not callable(initializer):
            return
        await self.trigger_hook("before_plugin_initialized", plugin)
        await self._invoke(plugin, "initialize", initializer, ())
        await self.trigger_hook("after_plugin_initialized", plugin)

    async def trigger_hook(self, name: str, *args: Any) -> None:
        """Await ``name`` on every plugin that defines it, in registration order."""
        # Plugins registered while a hook runs only see later hooks.
        for plugin in list(self._plugins):
            handler = getattr(plugin, name, None)
            if callable(handler):
                await self._invoke(plugin, name, handler, args)

    async def _invoke(self, plugin: Any, name: str, handler: Any, args: tuple[Any, ...]) -> None:
        try:
            result = handler(self._pipeline, *args)
            if inspect.isawaitable(result):
                await result
        except PluginHookError:
            raise
        except Exception as exc:
            if self.policy is HookErrorPolicy.LOG:
                logger.exception("Plugin %s failed in hook '%s'", type(plugin).__name__, name)
                return
            raise PluginHookError(name, plugin, exc) from exc


def load_plugin(spec: PluginSpec) -> Any:
    """Import ``spec.path`` and call it with ``spec.options`` to build a plugin."""
    module_name, _, attribute = spec.path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise PluginLoadError(f"Cannot import plugin module '{module_name}': {exc}") from exc

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise PluginLoadError(f"Plugin '{spec.path}' not found") from exc

    if not callable(target):
        return target
    try:
        return target(**spec.options)
    except TypeError as exc:
        raise PluginLoadError(f"Cannot construct plugin '{spec.path}': {exc}") from exc
