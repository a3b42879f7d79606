"""Coordinate a full site build: load, index, render pages, notify plugins."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Iterable

from .cache import PageCache
from .config import Config
from .content import CollectionEntry, Include, Page
from .context import BuildContext
from .errors import PluginHookError
from .indexer import IndexResult, index_content
from .loaders import load_data, load_includes
from .page_builder import PageBuilder
from .plugins import PluginHookBus, load_plugin
from .render import Renderer
from .reporting import BuildReport, BuildStats, assemble_report
from .walker import list_files, suffix_filter

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Build every content file under the configured source tree into pages.

    Plugins receive this object as the first argument of every hook and may
    read or mutate :attr:`collections`, :attr:`data` and :attr:`includes`,
    or register further plugins with :meth:`use`. The shared state is reset
    at the start of each :meth:`build`, so plugins should populate it from
    ``before_build`` rather than ``initialize``.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.context = BuildContext()
        self.hooks = PluginHookBus(self, policy=self.config.hook_errors)
        self.report: BuildReport | None = None

    @property
    def collections(self) -> dict[str, list[CollectionEntry]]:
        return self.context.collections

    @property
    def data(self) -> dict[str, Any]:
        return self.context.data

    @property
    def includes(self) -> dict[str, Include]:
        return self.context.includes

    @property
    def cache(self) -> PageCache:
        return self.context.cache

    @property
    def plugins(self) -> tuple[Any, ...]:
        return self.hooks.plugins

    async def use(self, plugin: Any) -> "SiteBuilder":
        """Register a plugin, running its ``initialize`` hook when present."""
        await self.hooks.use(plugin)
        return self

    async def trigger_hook(self, name: str, *args: Any) -> None:
        await self.hooks.trigger_hook(name, *args)

    async def use_configured_plugins(self) -> None:
        """Instantiate and register every plugin listed in the configuration."""
        for spec in self.config.plugins:
            await self.use(load_plugin(spec))

    def discover_content(self) -> list[Path]:
        return list_files(self.config.content_dir, suffix_filter(*self.config.content_suffixes))

    def load(self, *, include_drafts: bool | None = None) -> tuple[list[Path], IndexResult]:
        """Run the sequential phase: data, includes, discovery and indexing."""
        config = self.config
        if include_drafts is None:
            include_drafts = config.drafts_enabled()
        self.context = BuildContext()
        self.context.data.update(load_data(config.data_dir, config.data_suffixes))
        self.context.includes.update(load_includes(config.includes_dir, config.include_suffixes))
        files = self.discover_content()
        result = index_content(files, self.context, include_drafts=include_drafts)
        return files, result

    async def build(self) -> list[Page]:
        """Build all pages and return them. Order is not guaranteed."""
        start = time.perf_counter()
        include_drafts = self.config.drafts_enabled()
        files, _ = self.load(include_drafts=include_drafts)
        stats = BuildStats(files_discovered=len(files))

        await self.trigger_hook("before_build")

        renderer = Renderer(self.context.includes, markdown_suffixes=self.config.markdown_suffixes)
        page_builder = PageBuilder(
            self.context,
            renderer,
            self.hooks,
            content_root=self.config.content_dir,
            include_drafts=include_drafts,
            stats=stats,
        )
        pages = await self._build_pages(page_builder, files, stats)

        await self.trigger_hook("after_build", pages)

        self.report = assemble_report(
            project=self.config.project_name,
            duration_seconds=time.perf_counter() - start,
            stats=stats,
            pages=pages,
            collections=self.context.collections,
        )
        logger.info(
            "Built %d page(s) from %d file(s) in %.2fs",
            len(pages),
            len(files),
            self.report.duration_seconds,
        )
        return pages

    async def _build_pages(
        self,
        page_builder: PageBuilder,
        files: Iterable[Path],
        stats: BuildStats,
    ) -> list[Page]:
        limiter = asyncio.Semaphore(self.config.concurrency_limit)

        async def _guarded(path: Path) -> Page | None:
            async with limiter:
                try:
                    return await page_builder.build(path)
                except PluginHookError:
                    raise
                except Exception:
                    logger.exception("Error processing file %s", path)
                    stats.failed.append(str(path))
                    return None

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(_guarded(path)) for path in files]
        except ExceptionGroup as errors:
            raise errors.exceptions[0]

        return [page for page in (task.result() for task in tasks) if page is not None]


async def build_site(config: Config, plugins: Iterable[Any] = ()) -> tuple[list[Page], BuildReport]:
    """Register ``plugins`` (then any configured ones) and run a build."""
    builder = SiteBuilder(config)
    for plugin in plugins:
        await builder.use(plugin)
    await builder.use_configured_plugins()
    pages = await builder.build()
    assert builder.report is not None
    return pages, builder.report
