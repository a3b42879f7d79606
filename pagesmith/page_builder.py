"""Build a single content file into a rendered page."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from .cache import hash_content
from .content import Page, split_front_matter, validate_front_matter
from .context import BuildContext
from .errors import FrontMatterValidationError
from .permalinks import generate_permalinks
from .plugins import PluginHookBus
from .render import Renderer
from .reporting import BuildStats

logger = logging.getLogger(__name__)


class PageBuilder:
    """Run one content file through hashing, rendering, layout and permalinks.

    Returns ``None`` for files that are skipped (invalid front matter or an
    excluded draft). Unexpected errors propagate to the caller.
    """

    def __init__(
        self,
        context: BuildContext,
        renderer: Renderer,
        hooks: PluginHookBus,
        *,
        content_root: Path,
        include_drafts: bool = False,
        stats: BuildStats | None = None,
    ) -> None:
        self._context = context
        self._renderer = renderer
        self._hooks = hooks
        self._content_root = content_root
        self._include_drafts = include_drafts
        self._stats = stats if stats is not None else BuildStats()

    async def build(self, file_path: str | Path) -> Page | None:
        path = Path(file_path)
        raw = await asyncio.to_thread(path.read_bytes)
        digest = hash_content(raw)

        page, cache_hit = await self._context.cache.get_or_build(
            digest, lambda: self._build_page(path, raw.decode("utf-8"))
        )
        if cache_hit:
            logger.info("Using cached version for %s", path)
            self._stats.cache_hits += 1
        return page

    async def _build_page(self, path: Path, text: str) -> Page | None:
        source = str(path)
        page = Page(file_path=source)
        await self._hooks.trigger_hook("before_build_page", page)

        frontmatter, body = split_front_matter(text, source=source)
        page.frontmatter = frontmatter
        page.content = body

        try:
            page.frontmatter = validate_front_matter(frontmatter, source=source)
        except FrontMatterValidationError as exc:
            logger.warning("%s", exc)
            self._stats.skipped_invalid.append(source)
            return None

        if page.frontmatter.get("draft") and not self._include_drafts:
            logger.info("Skipping draft page: %s", source)
            self._stats.skipped_drafts.append(source)
            return None

        await self._hooks.trigger_hook("before_render_content", page)
        context = self._context.content_data(page.frontmatter)
        page.output = self._renderer.render_template(page.content, context, source=source)
        await self._hooks.trigger_hook("after_render_content", page)

        page.output = self._renderer.render_markup(page.output, path)

        context = await self._apply_layout(page, context)

        links = generate_permalinks(path, self._content_root, context, self._renderer)
        page.permalink_clean = links.clean
        page.permalink_filesystem = links.filesystem
        page.permalink_alias = links.alias

        await self._hooks.trigger_hook("after_build_page", page)
        return page

    async def _apply_layout(self, page: Page, context: dict[str, Any]) -> dict[str, Any]:
        layout_name = page.frontmatter.get("layout") or self._context.data.get("layout")
        if not layout_name:
            return context
        layout = self._context.includes.get(str(layout_name))
        if layout is None:
            logger.debug("Layout '%s' not found for %s; leaving content unwrapped", layout_name, page.file_path)
            return context

        page.layout = layout
        await self._hooks.trigger_hook("before_render_layout", page)
        merged = {**layout.frontmatter, **page.frontmatter}
        context = self._context.content_data(merged, content=page.output)
        page.output = self._renderer.render_template(
            layout.template, context, source=f"layout '{layout.name}'"
        )
        await self._hooks.trigger_hook("after_render_layout", page)
        return context
