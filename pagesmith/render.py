"""Template and Markdown rendering used by the page builder."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, cast

from jinja2 import Environment, FunctionLoader, TemplateError, TemplateNotFound
from markdown_it import MarkdownIt
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .content import Include
from .errors import RenderError

DEFAULT_MARKDOWN_SUFFIXES = (".md", ".markdown")


@lru_cache(maxsize=1)
def _markdown() -> MarkdownIt:
    """Configure and cache a CommonMark-compliant renderer."""
    md = MarkdownIt("commonmark", {"html": True, "linkify": True, "typographer": True})
    md.enable("table").enable("strikethrough")
    md.use(deflist_plugin)
    md.use(footnote_plugin)
    md.use(tasklists_plugin, label=True)
    return md


def render_markdown(text: str) -> str:
    """Render Markdown to HTML using the shared renderer."""
    if not text.strip():
        return ""
    return cast(str, _markdown().render(text))


class Renderer:
    """Render template bodies and page markup.

    Rendering keeps no per-call state. Include templates are resolved by
    name through ``includes``, which is read on every lookup so plugins
    that add includes before the build see them picked up.
    """

    def __init__(
        self,
        includes: Mapping[str, Include] | None = None,
        *,
        markdown_suffixes: Iterable[str] = DEFAULT_MARKDOWN_SUFFIXES,
    ) -> None:
        self._includes: Mapping[str, Include] = includes if includes is not None else {}
        self._markdown_suffixes = tuple(s.lower() for s in markdown_suffixes)
        self._env = Environment(
            loader=FunctionLoader(self._load_include),
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render_template(self, body: str, context: Mapping[str, Any], *, source: str | None = None) -> str:
        """Expand ``body`` as a Jinja template against ``context``."""
        label = source or "<string>"
        try:
            template = self._env.from_string(body)
            return template.render(dict(context))
        except TemplateNotFound as exc:
            raise RenderError(f"{label}: include '{exc.name}' not found", source=source) from exc
        except TemplateError as exc:
            raise RenderError(f"{label}: {exc}", source=source) from exc
        except Exception as exc:
            raise RenderError(f"{label}: {type(exc).__name__}: {exc}", source=source) from exc

    def render_markup(self, body: str, file_path: str | Path) -> str:
        """Convert ``body`` to HTML when ``file_path`` has a Markdown suffix."""
        if not self.is_markdown(file_path):
            return body
        try:
            return render_markdown(body)
        except Exception as exc:
            raise RenderError(f"{file_path}: markdown conversion failed: {exc}", source=str(file_path)) from exc

    def is_markdown(self, file_path: str | Path) -> bool:
        return Path(file_path).suffix.lower() in self._markdown_suffixes

    def _load_include(self, name: str) -> tuple[str, str | None, Callable[[], bool]] | None:
        include = self._includes.get(name)
        if include is None:
            include = self._includes.get(Path(name).stem)
        if include is None:
            return None
        current = include
        return include.template, None, lambda: self._includes.get(current.name) is current
