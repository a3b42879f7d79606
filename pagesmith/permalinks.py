"""Derive the clean, filesystem and alias addresses of a page."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Mapping

from .render import Renderer

INDEX_FILENAME = "index.html"


@dataclass(frozen=True, slots=True)
class Permalinks:
    clean: str
    filesystem: str
    alias: str | None = None


def logical_name(file_path: str | Path, content_root: str | Path) -> str:
    """Path of ``file_path`` relative to ``content_root`` without its suffix, in posix form."""
    path = Path(file_path)
    try:
        relative = path.resolve().relative_to(Path(content_root).resolve())
    except ValueError:
        relative = Path(path.name)
    return PurePosixPath(relative.as_posix()).with_suffix("").as_posix()


def generate_permalinks(
    file_path: str | Path,
    content_root: str | Path,
    context: Mapping[str, Any],
    renderer: Renderer,
) -> Permalinks:
    """Compute permalinks for a page from its (merged) render context.

    Without a ``permalink`` value every page maps to the clean path ``/`` and
    the filesystem path ``/<name>.html``. Both ``permalink`` and ``alias`` are
    rendered as templates against ``context``.
    """
    name = logical_name(file_path, content_root)
    source = str(file_path)
    clean = "/"
    filesystem = f"/{name}.html"
    alias: str | None = None

    alias_template = context.get("alias")
    if alias_template:
        alias = renderer.render_template(str(alias_template), context, source=f"{source} (alias)")

    permalink_template = context.get("permalink")
    if permalink_template:
        clean = renderer.render_template(str(permalink_template), context, source=f"{source} (permalink)")
        if not clean.startswith("/"):
            clean = f"/{clean}"
        directory = clean if clean.endswith("/") else f"{clean}/"
        filesystem = f"{directory}{INDEX_FILENAME}"

    return Permalinks(clean=clean, filesystem=filesystem, alias=alias)
