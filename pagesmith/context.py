"""Shared state for one build."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .cache import PageCache
from .content import CollectionEntry, Include


@dataclass(slots=True)
class BuildContext:
    """State shared by every stage of a build.

    Created empty when a build starts. The sequential phases populate
    ``data``, ``includes`` and ``collections``; the parallel page phase only
    reads them. ``cache`` is the one structure written concurrently.
    """

    data: dict[str, Any] = field(default_factory=dict)
    includes: dict[str, Include] = field(default_factory=dict)
    collections: dict[str, list[CollectionEntry]] = field(default_factory=dict)
    cache: PageCache = field(default_factory=PageCache)

    def content_data(self, frontmatter: dict[str, Any], **extra: Any) -> dict[str, Any]:
        """Build the render context: front matter keys plus the shared namespaces."""
        context: dict[str, Any] = dict(frontmatter)
        context["includes"] = self.includes
        context["collections"] = self.collections
        context["data"] = self.data
        context.update(extra)
        return context

    def add_to_collection(self, tag: str, entry: CollectionEntry) -> None:
        self.collections.setdefault(tag, []).append(entry)
