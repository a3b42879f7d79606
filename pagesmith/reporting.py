"""Build reporting helpers for pagesmith."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Mapping, Sequence

from pydantic import BaseModel, Field

from .content import CollectionEntry, Page


@dataclass
class BuildStats:
    """Counters collected while a build runs."""

    files_discovered: int = 0
    cache_hits: int = 0
    skipped_invalid: list[str] = field(default_factory=list)
    skipped_drafts: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class PageSummary(BaseModel):
    source: str
    clean: str
    filesystem: str
    alias: str | None = None


class BuildReport(BaseModel):
    project: str
    generated_at: datetime
    duration_seconds: float
    files_discovered: int
    pages_built: int
    cache_hits: int
    skipped_invalid: list[str] = Field(default_factory=list)
    skipped_drafts: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    collections: dict[str, int] = Field(default_factory=dict)
    pages: list[PageSummary] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_invalid) + len(self.skipped_drafts)


def summarize_pages(pages: Iterable[Page]) -> list[PageSummary]:
    summaries = [
        PageSummary(
            source=page.file_path,
            clean=page.permalink_clean,
            filesystem=page.permalink_filesystem,
            alias=page.permalink_alias,
        )
        for page in pages
    ]
    return sorted(summaries, key=lambda item: item.source)


def assemble_report(
    *,
    project: str,
    duration_seconds: float,
    stats: BuildStats,
    pages: Sequence[Page],
    collections: Mapping[str, Sequence[CollectionEntry]],
) -> BuildReport:
    return BuildReport(
        project=project,
        generated_at=datetime.now(timezone.utc),
        duration_seconds=duration_seconds,
        files_discovered=stats.files_discovered,
        pages_built=len(pages),
        cache_hits=stats.cache_hits,
        skipped_invalid=sorted(stats.skipped_invalid),
        skipped_drafts=sorted(stats.skipped_drafts),
        failed=sorted(stats.failed),
        collections={tag: len(entries) for tag, entries in sorted(collections.items())},
        pages=summarize_pages(pages),
    )
