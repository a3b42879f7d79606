"""Typed representations of pages, includes and collection entries."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FrontMatter(BaseModel):
    """Front-matter schema shared by the indexer and the page builder.

    Unknown keys (``layout``, custom template variables) are kept as extras.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    title: Optional[str] = Field(default=None, description="Display title.")
    date: Optional[dt.datetime | dt.date] = Field(default=None, description="Publication date.")
    draft: bool = Field(default=False, description="Exclude from builds unless drafts are enabled.")
    permalink: Optional[str] = Field(default=None, description="Template for the clean URL path.")
    alias: Optional[str] = Field(default=None, description="Template for a redirect source path.")
    tags: list[str] = Field(default_factory=list, description="Collections this page belongs to.")


@dataclass(frozen=True, slots=True)
class Include:
    """A layout or partial template loaded from the includes directory."""

    name: str
    frontmatter: dict[str, Any]
    template: str


@dataclass(frozen=True, slots=True)
class CollectionEntry:
    """A content file indexed under one of its tags."""

    frontmatter: dict[str, Any]
    content: str
    file_path: str


@dataclass(slots=True)
class Page:
    """One rendered unit of the site.

    Pages are mutated in place while the pipeline (and plugin hooks) run and
    must be treated as read-only once returned from a build.
    """

    file_path: str
    frontmatter: dict[str, Any] = field(default_factory=dict)
    content: str = ""
    layout: Include | None = None
    output: str = ""
    permalink_clean: str = ""
    permalink_filesystem: str = ""
    permalink_alias: str | None = None

    @property
    def title(self) -> str | None:
        value = self.frontmatter.get("title")
        return str(value) if value is not None else None

    @property
    def tags(self) -> list[str]:
        return list(self.frontmatter.get("tags") or [])
