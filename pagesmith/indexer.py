"""Validate content front matter and index tagged pages into collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .content import CollectionEntry, parse_document
from .context import BuildContext
from .errors import FrontMatterError, FrontMatterValidationError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexIssue:
    """A content file rejected while indexing."""

    source_path: str
    message: str
    fields: list[str] = field(default_factory=list)


@dataclass(slots=True)
class IndexResult:
    """Outcome of one full indexing pass."""

    indexed: list[str] = field(default_factory=list)
    drafts: list[str] = field(default_factory=list)
    issues: list[IndexIssue] = field(default_factory=list)

    @property
    def invalid(self) -> list[str]:
        return [issue.source_path for issue in self.issues]


def index_content(
    files: Iterable[Path],
    context: BuildContext,
    *,
    include_drafts: bool = False,
) -> IndexResult:
    """Index every file in ``files`` into ``context.collections``.

    Files that cannot be read as UTF-8 or carry malformed or invalid front
    matter are logged and skipped.
    Drafts are left out of collections unless ``include_drafts`` is set.
    Must finish before any page is rendered.
    """
    result = IndexResult()
    for path in files:
        source = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Cannot read {source}: {exc}"
            logger.warning("%s", message)
            result.issues.append(IndexIssue(source, message))
            continue
        try:
            frontmatter, content = parse_document(text, source=source)
        except FrontMatterValidationError as exc:
            logger.warning("%s", exc)
            result.issues.append(IndexIssue(source, str(exc), exc.fields))
            continue
        except FrontMatterError as exc:
            logger.warning("%s", exc)
            result.issues.append(IndexIssue(source, str(exc)))
            continue

        if frontmatter["draft"] and not include_drafts:
            result.drafts.append(source)
            continue

        if "permalink" in frontmatter:
            frontmatter["output_path"] = frontmatter["permalink"]
        if "alias" in frontmatter:
            frontmatter["alias_path"] = frontmatter["alias"]

        entry = CollectionEntry(frontmatter=frontmatter, content=content, file_path=source)
        for tag in frontmatter["tags"]:
            context.add_to_collection(tag, entry)
        result.indexed.append(source)

    logger.debug(
        "Indexed %d file(s) into %d collection(s); %d invalid, %d draft(s) excluded",
        len(result.indexed),
        len(context.collections),
        len(result.issues),
        len(result.drafts),
    )
    return result
