"""Recursive discovery of source files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable

from .errors import FilesystemError

NamePredicate = Callable[[str], bool]


def suffix_filter(*suffixes: str) -> NamePredicate:
    """Build a case-insensitive predicate matching file names by suffix."""
    wanted = tuple(s.lower() if s.startswith(".") else f".{s.lower()}" for s in suffixes)

    def _matches(name: str) -> bool:
        return name.lower().endswith(wanted)

    return _matches


def list_files(root: str | Path, predicate: NamePredicate) -> list[Path]:
    """Return absolute paths of files under ``root`` whose name matches ``predicate``.

    Every subdirectory is visited. A missing or unreadable ``root`` raises
    :class:`FilesystemError`; so does an unreadable subdirectory, rather than
    being skipped silently. Symlinked directories are not descended into, so
    link loops cannot recurse; symlinked files are listed. The result is
    sorted, though callers should not depend on the order.
    """
    base = Path(root)
    if not base.exists():
        raise FilesystemError(f"Directory not found: {base}", path=str(base))
    if not base.is_dir():
        raise FilesystemError(f"Not a directory: {base}", path=str(base))
    return sorted(_walk(base.resolve(), predicate))


def _walk(directory: Path, predicate: NamePredicate) -> Iterable[Path]:
    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as exc:
        raise FilesystemError(f"Cannot read directory {directory}: {exc}", path=str(directory)) from exc

    for entry in children:
        path = directory / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(path, predicate)
        elif entry.is_file() and predicate(entry.name):
            yield path
