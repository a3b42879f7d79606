"""Load global data files and layout/partial includes."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from .content import Include, split_front_matter
from .errors import DataFileError, FrontMatterError
from .walker import list_files, suffix_filter

logger = logging.getLogger(__name__)

JSON_SUFFIXES = {".json"}


def load_data(directory: Path, suffixes: Iterable[str]) -> dict[str, Any]:
    """Parse every data file below ``directory`` into a namespace keyed by stem.

    JSON files are decoded directly. YAML files may wrap their payload in a
    front matter block; otherwise the whole file is read as YAML. When two
    files share a stem the one read last wins and a warning is logged.
    """
    data: dict[str, Any] = {}
    sources: dict[str, Path] = {}
    for path in list_files(directory, suffix_filter(*suffixes)):
        key = path.stem
        value = _parse_data_file(path)
        _warn_on_collision("data", key, sources.get(key), path)
        data[key] = value
        sources[key] = path
    logger.debug("Loaded %d data file(s) from %s", len(data), directory)
    return data


def load_includes(directory: Path, suffixes: Iterable[str]) -> dict[str, Include]:
    """Load layout and partial templates keyed by file stem."""
    includes: dict[str, Include] = {}
    sources: dict[str, Path] = {}
    for path in list_files(directory, suffix_filter(*suffixes)):
        text = path.read_text(encoding="utf-8")
        frontmatter, template = split_front_matter(text, source=path)
        key = path.stem
        _warn_on_collision("include", key, sources.get(key), path)
        includes[key] = Include(name=key, frontmatter=frontmatter, template=template)
        sources[key] = path
    logger.debug("Loaded %d include(s) from %s", len(includes), directory)
    return includes


def _parse_data_file(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in JSON_SUFFIXES:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataFileError(f"{path}: invalid JSON: {exc}") from exc

    if text.startswith("---"):
        try:
            frontmatter, _ = split_front_matter(text, source=path)
        except FrontMatterError:
            # A bare document marker without a closing delimiter is plain YAML.
            logger.debug("No front matter block in %s; reading as plain YAML", path)
        else:
            return frontmatter
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DataFileError(f"{path}: invalid YAML: {exc}") from exc


def _warn_on_collision(kind: str, key: str, previous: Path | None, current: Path) -> None:
    if previous is None:
        return
    logger.warning(
        "Duplicate %s key '%s': %s overrides %s",
        kind,
        key,
        current,
        previous,
    )
