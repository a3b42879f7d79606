"""Split and validate front matter blocks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import FrontMatterError, FrontMatterValidationError
from .models import FrontMatter

DELIMITER = "---"


def split_front_matter(text: str, *, source: str | Path | None = None) -> tuple[dict[str, Any], str]:
    """Return ``(front_matter, body)`` for ``text``.

    Text without a leading ``---`` line has no front matter and is returned
    unchanged as the body.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text

    front_lines: list[str] = []
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            body = "".join(lines[idx + 1 :])
            return _load_yaml_mapping("".join(front_lines), source), body
        front_lines.append(line)
    raise FrontMatterError(f"{_label(source)}: closing front matter delimiter '---' missing.")


def validate_front_matter(data: dict[str, Any], *, source: str | Path) -> dict[str, Any]:
    """Validate ``data`` against :class:`FrontMatter` and fill defaults.

    Returns a new mapping holding every original key plus the schema
    defaults (``draft`` and ``tags``). Optional schema fields left unset
    stay absent.
    """
    try:
        meta = FrontMatter.model_validate(data)
    except ValidationError as exc:
        fields: list[str] = []
        details: list[str] = []
        for error in exc.errors():
            location = error.get("loc") or ()
            name = ".".join(str(part) for part in location[:1]) or "<root>"
            if location[1:] and isinstance(location[1], int):
                name = f"{name}[{location[1]}]"
            if name not in fields:
                fields.append(name)
                details.append(f"{name}: {error.get('msg', 'invalid value')}")
        raise FrontMatterValidationError(str(source), fields, details) from exc

    validated = dict(data)
    validated.update(meta.model_dump(exclude_unset=True, exclude_none=True))
    validated["draft"] = meta.draft
    validated["tags"] = list(meta.tags)
    return validated


def parse_document(text: str, *, source: str | Path) -> tuple[dict[str, Any], str]:
    """Split and validate a content file into ``(front_matter, body)``."""
    raw, body = split_front_matter(text, source=source)
    return validate_front_matter(raw, source=source), body


def _load_yaml_mapping(raw: str, source: str | Path | None) -> dict[str, Any]:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"{_label(source)}: malformed front matter: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"{_label(source)}: front matter must be a mapping, got {type(data).__name__}"
        )
    return data


def _label(source: str | Path | None) -> str:
    return str(source) if source is not None else "<string>"
