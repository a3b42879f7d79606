"""Project configuration for pagesmith builds."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "pagesmith.yml"
DRAFTS_ENV_VAR = "BUILD_DRAFTS"
_TRUTHY = {"1", "true", "yes", "on"}


class HookErrorPolicy(str, Enum):
    """What the hook bus does when a plugin handler raises."""

    RAISE = "raise"
    LOG = "log"


class PluginSpec(BaseModel):
    """Import path and keyword options for a plugin registered at build time."""

    path: str = Field(description="Import path in 'package.module:attribute' form.")
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("path")
    def _require_attribute(cls, value: str) -> str:
        text = value.strip()
        module, _, attribute = text.partition(":")
        if not module or not attribute:
            raise ValueError("plugin path must look like 'package.module:attribute'")
        return text


class Config(BaseModel):
    project_name: str = Field(default="pagesmith site")
    source_dir: Path = Field(default=Path("src"))
    data_subdir: str = Field(default="data")
    includes_subdir: str = Field(default="includes")
    content_subdir: str = Field(default="site")
    data_suffixes: list[str] = Field(default_factory=lambda: [".json", ".yaml", ".yml"])
    include_suffixes: list[str] = Field(default_factory=lambda: [".html", ".j2", ".jinja"])
    content_suffixes: list[str] = Field(
        default_factory=lambda: [".md", ".markdown", ".html", ".j2", ".jinja"]
    )
    markdown_suffixes: list[str] = Field(default_factory=lambda: [".md", ".markdown"])
    concurrency_limit: int = Field(
        default=5,
        ge=1,
        description="Maximum number of pages built concurrently.",
    )
    include_drafts: bool | None = Field(
        default=None,
        description=f"Build draft pages. When unset, the {DRAFTS_ENV_VAR} environment variable decides.",
    )
    hook_errors: HookErrorPolicy = Field(default=HookErrorPolicy.RAISE)
    plugins: list[PluginSpec] = Field(default_factory=list)

    @field_validator("source_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator(
        "data_suffixes",
        "include_suffixes",
        "content_suffixes",
        "markdown_suffixes",
    )
    def _normalize_suffixes(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for entry in value:
            text = entry.strip().lower()
            if not text:
                continue
            if not text.startswith("."):
                text = f".{text}"
            if text not in normalized:
                normalized.append(text)
        return normalized

    @property
    def data_dir(self) -> Path:
        return self.source_dir / self.data_subdir

    @property
    def includes_dir(self) -> Path:
        return self.source_dir / self.includes_subdir

    @property
    def content_dir(self) -> Path:
        return self.source_dir / self.content_subdir

    def drafts_enabled(self) -> bool:
        """Resolve the draft switch, falling back to the environment."""
        if self.include_drafts is not None:
            return self.include_drafts
        return os.environ.get(DRAFTS_ENV_VAR, "").strip().lower() in _TRUTHY


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a YAML file or to a directory containing
    ``pagesmith.yml``. A directory without that file yields the defaults
    anchored to the directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)
    if not cfg.source_dir.is_absolute():
        cfg.source_dir = (base_dir / cfg.source_dir).resolve()
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Configuration file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping.")
    return data
