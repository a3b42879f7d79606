"""Exception hierarchy raised by the pagesmith build pipeline."""

from __future__ import annotations

from typing import Sequence


class PagesmithError(Exception):
    """Base class for every error raised by pagesmith."""


class FilesystemError(PagesmithError):
    """Raised when a source directory is missing or cannot be read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class DataFileError(PagesmithError, ValueError):
    """Raised when a data file cannot be parsed."""


class FrontMatterError(PagesmithError, ValueError):
    """Raised when a file has a malformed front matter block."""


class FrontMatterValidationError(PagesmithError, ValueError):
    """Raised when front matter does not satisfy the page schema."""

    def __init__(self, source_path: str, fields: Sequence[str], details: Sequence[str]) -> None:
        self.source_path = source_path
        self.fields = list(fields)
        self.details = list(details)
        super().__init__(f"Invalid frontmatter in {source_path}: {', '.join(self.details)}")


class RenderError(PagesmithError):
    """Raised when a template or markup body fails to render."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class PluginHookError(PagesmithError):
    """Raised when a plugin hook handler fails."""

    def __init__(self, hook: str, plugin: object, cause: BaseException) -> None:
        self.hook = hook
        self.plugin = plugin
        name = type(plugin).__name__
        super().__init__(f"Plugin {name} failed in hook '{hook}': {cause}")


class PluginLoadError(PagesmithError, ImportError):
    """Raised when a configured plugin cannot be imported or constructed."""
