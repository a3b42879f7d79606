"""CLI entrypoints for pagesmith."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .builder import SiteBuilder
from .config import Config, load_config
from .errors import PagesmithError
from .reporting import BuildReport

console = Console()
app = typer.Typer(help="pagesmith in-memory site build pipeline.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging."),
]


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    drafts: Annotated[
        Optional[bool],
        typer.Option("--drafts/--no-drafts", help="Include draft pages (defaults to BUILD_DRAFTS)."),
    ] = None,
    concurrency: Annotated[
        Optional[int],
        typer.Option("--concurrency", "-j", min=1, help="Maximum pages built at once."),
    ] = None,
    verbose: VerboseFlag = False,
) -> None:
    """Build every page in memory and print where each would be published."""
    _configure_logging(verbose)
    config = _load(config_path)
    if drafts is not None:
        config.include_drafts = drafts
    if concurrency is not None:
        config.concurrency_limit = concurrency

    builder = SiteBuilder(config)
    try:
        asyncio.run(_run_build(builder))
    except PagesmithError as exc:
        console.print(f"[bold red]Build failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    assert builder.report is not None
    _print_build_report(builder.report)


@app.command()
def check(
    config_path: ConfigPathOption = ".",
    verbose: VerboseFlag = False,
) -> None:
    """Validate front matter and list collections without rendering."""
    _configure_logging(verbose)
    config = _load(config_path)
    builder = SiteBuilder(config)
    try:
        files, result = builder.load()
    except PagesmithError as exc:
        console.print(f"[bold red]Check failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    for issue in result.issues:
        console.print(f"[bold red]INVALID[/] {_display_path(Path(issue.source_path))} - {issue.message}")

    for tag, entries in sorted(builder.collections.items()):
        console.print(f"[bold blue]Collection[/] {tag}: {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")

    console.print(
        f"[bold green]Summary[/]: {len(files)} file(s), {len(result.indexed)} indexed, "
        f"{len(result.drafts)} draft(s) excluded, {len(result.issues)} invalid."
    )
    if result.issues:
        raise typer.Exit(code=1)


async def _run_build(builder: SiteBuilder) -> None:
    await builder.use_configured_plugins()
    await builder.build()


def _print_build_report(report: BuildReport) -> None:
    table = Table(title=f"{report.project}: pages")
    table.add_column("Source")
    table.add_column("Permalink")
    table.add_column("Output")
    table.add_column("Alias")
    for page in report.pages:
        table.add_row(_display_path(Path(page.source)), page.clean, page.filesystem, page.alias or "")
    console.print(table)

    console.print(
        "[bold green]Pages[/]: "
        f"{report.pages_built} built from {report.files_discovered} file(s) "
        f"({report.cache_hits} cache hit(s)) in {report.duration_seconds:.2f}s"
    )
    if report.skipped_drafts:
        console.print(f"[bold yellow]Drafts skipped[/]: {len(report.skipped_drafts)}")
    if report.skipped_invalid:
        console.print(f"[bold yellow]Invalid front matter[/]: {len(report.skipped_invalid)}")
        for source in report.skipped_invalid:
            console.print(f"  - {_display_path(Path(source))}")
    if report.failed:
        console.print(f"[bold red]Failed[/]: {len(report.failed)}")
        for source in report.failed:
            console.print(f"  - {_display_path(Path(source))}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


if __name__ == "__main__":
    app()
