"""Typer-based CLI for design-resolve."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, ResolveConfig
from .key_match.document import DocumentPositionError
from .key_match.lookup import relative_source
from .service import AnnotationService

app = typer.Typer(
    name="design-resolve",
    help="design-resolve - annotate outline documents with notes from .des files",
    add_completion=False,
)

console = Console()

ROOT_HELP = "Workspace root holding the note files (default: DESIGN_RESOLVE_ROOT or repo root)"


@app.callback()
def main_callback(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging on stderr",
    ),
):
    """Index 【key】 notes and resolve them inside outline documents."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _load_service(root: Optional[str], color: Optional[str] = None) -> AnnotationService:
    try:
        config = ResolveConfig.load(cli_root=root, cli_color=color)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not config.workspace_root.is_dir():
        console.print(f"[red]Error: Workspace root is not a directory: {config.workspace_root}[/red]")
        raise typer.Exit(code=1)

    return AnnotationService(config)


def _read_document(file: str) -> str:
    try:
        return Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: Cannot read document {file}: {e}[/red]")
        raise typer.Exit(code=1)


def _print_json(data) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


@app.command()
def notes(
    root: str = typer.Option(None, "--root", "-r", help=ROOT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print entries as JSON"),
):
    """List every note entry found in the workspace."""
    service = _load_service(root)
    index = service.rebuild_index()
    workspace_root = service.config.workspace_root

    if as_json:
        _print_json(
            {
                "entries": [
                    {
                        "key": e.key,
                        "value": e.value,
                        "source_id": e.source_id,
                        "line": e.definition_span.line,
                    }
                    for e in index.entries
                ],
                "skipped": [{"source_id": f.source_id, "reason": f.reason} for f in index.failures],
            }
        )
        return

    if not index.entries:
        console.print(f"[dim]No notes found under {workspace_root} ({service.config.note_glob})[/dim]")
    else:
        table = Table(title=f"{len(index.entries)} Note(s)")
        table.add_column("Key", style="magenta")
        table.add_column("Source", style="cyan")
        table.add_column("Line", style="yellow", justify="right")
        table.add_column("Value", style="dim")

        for entry in index.entries:
            value = entry.value.replace("\n", " ")
            if len(value) > 60:
                value = value[:57] + "..."
            table.add_row(
                escape(entry.key),
                relative_source(entry.source_id, workspace_root),
                str(entry.definition_span.line + 1),
                escape(value),
            )
        console.print(table)

    for failure in index.failures:
        console.print(f"[yellow]Skipped {failure.source_id}: {failure.reason}[/yellow]")


@app.command()
def highlight(
    file: str = typer.Argument(..., help="Outline document to annotate"),
    root: str = typer.Option(None, "--root", "-r", help=ROOT_HELP),
    color: str = typer.Option(None, "--color", "-c", help="Highlight color override"),
    language: str = typer.Option(
        None,
        "--language",
        help="Language id of FILE (default: the file extension, e.g. outline)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the highlight payload as JSON"),
):
    """Show every note key occurrence in FILE."""
    service = _load_service(root, color)
    language_id = language or Path(file).suffix.lstrip(".") or None
    result = service.highlight(_read_document(file), language_id)

    if as_json:
        _print_json(result.model_dump(mode="json"))
        return

    if not result.decorations:
        console.print("[dim]No note keys found in document[/dim]")
        return

    table = Table(title=f"{len(result.decorations)} Highlight(s), color {escape(result.color)}")
    table.add_column("Key", style="magenta")
    table.add_column("Start", style="cyan", no_wrap=True)
    table.add_column("End", style="cyan", no_wrap=True)
    for deco in result.decorations:
        table.add_row(
            escape(deco.key),
            f"{deco.range.start.line + 1}:{deco.range.start.character + 1}",
            f"{deco.range.end.line + 1}:{deco.range.end.character + 1}",
        )
    console.print(table)


@app.command()
def hover(
    file: str = typer.Argument(..., help="Outline document"),
    line: int = typer.Option(..., "--line", "-l", min=1, help="1-based line number"),
    column: int = typer.Option(..., "--column", "-c", min=1, help="1-based column"),
    root: str = typer.Option(None, "--root", "-r", help=ROOT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the hover payload as JSON"),
):
    """Show the note for the key at LINE:COLUMN of FILE."""
    service = _load_service(root)
    try:
        result = service.hover(_read_document(file), line - 1, column - 1)
    except DocumentPositionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if result is None:
        if as_json:
            _print_json(None)
        else:
            console.print("[dim]No note at this position[/dim]")
        return

    if as_json:
        _print_json(result.model_dump(mode="json"))
        return
    console.print(f"[bold magenta]{escape(result.key)}[/bold magenta]")
    console.print(Markdown(result.to_markdown()))


@app.command()
def definition(
    file: str = typer.Argument(..., help="Outline document"),
    line: int = typer.Option(..., "--line", "-l", min=1, help="1-based line number"),
    column: int = typer.Option(..., "--column", "-c", min=1, help="1-based column"),
    root: str = typer.Option(None, "--root", "-r", help=ROOT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the definition target as JSON"),
):
    """Print where the key at LINE:COLUMN of FILE is defined."""
    service = _load_service(root)
    try:
        result = service.definition(_read_document(file), line - 1, column - 1)
    except DocumentPositionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if result is None:
        if as_json:
            _print_json(None)
        else:
            console.print("[dim]No note at this position[/dim]")
        return

    if as_json:
        _print_json(result.model_dump(mode="json"))
        return
    typer.echo(f"{result.source_id}:{result.definition_span.line + 1}")


@app.command()
def version():
    """Show design-resolve version."""
    from . import __version__
    console.print(f"design-resolve v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
