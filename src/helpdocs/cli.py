"""Command line interface for helpdocs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from helpdocs.config import AppConfig
from helpdocs.errors import DocumentIndexError
from helpdocs.index.cache import IndexCache
from helpdocs.index.paths import PathTranslator
from helpdocs.index.view import DocumentView, open_view


console = Console()
app = typer.Typer(help="helpdocs - threaded index of markdown help documents")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _open_view(config: AppConfig, root: Path, request: Optional[str] = None) -> DocumentView:
    cache = IndexCache(config)
    try:
        return open_view(cache, root, request)
    except DocumentIndexError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _render_table(view: DocumentView) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Role")
    table.add_column("Parent", justify="right")
    table.add_column("Subject")
    table.add_column("Path")

    for document in view:
        parent = view.parent_of(document)
        indent = "  " * view.thread_depth(document.index_position)
        subject = f"{indent}{escape(document.subject)}"
        if not document.read:
            subject = f"[bold]{subject}[/bold]"
        table.add_row(
            str(document.index_position),
            document.role.label(),
            str(parent.index_position) if parent else "",
            subject,
            escape(document.path),
        )
    return table


@app.command()
def index(
    root: Path = typer.Argument(..., help="Directory with help documents.", resolve_path=True),
    max_header_lines: Optional[int] = typer.Option(
        None, "--max-header-lines", help="Maximum front-matter entries to read"
    ),
    link_chapters: bool = typer.Option(
        False, "--link-chapters", help="Link chapters to the first root document"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build and print the threaded index of a help directory."""
    _setup_logging(verbose)
    config = AppConfig(root=root, max_header_lines=max_header_lines, link_chapters=link_chapters)
    view = _open_view(config, root)

    console.print(f"Help documents in [bold]{escape(view.root)}[/bold] ({view.fingerprint}):")
    console.print(_render_table(view))


@app.command()
def resolve(
    path: str = typer.Argument(..., help="help:// identifier or filesystem path"),
    root: Path = typer.Option(None, "--root", help="Help document root"),
    validate: bool = typer.Option(False, "--validate", help="Require the path to exist"),
) -> None:
    """Translate a path between its help:// and filesystem forms."""
    config = AppConfig(root=root if root is not None else AppConfig().root)
    translator = PathTranslator(config.resolve_root(Path.cwd()), config.scheme)

    logical = translator.to_logical(path, validate=validate)
    filesystem = translator.to_filesystem(path, validate=validate)
    if logical is None or filesystem is None:
        console.print(f"[yellow]Cannot resolve {escape(path)}[/yellow]")
        raise typer.Exit(code=1)

    console.print(logical, soft_wrap=True)
    console.print(filesystem, soft_wrap=True)


@app.command()
def show(
    root: Path = typer.Argument(..., help="Directory with help documents.", resolve_path=True),
    request: Optional[str] = typer.Argument(None, help="Document to show (help:// or path)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print a help document, by default the first one of the index."""
    _setup_logging(verbose)
    view = _open_view(AppConfig(root=root), root, request)
    unread = view.unread()
    position = unread[0].index_position if unread else 0

    document = view[position]
    console.print(f"[bold]{escape(document.subject)}[/bold]")
    console.print(view.read_document(position), markup=False, highlight=False)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    root: Path = typer.Option(None, "--root", help="Help document root"),
) -> None:
    """Start the read-only web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from helpdocs.web.app import create_app

    config = AppConfig(root=root if root is not None else AppConfig().root)
    resolved_root = config.resolve_root(Path.cwd())
    if not resolved_root.is_dir():
        console.print("[yellow]Warning: help root not found, requests might fail.[/yellow]")

    console.print(f"Starting web interface on http://{host}:{port} (root: {resolved_root})")
    uvicorn.run(
        create_app(AppConfig(root=resolved_root)),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
