"""CLI for git-dom."""

import logging
import os
from typing import List, Optional

import typer
from rich.console import Console

from .api import pointer_changes
from .constants import GIT_DOM_VERSION, NO_COLOR_ENV
from .context import RepoContext
from .errors import DomError, GitEnvironmentError
from .status_display import (
    OUTPUT_FORMATS,
    display_diff_summary,
    display_listing,
    display_status,
    render_records,
)
from .submodule_state import SubmoduleInfo


app = typer.Typer(help="""\
A friendlier UX for git submodules. Read-only views of every submodule's
branch, head commit, working tree, upstream divergence and pending pointer
changes in the parent repository.""")

console = Console()


def _version_callback(value: bool):
    if value:
        typer.echo(f"git-dom {GIT_DOM_VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    no_colour: bool = typer.Option(False, "--no-colour", help="Disable colour output"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Configure output before running a command."""
    # https://no-color.org/
    if no_colour or os.environ.get(NO_COLOR_ENV) is not None:
        console.no_color = True
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def require_repo_context() -> RepoContext:
    """Open the repository containing the current directory.

    Raises:
        typer.Exit: If not inside a non-bare git repository
    """
    try:
        return RepoContext()
    except GitEnvironmentError as e:
        console.print(f"[red]✗[/red] {e}")
        console.print()
        console.print("[dim]Hint: run git-dom from inside a repository's working tree[/dim]")
        raise typer.Exit(1)


def _discover_or_exit(ctx: RepoContext, name: Optional[str]) -> List[SubmoduleInfo]:
    try:
        return ctx.discover(name)
    except DomError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ls(
    name: Optional[str] = typer.Argument(None, help="Target a specific submodule by name"),
    fmt: str = typer.Option("table", "--format", "-f", help="Output format: table, json or yaml"),
):
    """List all submodules.

    Examples:
        git dom ls                 # One line per submodule
        git dom ls libs/foo        # Only libs/foo
        git dom ls --format json   # Machine-readable records
    """
    if fmt not in OUTPUT_FORMATS:
        console.print(f"[red]✗[/red] Unknown format '{fmt}' (choose from {', '.join(OUTPUT_FORMATS)})")
        raise typer.Exit(2)

    ctx = require_repo_context()
    infos = _discover_or_exit(ctx, name)

    if fmt != "table":
        typer.echo(render_records(infos, fmt))
        return

    if not infos:
        console.print("No submodules found.")
        return

    display_listing(infos, console)


@app.command()
def status(
    name: Optional[str] = typer.Argument(None, help="Target a specific submodule by name"),
):
    """Show rich status for submodules.

    Examples:
        git dom status             # Every submodule
        git dom status libs/foo    # Only libs/foo
    """
    ctx = require_repo_context()
    infos = _discover_or_exit(ctx, name)

    if not infos:
        console.print("No submodules found.")
        return

    display_status(infos, console)


@app.command()
def diff(
    name: Optional[str] = typer.Argument(None, help="Target a specific submodule by name"),
):
    """Show changes across submodules.

    Lists submodules whose pointer changed in the parent or whose working
    tree is dirty.
    """
    ctx = require_repo_context()
    infos = _discover_or_exit(ctx, name)

    if not infos:
        console.print("No submodules found.")
        return

    display_diff_summary(infos, pointer_changes(ctx.repository, infos), console)


@app.command()
def config():
    """Show the effective git-dom configuration (dom.* git config keys)."""
    ctx = require_repo_context()
    cfg = ctx.get_config()

    console.print(f"[bold]Repository:[/bold] {ctx.root}")
    console.print(f"[bold]dom.root:[/bold]   {cfg.root}")
    console.print(f"[bold]dom.commit:[/bold] {cfg.commit_mode.value}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
