"""Display logic for submodule listings, status and diff summaries."""

import json
from typing import Dict, List, Sequence

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .api import PointerChange
from .constants import DETACHED_LABEL, NO_BRANCH_PLACEHOLDER, NO_COMMIT_PLACEHOLDER
from .submodule_state import SubmoduleInfo

OUTPUT_FORMATS = ("table", "json", "yaml")


def render_records(infos: Sequence[SubmoduleInfo], fmt: str) -> str:
    """Serialize records as json or yaml."""
    records = [info.to_dict() for info in infos]
    if fmt == "json":
        return json.dumps(records, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(records, sort_keys=False)
    raise ValueError(f"Unsupported format: {fmt} (choose from {', '.join(OUTPUT_FORMATS)})")


def display_listing(infos: Sequence[SubmoduleInfo], console: Console):
    """One row per submodule: name, head, branch, clean/dirty."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Commit", style="dim", no_wrap=True)
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("State", no_wrap=True)

    for info in infos:
        state = "[red]dirty[/red]" if info.is_dirty else "[green]clean[/green]"
        table.add_row(
            escape(info.name),
            info.head_commit or NO_COMMIT_PLACEHOLDER,
            escape(info.branch or NO_BRANCH_PLACEHOLDER),
            state,
        )

    console.print(table)


def _branch_text(info: SubmoduleInfo) -> str:
    if info.branch is None:
        return DETACHED_LABEL
    if info.detached:
        return f"{DETACHED_LABEL} {info.branch}"
    return escape(info.branch)


def _upstream_text(info: SubmoduleInfo) -> str:
    if info.ahead == 0 and info.behind == 0:
        return "[green]Your branch is up to date with upstream.[/green]"
    if info.behind == 0:
        return f"[green]↑[/green] ahead of upstream by [bold]{info.ahead}[/bold] commit(s)"
    if info.ahead == 0:
        return f"[red]↓[/red] behind upstream by [bold]{info.behind}[/bold] commit(s)"
    return f"[yellow]↕[/yellow] ahead by [bold]{info.ahead}[/bold], behind by [bold]{info.behind}[/bold]"


def _working_tree_lines(info: SubmoduleInfo) -> List[str]:
    if info.counts.is_clean:
        return ["[green]nothing to commit, working tree clean[/green]"]
    lines = []
    if info.staged:
        lines.append(f"[green]●[/green] {info.staged} staged change(s)")
    if info.modified:
        lines.append(f"[red]✱[/red] {info.modified} modified file(s)")
    if info.untracked:
        lines.append(f"[dim]?[/dim] {info.untracked} untracked file(s)")
    return lines


def display_status(infos: Sequence[SubmoduleInfo], console: Console):
    """Detailed status block per submodule.

    Args:
        infos: Records to display
        console: Rich console for output
    """
    for i, info in enumerate(infos):
        if i > 0:
            console.print()

        console.print(f"[bold]{escape(info.name)}[/bold]")
        console.print(f"  [dim]path:[/dim] {escape(info.path)}")
        console.print(f"  [dim]url: [/dim] {escape(info.url)}")
        console.print(f"  [dim]on:  [/dim] [cyan]{_branch_text(info)}[/cyan]")

        if info.head_commit:
            message = escape(info.head_message or "")
            console.print(f"  [dim]head:[/dim] [yellow]{info.head_commit}[/yellow] {message}")

        console.print(f"  {_upstream_text(info)}")
        for line in _working_tree_lines(info):
            console.print(f"  {line}")

        if info.parent_changed:
            console.print("  [yellow]⬆ submodule ref changed in parent (uncommitted)[/yellow]")


def display_diff_summary(
    infos: Sequence[SubmoduleInfo],
    changes: Sequence[PointerChange],
    console: Console,
) -> bool:
    """Summarize pointer changes and dirty trees across submodules.

    Args:
        infos: Records to summarize
        changes: Recorded vs current commits, keyed by submodule name
        console: Rich console for output

    Returns:
        True if any submodule had changes
    """
    by_name: Dict[str, PointerChange] = {change.name: change for change in changes}
    any_changes = False

    for info in infos:
        pointer = by_name.get(info.name)
        moved = pointer is not None and pointer.moved
        if not (info.parent_changed or info.is_dirty or moved):
            continue
        any_changes = True

        header = f"[bold]{escape(info.name)}[/bold]"
        if info.is_dirty:
            header += " [red](dirty)[/red]"
        console.print(header)

        if moved:
            recorded = pointer.recorded or NO_COMMIT_PLACEHOLDER
            current = pointer.current or NO_COMMIT_PLACEHOLDER
            console.print(f"  [dim]Submodule {escape(info.path)} {recorded}..{current}[/dim]")
        elif info.parent_changed:
            console.print(f"  [dim]Submodule {escape(info.path)} changed in parent[/dim]")

        if info.staged:
            console.print(f"  [green]{info.staged}[/green] staged")
        if info.modified:
            console.print(f"  [red]{info.modified}[/red] modified")
        if info.untracked:
            console.print(f"  [dim]{info.untracked}[/dim] untracked")

    if not any_changes:
        console.print("[green]No changes across submodules.[/green]")
    return any_changes
