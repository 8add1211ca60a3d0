"""
Rendering functions for repoversions output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain import ValidationResult, VersionsManifest

console = Console()


def _table(title: Optional[str] = None) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )


def render_manifest_table(manifest: VersionsManifest) -> None:
    """Render every repository record as a table."""
    if not len(manifest):
        console.print("[yellow]No repositories in manifest.[/yellow]")
        return

    table = _table("Repository Versions")
    table.add_column("Repository", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Git Tag")
    table.add_column("Commit", style="dim")
    table.add_column("Requires", style="yellow")
    table.add_column("Binaries", style="blue")

    for name, repo in manifest.versions.items():
        table.add_row(
            name,
            repo.version,
            repo.git_tag,
            (repo.git_commit or "")[:12],
            ", ".join(repo.requires),
            ", ".join(repo.binaries),
        )

    console.print(table)

    if manifest.metadata:
        meta = _table("Metadata")
        meta.add_column("Key", style="cyan")
        meta.add_column("Value")
        for key, value in manifest.metadata.items():
            meta.add_row(key, value)
        console.print(meta)


def render_validation(result: ValidationResult) -> None:
    """Render a validation result with every error and warning."""
    if result.is_valid and not result.warnings:
        console.print("[green]✓ Manifest is valid[/green]")
        return

    table = _table("Validation Problems")
    table.add_column("Severity")
    table.add_column("Kind", style="dim")
    table.add_column("Repository", style="cyan")
    table.add_column("Message")

    for issue in result.errors:
        table.add_row("[red]error[/red]", issue.kind.value, issue.repo or "", issue.message)
    for issue in result.warnings:
        table.add_row("[yellow]warning[/yellow]", issue.kind.value, issue.repo or "", issue.message)

    console.print(table)
    if result.is_valid:
        console.print(f"[yellow]Manifest is valid with {len(result.warnings)} warning(s)[/yellow]")
    else:
        console.print(f"[red]✗ Manifest is invalid: {len(result.errors)} error(s)[/red]")


def render_build_order(order: List[str], manifest: VersionsManifest) -> None:
    """Render a build order, one row per step."""
    if not order:
        console.print("[yellow]Nothing to build.[/yellow]")
        return

    table = _table("Build Order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Repository", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Git Tag")

    for position, name in enumerate(order, 1):
        repo = manifest.versions[name]
        table.add_row(str(position), name, repo.version, repo.git_tag)

    console.print(table)


def render_levels(levels: List[List[str]]) -> None:
    """Render parallel build levels."""
    if not levels:
        console.print("[yellow]Nothing to build.[/yellow]")
        return

    table = _table("Build Levels")
    table.add_column("Level", justify="right", style="dim")
    table.add_column("Repositories (parallel)", style="cyan")

    for index, names in enumerate(levels):
        table.add_row(str(index), ", ".join(names))

    console.print(table)
