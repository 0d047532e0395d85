"""
Human-readable output formatting.

Centralizes all CLI output formatting. Label lines go to stdout untouched so
they can be used as a build argument file; summaries use Rich tables.
"""
from __future__ import annotations

import typer
from typing import Dict, List

from rich.console import Console
from rich.table import Table

from ..models import ImageLabels
from .facade import ProjectInfo

_console = Console()


def print_labels(labels: ImageLabels) -> None:
    """Print ``KEY=value`` lines, one per label, in declared order."""
    for line in labels.build_args():
        typer.echo(line)


def print_field(value: str) -> None:
    typer.echo(value)


def print_info(info: ProjectInfo) -> None:
    """
    Print the project environment summary.

    Args:
        info: Summary produced by Operations.info()
    """
    _console.print(f"[bold]Project Root:[/] {info.project_root}")
    _console.print(f"[bold]Detected Type:[/] {info.detected}")
    _console.print(f"[bold]PROJECT_TYPE:[/] {info.project_type or 'not set'}")
    _console.print(f"[bold]Parser:[/] {info.parser}")

    if info.problem:
        _console.print(f"[yellow]{info.problem}[/]", highlight=False)
        return

    table = Table(title="Labels")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="yellow", overflow="fold")
    for field, value in info.fields.items():
        table.add_row(field.value, value or "[dim](empty)[/]")
    _console.print(table)


def print_build_summary(tags: List[str]) -> None:
    """
    Print build completion summary.

    Args:
        tags: Tags applied to the built image
    """
    typer.echo("")
    typer.echo("Build complete!")
    for tag in tags:
        typer.echo(f"   {tag}")


def print_inspect(image: str, labels: Dict[str, str]) -> None:
    """Print the OCI labels of an image, sorted by key."""
    typer.echo(f"OCI Labels for {image}:")
    typer.echo("")
    for key, value in labels.items():
        typer.echo(f"{key}={value}")
