"""
oci-labels CLI

Implements 5 CLI verbs with Operations facade integration:
- labels: Print OCI labels as KEY=value build arguments
- field: Resolve a single label field
- info: Show detected project type, parser and resolved fields
- build: Build a container image labelled with the project metadata
- inspect: Show the OCI labels of a built image

Usage with a container build:
    podman build --build-arg-file <(oci-labels labels) -t app:latest .
"""
from __future__ import annotations

import logging
import typer
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .cli_context import CLIContext
from .operations import Operations, run_and_exit
from .operations.printers import (
    print_labels, print_field, print_info, print_build_summary, print_inspect
)

app = typer.Typer(name="oci-labels", help="Extract OCI image labels from project manifests")


def _configure_logging(debug: bool) -> None:
    """Route log records to stderr so stdout stays usable as a build-arg file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _context(ctx: typer.Context) -> CLIContext:
    return ctx.obj


@app.callback()
def _global_options(
    ctx: typer.Context,
    project_root: Optional[Path] = typer.Option(
        None, "--project-root", envvar="OCI_LABELS_PROJECT_ROOT",
        help="Project directory (default: current directory)"
    ),
    project_type: Optional[str] = typer.Option(
        None, "--project-type", envvar=["OCI_LABELS_PROJECT_TYPE", "PROJECT_TYPE"],
        help="Explicit project type: node, python, rust, php, go"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show debug logging on stderr"),
) -> None:
    """Extract OCI image labels from project manifests."""

    def _setup() -> None:
        context = CLIContext.from_env(
            project_root=project_root.expanduser().resolve() if project_root else None,
            project_type=project_type,
            debug=True if debug else None,
        )
        _configure_logging(context.settings.debug)
        ctx.obj = context

    run_and_exit(_setup)


@app.command()
def labels(ctx: typer.Context) -> None:
    """Print OCI labels as KEY=value lines."""

    def _labels() -> None:
        ops = Operations(_context(ctx))
        print_labels(ops.labels())

    run_and_exit(_labels)


@app.command()
def field(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Field name, e.g. title or SOURCE"),
) -> None:
    """Resolve a single label field."""

    def _field() -> None:
        ops = Operations(_context(ctx))
        print_field(ops.resolve_field(name))

    run_and_exit(_field)


@app.command()
def info(ctx: typer.Context) -> None:
    """Show project detection, parser binding and resolved fields."""

    def _info() -> None:
        ops = Operations(_context(ctx))
        print_info(ops.info())

    run_and_exit(_info)


@app.command()
def build(
    ctx: typer.Context,
    tag: List[str] = typer.Option([], "--tag", "-t", help="Additional image tag (repeatable)"),
) -> None:
    """Build a container image labelled with project metadata."""

    def _build() -> None:
        context = _context(ctx)
        ops = Operations(context)
        typer.echo(f"Project:  {context.ecosystem.value}")
        tags = ops.build(extra_tags=tag)
        print_build_summary(tags)

    run_and_exit(_build)


@app.command()
def inspect(
    ctx: typer.Context,
    image: Optional[str] = typer.Argument(None, help="Image reference (default: <title>:<version>)"),
) -> None:
    """Show OCI labels of a built image."""

    def _inspect() -> None:
        ops = Operations(_context(ctx))
        ref, image_labels = ops.inspect(image)
        print_inspect(ref, image_labels)

    run_and_exit(_inspect)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
