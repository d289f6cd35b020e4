"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..build import build
from .parsers import parse_rename

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="sitegen",
    help="Render a Markdown blog into a static site.",
)


@app.callback()
def _root() -> None:
    """Static site renderer for Markdown blogs."""


@app.command()
def render(
    site_dir: Annotated[
        Path,
        typer.Argument(
            help="Site root containing index.md and _site.yml.",
            exists=True,
            file_okay=False,
            resolve_path=True,
        ),
    ] = Path("."),
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: output_dir from _site.yml).",
            metavar="DIR",
        ),
    ] = "",
    renames: Annotated[
        list[str],
        typer.Option(
            "--rename",
            help="Extra rename applied before rendering (format: SOURCE=TARGET). Repeatable.",
            metavar="SOURCE=TARGET",
        ),
    ] = [],
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Clear the output directory, apply renames and render every document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    logger.debug("Starting sitegen")

    extra_renames = [parse_rename(value) for value in renames]

    result = build(
        site_dir,
        output_dir=Path(output) if output else None,
        extra_renames=extra_renames,
    )

    typer.echo(str(result.output_root))
    logger.debug(f"Completed: {len(result.pages)} page(s) rendered")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
