"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer

from ..core.models import RenameRule


def parse_rename(value: str) -> RenameRule:
    """Parse a rename argument in format SOURCE=TARGET."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be SOURCE=TARGET, got: {value!r}")
    source, target = value.split("=", 1)
    if not source or not target:
        raise typer.BadParameter(f"Empty path in rename: {value!r}")
    return RenameRule(source=Path(source), target=Path(target))

