"""Source renames applied before rendering."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..core.models import RenameRule

logger = logging.getLogger(__name__)


class RenameError(ValueError):
    """Raised when a rename rule cannot be applied."""


def _resolve(site_root: Path, path: Path) -> Path:
    return path if path.is_absolute() else site_root / path


def apply_rename(site_root: Path, rule: RenameRule) -> bool:
    """Apply a single rename rule.

    Args:
        site_root: Base directory for relative rule paths
        rule: Rename to apply

    Returns:
        True if a file was moved, False if the rule was already applied
    """
    source = _resolve(site_root, rule.source)
    target = _resolve(site_root, rule.target)

    if source.exists() and target.exists():
        raise RenameError(
            f"Both {rule.source} and {rule.target} exist; refusing to overwrite"
        )

    if not source.exists():
        if target.exists():
            logger.debug(f"Rename already applied: {rule.target}")
            return False
        raise RenameError(f"Rename source not found: {source}")

    target.parent.mkdir(parents=True, exist_ok=True)
    source.rename(target)
    logger.info(f"Renamed {rule.source} → {rule.target}")
    return True


def apply_renames(site_root: Path, rules: Iterable[RenameRule]) -> list[Path]:
    """Apply all rename rules in order.

    Returns:
        Targets of the rules that moved a file during this call
    """
    moved = [rule.target for rule in rules if apply_rename(site_root, rule)]
    logger.debug(f"Applied {len(moved)} rename(s)")
    return moved
