"""Clean, rename and render steps of a site build."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .core.models import RenameRule, Site
from .rendering.engine import check_output_root, render_site
from .sources.config import load_site_config
from .sources.discovery import discover_site
from .sources.renames import apply_renames

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    site: Site
    pages: list[Path]
    renamed: list[Path] = field(default_factory=list)

    @property
    def output_root(self) -> Path:
        return self.site.output_root


def build(
    site_dir: Path,
    *,
    output_dir: Path | None = None,
    extra_renames: Iterable[RenameRule] = (),
) -> BuildResult:
    """Render a site from scratch.

    Removes the previous output, applies the configured renames, then renders
    the index and every post.

    Args:
        site_dir: Site root
        output_dir: Override for ``output_dir`` from ``_site.yml``
        extra_renames: Renames applied after the configured ones

    Returns:
        Build result with the rendered page paths
    """
    site_root = site_dir.resolve()
    config = load_site_config(site_root)
    if output_dir is not None:
        config = config.model_copy(update={"output_dir": output_dir})

    output_root = config.output_dir
    if not output_root.is_absolute():
        output_root = site_root / output_root
    output_root = check_output_root(site_root, output_root)
    if output_root.exists():
        logger.info(f"==> clean {output_root}")
        shutil.rmtree(output_root)

    logger.info("==> rename")
    renamed = apply_renames(site_root, [*config.renames, *extra_renames])

    logger.info("==> render")
    site = discover_site(site_root, config)
    pages = render_site(site)

    return BuildResult(site=site, pages=pages, renamed=renamed)
