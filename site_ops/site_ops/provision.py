from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from sitegen.sources.config import load_site_config

from ._utils import configure_logging, run_logged

logger = logging.getLogger(__name__)


def install_dependencies(
    requirements: Sequence[str], *, python: str | None = None
) -> list[str]:
    """Install the packages the site needs to render, via pip."""
    if not requirements:
        logger.info("No dependencies to install")
        return []

    logger.info("==> install %d dependency(ies)", len(requirements))
    run_logged(
        [
            python or sys.executable,
            "-m",
            "pip",
            "install",
            "--disable-pip-version-check",
            *requirements,
        ],
        capture_output=True,
        echo="on_error",
    )
    return list(requirements)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = argparse.ArgumentParser(
        prog="provision-deps",
        description="Install the dependencies listed in _site.yml.",
    )
    parser.add_argument("site_dir", nargs="?", default=".", type=Path)
    args = parser.parse_args(argv)

    config = load_site_config(args.site_dir)
    install_dependencies(config.dependencies)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
