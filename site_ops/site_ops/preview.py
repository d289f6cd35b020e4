from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .errors import PublishError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewArtifact:
    name: str
    directory: Path
    archive: Path


def package_preview(output_root: Path, work_dir: Path, name: str) -> PreviewArtifact:
    """
    Move the rendered site to `<work_dir>/<name>/<name>` and zip the
    `<work_dir>/<name>` folder to `<work_dir>/<name>.zip`.
    """
    if not output_root.is_dir():
        raise PublishError(f"Rendered output not found: {output_root}")

    preview_dir = work_dir / name
    resolved = preview_dir.resolve()
    output = output_root.resolve()
    if resolved == output or resolved in output.parents:
        raise PublishError(
            f"Preview folder {preview_dir} would overwrite the rendered output {output_root}"
        )

    logger.info("==> package preview %s", preview_dir)
    if preview_dir.exists():
        shutil.rmtree(preview_dir)
    preview_dir.mkdir(parents=True)

    site_dir = preview_dir / name
    shutil.move(str(output_root), str(site_dir))

    archive = Path(
        shutil.make_archive(str(work_dir / name), "zip", root_dir=str(preview_dir))
    )
    logger.info(
        "Please download and unzip the artifact named '%s' to obtain a browsable "
        "preview of the site.",
        name,
    )
    return PreviewArtifact(name=name, directory=preview_dir, archive=archive)
