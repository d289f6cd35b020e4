"""Site rendering engine."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    select_autoescape,
)

from ..core.models import Document, Site
from ..sources.discovery import DOCUMENT_SUFFIXES
from .io import atomic_write_text, copy_file, reset_directory
from .markdown import render_markdown

logger = logging.getLogger(__name__)

PACKAGE_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"
SITE_TEMPLATES_DIR = "_templates"

INDEX_TEMPLATE = "index.html.j2"
POST_TEMPLATE = "post.html.j2"


class OutputCollisionError(RuntimeError):
    """Raised when two sources would be written to the same output file."""


def build_environment(site_root: Path) -> Environment:
    """Create the Jinja2 environment for a site.

    Templates in the site's ``_templates`` folder take precedence over the
    packaged defaults.

    Args:
        site_root: Directory containing the site sources

    Returns:
        Configured Jinja2 environment
    """
    search_paths = []
    overrides = site_root / SITE_TEMPLATES_DIR
    if overrides.is_dir():
        search_paths.append(FileSystemLoader(str(overrides)))
    search_paths.append(FileSystemLoader(str(PACKAGE_TEMPLATES)))

    return Environment(
        loader=ChoiceLoader(search_paths),
        undefined=StrictUndefined,
        autoescape=select_autoescape(
            enabled_extensions=("html", "j2"), default_for_string=True
        ),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def find_assets(site: Site) -> list[tuple[Path, Path]]:
    """List non-document files inside the posts tree.

    Returns:
        Pairs of (source path, output path relative to the output dir)
    """
    posts_root = site.root / site.config.posts_dir
    if not posts_root.is_dir():
        return []

    assets = []
    for path in sorted(posts_root.rglob("*")):
        if not path.is_file() or path.suffix.lower() in DOCUMENT_SUFFIXES:
            continue
        relative = path.relative_to(posts_root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        assets.append((path, Path("posts") / relative))
    return assets


def check_collisions(site: Site, assets: list[tuple[Path, Path]]) -> None:
    """Ensure every output path has exactly one source.

    Raises:
        OutputCollisionError: If two sources map to the same output file
    """
    claims: dict[Path, list[Path]] = defaultdict(list)
    for doc in site.documents:
        claims[doc.output_path].append(doc.source_path)
    for source, output in assets:
        claims[output].append(source)

    clashes = {out: srcs for out, srcs in claims.items() if len(srcs) > 1}
    if clashes:
        details = "; ".join(
            f"{out}: {', '.join(str(s) for s in srcs)}"
            for out, srcs in sorted(clashes.items())
        )
        raise OutputCollisionError(f"Output path collision: {details}")


def check_output_root(site_root: Path, output_root: Path) -> Path:
    """Refuse output directories that would swallow the site sources."""
    site_root = site_root.resolve()
    output_root = output_root.resolve()
    if output_root == site_root or output_root in site_root.parents:
        raise ValueError(
            f"Output directory {output_root} must not contain the site sources"
        )
    return output_root


def _relative_root(doc: Document) -> str:
    depth = len(doc.output_path.parts) - 1
    return "../" * depth or "./"


def render_document(
    template: Template, doc: Document, site: Site, output_root: Path, file_mode: int
) -> Path:
    """Render a single document to its output file.

    Args:
        template: Page template
        doc: Document to render
        site: Site the document belongs to
        output_root: Output directory
        file_mode: File permissions

    Returns:
        Output file path
    """
    logger.debug(f"Rendering document: {doc.source_path}")

    rendered_text = template.render(
        site=site.config,
        page=doc,
        content=render_markdown(doc.body),
        posts=site.posts,
        root=_relative_root(doc),
    )

    output_path = output_root / doc.output_path
    atomic_write_text(output_path, rendered_text, mode=file_mode)
    logger.info(f"Rendered {doc.source_path.name} → {doc.output_path}")

    return output_path


def render_site(site: Site, file_mode: int = 0o644) -> list[Path]:
    """Render the site index and then every post.

    The output directory is cleared first so it reflects exactly the current
    sources.

    Args:
        site: Discovered site
        file_mode: File permissions for rendered pages

    Returns:
        Rendered page paths, index first
    """
    assets = find_assets(site)
    check_collisions(site, assets)
    output_root = check_output_root(site.root, site.output_root)

    env = build_environment(site.root)
    index_template = env.get_template(INDEX_TEMPLATE)
    post_template = env.get_template(POST_TEMPLATE)

    reset_directory(output_root)
    logger.info(f"Rendering {len(site.documents)} document(s) into {output_root}")

    outputs = [render_document(index_template, site.index, site, output_root, file_mode)]
    outputs.extend(
        render_document(post_template, post, site, output_root, file_mode)
        for post in site.posts
    )

    for source, relative in assets:
        copy_file(source, output_root / relative)
    if assets:
        logger.info(f"Copied {len(assets)} asset(s)")

    logger.info(f"Successfully rendered {len(outputs)} page(s)")
    return outputs
