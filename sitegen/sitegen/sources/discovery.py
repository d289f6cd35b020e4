"""Source document discovery and front matter normalization."""

from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from ..core.models import Document, Site, SiteConfig
from .config import load_site_config

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = frozenset({".md", ".markdown"})
INDEX_NAME = "index.md"

_DIR_DATE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})-")
_DATE_FORMATS = ("%Y-%m-%d", "%m-%d-%Y", "%B %d, %Y", "%b %d, %Y")


class DocumentError(ValueError):
    """Raised when a source document has unusable front matter."""


def parse_date(value: Any) -> dt.date | None:
    """Coerce a front matter date value to a date.

    Args:
        value: YAML date/datetime, string, or None

    Returns:
        Parsed date, or None when no value was given
    """
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    text = str(value).strip()
    try:
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date: {text!r}")


def parse_categories(value: Any) -> list[str]:
    """Normalize categories given as a list or comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ValueError(f"Categories must be a list or string, got {type(value).__name__}")


def _date_from_directory(path: Path) -> dt.date | None:
    match = _DIR_DATE_PATTERN.match(path.parent.name)
    if not match:
        return None
    try:
        return dt.date.fromisoformat(match.group(1))
    except ValueError:
        return None


def load_document(source_path: Path, output_path: Path, slug: str = "") -> Document:
    """Read a Markdown document and its front matter.

    Args:
        source_path: Markdown file to read
        output_path: Output location relative to the output directory
        slug: Post slug (empty for the site index)

    Returns:
        Parsed document
    """
    try:
        post = frontmatter.load(str(source_path))
    except (yaml.YAMLError, ValueError) as e:
        raise DocumentError(f"Invalid front matter in {source_path}: {e}") from e

    metadata: dict[str, Any] = dict(post.metadata)

    title = metadata.get("title")
    if not title or not str(title).strip():
        raise DocumentError(f"Document {source_path} has no title")

    try:
        date = parse_date(metadata.get("date"))
        categories = parse_categories(metadata.get("categories"))
    except ValueError as e:
        raise DocumentError(f"{source_path}: {e}") from e

    if date is None and slug:
        date = _date_from_directory(source_path)

    author = metadata.get("author")
    if isinstance(author, list):
        # Multi-author posts list mappings or plain names
        author = ", ".join(
            str(a.get("name", "")) if isinstance(a, dict) else str(a) for a in author
        )

    return Document(
        source_path=source_path,
        output_path=output_path,
        title=str(title).strip(),
        body=post.content,
        author=str(author) if author else None,
        date=date,
        description=str(metadata.get("description") or ""),
        categories=categories,
        slug=slug,
    )


def find_post_sources(posts_root: Path) -> list[Path]:
    """List Markdown post files below the posts directory, sorted by path."""
    if not posts_root.is_dir():
        logger.debug(f"Posts directory not found: {posts_root}")
        return []
    return sorted(
        path
        for path in posts_root.rglob("*")
        if path.is_file()
        and path.suffix.lower() in DOCUMENT_SUFFIXES
        and not any(
            part.startswith(".") for part in path.relative_to(posts_root).parts
        )
    )


def post_output_path(posts_root: Path, source_path: Path) -> tuple[str, Path]:
    """Return the slug and output path of a post.

    The slug is the post directory relative to the posts root; the output
    file keeps the source stem.
    """
    slug = source_path.parent.relative_to(posts_root).as_posix()
    if slug == ".":
        slug = ""
    output = Path("posts") / slug / f"{source_path.stem}.html"
    return slug, output


def discover_site(site_root: Path, config: SiteConfig | None = None) -> Site:
    """Discover the site index and all posts.

    Args:
        site_root: Directory containing the site sources
        config: Pre-loaded configuration (loaded from ``_site.yml`` if omitted)

    Returns:
        Discovered site with posts sorted newest first
    """
    site_root = site_root.resolve()
    if config is None:
        config = load_site_config(site_root)

    index_path = site_root / INDEX_NAME
    if not index_path.exists():
        raise DocumentError(f"Site index not found: {index_path}")
    index = load_document(index_path, Path("index.html"))

    posts_root = site_root / config.posts_dir
    posts = []
    for source in find_post_sources(posts_root):
        slug, output = post_output_path(posts_root, source)
        posts.append(load_document(source, output, slug=slug))

    posts.sort(key=lambda d: (d.date or dt.date.min, d.url), reverse=True)
    logger.info(f"Discovered {len(posts)} post(s) in {posts_root}")

    return Site(root=site_root, config=config, index=index, posts=posts)
