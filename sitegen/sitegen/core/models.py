"""Domain models for site configuration and source documents."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from pydantic import BaseModel, Field


class RenameRule(BaseModel):
    """Move a source file out of the way before rendering."""

    source: Path = Field(..., description="Path relative to the site root")
    target: Path = Field(..., description="Path relative to the site root")


class PublishConfig(BaseModel):
    """Where and when the rendered site is published."""

    primary_branch: str = Field(default="master", description="Branch that deploys")
    branch: str = Field(default="docs", description="Git branch receiving the site")
    netlify_timeout: float = Field(
        default=180.0, gt=0, description="Seconds to wait for a Netlify deploy"
    )
    deploy_message: str = Field(default="Deploy from GitHub Actions")
    commit_comment: bool = Field(
        default=True, description="Comment the deploy URL on the triggering commit"
    )


class PreviewConfig(BaseModel):
    """Naming of the preview artifact for non-publishing runs."""

    name: str = Field(default="ai-blog-preview", min_length=1)


class SiteConfig(BaseModel):
    """Contents of ``_site.yml``."""

    title: str = Field(default="Blog")
    description: str = Field(default="")
    base_url: str = Field(default="")
    output_dir: Path = Field(default=Path("docs"))
    posts_dir: Path = Field(default=Path("_posts"))
    dependencies: list[str] = Field(default_factory=list)
    renames: list[RenameRule] = Field(default_factory=list)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)


class Document(BaseModel):
    """A source document with its front matter and output location."""

    source_path: Path
    output_path: Path = Field(..., description="Path relative to the output dir")
    title: str
    body: str = ""
    author: str | None = None
    date: dt.date | None = None
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    slug: str = ""

    @property
    def url(self) -> str:
        return self.output_path.as_posix()


class Site(BaseModel):
    """A discovered site: configuration, index page and posts."""

    root: Path
    config: SiteConfig
    index: Document
    posts: list[Document] = Field(default_factory=list)

    @property
    def output_root(self) -> Path:
        output = self.config.output_dir
        return output if output.is_absolute() else self.root / output

    @property
    def documents(self) -> list[Document]:
        return [self.index, *self.posts]
