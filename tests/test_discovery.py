"""Tests for site config loading and document discovery."""

import datetime as dt
from pathlib import Path

import pytest

from sitegen.core.models import SiteConfig
from sitegen.sources.config import SiteConfigError, load_site_config
from sitegen.sources.discovery import (
    DocumentError,
    discover_site,
    load_document,
    parse_categories,
    parse_date,
)


class TestSiteConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_site_config(tmp_path)
        assert config.output_dir == Path("docs")
        assert config.publish.primary_branch == "master"
        assert config.publish.netlify_timeout == 180
        assert config.preview.name == "ai-blog-preview"

    def test_loads_renames(self, site_dir: Path) -> None:
        config = load_site_config(site_dir)
        assert config.title == "Test Blog"
        assert len(config.renames) == 1
        assert config.renames[0].target.name == "dp_2019.md"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "_site.yml").write_text("title: [unclosed\n")
        with pytest.raises(SiteConfigError, match="Invalid YAML"):
            load_site_config(tmp_path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "_site.yml").write_text("- a\n- b\n")
        with pytest.raises(SiteConfigError, match="mapping"):
            load_site_config(tmp_path)

    def test_validation_error(self, tmp_path: Path) -> None:
        (tmp_path / "_site.yml").write_text("publish:\n  netlify_timeout: -1\n")
        with pytest.raises(SiteConfigError):
            load_site_config(tmp_path)


class TestParsers:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (dt.date(2020, 1, 2), dt.date(2020, 1, 2)),
            (dt.datetime(2020, 1, 2, 8, 30), dt.date(2020, 1, 2)),
            ("2020-01-02", dt.date(2020, 1, 2)),
            ("01-02-2020", dt.date(2020, 1, 2)),
            ("January 2, 2020", dt.date(2020, 1, 2)),
            ("2020-01-02T10:00:00", dt.date(2020, 1, 2)),
            ("2020-01-02T23:30:00Z", dt.date(2020, 1, 2)),
            ("2020-01-02 08:00:00+02:00", dt.date(2020, 1, 2)),
            (None, None),
            ("", None),
        ],
    )
    def test_parse_date(self, value, expected) -> None:
        assert parse_date(value) == expected

    def test_parse_date_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            parse_date("someday")

    def test_parse_categories(self) -> None:
        assert parse_categories("nlp, torch ,") == ["nlp", "torch"]
        assert parse_categories(["nlp", " "]) == ["nlp"]
        assert parse_categories(None) == []

    def test_parse_categories_rejects_mapping(self) -> None:
        with pytest.raises(ValueError):
            parse_categories({"a": 1})


class TestLoadDocument:
    def test_missing_title(self, tmp_path: Path) -> None:
        path = tmp_path / "post.md"
        path.write_text("---\nauthor: x\n---\nbody\n")
        with pytest.raises(DocumentError, match="no title"):
            load_document(path, Path("post.html"))

    def test_no_front_matter(self, tmp_path: Path) -> None:
        path = tmp_path / "post.md"
        path.write_text("just text\n")
        with pytest.raises(DocumentError):
            load_document(path, Path("post.html"))

    def test_bad_date(self, tmp_path: Path) -> None:
        path = tmp_path / "post.md"
        path.write_text("---\ntitle: T\ndate: soon\n---\n")
        with pytest.raises(DocumentError, match="Unrecognized date"):
            load_document(path, Path("post.html"))

    def test_quoted_timestamp_date(self, tmp_path: Path) -> None:
        path = tmp_path / "post.md"
        path.write_text('---\ntitle: T\ndate: "2020-03-02T09:15:00-05:00"\n---\n')
        doc = load_document(path, Path("post.html"))
        assert doc.date == dt.date(2020, 3, 2)

    def test_multiple_authors(self, tmp_path: Path) -> None:
        path = tmp_path / "post.md"
        path.write_text(
            "---\ntitle: T\nauthor:\n  - name: Ada\n  - Grace\n---\nbody\n"
        )
        doc = load_document(path, Path("post.html"))
        assert doc.author == "Ada, Grace"
        assert doc.body.strip() == "body"


class TestDiscoverSite:
    def test_requires_index(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="Site index not found"):
            discover_site(tmp_path)

    def test_posts_sorted_newest_first(self, site_dir: Path) -> None:
        site = discover_site(site_dir)
        assert site.index.title == "Welcome"
        assert [p.title for p in site.posts] == [
            "Differential privacy revisited",
            "Sentence embeddings",
            "Differential privacy",
        ]

    def test_date_inferred_from_directory(self, site_dir: Path) -> None:
        site = discover_site(site_dir)
        dp = next(p for p in site.posts if p.title == "Differential privacy")
        assert dp.date == dt.date(2019, 12, 20)
        assert dp.categories == ["privacy", "pytorch"]
        assert dp.slug == "2019-12-20-dp"

    def test_output_paths(self, site_dir: Path) -> None:
        site = discover_site(site_dir)
        outputs = sorted(p.url for p in site.posts)
        assert outputs == [
            "posts/2019-12-20-dp/dp.html",
            "posts/2019-12-20-dp/dp.html",
            "posts/2020-03-02-embeddings/embeddings.html",
        ]
        assert site.index.url == "index.html"

    def test_skips_hidden_directories(self, site_dir: Path, make_post) -> None:
        make_post(
            site_dir,
            "2020-03-02-embeddings/.ipynb_checkpoints",
            "embeddings-checkpoint.md",
            "Checkpoint copy",
        )
        make_post(site_dir, ".drafts", "wip.md", "Work in progress")

        site = discover_site(site_dir)

        assert "Checkpoint copy" not in [p.title for p in site.posts]
        assert "Work in progress" not in [p.title for p in site.posts]
        assert len(site.posts) == 3
