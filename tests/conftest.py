"""Shared fixtures: throwaway site trees."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

SITE_YML = """\
title: Test Blog
description: A blog for tests.
output_dir: docs
renames:
  - source: _posts/2019-12-20-dp/dp.md
    target: _posts/2019-12-20-dp/dp_2019.md
"""

INDEX_MD = """\
---
title: Welcome
---

Hello from the **index**.
"""


def _post(title: str, date: str | None = None, extra: str = "") -> str:
    lines = ["---", f"title: {title}", "author: Jane Roe"]
    if date:
        lines.append(f"date: {date}")
    if extra:
        lines.append(extra)
    lines += ["---", "", f"Body of {title}.", ""]
    return "\n".join(lines)


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def site_dir(tmp_path: Path, write_file) -> Path:
    """A site with a colliding pair of documents resolved by the configured rename."""
    root = tmp_path / "site"
    write_file(root / "_site.yml", SITE_YML)
    write_file(root / "index.md", INDEX_MD)
    write_file(
        root / "_posts" / "2019-12-20-dp" / "dp.md",
        _post("Differential privacy", extra="categories: [privacy, pytorch]"),
    )
    write_file(
        root / "_posts" / "2019-12-20-dp" / "dp.markdown",
        _post("Differential privacy revisited", date="2020-06-01"),
    )
    write_file(
        root / "_posts" / "2020-03-02-embeddings" / "embeddings.md",
        _post("Sentence embeddings", date="2020-03-02"),
    )
    (root / "_posts" / "2020-03-02-embeddings" / "plot.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def make_post(write_file) -> Callable[..., Path]:
    def _make(root: Path, slug: str, name: str, title: str, **kwargs) -> Path:
        return write_file(root / "_posts" / slug / name, _post(title, **kwargs))

    return _make
