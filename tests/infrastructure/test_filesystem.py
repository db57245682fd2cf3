"""Tests for content discovery and the layout convention."""

from __future__ import annotations

from pathlib import Path

import pytest

from corpusctl.domain.content import FrontmatterError
from corpusctl.infrastructure.filesystem import (
    PathLayout,
    find_content_files,
    layout_from_source,
    read_frontmatter,
    relative_source,
)


class TestFindContentFiles:
    def test_sorted_and_recursive(self, content_dir: Path) -> None:
        for rel in ("b/index.md", "a/x/index.md", "a.md"):
            (content_dir / rel).parent.mkdir(parents=True, exist_ok=True)
            (content_dir / rel).write_text("---\n---\n")
        found = [relative_source(p, content_dir) for p in find_content_files(content_dir)]
        assert found == ["a.md", "a/x/index.md", "b/index.md"]

    def test_skips_excluded_dirs(self, content_dir: Path) -> None:
        (content_dir / "node_modules" / "pkg").mkdir(parents=True)
        (content_dir / "node_modules" / "pkg" / "README.md").write_text("x")
        (content_dir / "keep.md").write_text("x")
        found = find_content_files(content_dir)
        assert [p.name for p in found] == ["keep.md"]

    def test_pattern(self, content_dir: Path) -> None:
        (content_dir / "a.md").write_text("x")
        (content_dir / "b.mdx").write_text("x")
        found = find_content_files(content_dir, pattern="*.mdx")
        assert [p.name for p in found] == ["b.mdx"]

    def test_missing_root(self, tmp_path: Path) -> None:
        assert find_content_files(tmp_path / "nope") == []


class TestReadFrontmatter:
    def test_reads_mapping(self, content_dir: Path) -> None:
        path = content_dir / "a.md"
        path.write_text("---\ntitle: A\n---\nBody\n", encoding="utf-8")
        assert read_frontmatter(path) == {"title": "A"}

    def test_undecodable_file(self, content_dir: Path) -> None:
        path = content_dir / "bad.md"
        path.write_bytes(b"---\ntitle: \xff\xfe\n---\n")
        with pytest.raises(FrontmatterError, match="cannot read file"):
            read_frontmatter(path)


class TestLayout:
    def test_convention(self) -> None:
        assert layout_from_source("develop/auth/surface/index.md") == PathLayout(
            phase="develop", topic="auth", depth="surface"
        )

    @pytest.mark.parametrize(
        "source",
        [
            "case-studies/breach.md",
            "develop/auth/surface/notes.md",
            "develop/auth/shallow/index.md",
            "x/develop/auth/surface/index.md",
        ],
    )
    def test_outside_convention(self, source: str) -> None:
        assert layout_from_source(source) is None
