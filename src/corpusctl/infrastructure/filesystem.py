"""Filesystem operations for corpus content discovery.

INVARIANT: Files are truth. Nothing is cached to disk; every invocation
rediscovers and re-reads the content tree.

Pure frontmatter parsing lives in :mod:`corpusctl.domain.content`
(infrastructure -> domain). This module handles file discovery, reading
and the ``<phase>/<topic>/<depth>/index.md`` layout convention.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from corpusctl.domain.content import FrontmatterError, parse_frontmatter
from corpusctl.domain.types import Depth

# Directories to skip when discovering content files.
DEFAULT_SKIP_DIRS = frozenset({".git", "node_modules", ".astro"})

_LAYOUT_INDEX = "index.md"
_DEPTH_VALUES = frozenset(d.value for d in Depth)


@dataclass(frozen=True)
class PathLayout:
    """Phase/topic/depth implied by a file's location in the content tree."""

    phase: str
    topic: str
    depth: str


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_content_files(
    content_root: Path,
    *,
    pattern: str = "*.md",
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> list[Path]:
    """Discover all markdown files below *content_root*, sorted by path.

    Skips any path with a component in *skip_dirs*. Returns an empty list
    when the root does not exist.
    """
    if not content_root.is_dir():
        return []

    skip = frozenset(skip_dirs)
    results: list[Path] = []
    for path in content_root.rglob(pattern):
        if not path.is_file():
            continue
        if any(part in skip for part in path.relative_to(content_root).parts):
            continue
        results.append(path)
    return sorted(results)


def relative_source(path: Path, root: Path) -> str:
    """POSIX path of *path* relative to *root*, used as the issue source."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_frontmatter(path: Path) -> Any:
    """Read a markdown file and return its parsed frontmatter.

    Raises:
        FrontmatterError: If the file cannot be read or has no valid block.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read file: {exc}"
        raise FrontmatterError(msg) from exc
    frontmatter, _body = parse_frontmatter(content)
    return frontmatter


# ---------------------------------------------------------------------------
# Layout convention
# ---------------------------------------------------------------------------


def layout_from_source(source: str) -> PathLayout | None:
    """Derive phase/topic/depth from a ``phase/topic/depth/index.md`` path.

    Returns None for files outside that convention (case studies, loose
    pages, deeper nesting).
    """
    parts = PurePosixPath(source).parts
    if len(parts) != 4 or parts[3] != _LAYOUT_INDEX:
        return None
    if parts[2] not in _DEPTH_VALUES:
        return None
    return PathLayout(phase=parts[0], topic=parts[1], depth=parts[2])
