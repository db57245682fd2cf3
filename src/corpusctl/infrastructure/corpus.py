"""Corpus — the single dependency injected into every service.

Owns the resolved settings and content root, and turns the content tree
into an immutable :class:`CorpusSnapshot`. Reading and schema validation
are independent per file and run on a thread pool; the snapshot is only
returned once every file has been processed, which is the join point the
graph builder relies on.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from corpusctl.domain.content import FrontmatterError
from corpusctl.domain.document import SchemaOutcome, SourcedDocument, validate_frontmatter
from corpusctl.domain.issues import SchemaError
from corpusctl.infrastructure.filesystem import (
    find_content_files,
    read_frontmatter,
    relative_source,
)

if TYPE_CHECKING:
    from corpusctl.config.settings import CorpusSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorpusSnapshot:
    """Every file's schema outcome, ordered by source path."""

    content_root: Path
    outcomes: tuple[SchemaOutcome, ...] = ()

    @property
    def documents(self) -> tuple[SourcedDocument, ...]:
        return tuple(o.entry for o in self.outcomes if o.ok and o.entry is not None)

    @property
    def errors(self) -> tuple[SchemaError, ...]:
        return tuple(err for o in self.outcomes for err in o.errors)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


class Corpus:
    """A content tree on disk plus the settings that describe it.

    Args:
        settings: Resolved CLI/env/TOML settings.
        content_root: Overrides ``settings.content_dir`` (e.g. from a
            positional CLI argument).
    """

    def __init__(self, settings: CorpusSettings, *, content_root: Path | None = None) -> None:
        self.settings = settings
        self._content_root = content_root

    @property
    def root(self) -> Path:
        return self.settings.corpus_root

    @property
    def content_root(self) -> Path:
        if self._content_root is not None:
            return self._content_root
        return self.settings.content_dir

    def find_content(self) -> list[Path]:
        """Discover all content files (sorted)."""
        return find_content_files(
            self.content_root,
            pattern=self.settings.content.pattern,
            skip_dirs=self.settings.content.exclude,
        )

    def load(self) -> CorpusSnapshot:
        """Read and schema-validate every content file.

        Files are processed concurrently; outcomes come back in path order
        regardless of completion order.
        """
        paths = self.find_content()
        if not paths:
            logger.debug("No content files under %s", self.content_root)
            return CorpusSnapshot(content_root=self.content_root)

        workers = min(self.settings.worker_count, len(paths))
        logger.debug("Validating %d files with %d workers", len(paths), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = tuple(pool.map(self._load_one, paths))

        return CorpusSnapshot(content_root=self.content_root, outcomes=outcomes)

    def _load_one(self, path: Path) -> SchemaOutcome:
        source = relative_source(path, self.content_root)
        try:
            raw = read_frontmatter(path)
        except FrontmatterError as exc:
            error = SchemaError(source=source, field="frontmatter", message=str(exc))
            return SchemaOutcome(source=source, errors=(error,))
        return validate_frontmatter(raw, source=source)
