"""Shared pytest fixtures for corpusctl tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from io import StringIO
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from ruamel.yaml import YAML

from corpusctl.config.settings import CorpusSettings
from corpusctl.infrastructure.corpus import Corpus
from corpusctl.services.telemetry import disable_telemetry

type WriteDoc = Callable[..., Path]


def _dump_frontmatter(fields: dict[str, Any]) -> str:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    buf = StringIO()
    yaml.dump(fields, buf)
    return buf.getvalue()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep the host environment out of settings and telemetry."""
    for name in ("CORPUSCTL_CONFIG", "CORPUSCTL_CONTENT__DIR", "CORPUSCTL_BUILD__STRICT"):
        monkeypatch.delenv(name, raising=False)
    yield
    disable_telemetry()


@pytest.fixture
def corpus_root(tmp_path: Path) -> Path:
    """Temporary corpus with empty ``content/`` and ``learning-paths/`` dirs.

    This is the single source of truth for the corpus directory layout.
    """
    (tmp_path / "content").mkdir()
    (tmp_path / "learning-paths").mkdir()
    return tmp_path


@pytest.fixture
def content_dir(corpus_root: Path) -> Path:
    return corpus_root / "content"


@pytest.fixture
def write_doc(content_dir: Path) -> WriteDoc:
    """Factory writing a markdown document into the content directory.

    ``write_doc(title, phase, topic, depth=None, path=None, **fields)``
    stores the file at ``phase/topic/depth/index.md`` unless *path* is
    given, and returns the written path.
    """

    def _write(
        title: str,
        phase: str,
        topic: str,
        depth: str | None = None,
        *,
        path: str | None = None,
        body: str = "Body text.\n",
        **fields: Any,
    ) -> Path:
        frontmatter: dict[str, Any] = {"title": title, "phase": phase, "topic": topic}
        if depth is not None:
            frontmatter["depth"] = depth
        frontmatter.update(fields)
        if path is None:
            path = f"{phase}/{topic}/{depth}/index.md" if depth else f"{phase}/{topic}.md"
        target = content_dir / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"---\n{_dump_frontmatter(frontmatter)}---\n{body}", encoding="utf-8")
        return target

    return _write


@pytest.fixture
def write_raw(content_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing a file with verbatim content into the content directory."""

    def _write(path: str, text: str) -> Path:
        target = content_dir / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target

    return _write


@pytest.fixture
def settings(corpus_root: Path) -> CorpusSettings:
    return CorpusSettings.from_cli(corpus_root=corpus_root)


@pytest.fixture
def corpus(settings: CorpusSettings) -> Corpus:
    """Corpus over the temporary content directory."""
    return Corpus(settings)


@pytest.fixture
def auth_corpus(write_doc: WriteDoc) -> None:
    """Three-depth authentication topic: deep-water -> mid-depth -> surface."""
    write_doc("Auth Basics", "develop", "authentication", "surface")
    write_doc(
        "Auth in Practice",
        "develop",
        "authentication",
        "mid-depth",
        prerequisites=["authentication/surface"],
    )
    write_doc(
        "Auth Internals",
        "develop",
        "authentication",
        "deep-water",
        prerequisites=["authentication/mid-depth"],
        related_topics=["sessions"],
    )
    write_doc("Sessions", "develop", "sessions", "surface", related_topics=["authentication"])


@pytest.fixture
def _isolated_corpus(corpus_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp corpus root so the CLI discovers it.

    Use via ``@pytest.mark.usefixtures("_isolated_corpus")`` on command
    test classes.
    """
    monkeypatch.chdir(corpus_root)
