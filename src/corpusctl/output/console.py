"""Rich Console factory and theme for corpusctl output.

Consoles render into a StringIO buffer so renderers keep a plain
``str`` contract. Outside a terminal (tests, pipes, CI logs) Rich drops
color codes, which keeps issue lines greppable.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CORPUS_THEME = Theme(
    {
        "corpus.ok": "bold green",
        "corpus.error": "bold red",
        "corpus.warning": "bold yellow",
        "corpus.op": "bold cyan",
        "corpus.key": "dim",
        "corpus.id": "bold blue",
        "corpus.path": "dim",
        "corpus.title": "bold",
        "corpus.depth.surface": "green",
        "corpus.depth.mid-depth": "yellow",
        "corpus.depth.deep-water": "magenta",
        "corpus.missing": "red",
    }
)

_STATE_STYLES: dict[str, str] = {
    "validated": "corpus.ok",
    "schema-failed": "corpus.error",
    "graph-failed": "corpus.error",
    "integrity-failed": "corpus.error",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for stable test output).
    """
    return Console(
        file=StringIO(),
        theme=CORPUS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_depth(depth: str | None) -> str:
    """Return the Rich style name for a depth level."""
    if not depth:
        return ""
    return f"corpus.depth.{depth}"


def style_for_state(state: str) -> str:
    """Return the Rich style name for a build state."""
    return _STATE_STYLES.get(state, "")
