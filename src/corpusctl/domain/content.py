"""Frontmatter extraction — split the YAML block from markdown body text.

This is the only place the corpus touches document text. The body is
returned untouched and never inspected by the validator or graph.
"""

from __future__ import annotations

from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

_FRONTMATTER_DELIMITER = "---"


class FrontmatterError(ValueError):
    """The frontmatter block is missing, unterminated, or not valid YAML."""


def _new_yaml() -> YAML:
    """Create a fresh safe-mode YAML loader.

    A new instance per call keeps worker threads from sharing loader state.
    Safe mode yields plain ``dict``/``list``/``str`` values for validation.
    """
    return YAML(typ="safe", pure=True)


def split_frontmatter(content: str) -> tuple[str, str]:
    """Split markdown into ``(yaml_block, body)``.

    Expects ``---`` on the first line; the next ``---`` line closes the
    block. Handles both ``\\n`` and ``\\r\\n`` line endings and a leading
    byte-order mark.

    Raises:
        FrontmatterError: If the opening or closing delimiter is missing.
    """
    normalized = content.lstrip("\ufeff").replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        msg = "missing frontmatter block (file must start with '---')"
        raise FrontmatterError(msg)

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            body = "\n".join(lines[i + 1 :])
            return "\n".join(lines[1:i]), body.removeprefix("\n")

    msg = "unterminated frontmatter block (no closing '---')"
    raise FrontmatterError(msg)


def parse_frontmatter(content: str) -> tuple[Any, str]:
    """Parse YAML frontmatter and body from markdown content.

    Returns the loaded YAML value as-is (usually a mapping, ``None`` for an
    empty block). Type checking is the schema validator's job.

    Raises:
        FrontmatterError: If the block is missing or the YAML is malformed.
    """
    yaml_block, body = split_frontmatter(content)
    try:
        data = _new_yaml().load(yaml_block)
    except YAMLError as exc:
        msg = f"invalid YAML: {_first_line(str(exc))}"
        raise FrontmatterError(msg) from exc
    return data, body


def _first_line(text: str) -> str:
    return text.strip().splitlines()[0] if text.strip() else "parse error"
