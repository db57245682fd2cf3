"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, corpusctl.toml only contains
overrides. A corpus laid out as ``content/`` + ``learning-paths/`` needs
no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContentConfig(BaseModel):
    """[content] section."""

    model_config = {"frozen": True}

    dir: str = "content"
    pattern: str = "*.md"
    exclude: list[str] = Field(default_factory=lambda: [".git", "node_modules", ".astro"])
    check_layout: bool = True


class BuildConfig(BaseModel):
    """[build] section.

    ``workers = 0`` sizes the validation pool to the available cores.
    ``strict`` promotes integrity warnings to a failed build.
    """

    model_config = {"frozen": True}

    workers: int = Field(default=0, ge=0)
    strict: bool = False


class PathsConfig(BaseModel):
    """[paths] section.

    ``metadata_dir`` holds per-topic metadata at ``topics/<topic>.json``.
    """

    model_config = {"frozen": True}

    dir: str = "learning-paths"
    metadata_dir: str = "metadata"

